from __future__ import annotations

from dotenv import load_dotenv

load_dotenv()

import asyncio
import sys

from trident.logging.logger import get_logger, init_logging

init_logging()

from trident.configuration.config import settings
from trident.core.jobs.supply.factory import build_live_pipeline, build_paper_pipeline
from trident.core.jobs.supply.pipeline_config import PipelineConfig, build_default_pipeline_config
from trident.core.onchain.evm_signer import build_default_evm_signer
from trident.core.structures.structures import PipelineContext, PipelineState
from trident.core.utils.format_utils import format_run_report
from trident.integrations.telegram.telegram_client import send_alert

log = get_logger(__name__)

_STATE_EMOJI = {
    PipelineState.DONE: "✅",
    PipelineState.ABORTED: "⚠️",
    PipelineState.FAILED: "🚨",
}


async def run_once(config: PipelineConfig) -> PipelineContext:
    """Paper ledger when PAPER_MODE is on, otherwise the RPC-backed signer and web3 bindings."""
    if settings.PAPER_MODE:
        _, pipeline = build_paper_pipeline(config)
        return await pipeline.run()

    signer = await build_default_evm_signer()
    try:
        return await build_live_pipeline(config, signer).run()
    finally:
        await signer.close()


def main() -> int:
    mode_label = "PAPER MODE" if settings.PAPER_MODE else "LIVE"
    try:
        config = build_default_pipeline_config()
        context = asyncio.run(run_once(config))
    except Exception as error:
        log.exception("[MAIN] Startup failed: %s", error)
        return 1

    report = format_run_report(context, config.stablecoin_symbol)
    print(report)
    send_alert(f"Trident run [{mode_label}] {context.state.value}", report, _STATE_EMOJI.get(context.state, "🔔"))

    return 0 if context.succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
