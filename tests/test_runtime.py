"""
Tests for configuration, paper wiring, reporting, Telegram and the CLI entry point
"""
import logging
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
import requests

from trident import main as cli
from trident.configuration.config import _as_bool, settings
from trident.core.jobs.supply.factory import build_paper_pipeline
from trident.core.jobs.supply.pipeline_config import build_default_pipeline_config
from trident.core.structures.errors import TransactionFailed
from trident.core.structures.structures import PipelineContext, PipelineState, TokenAmount
from trident.core.utils.format_utils import format_run_report
from trident.integrations.paper.paper_ledger import PaperLedger
from trident.integrations.telegram import telegram_client
from trident.logging.logger import ColorFormatter, get_logger


@pytest.fixture
def paper_settings(monkeypatch):
    monkeypatch.setattr(settings, "PAPER_MODE", True)
    monkeypatch.setattr(settings, "PAPER_NATIVE_BALANCE", "1.0")
    monkeypatch.setattr(settings, "PAPER_SWAP_RATE", "2500")
    monkeypatch.setattr(settings, "SWAP_AMOUNT_NATIVE", "0.1")
    monkeypatch.setattr(settings, "TELEGRAM_BOT_TOKEN", "")
    monkeypatch.setattr(settings, "TELEGRAM_CHAT_ID", "")
    return settings


@pytest.mark.parametrize("value, expected", [("1", True), ("Yes", True), ("off", False), (None, False)])
def test_as_bool(value, expected):
    assert _as_bool(value) is expected


def test_default_pipeline_config_checksums_and_timeout(monkeypatch):
    monkeypatch.setattr(settings, "STABLECOIN_ADDRESS", "0x11fe4b6ae13d2a6055c8d9cf65c55bac32b5d844")
    monkeypatch.setattr(settings, "TX_CONFIRMATION_TIMEOUT_SEC", 0.0)

    config = build_default_pipeline_config()

    assert config.stablecoin_address == "0x11fE4B6AE13d2a6055C8D9cF65c55bac32B5d844"
    assert config.confirmation_timeout_sec is None
    assert config.referral_code == 0

    monkeypatch.setattr(settings, "TX_CONFIRMATION_TIMEOUT_SEC", 90.0)
    assert build_default_pipeline_config().confirmation_timeout_sec == 90.0


@pytest.mark.asyncio
async def test_paper_pipeline_runs_to_done(paper_settings):
    config = build_default_pipeline_config()
    ledger, pipeline = build_paper_pipeline(config)

    context = await pipeline.run()

    assert isinstance(ledger, PaperLedger)
    assert context.state == PipelineState.DONE
    assert context.deposited_amount.to_display() == Decimal("250")


@pytest.mark.asyncio
async def test_run_once_uses_paper_ledger_in_paper_mode(paper_settings):
    context = await cli.run_once(build_default_pipeline_config())

    assert context.signer_address == settings.PAPER_WALLET_ADDRESS
    assert context.state == PipelineState.DONE


@pytest.mark.asyncio
async def test_live_run_closes_the_signer(paper_settings, monkeypatch):
    monkeypatch.setattr(settings, "PAPER_MODE", False)
    signer = MagicMock()
    signer.close = AsyncMock()
    pipeline = MagicMock()
    pipeline.run = AsyncMock(side_effect=RuntimeError("rpc dropped"))
    monkeypatch.setattr(cli, "build_default_evm_signer", AsyncMock(return_value=signer))
    monkeypatch.setattr(cli, "build_live_pipeline", MagicMock(return_value=pipeline))

    with pytest.raises(RuntimeError):
        await cli.run_once(build_default_pipeline_config())
    signer.close.assert_awaited_once()


def test_run_report_lists_state_amounts_and_error():
    context = PipelineContext(signer_address="0x000000000000000000000000000000000000dEaD",
                              amount_in_native=Decimal("0.1"))
    context.state = PipelineState.FAILED
    context.swapped_amount = TokenAmount(250 * 10 ** 18, 18)
    context.error = TransactionFailed("network rejected transaction")

    report = format_run_report(context, "DAI")

    assert "State: FAILED" in report
    assert "Wallet: …00dead" in report
    assert "Received: 250 DAI" in report
    assert "Supplied: NA" in report
    assert "Error: TransactionFailed: network rejected transaction" in report


def test_cli_paper_run_exits_zero(paper_settings, capsys):
    assert cli.main() == 0
    assert "State: DONE" in capsys.readouterr().out


def test_cli_startup_failure_exits_one(paper_settings, monkeypatch):
    def broken_config():
        raise ValueError("bad address")

    monkeypatch.setattr(cli, "build_default_pipeline_config", broken_config)

    assert cli.main() == 1


def test_cli_failed_run_exits_one(paper_settings, monkeypatch):
    monkeypatch.setattr(settings, "PAPER_NATIVE_BALANCE", "0.01")

    assert cli.main() == 1


class _Response:
    def __init__(self, status_code: int = 200) -> None:
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")


def test_telegram_alert_is_skipped_without_credentials(paper_settings, monkeypatch):
    def unexpected_post(*args, **kwargs):
        raise AssertionError("no request expected")

    monkeypatch.setattr(telegram_client.requests, "post", unexpected_post)

    assert telegram_client.send_alert("title", "body") is False


def test_telegram_alert_escapes_markdown(monkeypatch):
    sent = {}

    def fake_post(url, json, timeout):
        sent.update(url=url, payload=json)
        return _Response()

    monkeypatch.setattr(settings, "TELEGRAM_BOT_TOKEN", "token")
    monkeypatch.setattr(settings, "TELEGRAM_CHAT_ID", "42")
    monkeypatch.setattr(telegram_client.requests, "post", fake_post)

    assert telegram_client.send_alert("Run DONE", "Received: 250.5 DAI", emoji="✅") is True
    assert sent["url"] == "https://api.telegram.org/bottoken/sendMessage"
    assert sent["payload"]["chat_id"] == "42"
    assert sent["payload"]["text"] == "*✅ Run DONE*\n\nReceived: 250\\.5 DAI"


def test_telegram_failure_is_logged_not_raised(monkeypatch):
    monkeypatch.setattr(settings, "TELEGRAM_BOT_TOKEN", "token")
    monkeypatch.setattr(settings, "TELEGRAM_CHAT_ID", "42")
    monkeypatch.setattr(telegram_client.requests, "post", lambda url, json, timeout: _Response(500))

    assert telegram_client.send_alert("title", "body") is False


def test_loggers_live_under_app_namespace():
    assert get_logger("core.pipeline").name == "trident.core.pipeline"
    assert get_logger("trident.core.pipeline").name == "trident.core.pipeline"


def test_plain_formatter_includes_level_and_message():
    record = logging.LogRecord("trident.test", logging.WARNING, __file__, 1, "[SWAP] %s", ("hello",), None)

    line = ColorFormatter(use_color=False).format(record)

    assert "WARNING" in line
    assert "trident.test - [SWAP] hello" in line
