from __future__ import annotations

from typing import Final

import requests

from trident.configuration.config import settings
from trident.logging.logger import get_logger

logger = get_logger(__name__)

_TELEGRAM_API_BASE: Final[str] = "https://api.telegram.org"


def _escape_markdown_v2(text: str) -> str:
    """
    Escape MarkdownV2 special characters for Telegram.
    See: https://core.telegram.org/bots/api#markdownv2-style
    """
    specials = r"_*[]()~`>#+-=|{}.!"
    for char in specials:
        text = text.replace(char, f"\\{char}")
    return text


def send_alert(title: str, body: str, emoji: str = "🔔") -> bool:
    """
    Send a formatted Telegram alert using MarkdownV2.

    Returns True when the message was accepted. Missing credentials or a failed
    request only log; a notification never changes the outcome of a run.

    Args:
        title: The header of the message.
        body: The main content.
        emoji: Icon prefix.
    """
    if not settings.TELEGRAM_BOT_TOKEN or not settings.TELEGRAM_CHAT_ID:
        return False

    header = f"{emoji} {title}".strip()
    text = f"*{_escape_markdown_v2(header)}*\n\n{_escape_markdown_v2(body)}"

    url = f"{_TELEGRAM_API_BASE}/bot{settings.TELEGRAM_BOT_TOKEN}/sendMessage"
    payload = {
        "chat_id": settings.TELEGRAM_CHAT_ID,
        "text": text,
        "parse_mode": "MarkdownV2",
        "disable_web_page_preview": True,
    }

    try:
        response = requests.post(url, json=payload, timeout=10)
        response.raise_for_status()
    except requests.RequestException as error:
        logger.error(f"[TELEGRAM] Send failed: {error}")
        return False
    return True
