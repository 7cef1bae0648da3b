from __future__ import annotations

import re
from enum import Enum


class Service(str, Enum):
    GEMINI = "gemini"
    GOOGLE_DOCS = "googleDocs"
    NOTEBOOK_LM = "notebookLM"
    CHATGPT = "chatgpt"
    GROK = "grok"
    DISCORD = "discord"
    SLACK = "slack"
    RAINDROP = "raindrop"


# Order matters: the first matching pattern wins.
SERVICE_PATTERNS: tuple[tuple[Service, re.Pattern[str]], ...] = (
    (Service.GEMINI, re.compile(r"^https://gemini\.google\.com/app/")),
    (Service.GOOGLE_DOCS, re.compile(r"^https://docs\.google\.com/document/")),
    (Service.NOTEBOOK_LM, re.compile(r"^https://notebooklm\.google\.com/")),
    (Service.CHATGPT, re.compile(r"^https://chatgpt\.com/c/")),
    (Service.GROK, re.compile(r"^https://grok\.com/c/")),
    (Service.DISCORD, re.compile(r"^https://discord\.com/channels/")),
    (Service.SLACK, re.compile(r"^https://app\.slack\.com/client/")),
    (Service.RAINDROP, re.compile(r"^https://app\.raindrop\.io/my/")),
)


def detect_service(url: str) -> Service | None:
    """Return the known service a URL belongs to, or None when unrecognised."""
    for service, pattern in SERVICE_PATTERNS:
        if pattern.match(url):
            return service
    return None
