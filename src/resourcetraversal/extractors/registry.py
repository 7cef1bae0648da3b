from __future__ import annotations

from resourcetraversal.extractors.base import Extractor
from resourcetraversal.extractors.chat import (
    extract_chatgpt,
    extract_gemini_chat,
    extract_grok,
    extract_notebooklm,
)
from resourcetraversal.extractors.documents import extract_google_doc, extract_raindrop
from resourcetraversal.extractors.generic import extract_generic
from resourcetraversal.extractors.messaging import extract_discord, extract_slack
from resourcetraversal.extractors.services import Service, detect_service

EXTRACTORS: dict[Service, Extractor] = {
    Service.GEMINI: extract_gemini_chat,
    Service.GOOGLE_DOCS: extract_google_doc,
    Service.NOTEBOOK_LM: extract_notebooklm,
    Service.CHATGPT: extract_chatgpt,
    Service.GROK: extract_grok,
    Service.DISCORD: extract_discord,
    Service.SLACK: extract_slack,
    Service.RAINDROP: extract_raindrop,
}


def get_extractor(url: str) -> Extractor:
    """Resolve the extractor for a URL; unknown services get the generic one."""
    service = detect_service(url)
    if service is None:
        return extract_generic
    return EXTRACTORS.get(service, extract_generic)
