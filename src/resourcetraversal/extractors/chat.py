"""Extractors for AI chat front-ends (Gemini, ChatGPT, Grok, NotebookLM)."""

from __future__ import annotations

import logging
import re

from bs4 import Tag
from playwright.async_api import Page

from resourcetraversal.extractors.base import (
    Fragment,
    attribute,
    dedupe_fragments,
    format_conversation,
    is_inside,
    page_soup,
    scroll_history,
    text_of,
    wait_for_signature,
)
from resourcetraversal.extractors.generic import extract_generic

logger = logging.getLogger(__name__)

_YOU = re.compile(r"\bYou\b")

GEMINI_MESSAGE = "[data-message-id]"
GEMINI_SCROLLERS = ("infinite-scroller", "main")

CHATGPT_TURN = '[data-testid*="conversation-turn"]'
CHATGPT_CONTENT = ".markdown, .prose, [data-message-author-role]"
CHATGPT_SCROLLERS = (
    ".react-scroll-to-bottom--css-pgsnv-1n7m0yu",
    'div[class*="overflow-y-auto"]',
)

GROK_MESSAGE = '.prose, [class*="message"], [data-testid="message-container"]'
GROK_SCROLLERS = ('div[class*="overflow-y-auto"]', "main")
GROK_MIN_LENGTH = 5

AUTHOR_LABEL = '[class*="author"], [class*="sender"], [data-testid*="author"]'

NOTEBOOK_READY = 'main, [role="main"], .source-card'
NOTEBOOK_TURN = '.chat-turn, [class*="message"], .source-card'


async def extract_gemini_chat(page: Page) -> str:
    await wait_for_signature(page, GEMINI_MESSAGE, 10_000)
    await scroll_history(page, GEMINI_SCROLLERS, iterations=5, delay_ms=1_000)

    soup = await page_soup(page)
    fragments: list[Fragment] = []
    for element in soup.select(GEMINI_MESSAGE):
        text = text_of(element)
        if text:
            is_user = is_inside(element, '[data-speaker="user"]')
            fragments.append(attribute(text, is_user=is_user, service_label="Gemini"))

    if not fragments:
        logger.info("No Gemini messages found; using generic extraction")
        return await extract_generic(page)
    return format_conversation(fragments)


async def extract_chatgpt(page: Page) -> str:
    await wait_for_signature(page, CHATGPT_TURN, 15_000)
    logger.info("Loading full ChatGPT history")
    await scroll_history(page, CHATGPT_SCROLLERS, iterations=10, delay_ms=1_000)

    soup = await page_soup(page)
    fragments: list[Fragment] = []
    for turn in soup.select(CHATGPT_TURN):
        content = turn.select_one(CHATGPT_CONTENT)
        text = text_of(content)
        if not text:
            continue
        is_user = (
            turn.select_one('[data-testid="user-message"], [data-message-author-role="user"]')
            is not None
        )
        fragments.append(attribute(text, is_user=is_user, service_label="ChatGPT"))

    fragments = dedupe_fragments(fragments)
    if not fragments:
        logger.info("No ChatGPT turns found; using generic extraction")
        return await extract_generic(page)
    return format_conversation(fragments)


def _labelled_you(turn: Tag | None) -> bool:
    """True when the turn's own author label reads "You"."""
    if turn is None:
        return False
    label = turn.select_one(AUTHOR_LABEL)
    return label is not None and bool(_YOU.search(label.get_text(" ")))


def _is_grok_user(element: Tag) -> bool:
    container = element.css.closest('[class*="message"]')
    if container is not None and "user" in " ".join(container.get("class", [])).lower():
        return True
    return _labelled_you(container)


async def extract_grok(page: Page) -> str:
    # Grok has no stable ready marker and is slow to hydrate
    await page.wait_for_timeout(10_000)
    logger.info("Loading full Grok history")
    await scroll_history(page, GROK_SCROLLERS, iterations=15, delay_ms=1_000)

    soup = await page_soup(page)
    fragments: list[Fragment] = []
    for element in soup.select(GROK_MESSAGE):
        text = text_of(element)
        if len(text) <= GROK_MIN_LENGTH:
            continue
        fragments.append(attribute(text, is_user=_is_grok_user(element), service_label="Grok"))

    fragments = dedupe_fragments(fragments)
    if not fragments:
        logger.info("No Grok messages found; using generic extraction")
        return await extract_generic(page)
    return format_conversation(fragments)


async def extract_notebooklm(page: Page) -> str:
    logger.info("Waiting for NotebookLM to load")
    await wait_for_signature(page, NOTEBOOK_READY, 20_000)
    await page.wait_for_timeout(8_000)

    soup = await page_soup(page)
    fragments: list[Fragment] = []
    for turn in soup.select(NOTEBOOK_TURN):
        text = text_of(turn)
        if not text:
            continue
        is_user = is_inside(turn, '[class*="user"]') or _labelled_you(turn)
        fragments.append(attribute(text, is_user=is_user, service_label="NotebookLM"))

    fragments = dedupe_fragments(fragments)
    if not fragments:
        logger.info("No NotebookLM turns found; using generic extraction")
        return await extract_generic(page)
    return format_conversation(fragments)
