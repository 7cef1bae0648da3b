"""Extractors for team chat apps (Discord, Slack)."""

from __future__ import annotations

import logging

from playwright.async_api import Page

from resourcetraversal.extractors.base import (
    Fragment,
    dedupe_fragments,
    page_soup,
    scroll_history,
    text_of,
    wait_for_signature,
)
from resourcetraversal.extractors.generic import extract_generic

logger = logging.getLogger(__name__)

DISCORD_READY = '[role="list"]'
DISCORD_CONTENT = '[id^="message-content-"], [class*="messageContent"]'
DISCORD_CONTAINER = 'li[id^="chat-messages-"], [role="article"], [class*="message-"]'
DISCORD_AUTHOR = '[class*="username"]'
DISCORD_SCROLLERS = ('[data-list-id="chat-messages"]', '[class*="scroller"]')

SLACK_READY = '.c-message_kit__message, [role="listitem"]'
SLACK_MESSAGE = '.c-message_kit__message, .c-message--light, [role="listitem"]'
SLACK_AUTHOR = '.c-message__sender_button, [data-qa="message_sender_name"], .c-message__sender'
SLACK_BODY = '.c-message_kit__blocks, .c-message__body, .c-message__content-body'
SLACK_TIME = '.c-timestamp__label, .c-timestamp'
SLACK_SCROLLERS = ('.c-scrollbar__hider', '.c-virtual_list__scroll_container')


async def extract_discord(page: Page) -> str:
    await wait_for_signature(page, DISCORD_READY, 15_000)
    await scroll_history(page, DISCORD_SCROLLERS, iterations=10, delay_ms=800)

    soup = await page_soup(page)
    fragments: list[Fragment] = []
    for element in soup.select(DISCORD_CONTENT):
        container = element.parent.css.closest(DISCORD_CONTAINER) if element.parent else None
        if container is None:
            continue
        author = text_of(container.select_one(DISCORD_AUTHOR)) or "Unknown"
        text = text_of(element)
        if text:
            fragments.append(Fragment(text=text, author=author))

    fragments = dedupe_fragments(fragments)
    if not fragments:
        logger.info("No Discord messages found; using generic extraction")
        return await extract_generic(page)
    return "\n\n".join(f"**{fragment.author}**: {fragment.text}" for fragment in fragments)


async def extract_slack(page: Page) -> str:
    await wait_for_signature(page, SLACK_READY, 15_000)
    logger.info("Loading Slack history")
    await scroll_history(page, SLACK_SCROLLERS, iterations=15, delay_ms=800)

    soup = await page_soup(page)
    fragments: list[Fragment] = []
    for element in soup.select(SLACK_MESSAGE):
        author = text_of(element.select_one(SLACK_AUTHOR))
        body = text_of(element.select_one(SLACK_BODY))
        if author and body:
            timestamp = text_of(element.select_one(SLACK_TIME))
            fragments.append(Fragment(text=body, author=author, timestamp=timestamp))

    fragments = dedupe_fragments(fragments)
    if not fragments:
        logger.info("No Slack messages found; using generic extraction")
        return await extract_generic(page)
    return "\n\n".join(
        f"**{fragment.author}** [{fragment.timestamp}]: {fragment.text}" for fragment in fragments
    )
