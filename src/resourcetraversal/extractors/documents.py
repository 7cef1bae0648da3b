"""Extractors for document-style pages (Google Docs, Raindrop bookmarks)."""

from __future__ import annotations

import logging
from urllib.parse import urljoin

from playwright.async_api import Page

from resourcetraversal.extractors.base import (
    page_soup,
    remove_all,
    text_of,
    wait_for_signature,
)
from resourcetraversal.extractors.generic import extract_generic

logger = logging.getLogger(__name__)

DOCS_EDITOR = ".kix-appview-editor"
DOCS_NOISE = ".kix-cursor, .kix-selection-overlay"
DOCS_LINE = ".kix-lineview"
DOCS_MIN_LENGTH = 50

RAINDROP_ITEM = ".bookmark"
RAINDROP_TITLE = '.title, [class*="title-"]'


async def extract_google_doc(page: Page) -> str:
    await wait_for_signature(page, DOCS_EDITOR, 15_000)
    await page.wait_for_timeout(3_000)

    soup = await page_soup(page)
    editor = soup.select_one(DOCS_EDITOR)
    if editor is not None:
        remove_all(editor, DOCS_NOISE)
        content = text_of(editor)
    else:
        content = "\n".join(text_of(line) for line in soup.select(DOCS_LINE))

    if len(content.strip()) < DOCS_MIN_LENGTH:
        logger.info("Google Doc body too short; using generic extraction")
        return await extract_generic(page)
    return content


async def extract_raindrop(page: Page) -> str:
    await wait_for_signature(page, RAINDROP_ITEM, 15_000)

    soup = await page_soup(page)
    bookmarks: list[str] = []
    for item in soup.select(RAINDROP_ITEM):
        title = text_of(item.select_one(RAINDROP_TITLE)) or "Untitled"
        link = item.select_one("a[href]")
        url = urljoin(page.url, link["href"]) if link is not None else "No URL"
        bookmarks.append(f"- [{title}]({url})")

    if not bookmarks:
        logger.info("No Raindrop bookmarks found; using generic extraction")
        return await extract_generic(page)
    return "\n".join(bookmarks)
