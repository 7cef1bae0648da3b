"""Shared building blocks for the per-service extractors.

Extractors work on a snapshot of the rendered DOM (``page.content()``) parsed
with BeautifulSoup. The helpers here turn that markup into text that reads like
the browser's ``innerText``, tag fragments by author and drop the repeats that
history scrolling tends to produce.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass

from bs4 import BeautifulSoup, NavigableString, Tag
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

logger = logging.getLogger(__name__)

Extractor = Callable[[Page], Awaitable[str]]

USER_LABEL = "User"
CONVERSATION_SEPARATOR = "\n\n---\n\n"
DEDUPE_PREFIX_LENGTH = 50

# marks a table cell boundary until clean_text turns it into a tab
CELL_BREAK = "\x1f"

NOISE_SELECTOR = "script, style, noscript"
BLOCK_TAGS = (
    "address", "article", "aside", "blockquote", "dd", "div", "dl", "dt",
    "fieldset", "figcaption", "figure", "footer", "form", "h1", "h2", "h3",
    "h4", "h5", "h6", "header", "hr", "li", "main", "nav", "ol", "p", "pre",
    "section", "table", "tr", "ul",
)

SCROLL_TO_TOP_JS = """
(selectors) => {
    for (const selector of selectors) {
        const scroller = document.querySelector(selector);
        if (scroller) {
            scroller.scrollTop = 0;
            return selector;
        }
    }
    window.scrollTo(0, 0);
    return null;
}
"""


@dataclass(slots=True)
class Fragment:
    text: str
    author: str
    is_user: bool = False
    timestamp: str = ""


def parse_html(html: str) -> BeautifulSoup:
    """Parse markup, drop non-visible tags and mark line breaks at block edges."""
    soup = BeautifulSoup(html, "html.parser")
    remove_all(soup, NOISE_SELECTOR)
    for br in soup.find_all("br"):
        br.replace_with("\n")
    for block in soup.find_all(BLOCK_TAGS):
        block.insert_before("\n")
        block.insert_after("\n")
    for row in soup.find_all("tr"):
        for child in list(row.children):
            if isinstance(child, NavigableString) and not child.strip():
                child.extract()
    for cell in soup.find_all(["td", "th"]):
        if cell.find_previous_sibling(["td", "th"]) is not None:
            cell.insert_before(CELL_BREAK)
    return soup


def remove_all(root: Tag, selector: str) -> None:
    for tag in root.select(selector):
        # nested matches are gone once an ancestor is decomposed
        if not tag.decomposed:
            tag.decompose()


def clean_text(text: str) -> str:
    lines = (
        "\t".join(" ".join(cell.split()) for cell in line.split(CELL_BREAK)).strip()
        for line in text.splitlines()
    )
    return "\n".join(line for line in lines if line)


def text_of(tag: Tag | None) -> str:
    if tag is None:
        return ""
    return clean_text(tag.get_text())


async def page_soup(page: Page) -> BeautifulSoup:
    return parse_html(await page.content())


async def wait_for_signature(page: Page, selector: str, timeout_ms: int) -> bool:
    """Wait for a service's signature element; a timeout is not an error."""
    try:
        await page.wait_for_selector(selector, timeout=timeout_ms)
    except PlaywrightTimeoutError:
        logger.debug("Timed out after %sms waiting for %s", timeout_ms, selector)
        return False
    return True


async def scroll_history(
    page: Page, scrollers: Sequence[str], *, iterations: int, delay_ms: int
) -> None:
    """Scroll to the top a fixed number of times so lazy history renders.

    There is no portable "history exhausted" signal, so the walk is bounded
    and best-effort.
    """
    for _ in range(iterations):
        try:
            await page.evaluate(SCROLL_TO_TOP_JS, list(scrollers))
        except PlaywrightError as exc:
            logger.debug("History scroll stopped early: %s", exc)
            return
        await page.wait_for_timeout(delay_ms)


def attribute(text: str, *, is_user: bool, service_label: str) -> Fragment:
    """Unlabelled fragments are credited to the service."""
    return Fragment(text=text, author=USER_LABEL if is_user else service_label, is_user=is_user)


def is_inside(tag: Tag, selector: str) -> bool:
    return tag.css.closest(selector) is not None


def dedupe_fragments(
    fragments: Iterable[Fragment], prefix_length: int = DEDUPE_PREFIX_LENGTH
) -> list[Fragment]:
    """Drop fragments whose leading text already appears in a kept fragment."""
    kept: list[Fragment] = []
    for fragment in fragments:
        prefix = fragment.text[:prefix_length]
        if any(prefix in existing.text for existing in kept):
            continue
        kept.append(fragment)
    return kept


def format_conversation(fragments: Iterable[Fragment]) -> str:
    return CONVERSATION_SEPARATOR.join(
        f"**{fragment.author}:**\n{fragment.text}" for fragment in fragments
    )
