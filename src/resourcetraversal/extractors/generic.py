from __future__ import annotations

from bs4 import BeautifulSoup, Tag
from playwright.async_api import Page

from resourcetraversal.extractors.base import page_soup, remove_all, text_of

CHROME_SELECTOR = 'nav, header, footer, [role="navigation"]'
MAIN_CONTENT_SELECTOR = 'main, article, [role="main"]'


def _main_region(soup: BeautifulSoup) -> Tag | None:
    """First landmark, narrowed while it wraps exactly one nested landmark.

    A landmark holding several sibling landmarks (a feed of articles) is kept
    whole.
    """
    region = soup.select_one(MAIN_CONTENT_SELECTOR)
    while region is not None:
        nested = [
            tag
            for tag in region.select(MAIN_CONTENT_SELECTOR)
            if tag.parent.css.closest(MAIN_CONTENT_SELECTOR) is region
        ]
        if len(nested) != 1:
            break
        region = nested[0]
    return region


async def extract_generic(page: Page) -> str:
    """Universal fallback: visible text of the main content region, sans chrome."""
    soup = await page_soup(page)
    remove_all(soup, CHROME_SELECTOR)
    region = _main_region(soup) or soup.body or soup
    return text_of(region)


async def extract_raw_text(page: Page) -> str:
    """Full-page body text with only scripts and styles removed."""
    soup = await page_soup(page)
    return text_of(soup.body or soup)
