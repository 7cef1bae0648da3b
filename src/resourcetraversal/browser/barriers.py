"""Best-effort bypass of overlays that hide page content.

Two obstructions are known: native-app interstitials (Slack's "open this link
in your browser") and cookie consent walls, which are often rendered inside an
iframe. A miss or a failed click is logged and the traversal continues.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Barrier:
    name: str
    markers: tuple[str, ...]
    selector: str
    search_frames: bool = False


APP_REDIRECT = Barrier(
    name="app-redirect",
    markers=(
        "open this link in your browser",
        "use slack in your browser",
        "continue in browser",
        "continue in your browser",
    ),
    selector=(
        'a:has-text("open this link in your browser"), '
        'a:has-text("use Slack in your browser"), '
        'a:has-text("continue in browser"), '
        'button:has-text("continue in browser"), '
        ".p-download_app__use_browser"
    ),
)

CONSENT_WALL = Barrier(
    name="consent-wall",
    markers=("accept all cookies", "cookie consent manager"),
    selector=(
        'button:has-text("ACCEPT ALL COOKIES"), '
        'button:has-text("Agree and proceed"), '
        'button:has-text("Accept all")'
    ),
    search_frames=True,
)

BARRIERS = (APP_REDIRECT, CONSENT_WALL)


async def handle_barriers(page: Page, settle_ms: int) -> list[str]:
    """Dismiss any known barrier on the page; returns the names of those cleared."""
    try:
        html = (await page.content()).lower()
    except PlaywrightError as exc:
        logger.warning("Could not inspect page for barriers: %s", exc)
        return []

    cleared: list[str] = []
    for barrier in BARRIERS:
        if not any(marker in html for marker in barrier.markers):
            continue
        logger.info("%s detected; attempting bypass", barrier.name)
        try:
            if await _dismiss(page, barrier, settle_ms):
                cleared.append(barrier.name)
            else:
                logger.info("No control found to dismiss %s", barrier.name)
        except PlaywrightError as exc:
            logger.warning("Failed to handle %s: %s", barrier.name, exc)
    return cleared


async def _dismiss(page: Page, barrier: Barrier, settle_ms: int) -> bool:
    targets = page.frames if barrier.search_frames else [page]
    for target in targets:
        control = await target.query_selector(barrier.selector)
        if control is not None:
            await control.click()
            await page.wait_for_timeout(settle_ms)
            return True
    return False
