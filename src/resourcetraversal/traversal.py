from __future__ import annotations

import logging

from resourcetraversal.browser.barriers import handle_barriers
from resourcetraversal.browser.session import BrowserSessionManager
from resourcetraversal.config import Settings
from resourcetraversal.exceptions import SessionNotFoundError
from resourcetraversal.extractors import EXTRACTORS, detect_service, extract_raw_text
from resourcetraversal.models import ExtractionResult

logger = logging.getLogger(__name__)


class TraversalPipeline:
    """Navigate to a URL with the persistent session and extract its content.

    Raw mode, and any URL that matches no known service, skips barrier
    handling and returns the page's body text untouched by any
    service-specific logic. Errors from navigation and extraction propagate;
    the browser context is closed on every path.
    """

    def __init__(self, sessions: BrowserSessionManager, settings: Settings):
        self.sessions = sessions
        self.settings = settings

    async def traverse(self, url: str, raw: bool = False) -> ExtractionResult:
        if not self.sessions.has_session():
            raise SessionNotFoundError(
                "No authenticated session found. Run `resource-traversal login` first.",
                url=url,
            )

        service = None if raw else detect_service(url)
        extractor = EXTRACTORS[service] if service is not None else None
        settle = (
            self.settings.settle_delay if extractor else self.settings.raw_settle_delay
        )

        async with self.sessions.open_session(headless=True) as session:
            page = session.page
            await page.goto(
                url,
                wait_until="domcontentloaded",
                timeout=self.settings.navigation_timeout * 1000,
            )
            await page.wait_for_timeout(settle * 1000)

            if extractor is None:
                title = await page.title()
                content = await extract_raw_text(page)
            else:
                cleared = await handle_barriers(
                    page, int(self.settings.barrier_settle_delay * 1000)
                )
                if cleared:
                    logger.info("Cleared %s on %s", ", ".join(cleared), url)
                title = await page.title()
                logger.info("Loaded %s (%s)", url, service.value)
                content = await extractor(page)

        return ExtractionResult(url=url, title=title, content=content, service=service)
