from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from playwright.async_api import BrowserContext, Page, Playwright, async_playwright
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from resourcetraversal.config import Settings
from resourcetraversal.exceptions import SessionNotFoundError

logger = logging.getLogger(__name__)

# Hide the automation flag from page scripts.
STEALTH_JS = "Object.defineProperty(navigator, 'webdriver', { get: () => undefined });"

IGNORE_DEFAULT_ARGS = ["--enable-automation"]

PlaywrightFactory = Callable[[], Any]


def browser_args(settings: Settings) -> list[str]:
    return [
        "--no-first-run",
        "--no-default-browser-check",
        "--disable-blink-features=AutomationControlled",
        "--disable-infobars",
        "--window-size=1920,1080",
        f"--user-agent={settings.user_agent}",
    ]


class SessionStore:
    """On-disk persistent profile whose existence marks a logged-in session."""

    def __init__(self, profile_dir: Path):
        self.path = Path(profile_dir)

    def exists(self) -> bool:
        return self.path.exists()


class BrowserSession:
    """Manages a Playwright persistent-context lifecycle for one profile."""

    def __init__(
        self,
        settings: Settings,
        store: SessionStore,
        *,
        headless: bool = True,
        login: bool = False,
        playwright_factory: PlaywrightFactory = async_playwright,
    ):
        self.settings = settings
        self.store = store
        self.headless = headless
        self.login = login
        self._playwright_factory = playwright_factory
        self._playwright: Playwright | None = None
        self._context: BrowserContext | None = None
        self._page: Page | None = None

    async def __aenter__(self) -> BrowserSession:
        try:
            await self._start()
        except Exception:
            await self._cleanup()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self._cleanup()

    @property
    def context(self) -> BrowserContext:
        if not self._context:
            raise RuntimeError("BrowserSession is not running")
        return self._context

    @property
    def page(self) -> Page:
        if not self._page:
            raise RuntimeError("BrowserSession is not running")
        return self._page

    async def _start(self) -> None:
        args = browser_args(self.settings)
        options: dict[str, Any] = {
            "headless": self.headless,
            "args": ["--start-maximized", *args] if self.login else args,
            "ignore_default_args": IGNORE_DEFAULT_ARGS,
        }
        if self.settings.browser_channel:
            options["channel"] = self.settings.browser_channel
        if self.login:
            options["no_viewport"] = True

        logger.debug("Launching browser (headless=%s) on %s", self.headless, self.store.path)
        self._playwright = await self._playwright_factory().start()
        self._context = await self._playwright.chromium.launch_persistent_context(
            str(self.store.path), **options
        )
        await self._context.add_init_script(script=STEALTH_JS)
        timeout_ms = self.settings.navigation_timeout * 1000
        self._context.set_default_navigation_timeout(timeout_ms)
        self._context.set_default_timeout(timeout_ms)
        pages = self._context.pages
        self._page = pages[0] if pages else await self._context.new_page()

    async def _cleanup(self) -> None:
        context, self._context, self._page = self._context, None, None
        playwright, self._playwright = self._playwright, None
        try:
            if context:
                await context.close()
                logger.debug("Browser context closed")
        finally:
            if playwright:
                await playwright.stop()


class BrowserSessionManager:
    """Hands out browser sessions bound to the persistent profile."""

    def __init__(
        self,
        settings: Settings,
        *,
        playwright_factory: PlaywrightFactory = async_playwright,
    ):
        self.settings = settings
        self.store = SessionStore(settings.profile_dir)
        self._playwright_factory = playwright_factory
        # Chromium allows only one process per user-data-dir.
        self._lock = asyncio.Lock()

    def has_session(self) -> bool:
        return self.store.exists()

    @asynccontextmanager
    async def open_session(self, headless: bool = True) -> AsyncIterator[BrowserSession]:
        if not self.has_session():
            raise SessionNotFoundError(
                f"No authenticated session found at {self.store.path}. "
                "Run `resource-traversal login` first."
            )
        async with self._lock:
            async with BrowserSession(
                self.settings,
                self.store,
                headless=headless,
                playwright_factory=self._playwright_factory,
            ) as session:
                yield session

    async def launch_for_login(self, start_url: str) -> bool:
        """Open a visible browser on the profile and wait for the user to close it.

        Returns True when the window was closed by the user and False when the
        login timeout elapsed first. The profile keeps whatever state was reached.
        """
        self.store.path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Launching browser for authentication; profile at %s", self.store.path)
        async with self._lock:
            async with BrowserSession(
                self.settings,
                self.store,
                headless=False,
                login=True,
                playwright_factory=self._playwright_factory,
            ) as session:
                await session.page.goto(start_url)
                try:
                    await session.context.wait_for_event(
                        "close", timeout=self.settings.login_timeout * 1000
                    )
                except PlaywrightTimeoutError:
                    logger.warning(
                        "Login window still open after %ss; saving session as is",
                        self.settings.login_timeout,
                    )
                    return False
        return True
