from __future__ import annotations

from typing import Any

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from resourcetraversal.config import Settings


class FakeElement:
    def __init__(self, *, fail: Exception | None = None):
        self.clicks = 0
        self.fail = fail

    async def click(self) -> None:
        if self.fail:
            raise self.fail
        self.clicks += 1


class FakeFrame:
    def __init__(self, controls: dict[str, FakeElement] | None = None):
        self.controls = controls or {}
        self.queries: list[str] = []

    async def query_selector(self, selector: str) -> FakeElement | None:
        self.queries.append(selector)
        for needle, element in self.controls.items():
            if needle in selector:
                return element
        return None


class FakePage(FakeFrame):
    """Stands in for a Playwright page holding a fixed DOM snapshot."""

    def __init__(
        self,
        html: str = "<html><body></body></html>",
        *,
        title: str = "Untitled",
        url: str = "https://example.com/",
        frames: list[FakeFrame] | None = None,
        controls: dict[str, FakeElement] | None = None,
        selector_timeout: bool = False,
        goto_error: Exception | None = None,
        content_error: Exception | None = None,
    ):
        super().__init__(controls)
        self.html = html
        self._title = title
        self.url = url
        self._frames = frames
        self.selector_timeout = selector_timeout
        self.goto_error = goto_error
        self.content_error = content_error
        self.visited: list[tuple[str, dict[str, Any]]] = []
        self.waits: list[float] = []
        self.evaluations: list[tuple[str, Any]] = []

    @property
    def frames(self) -> list[FakeFrame]:
        return self._frames if self._frames is not None else [self]

    async def goto(self, url: str, **kwargs: Any) -> None:
        if self.goto_error:
            raise self.goto_error
        self.visited.append((url, kwargs))
        self.url = url

    async def content(self) -> str:
        if self.content_error:
            raise self.content_error
        return self.html

    async def title(self) -> str:
        return self._title

    async def wait_for_timeout(self, timeout: float) -> None:
        self.waits.append(timeout)

    async def wait_for_selector(self, selector: str, **kwargs: Any) -> None:
        if self.selector_timeout:
            raise PlaywrightTimeoutError(f"Timeout waiting for {selector}")

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        self.evaluations.append((expression, arg))
        return None


class FakeContext:
    def __init__(self, page: FakePage, *, close_event_error: Exception | None = None):
        self.pages = [page]
        self.init_scripts: list[str] = []
        self.close_calls = 0
        self.close_event_error = close_event_error
        self.timeouts: dict[str, float] = {}

    async def add_init_script(self, script: str | None = None, **kwargs: Any) -> None:
        self.init_scripts.append(script or "")

    def set_default_navigation_timeout(self, timeout: float) -> None:
        self.timeouts["navigation"] = timeout

    def set_default_timeout(self, timeout: float) -> None:
        self.timeouts["default"] = timeout

    async def new_page(self) -> FakePage:
        page = FakePage()
        self.pages.append(page)
        return page

    async def wait_for_event(self, event: str, **kwargs: Any) -> None:
        if self.close_event_error:
            raise self.close_event_error

    async def close(self) -> None:
        self.close_calls += 1


class FakeChromium:
    def __init__(self, context_factory):
        self.context_factory = context_factory
        self.launches: list[tuple[str, dict[str, Any]]] = []
        self.contexts: list[FakeContext] = []

    async def launch_persistent_context(self, user_data_dir: str, **kwargs: Any) -> FakeContext:
        self.launches.append((user_data_dir, kwargs))
        context = self.context_factory()
        self.contexts.append(context)
        return context


class FakePlaywright:
    """Replaces ``async_playwright`` for tests; call it to get a starter."""

    def __init__(self, context_factory):
        self.chromium = FakeChromium(context_factory)
        self.stop_calls = 0

    def __call__(self) -> FakePlaywright:
        return self

    async def start(self) -> FakePlaywright:
        return self

    async def stop(self) -> None:
        self.stop_calls += 1


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        TRAVERSAL_PROFILE_DIR=tmp_path / "chromium-profile",
        SETTLE_DELAY_SECONDS=0,
        RAW_SETTLE_DELAY_SECONDS=0,
        BARRIER_SETTLE_DELAY_SECONDS=0,
    )


@pytest.fixture
def profile(settings) -> Settings:
    settings.profile_dir.mkdir(parents=True)
    return settings
