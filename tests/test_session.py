from __future__ import annotations

import pytest
from conftest import FakeContext, FakePage, FakePlaywright
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from resourcetraversal.browser.session import STEALTH_JS, BrowserSessionManager, SessionStore
from resourcetraversal.exceptions import SessionNotFoundError


def make_manager(settings, **context_kwargs):
    playwright = FakePlaywright(lambda: FakeContext(FakePage(), **context_kwargs))
    return BrowserSessionManager(settings, playwright_factory=playwright), playwright


def test_session_store_tracks_profile_directory(tmp_path):
    store = SessionStore(tmp_path / "profile")
    assert not store.exists()
    (tmp_path / "profile").mkdir()
    assert store.exists()


def test_has_session_follows_configured_profile(settings):
    manager, _ = make_manager(settings)
    assert manager.has_session() is False
    settings.profile_dir.mkdir(parents=True)
    assert manager.has_session() is True


@pytest.mark.asyncio
async def test_open_session_requires_profile(settings):
    manager, playwright = make_manager(settings)
    with pytest.raises(SessionNotFoundError):
        async with manager.open_session():
            pass
    assert playwright.chromium.launches == []


@pytest.mark.asyncio
async def test_open_session_launches_stealth_headless_context(profile):
    manager, playwright = make_manager(profile)
    async with manager.open_session(headless=True) as session:
        assert isinstance(session.page, FakePage)

    user_data_dir, options = playwright.chromium.launches[0]
    assert user_data_dir == str(profile.profile_dir)
    assert options["headless"] is True
    assert options["channel"] == "chrome"
    assert options["ignore_default_args"] == ["--enable-automation"]
    assert "--disable-blink-features=AutomationControlled" in options["args"]
    context = playwright.chromium.contexts[0]
    assert context.init_scripts == [STEALTH_JS]
    assert context.timeouts["navigation"] == profile.navigation_timeout * 1000
    assert context.close_calls == 1
    assert playwright.stop_calls == 1


@pytest.mark.asyncio
async def test_open_session_closes_context_when_body_raises(profile):
    manager, playwright = make_manager(profile)
    with pytest.raises(ValueError):
        async with manager.open_session():
            raise ValueError("extraction blew up")
    assert playwright.chromium.contexts[0].close_calls == 1


@pytest.mark.asyncio
async def test_repeated_opens_leave_marker_intact(profile):
    manager, playwright = make_manager(profile)
    for _ in range(3):
        async with manager.open_session():
            pass
    assert manager.has_session() is True
    assert [c.close_calls for c in playwright.chromium.contexts] == [1, 1, 1]


@pytest.mark.asyncio
async def test_launch_for_login_waits_for_user_to_close(settings):
    manager, playwright = make_manager(settings)
    assert await manager.launch_for_login("https://accounts.google.com") is True

    _, options = playwright.chromium.launches[0]
    assert options["headless"] is False
    assert options["no_viewport"] is True
    assert options["args"][0] == "--start-maximized"
    context = playwright.chromium.contexts[0]
    assert context.pages[0].visited[0][0] == "https://accounts.google.com"
    assert context.close_calls == 1


@pytest.mark.asyncio
async def test_launch_for_login_returns_on_timeout(settings):
    manager, playwright = make_manager(
        settings, close_event_error=PlaywrightTimeoutError("Timeout 300000ms exceeded")
    )
    assert await manager.launch_for_login("https://discord.com/login") is False
    assert playwright.chromium.contexts[0].close_calls == 1
