from __future__ import annotations

import pytest
from conftest import FakeContext, FakePage, FakePlaywright

from resourcetraversal.app.service import TraversalService
from resourcetraversal.browser.session import BrowserSessionManager


def make_service(settings, page: FakePage):
    playwright = FakePlaywright(lambda: FakeContext(page))
    sessions = BrowserSessionManager(settings, playwright_factory=playwright)
    return TraversalService(settings, sessions), playwright


class FailingPage(FakePage):
    def __init__(self, message: str):
        super().__init__()
        self.message = message

    async def title(self):
        raise RuntimeError(self.message)


@pytest.mark.asyncio
async def test_gemini_output_heading_carries_service_label(profile):
    page = FakePage('<div data-message-id="1">Answer</div>', title="My chat")
    service, _ = make_service(profile, page)

    result = await service.traverse_resource("https://gemini.google.com/app/abc123")

    assert result.is_error is False
    assert result.text.startswith("# My chat (gemini)\n")
    assert result.text == (
        "# My chat (gemini)\n\n"
        "**Source:** https://gemini.google.com/app/abc123\n\n"
        "---\n\n"
        "**Gemini:**\nAnswer"
    )


@pytest.mark.asyncio
async def test_unknown_service_heading_has_no_label(profile):
    page = FakePage("<main>Body</main>", title="Example")
    service, _ = make_service(profile, page)

    result = await service.traverse_resource("https://example.com/page")

    assert result.text.splitlines()[0] == "# Example"


@pytest.mark.asyncio
async def test_no_session_returns_instructions_without_launch(settings):
    service, playwright = make_service(settings, FakePage())

    result = await service.traverse_resource("https://gemini.google.com/app/abc123")

    assert result.is_error is True
    assert "No authenticated session found." in result.text
    assert "resource-traversal login" in result.text
    assert playwright.chromium.launches == []
    assert "No authenticated session found." in service.check_auth().text


@pytest.mark.asyncio
async def test_sign_in_failure_asks_for_reauthentication(profile):
    service, playwright = make_service(profile, FailingPage("Sign in to continue"))
    url = "https://app.slack.com/client/T01/C02"

    result = await service.traverse_resource(url)

    assert result.is_error is True
    assert "Session Expired or Auth Required" in result.text
    assert f"resource-traversal login {url}" in result.text
    assert playwright.chromium.contexts[0].close_calls == 1


@pytest.mark.asyncio
async def test_other_failure_is_generic_error(profile):
    service, _ = make_service(profile, FailingPage("renderer crashed"))

    result = await service.traverse_resource("https://example.com/page")

    assert result.is_error is True
    assert result.text == "Error: renderer crashed"


def test_check_auth_reports_existing_session(profile):
    service, _ = make_service(profile, FakePage())
    result = service.check_auth()
    assert result.is_error is False
    assert result.text.startswith("Authenticated session found.")


def test_list_tools_describes_both_capabilities(settings):
    service, _ = make_service(settings, FakePage())
    tools = {tool.name: tool for tool in service.list_tools()}
    assert set(tools) == {"traverse_resource", "check_auth"}
    assert tools["traverse_resource"].input_schema["required"] == ["url"]


@pytest.mark.asyncio
async def test_invoke_validates_arguments_and_names(profile):
    service, _ = make_service(profile, FakePage(title="Raw page"))

    missing = await service.invoke("traverse_resource", {})
    assert missing.is_error and missing.text == "Error: URL is required"

    unknown = await service.invoke("delete_everything")
    assert unknown.is_error and unknown.text == "Unknown tool: delete_everything"

    raw = await service.invoke(
        "traverse_resource", {"url": "https://gemini.google.com/app/x", "raw": True}
    )
    assert raw.text.startswith("# Raw page\n")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "flag, expect_raw",
    [("false", False), ("False", False), ("true", True), (None, False), (False, False)],
)
async def test_invoke_reads_raw_flag_strictly(profile, flag, expect_raw):
    page = FakePage('<div data-message-id="1">Answer</div>', title="Chat")
    service, _ = make_service(profile, page)

    result = await service.invoke(
        "traverse_resource", {"url": "https://gemini.google.com/app/x", "raw": flag}
    )

    heading = result.text.splitlines()[0]
    assert heading == ("# Chat" if expect_raw else "# Chat (gemini)")


@pytest.mark.asyncio
async def test_invoke_rejects_non_boolean_raw_flag(profile):
    service, playwright = make_service(profile, FakePage())

    result = await service.invoke(
        "traverse_resource", {"url": "https://gemini.google.com/app/x", "raw": "maybe"}
    )

    assert result.is_error is True
    assert result.text == "Error: raw must be a boolean"
    assert playwright.chromium.launches == []
