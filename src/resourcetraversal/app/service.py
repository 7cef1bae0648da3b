from __future__ import annotations

import logging
from typing import Any

from resourcetraversal.browser.session import BrowserSessionManager
from resourcetraversal.config import Settings
from resourcetraversal.exceptions import ErrorKind, SessionNotFoundError, classify_error
from resourcetraversal.models import ExtractionResult, ToolResult, ToolSpec
from resourcetraversal.traversal import TraversalPipeline

logger = logging.getLogger(__name__)

LOGIN_COMMAND = "resource-traversal login"

TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec(
        name="traverse_resource",
        description=(
            "Fetch content from an authenticated web resource (e.g., Gemini chat, "
            "Google Doc, NotebookLM). Requires prior authentication via "
            f"`{LOGIN_COMMAND}`."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "url": {
                    "type": "string",
                    "description": (
                        "The URL of the resource to traverse "
                        "(e.g., https://gemini.google.com/app/xyz)"
                    ),
                },
                "raw": {
                    "type": "boolean",
                    "description": (
                        "If true, return raw page text without service-specific "
                        "extraction (default: false)"
                    ),
                },
            },
            "required": ["url"],
        },
    ),
    ToolSpec(
        name="check_auth",
        description="Check if an authenticated browser session exists",
        input_schema={"type": "object", "properties": {}},
    ),
)


def no_session_message() -> str:
    return (
        "No authenticated session found.\n\n"
        "To set up authentication, run:\n"
        f"```\n{LOGIN_COMMAND}\n```\n\n"
        "This will open a browser for you to log in."
    )


def session_expired_message(url: str) -> str:
    return (
        "**Session Expired or Auth Required**\n\n"
        f"The traversal hit a login wall at: {url}\n\n"
        "**Action Required:**\n"
        "Log in again to refresh your session:\n"
        f"```bash\n{LOGIN_COMMAND} {url}\n```"
    )


def format_result(result: ExtractionResult) -> str:
    label = f" ({result.service.value})" if result.service else ""
    return "\n".join(
        [
            f"# {result.title}{label}",
            "",
            f"**Source:** {result.url}",
            "",
            "---",
            "",
            result.content,
        ]
    )


TRUE_FLAGS = frozenset({"true", "1", "yes"})
FALSE_FLAGS = frozenset({"false", "0", "no", ""})


def parse_flag(value: Any) -> bool | None:
    """Read a boolean argument that may arrive as a JSON string; None if invalid."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUE_FLAGS:
            return True
        if lowered in FALSE_FLAGS:
            return False
    return None


class TraversalService:
    """The two capabilities offered to a calling agent."""

    def __init__(self, settings: Settings, sessions: BrowserSessionManager | None = None):
        self.settings = settings
        self.sessions = sessions or BrowserSessionManager(settings)
        self.pipeline = TraversalPipeline(self.sessions, settings)

    def list_tools(self) -> list[ToolSpec]:
        return list(TOOLS)

    async def invoke(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResult:
        arguments = arguments or {}
        if name == "traverse_resource":
            url = arguments.get("url")
            if not url:
                return ToolResult("Error: URL is required", is_error=True)
            raw = parse_flag(arguments.get("raw"))
            if raw is None:
                return ToolResult("Error: raw must be a boolean", is_error=True)
            return await self.traverse_resource(str(url), raw=raw)
        if name == "check_auth":
            return self.check_auth()
        return ToolResult(f"Unknown tool: {name}", is_error=True)

    async def traverse_resource(self, url: str, raw: bool = False) -> ToolResult:
        if not self.sessions.has_session():
            return ToolResult(no_session_message(), is_error=True)
        try:
            result = await self.pipeline.traverse(url, raw=raw)
        except SessionNotFoundError:
            return ToolResult(no_session_message(), is_error=True)
        except Exception as exc:
            logger.warning("Traversal of %s failed: %s", url, exc)
            if classify_error(exc) is ErrorKind.SESSION_EXPIRED:
                return ToolResult(session_expired_message(url), is_error=True)
            return ToolResult(f"Error: {exc}", is_error=True)
        return ToolResult(format_result(result))

    def check_auth(self) -> ToolResult:
        if self.sessions.has_session():
            return ToolResult(
                "Authenticated session found.\n\n"
                "You can use `traverse_resource` to fetch content from authenticated URLs."
            )
        return ToolResult(
            "No authenticated session found.\n\n"
            f"To set up authentication, run:\n```\n{LOGIN_COMMAND}\n```"
        )
