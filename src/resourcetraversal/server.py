"""MCP stdio server exposing the traversal tools to agent hosts."""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from resourcetraversal.app.dependencies import get_service
from resourcetraversal.config import configure_logging, get_settings

mcp = FastMCP("resource-traversal")


@mcp.tool()
async def traverse_resource(url: str, raw: bool = False) -> str:
    """Fetch content from an authenticated web resource (e.g., Gemini chat, Google Doc,
    NotebookLM). Requires prior authentication via `resource-traversal login`.

    Args:
        url: The URL of the resource to traverse (e.g., https://gemini.google.com/app/xyz)
        raw: If true, return raw page text without service-specific extraction
    """
    result = await get_service().traverse_resource(url, raw=raw)
    return result.text


@mcp.tool()
def check_auth() -> str:
    """Check if an authenticated browser session exists."""
    return get_service().check_auth().text


def main() -> None:
    configure_logging(get_settings())
    mcp.run()


if __name__ == "__main__":
    main()
