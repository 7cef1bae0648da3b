from __future__ import annotations

import argparse
import asyncio
from urllib.parse import urlparse

from rich.console import Console
from rich.panel import Panel

from resourcetraversal.app.service import TraversalService
from resourcetraversal.browser.session import BrowserSessionManager
from resourcetraversal.config import Settings, configure_logging, get_settings

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="resource-traversal",
        description="Fetch content from logged-in web apps through a persistent browser profile",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    login = commands.add_parser("login", help="Open a browser to log in and save the session")
    login.add_argument("url", nargs="?", help="Page to start on (defaults to Google sign-in)")

    commands.add_parser("check", help="Report whether a saved session exists")

    fetch = commands.add_parser("fetch", help="Traverse one URL and print the extracted content")
    fetch.add_argument("url", help="Resource to traverse")
    fetch.add_argument("--raw", action="store_true", help="Skip service-specific extraction")

    commands.add_parser("serve", help="Run the MCP server on stdio")
    return parser


async def _login(settings: Settings, url: str | None) -> int:
    sessions = BrowserSessionManager(settings)
    start_url = url or settings.login_url

    console.print(Panel.fit("Resource Traversal - Universal Auth Key", style="bold cyan"))
    if sessions.has_session():
        console.print("Existing session found. This will update your saved profile.")
    else:
        console.print("Creating a new saved profile for the first time.")
    console.print(f"Target: [bold]{start_url}[/bold]")
    console.print(f"Profile: {sessions.store.path}\n")
    console.print(" 1. A Chrome window will open.")
    console.print(" 2. Log in to your account(s).")
    console.print(" 3. Once logged in, close the browser to save the session.\n")

    closed = await sessions.launch_for_login(start_url)
    if not closed:
        console.print(
            f"[yellow]Login window timed out after {settings.login_timeout}s; "
            "the session was saved as it stood.[/yellow]"
        )
    origin = urlparse(start_url)
    console.print("[bold green]Session saved.[/bold green] Authenticated resources are now "
                  f"reachable at {origin.scheme}://{origin.netloc}")
    console.print(f'Try it: resource-traversal fetch "{start_url}"')
    return 0


async def _fetch(settings: Settings, url: str, raw: bool) -> int:
    service = TraversalService(settings)
    result = await service.traverse_resource(url, raw=raw)
    if result.is_error:
        console.print(result.text, style="bold red", markup=False)
        return 1
    console.print(result.text, markup=False, highlight=False)
    return 0


def _check(settings: Settings) -> int:
    result = TraversalService(settings).check_auth()
    console.print(result.text, markup=False)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = get_settings()
    configure_logging(settings)

    if args.command == "login":
        return asyncio.run(_login(settings, args.url))
    if args.command == "check":
        return _check(settings)
    if args.command == "fetch":
        return asyncio.run(_fetch(settings, args.url, args.raw))

    from resourcetraversal.server import main as serve

    serve()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
