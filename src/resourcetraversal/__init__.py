from __future__ import annotations

import asyncio
import sys

if sys.platform.startswith("win"):
    # Playwright requires subprocess support, so enforce the Proactor loop on Windows.
    asyncio.set_event_loop_policy(asyncio.WindowsProactorEventLoopPolicy())

__all__ = []
