"""Playwright browser and context setup for screenshot capture."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from playwright.async_api import Browser, BrowserContext, Playwright

logger = logging.getLogger(__name__)


async def launch_browser(playwright: Playwright, headless: bool = True) -> Browser:
    return await playwright.chromium.launch(headless=headless)


async def create_context(
    browser: Browser,
    viewport: dict,
    storage_state: Optional[dict | str | Path] = None,
) -> BrowserContext:
    """Create a browser context for a viewport.

    Args:
        storage_state: Optional Playwright storage state (cookies + localStorage),
            as a dict or a path to a JSON file. The BackstopJS ``cookies.json``
            uses this format. Paths that do not exist are ignored.
    """
    context_kwargs: dict = {
        "viewport": viewport,
        "locale": "en-US",
    }
    if isinstance(storage_state, (str, Path)):
        if Path(storage_state).exists():
            context_kwargs["storage_state"] = str(storage_state)
        else:
            logger.info("No storage state at %s, starting without cookies", storage_state)
    elif storage_state is not None:
        context_kwargs["storage_state"] = storage_state

    return await browser.new_context(**context_kwargs)
