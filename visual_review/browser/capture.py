"""Single prepared screenshot of a URL."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from playwright.async_api import async_playwright

from visual_review.browser.page_prep import prepare_page
from visual_review.browser.session import create_context, launch_browser
from visual_review.models.config import PagePrepConfig, ViewportConfig

logger = logging.getLogger(__name__)


async def capture_screenshot(
    url: str,
    output_path: Path,
    viewport: Optional[ViewportConfig] = None,
    storage_state: Optional[dict | str | Path] = None,
    prep_config: Optional[PagePrepConfig] = None,
    headless: bool = True,
) -> Path:
    """Open ``url``, prepare the page, and save a full-page screenshot."""
    viewport = viewport or ViewportConfig()
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    async with async_playwright() as pw:
        browser = await launch_browser(pw, headless=headless)
        try:
            context = await create_context(
                browser, viewport.as_playwright(), storage_state=storage_state
            )
            page = await context.new_page()
            logger.info("Opening %s (%s %dx%d)", url, viewport.name,
                        viewport.width, viewport.height)
            await page.goto(url)
            await prepare_page(page, prep_config)
            await page.screenshot(path=str(output_path), full_page=True)
        finally:
            await browser.close()

    logger.info("Saved screenshot to %s", output_path)
    return output_path
