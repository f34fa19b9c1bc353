"""Makes lazy-loaded page content render before a screenshot is taken.

The page is scrolled top to bottom so lazy loaders fire, every ``<img>`` is
switched to eager loading, carousel-like components are forced visible, and
the routine waits for images and the network to settle before scrolling back
to the top.
"""

from __future__ import annotations

import logging
from typing import Optional

from playwright.async_api import Page

from visual_review.models.config import PagePrepConfig

logger = logging.getLogger(__name__)

_LOAD_ALL_IMAGES_SCRIPT = """
async (config) => {
    const sleep = (ms) => new Promise(resolve => setTimeout(resolve, ms));

    const forceLoad = (img) => {
        img.loading = 'eager';
        if (img.dataset.src && !img.src) {
            img.src = img.dataset.src;
        }
        // Reassigning src restarts a deferred load
        if (img.src) {
            const current = img.src;
            img.src = '';
            img.src = current;
        }
    };

    const waitForImage = (img, timeout) => {
        if (img.complete && img.naturalWidth > 0) {
            return Promise.resolve();
        }
        return new Promise(resolve => {
            const timer = setTimeout(() => {
                console.warn('Image load timeout:', img.src || 'no src');
                resolve();
            }, timeout);
            const done = () => {
                clearTimeout(timer);
                resolve();
            };
            img.onload = done;
            img.onerror = done;
        });
    };

    // 1. Scroll through the page
    const totalHeight = document.body.scrollHeight;
    for (let y = 0; y < totalHeight; y += config.scroll_step) {
        window.scrollTo(0, y);
        await sleep(config.scroll_delay);
        document.querySelectorAll('img').forEach(forceLoad);
    }
    window.scrollTo(0, totalHeight);
    await sleep(config.scroll_delay);

    // 2. Special components
    for (const selector of config.activate_selectors) {
        document.querySelectorAll(selector).forEach(el => {
            el.style.visibility = 'visible';
            el.style.opacity = '1';
            el.classList.add('active');
        });
    }
    for (const selector of config.reveal_selectors) {
        document.querySelectorAll(selector).forEach(el => {
            el.style.visibility = 'visible';
            el.style.opacity = '1';
        });
    }

    // 3. Force every image and wait for it
    const images = Array.from(document.querySelectorAll('img'));
    images.forEach(forceLoad);
    await Promise.all(images.map(img => waitForImage(img, config.image_timeout)));

    // 4. Back to the top
    window.scrollTo(0, 0);
    return images.length;
}
"""


async def prepare_page(page: Page, config: Optional[PagePrepConfig] = None) -> int:
    """Run the preparation routine on ``page``; returns the number of images seen.

    Network-idle timeouts raise Playwright's ``TimeoutError``.
    """
    config = config or PagePrepConfig()

    logger.debug("Waiting for initial page load...")
    await page.wait_for_load_state("networkidle", timeout=config.initial_timeout)

    logger.debug("Loading all images...")
    image_count = await page.evaluate(_LOAD_ALL_IMAGES_SCRIPT, config.model_dump())
    logger.debug("Forced %s images to load", image_count)

    await page.wait_for_load_state("networkidle", timeout=config.final_timeout)
    await page.wait_for_timeout(config.final_wait)
    logger.info("Page ready for screenshot: %s", page.url)
    return image_count
