"""Reachability checks for candidate URL pairs."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Sequence

import httpx

from visual_review.models.url_pair import CandidatePair, ValidatedPair
from visual_review.url_utils import is_well_formed_url

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


def _mark(ok: bool) -> str:
    return "ok" if ok else "failed"


async def validate_url(url: str, client: httpx.AsyncClient) -> bool:
    """Send a single HEAD request; only an HTTP 200 counts as reachable.

    Malformed URLs, non-200 statuses, connection errors and timeouts all
    yield ``False``. There are no retries.
    """
    if not is_well_formed_url(url):
        logger.info("Invalid URL format: %s", url)
        return False

    try:
        response = await client.head(url, follow_redirects=False)
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
        # ValueError covers hosts rejected by IDNA encoding
        logger.debug("HEAD %s failed: %s", url, e)
        return False

    logger.debug("HEAD %s -> %d", url, response.status_code)
    return response.status_code == 200


async def validate_pairs(
    pairs: Sequence[CandidatePair],
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> list[ValidatedPair]:
    """Keep the pairs whose before and after URLs are both reachable.

    Pairs are checked one after another; the two URLs of a pair are
    checked concurrently.
    """
    if client is None:
        async with httpx.AsyncClient(timeout=timeout) as owned_client:
            return await validate_pairs(pairs, owned_client)

    logger.info("Validating %d URL pairs...", len(pairs))
    validated: list[ValidatedPair] = []

    for pair in pairs:
        logger.info("Validating: %s -> %s", pair.before, pair.after)
        before_ok, after_ok = await asyncio.gather(
            validate_url(pair.before, client),
            validate_url(pair.after, client),
        )

        if before_ok and after_ok:
            validated.append(ValidatedPair.from_candidate(pair))
            logger.info("Valid URL pair: %s -> %s", pair.before, pair.after)
        else:
            logger.info(
                "Invalid URL pair (before: %s, after: %s): %s -> %s",
                _mark(before_ok), _mark(after_ok), pair.before, pair.after,
            )

    return validated
