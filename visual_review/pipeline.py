"""PR URL-pair pipeline: extract, validate, and apply stages."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Literal, Optional

import httpx

from visual_review.backstop.config_writer import apply_validated_pairs
from visual_review.models.config import PipelineSettings
from visual_review.models.url_pair import CandidatePair, ValidatedPair
from visual_review.pr_parser.extractor import extract_candidate_pairs
from visual_review.pr_parser.validator import validate_pairs

logger = logging.getLogger(__name__)

PipelineStatus = Literal["no_input", "no_pairs", "updated"]


@dataclass
class PipelineResult:
    status: PipelineStatus
    candidates: list[CandidatePair] = field(default_factory=list)
    validated: list[ValidatedPair] = field(default_factory=list)
    added: int = 0


def run_url_pair_pipeline(
    settings: PipelineSettings, client: Optional[httpx.AsyncClient] = None
) -> PipelineResult:
    """Execute extract → validate → apply for one PR body.

    A missing or unparsable configuration document is not handled here.
    """
    return asyncio.run(_run(settings, client))


async def _run(
    settings: PipelineSettings, client: Optional[httpx.AsyncClient] = None
) -> PipelineResult:
    if not settings.pr_body:
        logger.info("No PR body provided")
        return PipelineResult(status="no_input")

    logger.info("Parsing PR body for URL pairs...")
    candidates = extract_candidate_pairs(settings.pr_body)

    validated = await validate_pairs(
        candidates, client=client, timeout=settings.request_timeout
    )
    if not validated:
        logger.info("No valid URL pairs found in PR body")
        return PipelineResult(status="no_pairs", candidates=candidates)

    logger.info("Found %d valid URL pairs", len(validated))
    added = apply_validated_pairs(validated, settings.backstop_path)
    return PipelineResult(
        status="updated",
        candidates=candidates,
        validated=validated,
        added=added,
    )
