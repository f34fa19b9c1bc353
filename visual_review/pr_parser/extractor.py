"""Before/After URL pair extraction from free-form PR descriptions.

Expected format in the PR body::

    - Before: https://main--site--org.example.page/path
    - After: https://stage--site--org.example.page/path

Bullets (``*``, ``-``, ``•``) and surrounding whitespace are optional and the
keywords are matched case-insensitively.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from functools import reduce
from typing import Iterable, Optional

from visual_review.models.url_pair import CandidatePair

logger = logging.getLogger(__name__)

_BEFORE_RE = re.compile(r"^[*\-•\s]*before:\s*(.+)$", re.IGNORECASE)
_AFTER_RE = re.compile(r"^[*\-•\s]*after:\s*(.+)$", re.IGNORECASE)


@dataclass(frozen=True)
class ScanState:
    pending_before: Optional[str] = None
    pending_after: Optional[str] = None
    pairs: tuple[CandidatePair, ...] = ()


def scan_line(state: ScanState, line: str) -> ScanState:
    """Advance the scan by one line and return the new state."""
    line = line.strip()

    before = _BEFORE_RE.match(line)
    if before:
        # A later Before: replaces an unconsumed one
        return replace(state, pending_before=before.group(1).strip())

    after = _AFTER_RE.match(line)
    if not after:
        return state

    state = replace(state, pending_after=after.group(1).strip())
    if state.pending_before and state.pending_after:
        pair = CandidatePair(before=state.pending_before, after=state.pending_after)
        logger.info("Found potential URL pair: %s -> %s", pair.before, pair.after)
        return ScanState(pairs=state.pairs + (pair,))
    return state


def scan_lines(lines: Iterable[str]) -> ScanState:
    return reduce(scan_line, lines, ScanState())


def extract_candidate_pairs(text: Optional[str]) -> list[CandidatePair]:
    """Return Before/After pairs in the order they appear in ``text``.

    Dangling ``Before:`` or ``After:`` values are reported and dropped.
    """
    if not text:
        logger.info("No PR body provided")
        return []

    state = scan_lines(text.split("\n"))

    if state.pending_before:
        logger.warning('Found "Before" URL without matching "After": %s', state.pending_before)
    if state.pending_after:
        logger.warning('Found "After" URL without matching "Before": %s', state.pending_after)

    return list(state.pairs)
