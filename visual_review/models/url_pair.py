"""Before/after URL pairs found in pull-request descriptions."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CandidatePair:
    before: str
    after: str


@dataclass(frozen=True)
class ValidatedPair:
    """A candidate pair whose URLs both answered HTTP 200."""

    before: str
    after: str

    @classmethod
    def from_candidate(cls, pair: CandidatePair) -> "ValidatedPair":
        return cls(before=pair.before, after=pair.after)
