"""BackstopJS scenario records."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from visual_review.models.url_pair import ValidatedPair

DEFAULT_HIDE_SELECTORS = [
    ".cookie-banner",
    ".loading-spinner",
    '[data-testid="timestamp"]',
    ".logo-garden",
]
DEFAULT_REMOVE_SELECTORS = [".advertisement", ".chat-widget"]
DEFAULT_MISMATCH_THRESHOLD = 0.1


class Scenario(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    label: str
    url: str
    reference_url: str = Field(alias="referenceUrl")
    hide_selectors: list[str] = Field(
        default_factory=lambda: list(DEFAULT_HIDE_SELECTORS), alias="hideSelectors"
    )
    remove_selectors: list[str] = Field(
        default_factory=lambda: list(DEFAULT_REMOVE_SELECTORS), alias="removeSelectors"
    )
    mismatch_threshold: float = Field(
        default=DEFAULT_MISMATCH_THRESHOLD, alias="misMatchThreshold"
    )

    @classmethod
    def from_pair(cls, pair: ValidatedPair, index: int) -> "Scenario":
        """Build the scenario for the ``index``-th (1-based) pair added in a run."""
        return cls(
            label=f"Additional test page ({index})",
            url=pair.after,
            reference_url=pair.before,
        )

    def to_backstop(self) -> dict:
        """Serialize with the camelCase keys BackstopJS expects."""
        return self.model_dump(by_alias=True)
