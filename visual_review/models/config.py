"""Configuration models for the visual review tooling."""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

BackstopCommand = Literal["reference", "test", "approve", "report"]
BACKSTOP_COMMANDS: tuple[str, ...] = ("reference", "test", "approve", "report")

DEFAULT_BACKSTOP_PATH = Path("backstop.json")
DEFAULT_COOKIES_PATH = Path("backstop_data") / "engine_scripts" / "cookies.json"


def _blank_to_none(v: Optional[str]) -> Optional[str]:
    if isinstance(v, str) and not v.strip():
        return None
    return v


class ViewportConfig(BaseModel):
    width: int = 1280
    height: int = 720
    name: str = "desktop"

    def as_playwright(self) -> dict:
        return {"width": self.width, "height": self.height}


class PagePrepConfig(BaseModel):
    """Timings (ms / px) used when preparing a page for a screenshot."""

    initial_timeout: int = 10000
    final_timeout: int = 30000
    scroll_step: int = 400
    scroll_delay: int = 300
    image_timeout: int = 3000
    final_wait: int = 1000

    # Components whose hidden slides / images must be shown
    activate_selectors: list[str] = Field(default_factory=lambda: [".roll-card"])
    reveal_selectors: list[str] = Field(
        default_factory=lambda: [".threat-card-item-image"]
    )


class PipelineSettings(BaseModel):
    """Inputs of the PR URL-pair pipeline, resolved once at the CLI boundary."""

    pr_body: Optional[str] = None
    backstop_path: Path = DEFAULT_BACKSTOP_PATH
    request_timeout: float = 10.0

    @field_validator("pr_body", mode="before")
    @classmethod
    def empty_body_is_missing(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)


class RunnerConfig(BaseModel):
    command: BackstopCommand = "test"

    # Replacements for the "stage--" / "main--" host prefixes
    url_pattern: Optional[str] = None
    ref_pattern: Optional[str] = None

    config_path: Path = DEFAULT_BACKSTOP_PATH
    cookies_path: Path = DEFAULT_COOKIES_PATH

    @field_validator("url_pattern", "ref_pattern", mode="before")
    @classmethod
    def empty_pattern_is_missing(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)

    @property
    def has_patterns(self) -> bool:
        return bool(self.url_pattern or self.ref_pattern)

    @staticmethod
    def backup_path(path: Path) -> Path:
        return path.with_name(path.name + ".backup")
