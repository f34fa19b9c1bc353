"""Shared URL helpers: well-formedness checks and environment prefix swaps."""

from __future__ import annotations

from urllib.parse import urlparse

STAGE_MARKER = "stage--"
MAIN_MARKER = "main--"


def is_well_formed_url(url: str) -> bool:
    """Return True for an absolute http(s) URL with a host."""
    try:
        parsed = urlparse(url.strip())
        # Accessing .port raises for out-of-range or non-numeric ports
        parsed.port
    except (AttributeError, ValueError):
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.hostname)


def swap_marker(value: str, marker: str, replacement: str | None) -> str:
    """Replace every occurrence of ``marker`` in ``value`` when a replacement is set."""
    if not replacement or not value or marker not in value:
        return value
    return value.replace(marker, replacement)
