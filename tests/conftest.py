"""Pytest configuration and shared fixtures."""

import json
from pathlib import Path
from typing import Callable
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from visual_review.models.config import RunnerConfig
from visual_review.models.url_pair import CandidatePair, ValidatedPair


# ============================================================================
# Backstop Config Fixtures
# ============================================================================


@pytest.fixture
def backstop_data() -> dict:
    """A BackstopJS config with one existing scenario."""
    return {
        "id": "site_visual_test",
        "viewports": [
            {"label": "desktop", "width": 1280, "height": 720},
            {"label": "phone", "width": 375, "height": 812},
        ],
        "scenarios": [
            {
                "label": "Homepage",
                "url": "https://stage--site--org.example.page/",
                "referenceUrl": "https://main--site--org.example.page/",
                "misMatchThreshold": 0.1,
            }
        ],
        "engine": "playwright",
        "report": ["browser", "CI"],
    }


@pytest.fixture
def backstop_file(backstop_data: dict, tmp_path: Path) -> Path:
    path = tmp_path / "backstop.json"
    path.write_text(json.dumps(backstop_data, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def storage_state() -> dict:
    """A Playwright storage state as stored in cookies.json."""
    return {
        "cookies": [
            {"name": "consent", "value": "yes", "domain": "stage--site--org.example.page", "path": "/"},
            {"name": "consent", "value": "yes", "domain": "main--site--org.example.page", "path": "/"},
            {"name": "other", "value": "1", "domain": "cdn.example.com", "path": "/"},
        ],
        "origins": [
            {
                "origin": "https://stage--site--org.example.page",
                "localStorage": [{"name": "banner-dismissed", "value": "true"}],
            },
        ],
    }


@pytest.fixture
def cookies_file(storage_state: dict, tmp_path: Path) -> Path:
    path = tmp_path / "backstop_data" / "engine_scripts" / "cookies.json"
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps(storage_state, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def runner_config(backstop_file: Path, cookies_file: Path) -> RunnerConfig:
    return RunnerConfig(
        command="test",
        url_pattern="my-branch--",
        ref_pattern="production--",
        config_path=backstop_file,
        cookies_path=cookies_file,
    )


# ============================================================================
# URL Pair Fixtures
# ============================================================================


@pytest.fixture
def candidate_pair() -> CandidatePair:
    return CandidatePair(before="https://a.example/x", after="https://b.example/y")


@pytest.fixture
def validated_pairs() -> list[ValidatedPair]:
    return [
        ValidatedPair(before="https://a.example/1", after="https://b.example/1"),
        ValidatedPair(before="https://a.example/2", after="https://b.example/2"),
    ]


# ============================================================================
# HTTP Fixtures
# ============================================================================


@pytest.fixture
def make_client() -> Callable[[dict], httpx.AsyncClient]:
    """Build an AsyncClient whose HEAD responses come from a url -> status map.

    A status of ``None`` raises a connection error; ``"timeout"`` raises a
    read timeout; ``"idna"`` raises the UnicodeError the idna codec gives
    for a malformed host label. Unknown URLs answer 404. Requests are
    recorded on ``client.requests_seen``.
    """

    def _make(statuses: dict) -> httpx.AsyncClient:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            status = statuses.get(str(request.url), 404)
            if status is None:
                raise httpx.ConnectError("Connection refused", request=request)
            if status == "timeout":
                raise httpx.ReadTimeout("Timed out", request=request)
            if status == "idna":
                raise UnicodeError("Malformed A-label, no Punycode eligible content found")
            return httpx.Response(status)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler), timeout=10.0)
        client.requests_seen = seen
        return client

    return _make


# ============================================================================
# Playwright Fixtures
# ============================================================================


@pytest.fixture
def mock_page() -> AsyncMock:
    page = AsyncMock()
    page.url = "https://stage--site--org.example.page/"
    page.evaluate = AsyncMock(return_value=12)
    page.wait_for_load_state = AsyncMock()
    page.wait_for_timeout = AsyncMock()
    page.on = Mock()
    return page
