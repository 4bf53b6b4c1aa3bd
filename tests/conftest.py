"""Shared pytest fixtures: configuration, a fixed clock and fake HTTP responses."""

from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import MagicMock

import pytest
import requests

from models.config import Config, RadarrConfig, SonarrConfig

# "Day 100" of the documented scenarios
NOW = datetime(2024, 4, 10, 12, 0, 0, tzinfo=timezone.utc)
EXCLUSION_TAG_ID = 7


def days_ago(days: float) -> datetime:
    return NOW - timedelta(days=days)


def iso_days_ago(days: float) -> str:
    return days_ago(days).strftime("%Y-%m-%dT%H:%M:%SZ")


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def config() -> Config:
    return Config(
        radarr=RadarrConfig(base_uri="http://radarr:7878", api_key="radarr-key"),
        sonarr=SonarrConfig(base_uri="http://sonarr:8989/", api_key="sonarr-key"),
        dry_run=False,
        max_age_days=90,
    )


@pytest.fixture
def make_response():
    """Factory for fake requests.Response objects."""

    def _make(
        json_data: Any = None, status_code: int = 200, reason: str = "OK", text: str = ""
    ) -> MagicMock:
        response = MagicMock(spec=requests.Response)
        response.status_code = status_code
        response.ok = status_code < 400
        response.reason = reason
        response.text = text
        response.json.return_value = json_data
        return response

    return _make


@pytest.fixture
def mock_session():
    """A stand-in for requests.Session; configure request.return_value per test."""
    return MagicMock(spec=requests.Session)
