"""Pytest configuration shared by the client tests.

Puts the repository root on ``sys.path`` so ``import translator_client`` works
from any working directory, and provides settings and HTTP fakes.
"""

import os
import sys
from unittest.mock import MagicMock

import pytest
import requests

# Project root = parent directory of this tests/ folder
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from translator_client.core.config import Settings  # noqa: E402


@pytest.fixture
def settings() -> Settings:
    return Settings(
        api_endpoint="https://api.example.test/prod/",
        user_pool_id="us-east-1_pool",
        user_pool_client_id="client-123",
        poll_interval_seconds=0.01,
        refresh_delay_seconds=0.01,
        request_timeout_seconds=5,
    )


def make_response(status_code: int = 200, body=None) -> MagicMock:
    """Build a fake ``requests.Response`` with the given status and JSON body."""
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.ok = status_code < 400
    if body is None:
        response.json.side_effect = ValueError("no JSON body")
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def http() -> MagicMock:
    return MagicMock(spec=requests.Session)
