"""Shared test fixtures for the Firebolt client."""

import os
from collections.abc import Callable
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Any

import httpx
import pytest

from firebolt_client.core.client import FireboltClient
from tests.fakes import API_ENDPOINT, ENGINE_URL


@pytest.fixture
def temp_dir():
    """Temporary directory for test files."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove FIREBOLT_* variables so config tests see only what they set."""
    for key in list(os.environ):
        if key.startswith("FIREBOLT_"):
            monkeypatch.delenv(key)
    return monkeypatch


@pytest.fixture
def make_client():
    """Build a FireboltClient whose HTTP traffic goes to ``handler``."""
    created: list[FireboltClient] = []

    def build(
        handler: Callable[[httpx.Request], httpx.Response], **kwargs: Any
    ) -> FireboltClient:
        http_client = httpx.Client(transport=httpx.MockTransport(handler))
        kwargs.setdefault("client_id", "test_id")
        kwargs.setdefault("client_secret", "test_secret")
        kwargs.setdefault("api_endpoint", API_ENDPOINT)
        kwargs.setdefault("engine_url", ENGINE_URL)
        kwargs.setdefault("token", "test_token")
        client = FireboltClient(http_client=http_client, **kwargs)
        created.append(client)
        return client

    yield build
    for client in created:
        client.http_client.close()
