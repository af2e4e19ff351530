"""Tests for Sentry setup."""

import pytest

from firebolt_client.__about__ import __version__
from firebolt_client.core import monitoring


@pytest.mark.unit
def test_setup_sentry_passes_release_and_dsn(monkeypatch):
    calls = []
    monkeypatch.setattr(monitoring.sentry_sdk, "init", lambda **kw: calls.append(kw))

    monitoring.setup_sentry("https://key@sentry.example.com/1", environment="ci")

    assert len(calls) == 1
    options = calls[0]
    assert options["dsn"] == "https://key@sentry.example.com/1"
    assert options["environment"] == "ci"
    assert options["release"] == f"firebolt-client@{__version__}"
    assert options["send_default_pii"] is False
