"""Tests for package structure and imports."""

import pytest


@pytest.mark.unit
def test_package_imports():
    """Package imports without errors."""
    import firebolt_client

    assert firebolt_client is not None


@pytest.mark.unit
def test_version_format():
    """Version follows semver format."""
    from firebolt_client import __version__

    parts = __version__.split(".")
    assert len(parts) == 3
    for part in parts:
        assert part.isdigit()


@pytest.mark.unit
def test_user_agent_carries_version():
    from firebolt_client.__about__ import __version__, user_agent

    assert user_agent() == f"firebolt-client/{__version__}"


@pytest.mark.unit
def test_public_api_exports():
    import firebolt_client

    for name in firebolt_client.__all__:
        assert hasattr(firebolt_client, name), name
