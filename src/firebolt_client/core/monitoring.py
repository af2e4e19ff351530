"""Sentry integration for error tracking and query tracing.

Query spans are recorded by FireboltClient whether or not Sentry is
initialized; without setup_sentry() they are no-ops.
"""

import sentry_sdk

from firebolt_client.__about__ import __version__


def setup_sentry(dsn: str, environment: str = "local") -> None:
    """Initialize Sentry for the application embedding the client."""
    sentry_sdk.init(
        dsn=dsn,
        traces_sample_rate=0.03,
        environment=environment,
        release=f"firebolt-client@{__version__}",
        attach_stacktrace=True,
        send_default_pii=False,
    )
