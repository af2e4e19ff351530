"""Session mutations directed by Firebolt response headers.

The server steers session state (active database, engine endpoint, custom
settings) through headers on successful responses. The mutations run in a
fixed order and are not transactional: if a later header is malformed the
earlier ones have already been applied.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Protocol
from urllib.parse import parse_qsl, urlsplit

from firebolt_client.core.exceptions import HeaderParsingError
from firebolt_client.core.logging import get_logger

UPDATE_ENDPOINT_HEADER = "Firebolt-Update-Endpoint"
UPDATE_PARAMETERS_HEADER = "Firebolt-Update-Parameters"
RESET_SESSION_HEADER = "Firebolt-Reset-Session"
REMOVE_PARAMETERS_HEADER = "Firebolt-Remove-Parameters"

# Kept across a session reset.
PRESERVED_PARAMETERS = ("database", "engine")


class SessionState(Protocol):
    engine_url: str | None
    parameters: MutableMapping[str, str]


def parse_endpoint(value: str) -> tuple[str, dict[str, str]]:
    """Split an endpoint URL into the engine URL and its query parameters.

    A root or empty path collapses to scheme and host.
    """
    parts = urlsplit(value.strip())
    if not parts.scheme or not parts.netloc:
        msg = f"Invalid {UPDATE_ENDPOINT_HEADER} value: '{value}'"
        raise HeaderParsingError(msg)
    host = parts.netloc.rpartition("@")[2]
    engine_url = f"{parts.scheme}://{host}"
    if parts.path not in ("", "/"):
        engine_url += parts.path
    return engine_url, dict(parse_qsl(parts.query, keep_blank_values=True))


def parse_parameters(value: str) -> dict[str, str]:
    """Parse a comma-separated ``key=value`` list.

    Values may contain ``=``; only the first one separates key from value.
    """
    result: dict[str, str] = {}
    for entry in value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        key, sep, val = entry.partition("=")
        key = key.strip()
        if not sep or not key:
            msg = f"Invalid {UPDATE_PARAMETERS_HEADER} entry: '{entry}'"
            raise HeaderParsingError(msg)
        result[key] = val.strip()
    return result


def parse_keys(value: str) -> list[str]:
    return [key.strip() for key in value.split(",") if key.strip()]


def apply_response_headers(session: SessionState, headers: Mapping[str, str]) -> None:
    """Apply update-endpoint, update-parameters, reset and remove, in order."""
    log = get_logger(__name__)

    endpoint = headers.get(UPDATE_ENDPOINT_HEADER)
    if endpoint is not None:
        engine_url, params = parse_endpoint(endpoint)
        session.engine_url = engine_url
        session.parameters.update(params)
        log.debug("engine endpoint updated", engine_url=engine_url)

    update = headers.get(UPDATE_PARAMETERS_HEADER)
    if update is not None:
        params = parse_parameters(update)
        session.parameters.update(params)
        log.debug("session parameters updated", keys=sorted(params))

    if RESET_SESSION_HEADER in headers:
        preserved = {
            key: session.parameters[key]
            for key in PRESERVED_PARAMETERS
            if key in session.parameters
        }
        session.parameters.clear()
        session.parameters.update(preserved)
        log.debug("session reset", preserved=sorted(preserved))

    remove = headers.get(REMOVE_PARAMETERS_HEADER)
    if remove is not None:
        keys = parse_keys(remove)
        for key in keys:
            session.parameters.pop(key, None)
        log.debug("session parameters removed", keys=keys)
