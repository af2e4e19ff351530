"""OAuth client-credentials authentication against Firebolt's identity service."""

from __future__ import annotations

import json
import time

import httpx
from pydantic import BaseModel, ValidationError

from firebolt_client.__about__ import user_agent
from firebolt_client.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    NetworkError,
    TimeoutError,
)
from firebolt_client.core.logging import get_logger

AUDIENCE = "https://api.firebolt.io"
GRANT_TYPE = "client_credentials"


class AuthRequest(BaseModel):
    client_id: str
    client_secret: str
    grant_type: str = GRANT_TYPE
    audience: str = AUDIENCE


class AuthResponse(BaseModel):
    access_token: str
    expires_in: int


def strip_scheme(api_endpoint: str) -> str:
    for prefix in ("https://", "http://"):
        if api_endpoint.startswith(prefix):
            return api_endpoint[len(prefix) :]
    return api_endpoint


def token_url(api_endpoint: str) -> str:
    """Map ``api.<env>.firebolt.io`` to its ``id.<env>.firebolt.io`` token URL."""
    endpoint = strip_scheme(api_endpoint).rstrip("/")
    if not endpoint.startswith("api.") or not endpoint.endswith(".firebolt.io"):
        msg = (
            "Invalid API endpoint format. Expected 'api.<env>.firebolt.io', "
            f"got '{endpoint}'"
        )
        raise ConfigurationError(msg)
    return f"https://id.{endpoint[len('api.'):]}/oauth/token"


def extract_error_message(body: str) -> str:
    """Pick the most descriptive message out of an identity-service error body."""
    try:
        doc = json.loads(body)
    except json.JSONDecodeError:
        return f"Authentication failed: {body}"
    if isinstance(doc, dict):
        for field in ("message", "error", "error_description"):
            value = doc.get(field)
            if isinstance(value, str):
                return value
    return f"Authentication failed: {body}"


def authenticate(
    client_id: str,
    client_secret: str,
    api_endpoint: str,
    http_client: httpx.Client | None = None,
) -> tuple[str, int]:
    """Exchange client credentials for a bearer token.

    Returns:
        The access token and its expiry as a unix timestamp in seconds.

    Raises:
        ConfigurationError: ``api_endpoint`` is not a Firebolt API host.
        AuthenticationError: the identity service rejected the request.
        NetworkError: the token request could not be sent.
    """
    log = get_logger(__name__)
    url = token_url(api_endpoint)
    payload = AuthRequest(client_id=client_id, client_secret=client_secret)

    client = http_client or httpx.Client()
    try:
        response = client.post(
            url,
            json=payload.model_dump(),
            headers={"User-Agent": user_agent()},
        )
    except httpx.TimeoutException as e:
        raise TimeoutError(f"Authentication request timed out: {e}") from e
    except httpx.TransportError as e:
        raise NetworkError(f"Authentication request failed: {e}") from e
    finally:
        if http_client is None:
            client.close()

    if not response.is_success:
        message = extract_error_message(response.text)
        log.error("authentication failed", status=response.status_code)
        raise AuthenticationError(message)

    try:
        auth = AuthResponse.model_validate_json(response.content)
    except ValidationError as e:
        raise AuthenticationError(f"Failed to parse response: {e}") from e

    log.debug("authenticated", expires_in=auth.expires_in)
    return auth.access_token, int(time.time()) + auth.expires_in
