"""Firebolt query client.

FireboltClient is a session: it holds the bearer token, the engine URL and
the server-negotiated session parameters, and updates them as queries run.
It is not safe to share one session between threads without external
locking; separate sessions are independent.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from functools import partial
from typing import TYPE_CHECKING, Any

import httpx
import sentry_sdk

from firebolt_client.__about__ import PROTOCOL_VERSION, user_agent
from firebolt_client.core.auth import authenticate, strip_scheme
from firebolt_client.core.config import DEFAULT_API_ENDPOINT, DEFAULT_TIMEOUT
from firebolt_client.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    FireboltError,
    NetworkError,
    TimeoutError,
)
from firebolt_client.core.headers import apply_response_headers, parse_endpoint
from firebolt_client.core.logging import get_logger
from firebolt_client.core.parser import parse_response, parse_server_error

if TYPE_CHECKING:
    from firebolt_client.core.config import ResolvedConfig
    from firebolt_client.core.models import ResultSet

OUTPUT_FORMAT = "JSON_Compact"

# (client_id, client_secret, api_endpoint) -> (token, expiry unix seconds)
Authenticator = Callable[[str, str, str], tuple[str, int]]


class FireboltClient:
    """Synchronous Firebolt session over httpx."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        api_endpoint: str = DEFAULT_API_ENDPOINT,
        engine_url: str | None = None,
        token: str | None = None,
        parameters: dict[str, str] | None = None,
        http_client: httpx.Client | None = None,
        authenticator: Authenticator | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.api_endpoint = api_endpoint
        self.engine_url = engine_url
        self.token = token
        self.token_expiry: int | None = None
        self.parameters: dict[str, str] = dict(parameters or {})
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.Client(timeout=timeout)
        self._authenticator = authenticator or partial(
            authenticate, http_client=self._http
        )

    def __enter__(self) -> FireboltClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @classmethod
    def builder(cls) -> FireboltClientFactory:
        return FireboltClientFactory()

    @property
    def http_client(self) -> httpx.Client:
        return self._http

    def authenticate(self) -> str:
        """Fetch a fresh token and store it on the session."""
        self.token, self.token_expiry = self._authenticator(
            self.client_id, self.client_secret, self.api_endpoint
        )
        return self.token

    def query(self, sql: str) -> ResultSet:
        """Execute SQL and return a ResultSet.

        A 401 response triggers one token refresh and one retry of the
        same request.

        Raises:
            ConfigurationError: no engine URL on the session.
            AuthenticationError: no token, refresh failed, or 401 after refresh.
            NetworkError: the request could not be sent or read.
            QueryError: the server rejected the query or sent a malformed body.
            HeaderParsingError: a session header on a 2xx response is malformed.
            SerializationError: the body is not JSON.
        """
        if not self.engine_url:
            raise ConfigurationError("Engine URL not set")

        url = self.engine_url
        if not url.endswith("/"):
            url += "/"
        params = {**self.parameters, "output_format": OUTPUT_FORMAT}

        log = get_logger(__name__)
        sql_normalized = " ".join(sql.split())
        log.debug("executing query", sql=sql_normalized)
        with sentry_sdk.start_span(op="db.query", name=sql_normalized[:100]) as span:
            start_time = time.monotonic()
            try:
                result = self._execute(url, sql, params, should_retry=True)
            except FireboltError as e:
                span.set_status("internal_error")
                log.error("query failed", sql=sql_normalized, error=e.message)
                raise
            duration_ms = (time.monotonic() - start_time) * 1000
            span.set_data("row_count", result.row_count)
            span.set_data("duration_ms", duration_ms)
            log.debug(
                "query complete",
                duration_ms=f"{duration_ms:.1f}",
                row_count=result.row_count,
            )
            return result

    def _execute(
        self,
        url: str,
        sql: str,
        params: dict[str, str],
        should_retry: bool,
    ) -> ResultSet:
        response = self._send(url, sql, params)

        if response.status_code == 401:
            if not should_retry:
                msg = f"Authentication failed after token refresh: {response.text}"
                raise AuthenticationError(msg)
            self._refresh_token()
            return self._execute(url, sql, params, should_retry=False)

        if not response.is_success:
            raise parse_server_error(response.text)

        apply_response_headers(self, response.headers)
        return parse_response(response.content)

    def _send(self, url: str, sql: str, params: dict[str, str]) -> httpx.Response:
        if not self.token:
            raise AuthenticationError("No token available")
        headers = {
            "Authorization": f"Bearer {self.token}",
            "User-Agent": user_agent(),
            "Firebolt-Protocol-Version": PROTOCOL_VERSION,
        }
        with sentry_sdk.start_span(op="http.client", name=f"POST {url}") as span:
            try:
                response = self._http.post(
                    url, params=params, headers=headers, content=sql.encode("utf-8")
                )
            except httpx.TimeoutException as e:
                span.set_status("deadline_exceeded")
                raise TimeoutError(f"Request timed out: {e}") from e
            except httpx.TransportError as e:
                span.set_status("unavailable")
                raise NetworkError(f"Request failed: {e}") from e
            except httpx.InvalidURL as e:
                raise ConfigurationError(f"Invalid engine URL '{url}': {e}") from e
            span.set_data("http.status_code", response.status_code)
            return response

    def _refresh_token(self) -> None:
        log = get_logger(__name__)
        log.debug("token rejected, refreshing")
        try:
            self.authenticate()
        except FireboltError as e:
            raise AuthenticationError(f"Token refresh failed: {e.message}") from e

    def close(self) -> None:
        """Close the HTTP client if the session created it."""
        if self._owns_http_client:
            self._http.close()


def resolve_engine_url(
    http_client: httpx.Client, api_endpoint: str, account: str, token: str
) -> tuple[str, dict[str, str]]:
    """Look up the system engine URL of an account.

    Returns the engine URL and the session parameters carried on it.
    """
    host = strip_scheme(api_endpoint).rstrip("/")
    url = f"https://{host}/web/v3/account/{account}/engineUrl"
    headers = {"Authorization": f"Bearer {token}", "User-Agent": user_agent()}
    try:
        response = http_client.get(url, headers=headers)
    except httpx.TimeoutException as e:
        raise TimeoutError(f"Engine URL request timed out: {e}") from e
    except httpx.TransportError as e:
        raise NetworkError(f"Engine URL request failed: {e}") from e

    if response.status_code == 404:
        raise ConfigurationError(f"Account not found: '{account}'")
    if response.status_code in (401, 403):
        msg = f"Not authorized to access account '{account}': {response.text}"
        raise AuthenticationError(msg)
    if not response.is_success:
        msg = f"Failed to resolve engine URL for account '{account}': {response.text}"
        raise ConfigurationError(msg)

    try:
        engine_url: Any = response.json().get("engineUrl")
    except (ValueError, AttributeError):
        engine_url = None
    if not isinstance(engine_url, str) or not engine_url:
        msg = f"Invalid engine URL response for account '{account}': {response.text}"
        raise ConfigurationError(msg)

    if "://" not in engine_url:
        engine_url = f"https://{engine_url}"
    return parse_endpoint(engine_url)


def _quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


class FireboltClientFactory:
    """Builder that authenticates and returns a ready FireboltClient."""

    def __init__(self) -> None:
        self.client_id: str | None = None
        self.client_secret: str | None = None
        self.account_name: str | None = None
        self.database_name: str | None = None
        self.engine_name: str | None = None
        self.api_endpoint = DEFAULT_API_ENDPOINT
        self.timeout = DEFAULT_TIMEOUT
        self._http_client: httpx.Client | None = None

    @classmethod
    def from_config(cls, config: ResolvedConfig) -> FireboltClientFactory:
        factory = cls()
        factory.client_id = config.client_id
        factory.client_secret = config.client_secret
        factory.account_name = config.account
        factory.database_name = config.database
        factory.engine_name = config.engine
        factory.api_endpoint = config.api_endpoint
        factory.timeout = config.timeout
        return factory

    def with_credentials(
        self, client_id: str, client_secret: str
    ) -> FireboltClientFactory:
        self.client_id = client_id
        self.client_secret = client_secret
        return self

    def with_account(self, account_name: str) -> FireboltClientFactory:
        self.account_name = account_name
        return self

    def with_database(self, database_name: str) -> FireboltClientFactory:
        self.database_name = database_name
        return self

    def with_engine(self, engine_name: str) -> FireboltClientFactory:
        self.engine_name = engine_name
        return self

    def with_api_endpoint(self, api_endpoint: str) -> FireboltClientFactory:
        self.api_endpoint = api_endpoint
        return self

    def with_http_client(self, http_client: httpx.Client) -> FireboltClientFactory:
        self._http_client = http_client
        return self

    def build(self) -> FireboltClient:
        """Authenticate, resolve the account's engine and select database/engine.

        Raises:
            ConfigurationError: missing credentials or account, unknown account.
            AuthenticationError: credentials rejected.
        """
        if not self.client_id or not self.client_secret:
            raise ConfigurationError("Client credentials are required")
        if not self.account_name:
            raise ConfigurationError("Account name is required")

        log = get_logger(__name__)
        client = FireboltClient(
            client_id=self.client_id,
            client_secret=self.client_secret,
            api_endpoint=self.api_endpoint,
            http_client=self._http_client,
            timeout=self.timeout,
        )
        try:
            token = client.authenticate()
            engine_url, params = resolve_engine_url(
                client.http_client, client.api_endpoint, self.account_name, token
            )
            client.engine_url = engine_url
            client.parameters.update(params)
            log.debug("system engine resolved", account=self.account_name)

            if self.database_name:
                client.query(f"USE DATABASE {_quote_identifier(self.database_name)}")
            if self.engine_name:
                client.query(f"USE ENGINE {_quote_identifier(self.engine_name)}")
        except FireboltError:
            client.close()
            raise
        return client
