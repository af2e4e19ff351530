"""HTTP and authenticator fakes for unit tests."""

import json
from typing import Any

import httpx

ENGINE_URL = "https://engine.test.firebolt.io"
API_ENDPOINT = "api.test.firebolt.io"


def compact_body(meta: list[dict[str, str]], data: list[list[Any]]) -> str:
    return json.dumps({"meta": meta, "data": data, "rows": len(data)})


SIMPLE_BODY = compact_body(
    [{"name": "id", "type": "int"}, {"name": "name", "type": "text"}],
    [[1, "test"], [2, "example"]],
)


class Recorder:
    """MockTransport handler that replays canned responses in order."""

    def __init__(self, *responses: httpx.Response) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"unexpected request: {request.method} {request.url}")
        return self.responses.pop(0)


class FakeAuthenticator:
    def __init__(
        self, tokens: list[str] | None = None, error: Exception | None = None
    ) -> None:
        self.tokens = list(tokens or ["fresh_token"])
        self.error = error
        self.calls: list[tuple[str, str, str]] = []

    def __call__(
        self, client_id: str, client_secret: str, api_endpoint: str
    ) -> tuple[str, int]:
        self.calls.append((client_id, client_secret, api_endpoint))
        if self.error is not None:
            raise self.error
        return self.tokens.pop(0), 1_900_000_000
