"""Exception hierarchy for the Firebolt client.

Every error raised by the library derives from FireboltError, so callers
can catch the whole family with a single handler.
"""


class FireboltError(Exception):
    """Base exception for all Firebolt client errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AuthenticationError(FireboltError):
    """Credentials rejected or token refresh failed."""


class NetworkError(FireboltError):
    """Connection failures, unreadable responses."""


class TimeoutError(NetworkError):
    """Request timed out in the transport."""


class QueryError(FireboltError):
    """Server reported a failure or the response body is malformed."""


class ColumnNotFoundError(QueryError):
    """No column with the requested name."""


class ColumnIndexError(QueryError):
    """Column ordinal outside the result set."""


class UnsupportedTypeError(QueryError):
    """Column metadata names a wire type the client does not know."""

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(f"Unsupported type: '{type_name}'")


class SerializationError(FireboltError):
    """Invalid JSON payload or failed value conversion."""


class ConfigurationError(FireboltError):
    """Missing or invalid configuration."""


class HeaderParsingError(FireboltError):
    """Response header value does not match its expected format."""
