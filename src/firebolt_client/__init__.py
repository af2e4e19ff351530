"""Client library for the Firebolt analytics database."""

from firebolt_client.__about__ import __version__
from firebolt_client.core.auth import authenticate
from firebolt_client.core.client import FireboltClient, FireboltClientFactory
from firebolt_client.core.conversion import (
    BIGINT,
    BOOLEAN,
    BYTES,
    DECIMAL,
    DOUBLE,
    FLOAT,
    INT,
    OPTIONAL_BIGINT,
    OPTIONAL_BOOLEAN,
    OPTIONAL_BYTES,
    OPTIONAL_DECIMAL,
    OPTIONAL_DOUBLE,
    OPTIONAL_FLOAT,
    OPTIONAL_INT,
    OPTIONAL_TEXT,
    RAW,
    TEXT,
    Target,
)
from firebolt_client.core.exceptions import (
    AuthenticationError,
    ColumnIndexError,
    ColumnNotFoundError,
    ConfigurationError,
    FireboltError,
    HeaderParsingError,
    NetworkError,
    QueryError,
    SerializationError,
    TimeoutError,
    UnsupportedTypeError,
)
from firebolt_client.core.models import Column, ColumnRef, ResultSet, Row
from firebolt_client.core.types import Type, parse_type

__all__ = [
    "BIGINT",
    "BOOLEAN",
    "BYTES",
    "DECIMAL",
    "DOUBLE",
    "FLOAT",
    "INT",
    "OPTIONAL_BIGINT",
    "OPTIONAL_BOOLEAN",
    "OPTIONAL_BYTES",
    "OPTIONAL_DECIMAL",
    "OPTIONAL_DOUBLE",
    "OPTIONAL_FLOAT",
    "OPTIONAL_INT",
    "OPTIONAL_TEXT",
    "RAW",
    "TEXT",
    "AuthenticationError",
    "Column",
    "ColumnIndexError",
    "ColumnNotFoundError",
    "ColumnRef",
    "ConfigurationError",
    "FireboltClient",
    "FireboltClientFactory",
    "FireboltError",
    "HeaderParsingError",
    "NetworkError",
    "QueryError",
    "ResultSet",
    "Row",
    "SerializationError",
    "Target",
    "TimeoutError",
    "Type",
    "UnsupportedTypeError",
    "__version__",
    "authenticate",
    "parse_type",
]
