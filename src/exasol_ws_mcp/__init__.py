"""Exasol websocket driver with a DB-API 2.0 surface and an MCP server."""

__version__ = "0.1.0"

apilevel = "2.0"
threadsafety = 1
paramstyle = "qmark"

from .config import Config  # noqa: E402
from .connection import Connection, ConnectionState, connect  # noqa: E402
from .exceptions import (  # noqa: E402
    AutocommitEnabledError,
    BadConnectionError,
    ConnectionClosedError,
    DatabaseError,
    DataError,
    Error,
    IntegrityError,
    InterfaceError,
    InternalError,
    InvalidValuesCountError,
    MalformedResponseError,
    NotSupportedError,
    OperationalError,
    ProgrammingError,
    ServerError,
    Warning,
)

__all__ = [
    "__version__",
    "apilevel",
    "threadsafety",
    "paramstyle",
    "connect",
    "Config",
    "Connection",
    "ConnectionState",
    "Error",
    "Warning",
    "InterfaceError",
    "DatabaseError",
    "DataError",
    "OperationalError",
    "IntegrityError",
    "InternalError",
    "ProgrammingError",
    "NotSupportedError",
    "ConnectionClosedError",
    "MalformedResponseError",
    "BadConnectionError",
    "AutocommitEnabledError",
    "InvalidValuesCountError",
    "ServerError",
]
