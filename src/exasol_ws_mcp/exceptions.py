"""PEP 249 exception hierarchy plus the driver-specific failure kinds.

Usage errors (closed connection, autocommit misuse, bad argument counts)
are raised locally without contacting the server. ``ServerError`` carries
the message the server reported; the connection stays usable. A
``BadConnectionError`` means the transport failed and the connection has
been closed.
"""

from __future__ import annotations


class Warning(Exception):  # noqa: A001 - name fixed by PEP 249
    """Important warnings such as data truncation."""


class Error(Exception):
    """Base class for all driver errors."""


class InterfaceError(Error):
    """Errors in the driver itself rather than the database."""


class DatabaseError(Error):
    """Errors related to the database."""


class DataError(DatabaseError):
    pass


class OperationalError(DatabaseError):
    pass


class IntegrityError(DatabaseError):
    pass


class InternalError(DatabaseError):
    pass


class ProgrammingError(DatabaseError):
    pass


class NotSupportedError(DatabaseError):
    pass


class ConnectionClosedError(InterfaceError):
    """The connection is already closed."""

    def __init__(self, message: str = "connection already closed") -> None:
        super().__init__(message)


class MalformedResponseError(InterfaceError):
    """The server reply could not be decoded or violates the protocol."""


class BadConnectionError(OperationalError):
    """The transport failed; the connection must be discarded."""


class AutocommitEnabledError(ProgrammingError):
    """A transaction was requested on a session running in autocommit mode."""

    def __init__(self, message: str = "autocommit is enabled") -> None:
        super().__init__(message)


class InvalidValuesCountError(ProgrammingError):
    """Bound argument count is not a multiple of the parameter column count."""


class ServerError(DatabaseError):
    """The server answered a command with an error status."""

    def __init__(self, text: str, sql_code: str | None = None) -> None:
        super().__init__(f"[{sql_code}] {text}" if sql_code else text)
        self.text = text
        self.sql_code = sql_code
