"""Prepared statement handle bound to a connection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Sequence

from .cursor import ExecResult, Rows
from .exceptions import InterfaceError
from .models.result import Column, QueryResults
from .protocol.commands import build_argument_matrix
from .protocol.parser import PreparedStatementResponse

if TYPE_CHECKING:
    from .connection import Connection

logger = logging.getLogger(__name__)


class Statement:
    """A server-side prepared statement.

    Can be executed any number of times until :meth:`close` releases the
    handle. Also usable as a context manager.
    """

    def __init__(self, connection: Connection, prepared: PreparedStatementResponse) -> None:
        self._connection = connection
        self._prepared = prepared
        self._closed = False

    def __enter__(self) -> Statement:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Statement(handle={self.statement_handle}, num_input={self.num_input})"

    @property
    def statement_handle(self) -> int:
        return self._prepared.statement_handle

    @property
    def num_input(self) -> int:
        return len(self._prepared.columns)

    @property
    def columns(self) -> list[Column]:
        return list(self._prepared.columns)

    def _execute(self, args: Sequence[Any]) -> QueryResults:
        if self._closed:
            raise InterfaceError("statement is closed")
        data = build_argument_matrix(args, self.num_input)
        return self._connection.execute_prepared(self._prepared, data)

    def exec(self, args: Sequence[Any]) -> ExecResult:
        return ExecResult.from_results(self._execute(args))

    def query(self, args: Sequence[Any]) -> Rows:
        return Rows.from_results(self._execute(args))

    def close(self) -> None:
        """Release the server-side handle. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        logger.debug("Closing statement %s", self.statement_handle)
        self._connection.close_prepared(self.statement_handle)
