"""Explicit transaction on a session with autocommit disabled."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .exceptions import InterfaceError

if TYPE_CHECKING:
    from .connection import Connection


class Transaction:
    """Ends with exactly one :meth:`commit` or :meth:`rollback`.

    As a context manager it commits on success and rolls back when the
    block raises.
    """

    def __init__(self, connection: Connection) -> None:
        self._connection = connection
        self._done = False

    def __enter__(self) -> Transaction:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._done:
            return
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    @property
    def done(self) -> bool:
        return self._done

    def _finish(self, sql: str) -> None:
        if self._done:
            raise InterfaceError("transaction already finished")
        self._done = True
        self._connection.simple_exec(sql)

    def commit(self) -> None:
        self._connection.ensure_open()
        self._finish("COMMIT")

    def rollback(self) -> None:
        self._connection.ensure_open()
        self._finish("ROLLBACK")
