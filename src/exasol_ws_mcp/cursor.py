"""Views over ``QueryResults``: row cursor, affected-row count, DB-API cursor."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterator, Sequence

from .exceptions import InterfaceError, NotSupportedError, ProgrammingError
from .models.result import ROW_COUNT, Column, QueryResults

if TYPE_CHECKING:
    from .connection import Connection

logger = logging.getLogger(__name__)


class Rows:
    """Row cursor over the first result of an execute call."""

    def __init__(self, columns: list[Column], rows: list[tuple]) -> None:
        self._columns = columns
        self._rows = rows
        self._position = 0

    @classmethod
    def from_results(cls, results: QueryResults) -> Rows:
        """Build the cursor view.

        Raises:
            ProgrammingError: The first result is an update count.
        """
        first = results.first()
        if not first.has_rows:
            raise ProgrammingError("statement did not return a result set")

        row_set = first.row_set
        if not row_set.complete:
            logger.warning(
                "Result set %s holds %d rows, only %d were sent",
                row_set.result_set_handle,
                row_set.num_rows,
                row_set.num_rows_in_message,
            )
        return cls(row_set.columns, row_set.rows())

    @property
    def columns(self) -> list[str]:
        return [c.name for c in self._columns]

    @property
    def column_types(self) -> list[Column]:
        return list(self._columns)

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[tuple]:
        while self._position < len(self._rows):
            yield self.fetchone()

    def fetchone(self) -> tuple | None:
        if self._position >= len(self._rows):
            return None
        row = self._rows[self._position]
        self._position += 1
        return row

    def fetchmany(self, size: int) -> list[tuple]:
        rows = self._rows[self._position : self._position + size]
        self._position += len(rows)
        return rows

    def fetchall(self) -> list[tuple]:
        rows = self._rows[self._position :]
        self._position = len(self._rows)
        return rows

    def to_dicts(self) -> list[dict[str, Any]]:
        names = self.columns
        return [dict(zip(names, row)) for row in self.fetchall()]


class ExecResult:
    """Affected-row view of an execute call."""

    def __init__(self, rows_affected: int) -> None:
        self.rows_affected = rows_affected

    def __repr__(self) -> str:
        return f"ExecResult(rows_affected={self.rows_affected})"

    @classmethod
    def from_results(cls, results: QueryResults) -> ExecResult:
        first = results.first()
        if first.result_type == ROW_COUNT:
            return cls(first.row_count or 0)
        return cls(0)

    def last_insert_id(self) -> int:
        raise NotSupportedError("last insert id is not supported")


class Cursor:
    """PEP 249 cursor. Parameters use the ``qmark`` style."""

    def __init__(self, connection: Connection) -> None:
        self.connection = connection
        self.arraysize = 1
        self.rowcount = -1
        self.description: list[tuple] | None = None
        self._rows: Rows | None = None
        self._closed = False

    def __enter__(self) -> Cursor:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[tuple]:
        return iter(self._require_rows())

    def _check(self) -> None:
        if self._closed:
            raise InterfaceError("cursor is closed")

    def _require_rows(self) -> Rows:
        self._check()
        if self._rows is None:
            raise ProgrammingError("no result set; execute a query first")
        return self._rows

    def _load(self, results: QueryResults) -> None:
        first = results.first()
        if first.has_rows:
            self._rows = Rows.from_results(results)
            self.rowcount = first.row_set.num_rows
            self.description = [
                (c.name, c.type_name, None, None,
                 c.data_type.get("precision"), c.data_type.get("scale"), None)
                for c in first.row_set.columns
            ]
        else:
            self._rows = None
            self.rowcount = first.row_count or 0
            self.description = None

    def execute(self, operation: str, parameters: Sequence[Any] | None = None) -> Cursor:
        self._check()
        self._load(self.connection.execute(operation, list(parameters or ())))
        return self

    def executemany(self, operation: str, seq_of_parameters: Sequence[Sequence[Any]]) -> Cursor:
        """Run one prepared execute with every parameter row bound at once."""
        self._check()
        flat: list[Any] = []
        width = None
        for params in seq_of_parameters:
            if width is None:
                width = len(params)
            elif len(params) != width:
                raise ProgrammingError("all parameter rows must have the same length")
            flat.extend(params)

        if not flat:
            self.rowcount = 0
            self._rows = None
            self.description = None
            return self
        self._load(self.connection.execute(operation, flat))
        return self

    def fetchone(self) -> tuple | None:
        return self._require_rows().fetchone()

    def fetchmany(self, size: int | None = None) -> list[tuple]:
        return self._require_rows().fetchmany(size or self.arraysize)

    def fetchall(self) -> list[tuple]:
        return self._require_rows().fetchall()

    def setinputsizes(self, sizes) -> None:
        pass

    def setoutputsize(self, size, column=None) -> None:
        pass

    def close(self) -> None:
        self._closed = True
        self._rows = None
