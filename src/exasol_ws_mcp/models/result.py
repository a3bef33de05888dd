"""Result set model returned by ``execute`` and ``executePreparedStatement``.

Row data arrives column-major: ``data[c][r]`` is the value of column ``c``
in row ``r``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

RESULT_SET = "resultSet"
ROW_COUNT = "rowCount"


@dataclass
class Column:
    """A column descriptor (result column or bind parameter)."""

    name: str
    data_type: dict[str, Any] = field(default_factory=dict)

    @property
    def type_name(self) -> str:
        return str(self.data_type.get("type", ""))

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "dataType": dict(self.data_type)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Column:
        return cls(name=str(data.get("name", "")), data_type=dict(data.get("dataType") or {}))


@dataclass
class RowSet:
    """Tabular payload of a row-returning result."""

    num_columns: int
    num_rows: int
    columns: list[Column] = field(default_factory=list)
    data: list[list[Any]] = field(default_factory=list)
    num_rows_in_message: int = 0
    result_set_handle: int | None = None

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    @property
    def complete(self) -> bool:
        """True when every row of the result arrived in this message."""
        return self.num_rows_in_message >= self.num_rows

    def rows(self) -> list[tuple]:
        """Transpose the column-major data into row tuples."""
        if not self.data:
            return []
        return list(zip(*self.data))


@dataclass
class QueryResult:
    """One logical result: either rows or an update count."""

    result_type: str
    row_set: RowSet | None = None
    row_count: int | None = None

    @property
    def has_rows(self) -> bool:
        return self.result_type == RESULT_SET and self.row_set is not None


@dataclass
class QueryResults:
    """All logical results of one execute call."""

    num_results: int
    results: list[QueryResult] = field(default_factory=list)

    def first(self) -> QueryResult:
        return self.results[0]

    def __repr__(self) -> str:
        kinds = ", ".join(r.result_type for r in self.results)
        return f"QueryResults(num_results={self.num_results}, results=[{kinds}])"
