"""Typed views of the ``responseData`` payloads."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..exceptions import MalformedResponseError
from ..models.result import (
    RESULT_SET,
    ROW_COUNT,
    Column,
    QueryResult,
    QueryResults,
    RowSet,
)


@dataclass
class PublicKeyResponse:
    """Reply to ``login``: the key used to encrypt the password."""

    public_key_modulus: str
    public_key_exponent: str
    public_key_pem: str = ""

    def __repr__(self) -> str:
        return (
            f"PublicKeyResponse(modulus_len={len(self.public_key_modulus)}, "
            f"exponent={self.public_key_exponent!r})"
        )


@dataclass
class SessionInfo:
    """Session metadata returned once authentication succeeds."""

    session_id: int
    protocol_version: int = 0
    release_version: str = ""
    database_name: str = ""
    product_name: str = ""
    max_data_message_size: int = 0
    max_identifier_length: int = 0
    max_varchar_length: int = 0
    identifier_quote_string: str = '"'
    time_zone: str = ""
    time_zone_behavior: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "protocol_version": self.protocol_version,
            "release_version": self.release_version,
            "database_name": self.database_name,
            "product_name": self.product_name,
            "time_zone": self.time_zone,
        }


@dataclass
class PreparedStatementResponse:
    """Reply to ``createPreparedStatement``."""

    statement_handle: int
    num_columns: int = 0
    columns: list[Column] = field(default_factory=list)


def _require(data: dict[str, Any], key: str, what: str) -> Any:
    if key not in data:
        raise MalformedResponseError(f"{what} response is missing {key!r}")
    return data[key]


def parse_public_key(data: dict[str, Any]) -> PublicKeyResponse:
    return PublicKeyResponse(
        public_key_modulus=str(_require(data, "publicKeyModulus", "login")),
        public_key_exponent=str(_require(data, "publicKeyExponent", "login")),
        public_key_pem=str(data.get("publicKeyPem", "")),
    )


def parse_session_info(data: dict[str, Any]) -> SessionInfo:
    try:
        session_id = int(_require(data, "sessionId", "authentication"))
    except (TypeError, ValueError) as e:
        raise MalformedResponseError(f"invalid session id: {e}") from e

    return SessionInfo(
        session_id=session_id,
        protocol_version=int(data.get("protocolVersion", 0)),
        release_version=str(data.get("releaseVersion", "")),
        database_name=str(data.get("databaseName", "")),
        product_name=str(data.get("productName", "")),
        max_data_message_size=int(data.get("maxDataMessageSize", 0)),
        max_identifier_length=int(data.get("maxIdentifierLength", 0)),
        max_varchar_length=int(data.get("maxVarcharLength", 0)),
        identifier_quote_string=str(data.get("identifierQuoteString", '"')),
        time_zone=str(data.get("timeZone", "")),
        time_zone_behavior=str(data.get("timeZoneBehavior", "")),
    )


def parse_prepared_statement(data: dict[str, Any]) -> PreparedStatementResponse:
    handle = _require(data, "statementHandle", "createPreparedStatement")
    parameter_data = data.get("parameterData") or {}
    columns = [Column.from_dict(c) for c in parameter_data.get("columns") or []]
    return PreparedStatementResponse(
        statement_handle=int(handle),
        num_columns=int(parameter_data.get("numColumns", len(columns))),
        columns=columns,
    )


def _parse_row_set(data: dict[str, Any]) -> RowSet:
    columns = [Column.from_dict(c) for c in data.get("columns") or []]
    num_rows = int(data.get("numRows", 0))
    handle = data.get("resultSetHandle")
    return RowSet(
        num_columns=int(data.get("numColumns", len(columns))),
        num_rows=num_rows,
        columns=columns,
        data=[list(col) for col in data.get("data") or []],
        num_rows_in_message=int(data.get("numRowsInMessage", num_rows)),
        result_set_handle=int(handle) if handle is not None else None,
    )


def parse_result(data: dict[str, Any]) -> QueryResult:
    result_type = _require(data, "resultType", "result")
    if result_type == RESULT_SET:
        row_set = _parse_row_set(_require(data, "resultSet", "result"))
        return QueryResult(result_type=RESULT_SET, row_set=row_set)
    if result_type == ROW_COUNT:
        return QueryResult(result_type=ROW_COUNT, row_count=int(data.get("rowCount", 0)))
    raise MalformedResponseError(f"unknown result type {result_type!r}")


def parse_query_results(data: dict[str, Any]) -> QueryResults:
    """Parse an execute reply.

    Raises:
        MalformedResponseError: If the reply claims zero results or its
            result list does not match ``numResults``.
    """
    num_results = int(data.get("numResults", 0))
    if num_results == 0:
        raise MalformedResponseError("execute response contains no results")

    results = [parse_result(r) for r in data.get("results") or []]
    if len(results) != num_results:
        raise MalformedResponseError(
            f"numResults is {num_results} but {len(results)} result(s) were sent"
        )
    return QueryResults(num_results=num_results, results=results)
