"""Scripted transport and canned server replies for driver tests."""

from __future__ import annotations

import json
from typing import Any

import rsa

from exasol_ws_mcp.config import Config
from exasol_ws_mcp.connection import Connection

# One small key for the whole test run; 512 bits is plenty for a short password.
PUBLIC_KEY, PRIVATE_KEY = rsa.newkeys(512)


class ScriptedTransport:
    """Records every sent envelope and replays scripted replies in order.

    A reply that is an exception instance is raised from ``read`` instead.
    """

    def __init__(self, replies: list[Any] | None = None) -> None:
        self.sent: list[dict[str, Any]] = []
        self.replies = list(replies or [])
        self.closed = False
        self.close_calls = 0

    def write(self, data: str) -> None:
        if self.closed:
            raise ConnectionError("transport closed")
        self.sent.append(json.loads(data))

    def read(self) -> str:
        if not self.replies:
            raise ConnectionError("no reply scripted")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply if isinstance(reply, str) else json.dumps(reply)

    def close(self) -> None:
        self.closed = True
        self.close_calls += 1

    @property
    def commands(self) -> list[str]:
        return [m.get("command", "auth") for m in self.sent]

    def queue(self, *replies: Any) -> None:
        self.replies.extend(replies)


def ok(data: dict[str, Any] | None = None) -> dict[str, Any]:
    return {"status": "ok", "responseData": data or {}}


def error(text: str, sql_code: str = "42000") -> dict[str, Any]:
    return {"status": "error", "exception": {"text": text, "sqlCode": sql_code}}


def public_key_reply() -> dict[str, Any]:
    return ok({
        "publicKeyModulus": format(PUBLIC_KEY.n, "x"),
        "publicKeyExponent": format(PUBLIC_KEY.e, "x"),
        "publicKeyPem": "",
    })


def session_reply(session_id: int = 4242) -> dict[str, Any]:
    return ok({
        "sessionId": session_id,
        "protocolVersion": 1,
        "releaseVersion": "7.1.0",
        "databaseName": "EXADB",
        "productName": "EXASolution",
        "maxDataMessageSize": 4194304,
        "maxIdentifierLength": 128,
        "maxVarcharLength": 2000000,
        "identifierQuoteString": '"',
        "timeZone": "UTC",
        "timeZoneBehavior": "INVALID SHIFT AMBIGUOUS ST",
    })


def result_set_reply(columns: list[str], data: list[list[Any]]) -> dict[str, Any]:
    num_rows = len(data[0]) if data else 0
    return ok({
        "numResults": 1,
        "results": [{
            "resultType": "resultSet",
            "resultSet": {
                "numColumns": len(columns),
                "numRows": num_rows,
                "numRowsInMessage": num_rows,
                "columns": [
                    {"name": name, "dataType": {"type": "DECIMAL", "precision": 18, "scale": 0}}
                    for name in columns
                ],
                "data": data,
            },
        }],
    })


def row_count_reply(count: int) -> dict[str, Any]:
    return ok({"numResults": 1, "results": [{"resultType": "rowCount", "rowCount": count}]})


def prepared_reply(handle: int, num_columns: int) -> dict[str, Any]:
    return ok({
        "statementHandle": handle,
        "parameterData": {
            "numColumns": num_columns,
            "columns": [
                {"name": f"P{i}", "dataType": {"type": "VARCHAR", "size": 100}}
                for i in range(num_columns)
            ],
        },
    })


def open_connection(
    transport: ScriptedTransport | None = None,
    **config: Any,
) -> tuple[Connection, ScriptedTransport]:
    """Log a connection in against scripted handshake replies."""
    transport = transport or ScriptedTransport()
    transport.replies[:0] = [public_key_reply(), session_reply()]
    options = {"user": "sys", "password": "exasol"}
    options.update(config)
    conn = Connection(Config(**options), transport)
    conn.login()
    transport.sent.clear()
    return conn, transport
