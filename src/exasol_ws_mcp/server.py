"""MCP server entry point for an Exasol database.

Exposes tools, resources, and prompts via the Model Context Protocol
using the official Python MCP SDK with stdio transport.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .config import Config
from .connection import Connection, connect as open_connection
from .exceptions import Error
from .settings import ServerSettings

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "exasol",
    instructions="MCP server for running SQL against an Exasol database",
)

# Global connection state
_connection: Connection | None = None
_settings: ServerSettings | None = None


def _get_settings() -> ServerSettings:
    global _settings
    if _settings is None:
        _settings = ServerSettings()
    return _settings


def _get_connection() -> Connection:
    """Get the active connection, raising if not connected."""
    if _connection is None or _connection.closed:
        raise RuntimeError(
            "Not connected to a database. Use the 'connect' tool first."
        )
    return _connection


def _error(e: Exception) -> dict[str, Any]:
    logger.warning("Tool failed: %s", e)
    result: dict[str, Any] = {"error": str(e), "type": type(e).__name__}
    sql_code = getattr(e, "sql_code", None)
    if sql_code:
        result["sql_code"] = sql_code
    return result


def _json_value(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


# ─── CONNECTION TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def connect(dsn: str | None = None) -> dict[str, Any]:
    """Open a session on the Exasol server.

    Without a DSN the connection settings come from the EXASOL_*
    environment variables.

    Args:
        dsn: Optional "exa:HOST:PORT;user=...;password=..." string.
    """
    global _connection
    if _connection is not None and not _connection.closed:
        return {
            "connected": True,
            "message": "Already connected",
            "session_id": _connection.session_id,
        }

    try:
        config = Config.from_dsn(dsn) if dsn else _get_settings().to_config()
        _connection = open_connection(config)
    except (Error, ValueError) as e:
        return _error(e)

    result: dict[str, Any] = {"connected": True}
    result.update(_connection.metadata.to_dict())
    return result


@mcp.tool()
def disconnect() -> dict[str, bool]:
    """Close the session and the socket."""
    global _connection
    if _connection is None:
        return {"disconnected": True}
    _connection.close()
    _connection = None
    return {"disconnected": True}


@mcp.tool()
def get_session_info() -> dict[str, Any]:
    """Session id, database name, and server version of the open session."""
    conn = _get_connection()
    info = conn.metadata.to_dict()
    info["autocommit"] = conn.autocommit
    return info


# ─── SQL TOOLS ────────────────────────────────────────────────────────

@mcp.tool()
def run_query(
    sql: str, params: list[Any] | None = None, max_rows: int | None = None
) -> dict[str, Any]:
    """Run a row-returning statement and return its columns and rows.

    Args:
        sql: SQL text, with ? placeholders when params are given.
        params: Flat list of bind values, row after row.
        max_rows: Maximum rows to return (defaults to EXASOL_MAX_ROWS).
    """
    conn = _get_connection()
    limit = max_rows if max_rows is not None else _get_settings().max_rows
    try:
        rows = conn.query(sql, params or [])
    except Error as e:
        return _error(e)

    total = len(rows)
    data = [[_json_value(v) for v in row] for row in rows.fetchmany(limit)]
    return {
        "columns": rows.columns,
        "rows": data,
        "row_count": total,
        "truncated": total > len(data),
    }


@mcp.tool()
def execute_statement(sql: str, params: list[Any] | None = None) -> dict[str, Any]:
    """Run a DML or DDL statement and return the affected row count.

    Args:
        sql: SQL text, with ? placeholders when params are given.
        params: Flat list of bind values, row after row.
    """
    conn = _get_connection()
    try:
        result = conn.exec(sql, params or [])
    except Error as e:
        return _error(e)
    return {"rows_affected": result.rows_affected}


@mcp.tool()
def commit() -> dict[str, Any]:
    """Commit the current transaction (no-op under autocommit)."""
    conn = _get_connection()
    try:
        conn.commit()
    except Error as e:
        return _error(e)
    return {"committed": True}


@mcp.tool()
def rollback() -> dict[str, Any]:
    """Roll back the current transaction (requires autocommit off)."""
    conn = _get_connection()
    try:
        conn.rollback()
    except Error as e:
        return _error(e)
    return {"rolled_back": True}


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("exasol://session/info")
def resource_session_info() -> str:
    """Current session metadata."""
    if _connection is None or _connection.closed:
        return json.dumps({"connected": False})
    info = _connection.metadata.to_dict()
    info["connected"] = True
    return json.dumps(info)


# ─── MCP PROMPTS ─────────────────────────────────────────────────────

@mcp.prompt()
def explore_schema(schema: str) -> str:
    """Guide the AI through the tables of a schema.

    Args:
        schema: Schema name to explore.
    """
    return f"""Explore the {schema} schema.
Use run_query with:
- SELECT TABLE_NAME, TABLE_ROW_COUNT FROM EXA_ALL_TABLES WHERE TABLE_SCHEMA = ?
- SELECT COLUMN_NAME, COLUMN_TYPE FROM EXA_ALL_COLUMNS
  WHERE COLUMN_SCHEMA = ? AND COLUMN_TABLE = ?

Pass the schema and table names as params rather than inlining them.
Summarize each table with its purpose, key columns, and size."""


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=_get_settings().log_level.upper())
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
