"""Command kinds and command envelope builders.

Every request except the credentials message carries a ``command``
discriminator naming its kind.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Sequence

from ..exceptions import InvalidValuesCountError
from ..models.result import Column


class Command(str, Enum):
    """Command discriminators."""

    LOGIN = "login"
    EXECUTE = "execute"
    CREATE_PREPARED_STATEMENT = "createPreparedStatement"
    EXECUTE_PREPARED_STATEMENT = "executePreparedStatement"
    CLOSE_PREPARED_STATEMENT = "closePreparedStatement"
    DISCONNECT = "disconnect"


def build_command(command: Command, **fields: Any) -> dict[str, Any]:
    """Build an envelope for ``command``; ``None`` fields are dropped."""
    message: dict[str, Any] = {"command": command.value}
    message.update({k: v for k, v in fields.items() if v is not None})
    return message


def build_login(protocol_version: int, autocommit: bool) -> dict[str, Any]:
    """First handshake step: announce the protocol version."""
    return build_command(
        Command.LOGIN,
        protocolVersion=protocol_version,
        attributes={"autocommit": autocommit},
    )


def build_auth(
    username: str,
    encrypted_password: str,
    *,
    client_name: str,
    driver_name: str,
    client_os: str,
    client_os_username: str,
    client_version: str,
    client_runtime: str,
    autocommit: bool,
    schema: str = "",
    use_compression: bool = False,
) -> dict[str, Any]:
    """Second handshake step: the credentials message (no discriminator)."""
    attributes: dict[str, Any] = {"autocommit": autocommit}
    if schema:
        attributes["currentSchema"] = schema
    return {
        "username": username,
        "password": encrypted_password,
        "useCompression": use_compression,
        "clientName": client_name,
        "driverName": driver_name,
        "clientOs": client_os,
        "clientOsUsername": client_os_username,
        "clientVersion": client_version,
        "clientRuntime": client_runtime,
        "attributes": attributes,
    }


def build_execute(sql_text: str, attributes: dict[str, Any] | None = None) -> dict[str, Any]:
    return build_command(Command.EXECUTE, sqlText=sql_text, attributes=attributes or None)


def build_create_prepared(sql_text: str) -> dict[str, Any]:
    return build_command(Command.CREATE_PREPARED_STATEMENT, sqlText=sql_text)


def build_execute_prepared(
    statement_handle: int,
    columns: Sequence[Column],
    data: list[list[Any]],
    attributes: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build an executePreparedStatement envelope.

    ``data`` is the column-major Argument Matrix from
    :func:`build_argument_matrix`.
    """
    return build_command(
        Command.EXECUTE_PREPARED_STATEMENT,
        statementHandle=statement_handle,
        numColumns=len(columns),
        numRows=len(data[0]) if data else 0,
        columns=[c.to_dict() for c in columns],
        data=data,
        attributes=attributes or None,
    )


def build_close_prepared(statement_handle: int) -> dict[str, Any]:
    return build_command(Command.CLOSE_PREPARED_STATEMENT, statementHandle=statement_handle)


def build_disconnect() -> dict[str, Any]:
    return build_command(Command.DISCONNECT)


def build_argument_matrix(args: Sequence[Any], num_columns: int) -> list[list[Any]]:
    """Reshape flat bind values into one list per parameter column.

    The value at flat index ``i`` belongs to column ``i % num_columns``, so
    ``matrix[c][r] == args[r * num_columns + c]``.

    Raises:
        InvalidValuesCountError: If ``len(args)`` is not a multiple of
            ``num_columns``.
    """
    if num_columns <= 0 or len(args) % num_columns != 0:
        raise InvalidValuesCountError(
            f"got {len(args)} values for {num_columns} parameter column(s)"
        )
    return [list(args[c::num_columns]) for c in range(num_columns)]
