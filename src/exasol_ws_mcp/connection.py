"""Session protocol engine.

A ``Connection`` owns one transport and runs the strictly synchronous
command/response exchange over it: one envelope out, one envelope in,
never more than one command in flight. On top of that it implements the
login handshake and the two statement-execution paths::

    no bound args   ->  execute
    bound args      ->  createPreparedStatement
                        executePreparedStatement
                        closePreparedStatement   (whether the execute succeeded or not)

There is no internal locking. A connection must not be shared between
threads without external serialization.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Protocol, Sequence, TypeVar

from . import __version__
from .config import Config
from .cursor import Cursor, ExecResult, Rows
from .exceptions import (
    AutocommitEnabledError,
    BadConnectionError,
    ConnectionClosedError,
    MalformedResponseError,
    ServerError,
)
from .models.result import QueryResults
from .protocol.auth import (
    client_os,
    client_runtime,
    encrypt_password,
    load_public_key,
    os_username,
)
from .protocol.commands import (
    build_argument_matrix,
    build_auth,
    build_close_prepared,
    build_create_prepared,
    build_disconnect,
    build_execute,
    build_execute_prepared,
    build_login,
)
from .protocol.framing import build_frame, parse_frame
from .protocol.parser import (
    PreparedStatementResponse,
    SessionInfo,
    parse_prepared_statement,
    parse_public_key,
    parse_query_results,
    parse_session_info,
)
from .statement import Statement
from .transaction import Transaction
from .transport.websocket_connection import WebSocketConnection

logger = logging.getLogger(__name__)

T = TypeVar("T")

DRIVER_NAME = f"exasol-ws-mcp {__version__}"


class Transport(Protocol):
    """What the engine needs from a frame transport."""

    def write(self, data: str) -> None: ...

    def read(self) -> str: ...

    def close(self) -> None: ...


class ConnectionState(Enum):
    UNOPENED = "unopened"
    OPEN = "open"
    CLOSED = "closed"


class Connection:
    """One authenticated session over one transport.

    Usage::

        conn = connect(Config(host="db", user="sys", password="exasol"))
        rows = conn.query("SELECT 1")
        conn.exec("INSERT INTO t VALUES (?, ?)", [1, "a", 2, "b"])
        conn.close()
    """

    def __init__(self, config: Config, transport: Transport) -> None:
        self.config = config
        self._transport: Transport | None = transport
        self._state = ConnectionState.UNOPENED
        self.session_id: int | None = None
        self.metadata: SessionInfo | None = None

    def __repr__(self) -> str:
        return f"Connection(state={self._state.value}, session_id={self.session_id})"

    def __enter__(self) -> Connection:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._state is ConnectionState.CLOSED

    @property
    def autocommit(self) -> bool:
        return self.config.autocommit

    # ─── COMMAND / RESPONSE ENGINE ───────────────────────────────────

    def send(
        self,
        command: dict[str, Any],
        parse: Callable[[dict[str, Any]], T] | None = None,
    ) -> T | None:
        """Run one request/response exchange.

        Args:
            command: The command envelope.
            parse: Converts ``responseData`` into a typed response. When
                ``None`` the payload is ignored.

        Raises:
            BadConnectionError: The transport failed. The connection is
                closed and must be discarded.
            MalformedResponseError: The reply could not be decoded.
            ServerError: The server reported a failure. The connection
                remains usable.
        """
        if self._transport is None:
            raise ConnectionClosedError()

        kind = command.get("command", "auth")
        logger.debug("-> %s", kind)
        try:
            self._transport.write(build_frame(command))
            raw = self._transport.read()
        except OSError as e:
            logger.error("Transport failure during %s: %s", kind, e)
            self._invalidate()
            raise BadConnectionError(f"bad connection: {e}") from e

        frame = parse_frame(raw)
        if frame is None:
            raise MalformedResponseError(f"undecodable reply to {kind}")
        logger.debug("<- %s %s", kind, frame.status)

        if not frame.ok:
            raise ServerError(frame.error_text, frame.sql_code)
        if parse is None:
            return None
        try:
            return parse(frame.response_data)
        except (TypeError, ValueError, AttributeError) as e:
            raise MalformedResponseError(f"unexpected {kind} reply: {e}") from e

    def _invalidate(self) -> None:
        self._state = ConnectionState.CLOSED
        if self._transport is not None:
            self._transport.close()
            self._transport = None

    def ensure_open(self) -> None:
        if self._state is not ConnectionState.OPEN:
            logger.warning("Operation on %s connection", self._state.value)
            raise ConnectionClosedError()

    # ─── AUTHENTICATION HANDSHAKE ────────────────────────────────────

    def login(self) -> SessionInfo:
        """Run the two-step handshake and open the session.

        Raises:
            BadConnectionError: If the password cannot be encrypted with
                the key the server sent, or the transport fails.
            ServerError: If the server rejects either step.
        """
        if self._state is not ConnectionState.UNOPENED:
            raise ConnectionClosedError(f"cannot log in from state {self._state.value}")

        config = self.config
        key_response = self.send(
            build_login(config.api_version, config.autocommit),
            parse_public_key,
        )

        try:
            public_key = load_public_key(
                key_response.public_key_modulus,
                key_response.public_key_exponent,
            )
            password = encrypt_password(config.password, public_key)
        except (ValueError, OverflowError) as e:
            logger.error("Password encryption error: %s", e)
            raise BadConnectionError(f"password encryption failed: {e}") from e

        auth = build_auth(
            config.user,
            password,
            client_name=config.client_name,
            driver_name=DRIVER_NAME,
            client_os=client_os(),
            client_os_username=os_username(),
            client_version=config.client_version,
            client_runtime=client_runtime(),
            autocommit=config.autocommit,
            schema=config.schema,
        )
        session = self.send(auth, parse_session_info)

        self.session_id = session.session_id
        self.metadata = session
        self._state = ConnectionState.OPEN
        logger.info("Session %s opened as %s", session.session_id, config.user)
        return session

    # ─── STATEMENT EXECUTION ─────────────────────────────────────────

    def _execute_attributes(self) -> dict[str, Any] | None:
        if self.config.result_set_max_rows is None:
            return None
        return {"resultSetMaxRows": self.config.result_set_max_rows}

    def execute(self, sql: str, args: Sequence[Any] = ()) -> QueryResults:
        """Execute ``sql`` and return the raw results.

        Without ``args`` a single ``execute`` command is sent; otherwise the
        statement is prepared, executed once with ``args`` and closed.
        """
        self.ensure_open()
        if not args:
            return self.simple_exec(sql)

        prepared = self.send(build_create_prepared(sql), parse_prepared_statement)
        # A count mismatch fails before any further traffic, close included.
        data = build_argument_matrix(args, len(prepared.columns))
        try:
            return self.execute_prepared(prepared, data)
        finally:
            self.close_prepared(prepared.statement_handle, quiet=True)

    def simple_exec(self, sql: str) -> QueryResults:
        return self.send(build_execute(sql, self._execute_attributes()), parse_query_results)

    def execute_prepared(
        self, prepared: PreparedStatementResponse, data: list[list[Any]]
    ) -> QueryResults:
        """Execute an open prepared statement with a column-major matrix.

        ``data`` comes from :func:`build_argument_matrix`.
        """
        self.ensure_open()
        logger.debug(
            "Executing statement %s with %d row(s)",
            prepared.statement_handle,
            len(data[0]),
        )
        command = build_execute_prepared(
            prepared.statement_handle,
            prepared.columns,
            data,
            self._execute_attributes(),
        )
        return self.send(command, parse_query_results)

    def close_prepared(self, statement_handle: int, quiet: bool = False) -> None:
        """Release a server-side prepared statement.

        With ``quiet`` a server-reported failure is logged instead of
        raised, so it cannot mask the error of the preceding execute.
        Transport failures always propagate.
        """
        if self.closed:
            return
        try:
            self.send(build_close_prepared(statement_handle))
        except ServerError as e:
            if not quiet:
                raise
            logger.warning("Failed to close prepared statement %s: %s", statement_handle, e)

    def exec(self, sql: str, args: Sequence[Any] = ()) -> ExecResult:
        """Execute a statement and return its affected-row view."""
        return ExecResult.from_results(self.execute(sql, args))

    def query(self, sql: str, args: Sequence[Any] = ()) -> Rows:
        """Execute a query and return a row cursor over its first result."""
        return Rows.from_results(self.execute(sql, args))

    def prepare(self, sql: str) -> Statement:
        """Create a server-side prepared statement."""
        self.ensure_open()
        prepared = self.send(build_create_prepared(sql), parse_prepared_statement)
        return Statement(self, prepared)

    def begin(self) -> Transaction:
        """Start a transaction.

        Raises:
            ConnectionClosedError: The connection is not open.
            AutocommitEnabledError: The session runs in autocommit mode.
        """
        self.ensure_open()
        if self.config.autocommit:
            raise AutocommitEnabledError()
        return Transaction(self)

    # ─── PEP 249 SURFACE ─────────────────────────────────────────────

    def cursor(self) -> Cursor:
        self.ensure_open()
        return Cursor(self)

    def commit(self) -> None:
        self.ensure_open()
        if not self.config.autocommit:
            self.simple_exec("COMMIT")

    def rollback(self) -> None:
        self.ensure_open()
        if self.config.autocommit:
            raise AutocommitEnabledError()
        self.simple_exec("ROLLBACK")

    # ─── LIFECYCLE ───────────────────────────────────────────────────

    def close(self) -> None:
        """Disconnect and release the transport.

        The connection ends up closed whatever happens. The disconnect
        round trip is best effort and skipped if the transport is gone.
        """
        if self._transport is None:
            self._state = ConnectionState.CLOSED
            return

        try:
            if self._state is ConnectionState.OPEN:
                self.send(build_disconnect())
        except (BadConnectionError, ServerError, MalformedResponseError) as e:
            logger.warning("Disconnect failed: %s", e)
        finally:
            self._invalidate()
            logger.info("Session %s closed", self.session_id)


def connect(
    config: Config | None = None,
    transport: Transport | None = None,
    **kwargs: Any,
) -> Connection:
    """Open a transport, log in, and return an open ``Connection``.

    Args:
        config: Connection settings. Keyword arguments override its fields
            (or build one from scratch when ``config`` is ``None``).
        transport: An already opened transport. When omitted a
            ``WebSocketConnection`` is built from ``config`` and opened.

    Raises:
        BadConnectionError: The server cannot be reached.
        Error: Any handshake failure; the transport is closed first.
    """
    if config is None:
        config = Config(**kwargs)
    elif kwargs:
        config = config.with_options(**kwargs)

    if transport is None:
        ws = WebSocketConnection.from_config(config)
        try:
            ws.open()
        except ConnectionError as e:
            raise BadConnectionError(str(e)) from e
        transport = ws

    conn = Connection(config, transport)
    try:
        conn.login()
    except Exception:
        conn._invalidate()
        raise
    return conn
