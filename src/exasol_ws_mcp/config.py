"""Connection configuration.

A ``Config`` is immutable once built. DSN form::

    exa:HOST:PORT;user=USER;password=SECRET;autocommit=0;encryption=1
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace

from . import __version__

DEFAULT_PORT = 8563
DEFAULT_API_VERSION = 1
DSN_PREFIX = "exa:"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _to_bool(key: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"Invalid boolean for {key!r}: {value!r}")


@dataclass(frozen=True)
class Config:
    """Settings read by the connection and the login handshake."""

    host: str = "localhost"
    port: int = DEFAULT_PORT
    user: str = ""
    password: str = ""
    schema: str = ""
    api_version: int = DEFAULT_API_VERSION
    autocommit: bool = True
    client_name: str = "exasol-ws-mcp"
    client_version: str = __version__
    encryption: bool = True
    verify_certificate: bool = True
    timeout: float | None = 30.0
    result_set_max_rows: int | None = None

    def __post_init__(self) -> None:
        if not 0 < self.port < 65536:
            raise ValueError(f"Port must be 1-65535, got {self.port}")
        if self.result_set_max_rows is not None and self.result_set_max_rows < 0:
            raise ValueError("result_set_max_rows must not be negative")

    def __repr__(self) -> str:
        return (
            f"Config(host={self.host!r}, port={self.port}, user={self.user!r}, "
            f"autocommit={self.autocommit}, encryption={self.encryption})"
        )

    @property
    def url(self) -> str:
        scheme = "wss" if self.encryption else "ws"
        return f"{scheme}://{self.host}:{self.port}"

    def with_options(self, **changes) -> Config:
        return replace(self, **changes)

    @classmethod
    def from_dsn(cls, dsn: str) -> Config:
        """Parse an ``exa:HOST:PORT;key=value;...`` string.

        Raises:
            ValueError: On a missing prefix, a malformed option, or an
                unknown option name.
        """
        if not dsn.startswith(DSN_PREFIX):
            raise ValueError(f"DSN must start with {DSN_PREFIX!r}")

        head, _, options = dsn[len(DSN_PREFIX):].partition(";")
        host, _, port = head.partition(":")
        values: dict = {}
        if host:
            values["host"] = host
        if port:
            values["port"] = int(port)

        known = {f.name: f.type for f in fields(cls)}
        for option in filter(None, (o.strip() for o in options.split(";"))):
            key, sep, value = option.partition("=")
            key = key.strip().lower()
            if not sep:
                raise ValueError(f"Malformed DSN option {option!r}")
            if key not in known or key in ("host", "port"):
                raise ValueError(f"Unknown DSN option {key!r}")

            kind = known[key]
            if "bool" in kind:
                values[key] = _to_bool(key, value)
            elif "int" in kind:
                values[key] = int(value)
            elif "float" in kind:
                values[key] = float(value)
            else:
                values[key] = value

        return cls(**values)
