"""MCP server settings using pydantic-settings."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

from .config import DEFAULT_PORT, Config


class ServerSettings(BaseSettings):
    """Connection defaults for the MCP server, read from ``EXASOL_*`` variables."""

    model_config = SettingsConfigDict(
        env_prefix="EXASOL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Connection
    # ------------------------------------------------------------------
    dsn: str | None = None
    host: str = "localhost"
    port: int = DEFAULT_PORT
    user: str = ""
    password: str = ""
    schema_name: str = ""
    autocommit: bool = True
    encryption: bool = True
    verify_certificate: bool = True
    timeout: float = 30.0

    # ------------------------------------------------------------------
    # Query limits
    # ------------------------------------------------------------------
    max_rows: int = 1000

    log_level: str = "INFO"

    def to_config(self) -> Config:
        """Build a driver ``Config``; an explicit DSN wins over the single fields."""
        if self.dsn:
            return Config.from_dsn(self.dsn)
        return Config(
            host=self.host,
            port=self.port,
            user=self.user,
            password=self.password,
            schema=self.schema_name,
            autocommit=self.autocommit,
            encryption=self.encryption,
            verify_certificate=self.verify_certificate,
            timeout=self.timeout,
        )
