"""Tests for driver configuration and server settings."""

import dataclasses

import pytest

from exasol_ws_mcp.config import DEFAULT_PORT, Config
from exasol_ws_mcp.settings import ServerSettings


def test_defaults():
    """Defaults use an encrypted socket with autocommit on."""
    config = Config()
    assert config.port == DEFAULT_PORT
    assert config.autocommit is True
    assert config.url == f"wss://localhost:{DEFAULT_PORT}"


def test_config_is_immutable():
    """Config fields cannot be reassigned."""
    config = Config(user="sys")
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.user = "other"


def test_repr_hides_password():
    """The password never appears in repr."""
    assert "s3cret" not in repr(Config(password="s3cret"))


def test_unencrypted_url():
    """encryption=False selects ws://."""
    assert Config(host="db", port=9000, encryption=False).url == "ws://db:9000"


def test_invalid_port():
    """Ports outside 1-65535 are rejected."""
    with pytest.raises(ValueError):
        Config(port=0)


def test_from_dsn():
    """A DSN sets host, port and typed options."""
    config = Config.from_dsn(
        "exa:db.example.com:8899;user=sys;password=p=w;autocommit=0;"
        "api_version=3;timeout=5.5;result_set_max_rows=100;encryption=false"
    )
    assert config.host == "db.example.com"
    assert config.port == 8899
    assert config.user == "sys"
    assert config.password == "p=w"
    assert config.autocommit is False
    assert config.api_version == 3
    assert config.timeout == 5.5
    assert config.result_set_max_rows == 100
    assert config.encryption is False


def test_from_dsn_host_only():
    """Port falls back to the default."""
    config = Config.from_dsn("exa:db")
    assert config.host == "db"
    assert config.port == DEFAULT_PORT


@pytest.mark.parametrize("dsn", [
    "db:8563",
    "exa:db:8563;user",
    "exa:db:8563;colour=blue",
    "exa:db:8563;autocommit=maybe",
    "exa:db:notaport",
])
def test_from_dsn_invalid(dsn):
    """Malformed DSNs raise ValueError."""
    with pytest.raises(ValueError):
        Config.from_dsn(dsn)


def test_server_settings_from_env(monkeypatch):
    """EXASOL_* variables feed the driver config."""
    monkeypatch.setenv("EXASOL_HOST", "warehouse")
    monkeypatch.setenv("EXASOL_USER", "analyst")
    monkeypatch.setenv("EXASOL_AUTOCOMMIT", "false")
    monkeypatch.setenv("EXASOL_SCHEMA_NAME", "RETAIL")
    config = ServerSettings(_env_file=None).to_config()
    assert config.host == "warehouse"
    assert config.user == "analyst"
    assert config.autocommit is False
    assert config.schema == "RETAIL"


def test_server_settings_dsn_wins(monkeypatch):
    """EXASOL_DSN overrides the single fields."""
    monkeypatch.setenv("EXASOL_HOST", "ignored")
    monkeypatch.setenv("EXASOL_DSN", "exa:from-dsn:1234;user=u")
    config = ServerSettings(_env_file=None).to_config()
    assert config.host == "from-dsn"
    assert config.port == 1234
