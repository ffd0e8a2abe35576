"""Tests for configuration loading and validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from redis_mcp import __version__
from redis_mcp.config.loader import _deep_merge, load_config
from redis_mcp.config.schema import (
    DEFAULT_REDIS_URL,
    BridgeConfig,
    LoggingConfig,
    ReconnectConfig,
    RedisConfig,
    ServerConfig,
)
from redis_mcp.core.errors import ConfigError


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """No user, project or env config files visible."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("REDIS_MCP_CONFIG", raising=False)
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    return tmp_path


# ─── Schema Defaults ──────────────────────────────────────────


class TestSchemaDefaults:
    def test_bridge_config_all_defaults(self):
        cfg = BridgeConfig()
        assert cfg.redis.url == DEFAULT_REDIS_URL == "redis://localhost:6379"
        assert cfg.reconnect.max_retries == 5
        assert cfg.reconnect.base_delay == 1.0
        assert cfg.reconnect.max_delay == 30.0
        assert cfg.server.name == "redis"
        assert cfg.server.version == __version__
        assert cfg.logging.level == "INFO"

    def test_redis_config_defaults(self):
        cfg = RedisConfig()
        assert cfg.socket_timeout is None
        assert cfg.socket_connect_timeout == 5.0

    def test_logging_config_defaults(self):
        assert LoggingConfig().file == ""

    def test_server_config_override(self):
        assert ServerConfig(name="cache").name == "cache"


class TestSchemaValidation:
    def test_negative_retries_rejected(self):
        with pytest.raises(ValidationError):
            ReconnectConfig(max_retries=-1)

    def test_zero_retries_allowed(self):
        assert ReconnectConfig(max_retries=0).max_retries == 0

    def test_zero_delay_rejected(self):
        with pytest.raises(ValidationError):
            ReconnectConfig(base_delay=0)

    def test_invalid_type_raises(self):
        with pytest.raises(ValidationError):
            BridgeConfig.model_validate({"reconnect": {"max_retries": "many"}})

    @pytest.mark.parametrize(
        "url",
        ["redis://cache:6380/2", "rediss://:secret@cache:6380", "unix:///tmp/redis.sock"],
    )
    def test_redis_url_schemes_accepted(self, url):
        assert RedisConfig(url=url).url == url

    @pytest.mark.parametrize("url", ["localhost:6379", "http://cache:6379", ""])
    def test_redis_url_scheme_required(self, url):
        with pytest.raises(ValidationError, match="Redis URL must start with"):
            RedisConfig(url=url)


# ─── Deep Merge ───────────────────────────────────────────────


class TestDeepMerge:
    def test_nested_merge(self):
        base = {"redis": {"url": "a", "socket_timeout": 1.0}}
        result = _deep_merge(base, {"redis": {"url": "b"}})
        assert result == {"redis": {"url": "b", "socket_timeout": 1.0}}

    def test_override_replaces_non_dict(self):
        assert _deep_merge({"a": {"x": 1}}, {"a": 2}) == {"a": 2}

    def test_base_unchanged(self):
        base = {"redis": {"url": "a"}}
        _deep_merge(base, {"redis": {"url": "b"}})
        assert base == {"redis": {"url": "a"}}


# ─── Loading ──────────────────────────────────────────────────


class TestLoadConfig:
    def test_defaults_when_no_files(self, isolated):
        cfg = load_config()
        assert cfg.redis.url == DEFAULT_REDIS_URL

    def test_load_from_explicit_path(self, isolated):
        toml_file = isolated / "test.toml"
        toml_file.write_text('[redis]\nurl = "redis://cache:6380"\n\n[reconnect]\nmax_retries = 2\n')
        cfg = load_config(path=toml_file)
        assert cfg.redis.url == "redis://cache:6380"
        assert cfg.reconnect.max_retries == 2
        assert cfg.reconnect.base_delay == 1.0

    def test_explicit_path_not_found_raises(self, isolated):
        with pytest.raises(ConfigError, match="not found"):
            load_config(path=isolated / "nonexistent.toml")

    def test_invalid_toml_raises(self, isolated):
        bad = isolated / "bad.toml"
        bad.write_text("[redis\nurl = ")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(path=bad)

    def test_url_without_scheme_raises_config_error(self, isolated):
        with pytest.raises(ConfigError, match="Redis URL must start with"):
            load_config(overrides={"redis": {"url": "localhost:6379"}})

    def test_validation_failure_raises_config_error(self, isolated):
        bad = isolated / "bad.toml"
        bad.write_text("[reconnect]\nmax_retries = -3\n")
        with pytest.raises(ConfigError, match="validation failed"):
            load_config(path=bad)

    def test_overrides_beat_file(self, isolated):
        toml_file = isolated / "test.toml"
        toml_file.write_text('[redis]\nurl = "redis://file:6379"\n')
        cfg = load_config(path=toml_file, overrides={"redis": {"url": "redis://cli:6379"}})
        assert cfg.redis.url == "redis://cli:6379"

    def test_project_local_config(self, isolated):
        (isolated / "redis-mcp.toml").write_text('[logging]\nlevel = "DEBUG"\n')
        assert load_config().logging.level == "DEBUG"

    def test_user_config(self, isolated):
        user_dir = isolated / ".config" / "redis-mcp"
        user_dir.mkdir(parents=True)
        (user_dir / "config.toml").write_text('[server]\nname = "mine"\n')
        assert load_config().server.name == "mine"

    def test_project_beats_user(self, isolated):
        user_dir = isolated / ".config" / "redis-mcp"
        user_dir.mkdir(parents=True)
        (user_dir / "config.toml").write_text('[server]\nname = "user"\n')
        (isolated / "redis-mcp.toml").write_text('[server]\nname = "project"\n')
        assert load_config().server.name == "project"

    def test_env_path(self, isolated, monkeypatch):
        toml_file = isolated / "env.toml"
        toml_file.write_text('[redis]\nurl = "redis://env:6379"\n')
        monkeypatch.setenv("REDIS_MCP_CONFIG", str(toml_file))
        assert load_config().redis.url == "redis://env:6379"

    def test_env_missing_file_raises(self, isolated, monkeypatch):
        monkeypatch.setenv("REDIS_MCP_CONFIG", str(isolated / "nope.toml"))
        with pytest.raises(ConfigError, match="REDIS_MCP_CONFIG"):
            load_config()
