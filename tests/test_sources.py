# tests/test_sources.py
"""
Tests for value sources.

Covers:
    - default_get_func() and EnvSource, including .env loading
    - MappingSource
    - FileSource for JSON and TOML files
    - envstruct.utils helpers
"""

import json
from dataclasses import dataclass, field
from typing import List

import pytest
import toml

from envstruct.exceptions import SourceError
from envstruct.parser import parse_struct
from envstruct.sources import EnvSource, FileSource, MappingSource, default_get_func
from envstruct.utils import expand_path, flatten, to_string


def _unset(monkeypatch, name):
    """Make `name` absent for the test and remove it again afterwards."""
    monkeypatch.setenv(name, "")
    monkeypatch.delenv(name)


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


class TestEnvSource:
    """Tests for the process environment source."""

    def test_present(self, monkeypatch):
        monkeypatch.setenv("TEST_PORT", "3000")
        assert default_get_func("TEST_PORT", "8080") == "3000"

    def test_absent_uses_default(self, monkeypatch):
        _unset(monkeypatch, "TEST_BADKEY")
        assert default_get_func("TEST_BADKEY", "8080") == "8080"

    def test_empty_uses_default(self, monkeypatch):
        monkeypatch.setenv("TEST_EMPTY", "")
        assert default_get_func("TEST_EMPTY", "fallback") == "fallback"

    def test_callable(self, monkeypatch):
        monkeypatch.setenv("TEST_NAME", "value")
        assert EnvSource()("TEST_NAME", "") == "value"

    def test_loads_dotenv(self, tmp_path, monkeypatch):
        _unset(monkeypatch, "DOTENV_TEST_KEY")
        env_file = tmp_path / ".env"
        env_file.write_text("DOTENV_TEST_KEY=from_dotenv\n")

        source = EnvSource(load_dotenv_file=True, dotenv_path=str(env_file))
        assert source.dotenv_path == str(env_file)
        assert source("DOTENV_TEST_KEY", "") == "from_dotenv"

    def test_dotenv_does_not_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DOTENV_TEST_OTHER", "already")
        env_file = tmp_path / ".env"
        env_file.write_text("DOTENV_TEST_OTHER=file\n")

        source = EnvSource(load_dotenv_file=True, dotenv_path=str(env_file))
        assert source("DOTENV_TEST_OTHER", "") == "already"

    def test_missing_dotenv(self, tmp_path):
        source = EnvSource(load_dotenv_file=True, dotenv_path=str(tmp_path / "missing.env"))
        assert source.dotenv_path is None


# ---------------------------------------------------------------------------
# Mapping
# ---------------------------------------------------------------------------


class TestMappingSource:
    def test_lookup(self):
        source = MappingSource({"A": "1", "EMPTY": ""})
        assert source("A", "d") == "1"
        assert source("EMPTY", "d") == "d"
        assert source("MISSING", "d") == "d"


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


@dataclass
class Server:
    host: str = ""
    port: int = 0
    tls: bool = False


@dataclass
class FileConfig:
    server: Server = field(default_factory=Server)
    tags: List[str] = field(default_factory=list)


DATA = {"app": {"server": {"host": "db", "port": 5432, "tls": True}, "tags": ["a", "b"]}}


class TestFileSource:
    """Tests for JSON/TOML file sources."""

    def test_json(self, tmp_path):
        f = tmp_path / "config.json"
        f.write_text(json.dumps(DATA))
        source = FileSource(str(f))
        assert source("APP_SERVER_PORT", "") == "5432"
        assert source("APP_SERVER_TLS", "") == "true"
        assert source("APP_TAGS", "") == "a,b"
        assert source("APP_MISSING", "d") == "d"

    def test_toml(self, tmp_path):
        f = tmp_path / "config.toml"
        f.write_text(toml.dumps(DATA))
        source = FileSource(str(f))
        assert source("APP_SERVER_HOST", "") == "db"

    def test_populates_struct(self, tmp_path):
        f = tmp_path / "config.toml"
        f.write_text(toml.dumps(DATA))
        cfg = parse_struct(FileConfig, "APP", value_func=FileSource(str(f)))
        assert cfg.server == Server(host="db", port=5432, tls=True)
        assert cfg.tags == ["a", "b"]

    def test_expands_env_var_path(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TEST_CONFIG_DIR", str(tmp_path))
        (tmp_path / "config.json").write_text('{"y": 2}')
        assert FileSource("$TEST_CONFIG_DIR/config.json")("Y", "") == "2"

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceError, match="not found"):
            FileSource(str(tmp_path / "nope.toml"))

    def test_unsupported_format(self, tmp_path):
        f = tmp_path / "config.yaml"
        f.write_text("key: value")
        with pytest.raises(SourceError, match="Unsupported"):
            FileSource(str(f))

    def test_invalid_json(self, tmp_path):
        f = tmp_path / "bad.json"
        f.write_text("{invalid json")
        with pytest.raises(SourceError):
            FileSource(str(f))

    def test_invalid_toml(self, tmp_path):
        f = tmp_path / "bad.toml"
        f.write_text('[section\nkey = "broken')
        with pytest.raises(SourceError):
            FileSource(str(f))

    def test_top_level_must_be_mapping(self, tmp_path):
        f = tmp_path / "list.json"
        f.write_text("[1, 2]")
        with pytest.raises(SourceError, match="mapping"):
            FileSource(str(f))


# ---------------------------------------------------------------------------
# utils
# ---------------------------------------------------------------------------


class TestUtils:
    def test_expand_path_none(self):
        assert expand_path(None) is None

    def test_expand_user(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert expand_path("~/x.toml") == str(tmp_path / "x.toml")

    def test_to_string(self):
        assert to_string(None) == ""
        assert to_string(False) == "false"
        assert to_string([1, 2.5, "c"]) == "1,2.5,c"
        assert to_string(7) == "7"

    def test_flatten(self):
        assert flatten({"a": {"b": {"c": 1}}, "d": "x"}) == {"A_B_C": "1", "D": "x"}
