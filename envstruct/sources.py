"""
envstruct.sources
-----------------

Value sources. A source is any callable ``(key, default) -> str`` that
returns `default` when the key is missing or empty. The parser never looks
past this contract, so environment variables, ``.env`` files, JSON/TOML files
or hardcoded mappings are interchangeable.
"""

import json
import logging
import os
from typing import Callable, Mapping, Optional

import tomli
from dotenv import find_dotenv, load_dotenv

from .exceptions import SourceError
from .utils import expand_path, flatten

log = logging.getLogger(__name__)

ValueFunc = Callable[[str, str], str]


def default_get_func(key: str, default: str) -> str:
    """Read `key` from the process environment."""
    return os.environ.get(key) or default


class EnvSource:
    """
    Process environment, optionally seeded from a ``.env`` file.

    The ``.env`` file never overrides variables that are already set.

    Args:
        load_dotenv_file: Search for and load a ``.env`` file on creation.
        dotenv_path: Explicit ``.env`` path; searched from the cwd upwards when omitted.
    """

    def __init__(self, load_dotenv_file: bool = False, dotenv_path: Optional[str] = None):
        self.dotenv_path = None
        if load_dotenv_file:
            self.dotenv_path = self._load_dotenv_file(dotenv_path)

    @staticmethod
    def _load_dotenv_file(dotenv_path: Optional[str]) -> Optional[str]:
        """Loads a .env file into os.environ and returns its path, or None if none was found."""
        actual_path = expand_path(dotenv_path) if dotenv_path else find_dotenv(usecwd=True)
        if not actual_path or not os.path.exists(actual_path):
            if dotenv_path:
                log.warning("Warning: .env file not found at %s.", actual_path)
            return None

        if load_dotenv(dotenv_path=actual_path, override=False):
            log.debug("Loaded .env file from %s.", actual_path)
        else:
            log.debug(".env file at %s set no new variables.", actual_path)
        return actual_path

    def __call__(self, key: str, default: str) -> str:
        return default_get_func(key, default)


class MappingSource:
    """Values from a fixed mapping, e.g. ``MappingSource({"APP_PORT": "8080"})``."""

    def __init__(self, values: Mapping[str, str]):
        self.values = dict(values)

    def __call__(self, key: str, default: str) -> str:
        return self.values.get(key) or default


class FileSource:
    """
    Values from a single JSON or TOML file.

    Nested tables are flattened into upper-cased, ``_``-joined keys, so::

        [app.server]
        port = 8080

    answers ``APP_SERVER_PORT`` with ``"8080"``.

    Args:
        path: Path to a ``.json`` or ``.toml`` file. ``~`` and ``$VARS`` are expanded.

    Raises:
        SourceError: If the file is missing, unreadable or of an unsupported type.
    """

    def __init__(self, path: str):
        self.path = expand_path(path)
        self.values = flatten(self._load(self.path))
        log.debug("Loaded %d keys from %s.", len(self.values), self.path)

    @staticmethod
    def _load(path: str) -> dict:
        if not os.path.exists(path):
            raise SourceError(f"Config file not found: {path}")

        ext = os.path.splitext(path)[1].lower()
        try:
            if ext == ".toml":
                with open(path, mode="rb") as f:
                    content = tomli.load(f)
            elif ext == ".json":
                with open(path, mode="r", encoding="utf-8") as f:
                    content = json.load(f)
            else:
                raise SourceError(f"Unsupported config file type: {ext}")
        except (OSError, ValueError) as e:
            raise SourceError(f"Error loading/parsing file {path}: {e}") from e

        if not isinstance(content, dict):
            raise SourceError(f"Config file {path} must contain a mapping at the top level")
        return content

    def __call__(self, key: str, default: str) -> str:
        return self.values.get(key.upper()) or default
