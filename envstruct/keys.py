"""
envstruct.keys
--------------

Key composition: deriving lookup keys from field names, nesting them under a
prefix and turning the dotted result into the name the backing store uses.
"""

import re
from typing import Callable

KeyFunc = Callable[[str], str]

KEY_SEPARATOR = "."

# a lowercase letter or digit directly followed by an uppercase letter
_CASE_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


def derive_key(name: str) -> str:
    """
    Build a lookup key from a field name.

    Examples:
        >>> derive_key("TimeOut")
        'TIME_OUT'
        >>> derive_key("time_out")
        'TIME_OUT'
    """
    return _CASE_BOUNDARY.sub(r"\1_\2", name).upper()


def compose_key(prefix: str, key: str) -> str:
    """Nest `key` under `prefix` using dot notation."""
    if prefix:
        return f"{prefix}{KEY_SEPARATOR}{key}"
    return key


def default_key_func(key: str) -> str:
    """
    Turn a dotted key into an environment-style name: ``app.server.port`` -> ``app_server_port``.
    """
    return key.strip().replace(KEY_SEPARATOR, "_")
