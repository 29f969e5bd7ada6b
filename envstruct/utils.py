"""
envstruct.utils
---------------

Helpers shared by the value sources: path expansion and flattening of nested
mappings into lookup keys.
"""

import os
from typing import Any, Dict, Mapping, Optional


def expand_path(path: Optional[str]) -> Optional[str]:
    """Expand ~ and environment variables in a path string.

    Args:
        path: Path string to expand, or None.

    Returns:
        Expanded path string, or None if input was None.

    Examples:
        >>> expand_path("$HOME/.config/app.toml")
        '/home/user/.config/app.toml'
    """
    if path is None:
        return None
    return os.path.expandvars(os.path.expanduser(str(path)))


def to_string(value: Any) -> str:
    """Render a loaded file value the way it would be written in an environment variable.

    Booleans become ``true``/``false``, ``None`` becomes an empty string and
    lists are joined with commas.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(to_string(v) for v in value)
    return str(value)


def flatten(data: Mapping[str, Any], prefix: str = "") -> Dict[str, str]:
    """Flatten nested mappings into ``{"SERVER_PORT": "8080", ...}``.

    Keys are joined with ``_`` and upper-cased so they line up with the keys
    produced by ``envstruct.keys.default_key_func``.
    """
    items = {}
    for k, v in data.items():
        key = f"{prefix}_{k}" if prefix else str(k)
        if isinstance(v, Mapping):
            items.update(flatten(v, key))
        else:
            items[key.upper()] = to_string(v)
    return items
