"""
envstruct.accessors
-------------------

Single-key helpers built on the same conversions as the struct walker.

Unlike ``Parser.parse_struct``, these never raise on bad input: a missing or
unparsable value yields the zero value of the requested type (``0``, ``""``,
``False``, ``[]``, ``datetime.min`` ...), and ``get_default`` swaps a zero
value for the caller's default.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, List, Optional

from .exceptions import ParseFailure
from .kinds import resolve_target, zero_value
from .parser import Parser
from .sources import ValueFunc, default_get_func

log = logging.getLogger(__name__)


def get(name: str, tp: Any = str, value_func: Optional[ValueFunc] = None) -> Any:
    """
    Read `name` and convert it to `tp`.

    Args:
        name: The key, used as-is.
        tp: Target type hint (``int``, ``list[str]``, ``timedelta`` ...).
        value_func: Value source; the process environment when omitted.

    Returns:
        The converted value, or the zero value of `tp` when the key is
        missing or its value does not parse.
    """
    target = resolve_target(tp)
    value = (value_func or default_get_func)(name, "")
    if value == "":
        return zero_value(target)

    try:
        return Parser(value_func=value_func).parse_value(target, value, "", name)
    except ParseFailure as e:
        log.debug("Value of '%s' does not parse as %s: %s", name, target.kind.value, e)
        return zero_value(target)


def get_default(name: str, default: Any, tp: Any = None, value_func: Optional[ValueFunc] = None) -> Any:
    """
    Like ``get`` but returns `default` whenever the result is the zero value.

    `tp` defaults to ``type(default)``.

    Examples:
        >>> get_default("APP_PORT", 8080)
        8080
    """
    if tp is None:
        tp = type(default)
    value = get(name, tp, value_func)
    if value == zero_value(resolve_target(tp)):
        return default
    return value


def make_key_provider_prefix(prefix: str) -> Callable[[str], str]:
    """Return a function mapping ``"PORT"`` to ``"<prefix>_PORT"`` (identity for an empty prefix)."""

    def key(name: str) -> str:
        if not prefix:
            return name
        return f"{prefix}_{name}"

    return key


class Getter:
    """
    Typed accessors over a key provider.

    Example::

        env = Getter(make_key_provider_prefix("APP"))
        port = env.get_int("PORT", 8080)      # reads APP_PORT
    """

    def __init__(self, key: Optional[Callable[[str], str]] = None, value_func: Optional[ValueFunc] = None):
        self.key = key or make_key_provider_prefix("")
        self.value_func = value_func

    def _get(self, name: str, default: Any, tp: Any) -> Any:
        return get_default(self.key(name), default, tp, self.value_func)

    def get_string(self, name: str, default: str = "") -> str:
        return self._get(name, default, str)

    def get_string_list(self, name: str) -> List[str]:
        return self._get(name, [], List[str])

    def get_int(self, name: str, default: int = 0) -> int:
        return self._get(name, default, int)

    def get_float(self, name: str, default: float = 0.0) -> float:
        return self._get(name, default, float)

    def get_bool(self, name: str) -> bool:
        return self._get(name, False, bool)

    def get_time(self, name: str, default: datetime = datetime.min) -> datetime:
        return self._get(name, default, datetime)

    def get_duration(self, name: str, default: timedelta = timedelta(0)) -> timedelta:
        return self._get(name, default, timedelta)
