"""
envstruct.parser
----------------

Struct walker. Populates dataclasses from a value source.

For every public field the walker:

1. reads the annotation (``field(metadata={"env": "PORT,default=8080"})``) or
   derives a key from the field name (``time_out`` -> ``TIME_OUT``),
2. nests the key under the current prefix (``APP.SERVER.PORT``),
3. asks the value source for ``key_func(key)`` (``APP_SERVER_PORT``), falling
   back to the annotation's default,
4. converts the string into the field's type and assigns it.

Nested dataclasses are walked with their own key as prefix. Types that
subclass ``EnvParser`` take over their own subtree.

Example::

    @dataclass
    class Server:
        host: str = env_field("HOST,default=127.0.0.1")
        port: int = env_field("PORT,default=8080")
        timeout: timedelta = env_field("TIMEOUT,default=10s")

    @dataclass
    class Settings:
        server: Server = env_field("SERVER", default_factory=Server)
        tags: list[str] = field(default_factory=list)

    settings = parse_struct(Settings, "APP")   # reads APP_SERVER_HOST, APP_TAGS, ...
"""

import dataclasses
import logging
from typing import Any, Optional, get_type_hints

from .base import EnvParser
from .coerce import (
    parse_bool,
    parse_duration,
    parse_float,
    parse_int,
    parse_time,
    parse_uint,
    parse_url,
    split_pairs,
    split_values,
)
from .exceptions import BadFormat, NotAPointer, NotAStruct, ParseFailure
from .keys import KeyFunc, compose_key, default_key_func, derive_key
from .kinds import Kind, Target, resolve_target, zero_instance
from .sources import ValueFunc, default_get_func
from .tags import TAG_NAME, parse_tag

log = logging.getLogger(__name__)

_IMMUTABLE = (str, bytes, int, float, complex, tuple, frozenset)

_SCALAR_PARSERS = {
    Kind.FLOAT: parse_float,
    Kind.BOOL: parse_bool,
    Kind.TIME: parse_time,
    Kind.DURATION: parse_duration,
    Kind.URL: parse_url,
}


def env_field(tag: str, **kwargs: Any) -> Any:
    """
    ``dataclasses.field`` carrying an annotation string.

    Examples:
        >>> port: int = env_field("PORT,default=8080", default=0)
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[TAG_NAME] = tag
    return dataclasses.field(metadata=metadata, **kwargs)


class Parser:
    """
    Populates dataclasses from string values.

    Args:
        key_func: Turns a dotted key into the name handed to the source.
                  Defaults to ``default_key_func`` (``.`` -> ``_``).
        value_func: The value source, ``(key, default) -> str``.
                    Defaults to ``default_get_func`` (process environment).
    """

    def __init__(self, key_func: Optional[KeyFunc] = None, value_func: Optional[ValueFunc] = None):
        self.build_key = key_func or default_key_func
        self.get = value_func or default_get_func

    def parse_struct(self, dest: Any, prefix: str = "") -> Any:
        """
        Populate the dataclass `dest` from the value source.

        Args:
            dest: A dataclass instance, populated in place, or a dataclass
                  class, in which case a fresh instance is allocated.
            prefix: Dotted key every field key is nested under.

        Returns:
            The populated instance.

        Raises:
            NotAPointer: `dest` cannot be modified in place.
            NotAStruct: `dest` is not a dataclass.
            ParseFailure: A value could not be converted. Fields parsed
                          before the failure keep their new values.
        """
        dest = self._dereference(dest)
        hints = get_type_hints(type(dest), include_extras=True)

        for f in dataclasses.fields(dest):
            if f.name.startswith("_"):
                continue

            tag = f.metadata.get(TAG_NAME)
            if tag is None:
                tag = derive_key(f.name)
            directive = parse_tag(tag)
            if directive.skip:
                log.debug("Skipping field '%s' (no key).", f.name)
                continue

            key = compose_key(prefix, directive.key)
            str_value = self.get(self.build_key(key), directive.default)
            target = resolve_target(hints.get(f.name, f.type))

            if str_value == "" and target.kind is not Kind.STRUCT:
                continue

            log.debug("Parsing field '%s' from key '%s' as %s.", f.name, key, target.kind.value)
            value = self.parse_value(target, str_value, prefix, key, getattr(dest, f.name, None))
            setattr(dest, f.name, value)

        return dest

    @staticmethod
    def _dereference(dest: Any) -> Any:
        if isinstance(dest, type):
            if not dataclasses.is_dataclass(dest):
                raise NotAStruct(dest)
            if dest.__dataclass_params__.frozen:
                raise NotAPointer(dest)
            return zero_instance(dest)

        if dest is None or isinstance(dest, _IMMUTABLE):
            raise NotAPointer(dest)
        if not dataclasses.is_dataclass(dest):
            raise NotAStruct(dest)
        if dest.__dataclass_params__.frozen:
            raise NotAPointer(dest)
        return dest

    def parse_value(self, target: Any, value: str, prefix: str = "", key: str = "", current: Any = None) -> Any:
        """
        Convert `value` into the type described by `target`.

        Args:
            target: A resolved ``Target`` or a plain type hint.
            value: The raw string.
            prefix: Dotted prefix of the enclosing structure.
            key: Dotted key of the value; nested structures use it as their prefix.
            current: The value currently held; structures are populated in place
                     and unsupported kinds hand it back untouched.

        Returns:
            The converted value.
        """
        if not isinstance(target, Target):
            target = resolve_target(target)

        kind = target.kind
        if kind in _SCALAR_PARSERS:
            return _SCALAR_PARSERS[kind](value)
        if kind is Kind.TEXT:
            return value
        if kind is Kind.INT:
            return parse_int(value, target.bits)
        if kind is Kind.UINT:
            return parse_uint(value, target.bits)
        if kind is Kind.MAP:
            return self._parse_map(target, value)
        if kind is Kind.SEQUENCE:
            return self._parse_sequence(target, value, key, current)
        if kind is Kind.STRUCT:
            return self._parse_nested(target, key, current)

        # callables and unknown types carry no configuration
        return current

    def _parse_nested(self, target: Target, key: str, current: Any) -> Any:
        instance = current if isinstance(current, target.type) else zero_instance(target.type)

        if isinstance(instance, EnvParser):
            instance.parse_env(key)
            return instance

        return self.parse_struct(instance, key)

    def _parse_map(self, target: Target, value: str) -> dict:
        """Turns ``"key1:val1,key2:val2"`` into a dict of the target's key and value types."""
        result = {}
        for pair in split_pairs(value):
            parts = pair.split(":", 1)
            if len(parts) < 2:
                raise BadFormat(f"{pair!r} is not a key:value pair", value=pair, kind=Kind.MAP.value)

            key_str, val_str = parts[0].strip(), parts[1].strip()
            try:
                k = self.parse_value(target.key, key_str)
            except ParseFailure as e:
                raise BadFormat(
                    f"{key_str!r} can not be parsed as {target.key.kind.value}",
                    value=key_str,
                    kind=target.key.kind.value,
                ) from e
            try:
                v = self.parse_value(target.value, val_str)
            except ParseFailure as e:
                raise BadFormat(
                    f"{val_str!r} can not be parsed as {target.value.kind.value}",
                    value=val_str,
                    kind=target.value.kind.value,
                ) from e
            result[k] = v
        return result

    def _parse_sequence(self, target: Target, value: str, key: str, current: Any) -> list:
        existing = list(current) if isinstance(current, list) else []
        result = []
        for i, item in enumerate(split_values(value)):
            previous = existing[i] if i < len(existing) else None
            # items have no key of their own; the sequence key is their prefix
            result.append(self.parse_value(target.item, item.strip(), key, "", previous))
        return result


def parse_struct(
    dest: Any,
    prefix: str = "",
    key_func: Optional[KeyFunc] = None,
    value_func: Optional[ValueFunc] = None,
) -> Any:
    """Shortcut for ``Parser(key_func, value_func).parse_struct(dest, prefix)``."""
    return Parser(key_func, value_func).parse_struct(dest, prefix)
