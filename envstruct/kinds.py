"""
envstruct.kinds
---------------

Closed set of target kinds and the resolution of type hints into them.

Every field type is resolved once into a ``Target`` and the parser dispatches
on ``Target.kind``. Anything that does not map to a known kind resolves to
``Kind.UNSUPPORTED`` and is left alone by the parser.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import types
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Annotated, Any, Optional, Tuple, Union, get_args, get_origin, get_type_hints
from urllib.parse import ParseResult

from .base import EnvParser


class Kind(Enum):
    TEXT = "text"
    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    BOOL = "bool"
    TIME = "time"
    DURATION = "duration"
    URL = "url"
    MAP = "map"
    SEQUENCE = "sequence"
    STRUCT = "struct"
    FUNC = "func"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class IntBits:
    """
    Width marker for integers, used through ``Annotated[int, IntBits(...)]``.

    Attributes:
        bits: Width of the integer in bits.
        signed: False for unsigned integers.
    """

    bits: int
    signed: bool = True

    @property
    def min(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1


Int8 = Annotated[int, IntBits(8)]
Int16 = Annotated[int, IntBits(16)]
Int32 = Annotated[int, IntBits(32)]
Int64 = Annotated[int, IntBits(64)]
UInt8 = Annotated[int, IntBits(8, signed=False)]
UInt16 = Annotated[int, IntBits(16, signed=False)]
UInt32 = Annotated[int, IntBits(32, signed=False)]
UInt64 = Annotated[int, IntBits(64, signed=False)]
UInt = UInt64


@dataclass(frozen=True)
class Target:
    """
    A resolved field type.

    Attributes:
        kind: What the parser does with the field.
        type: The underlying Python type (``Optional`` and ``Annotated`` stripped).
        args: Resolved type arguments: ``(key, value)`` for maps, ``(item,)`` for sequences.
        bits: Width limits for integer kinds, None when unbounded.
        optional: True when ``None`` is an accepted value.
    """

    kind: Kind
    type: Any
    args: Tuple["Target", ...] = ()
    bits: Optional[IntBits] = None
    optional: bool = False

    @property
    def key(self) -> "Target":
        return self.args[0]

    @property
    def value(self) -> "Target":
        return self.args[1]

    @property
    def item(self) -> "Target":
        return self.args[0]


_NAMED_KINDS = {
    datetime: Kind.TIME,
    timedelta: Kind.DURATION,
    ParseResult: Kind.URL,
}

_SCALAR_KINDS = {
    str: Kind.TEXT,
    bool: Kind.BOOL,
    int: Kind.INT,
    float: Kind.FLOAT,
}

_MAP_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)
_SEQUENCE_ORIGINS = (list, collections.abc.Sequence, collections.abc.MutableSequence)

_ZERO_VALUES = {
    Kind.TEXT: "",
    Kind.INT: 0,
    Kind.UINT: 0,
    Kind.FLOAT: 0.0,
    Kind.BOOL: False,
    Kind.TIME: datetime.min,
    Kind.DURATION: timedelta(0),
}


def resolve_target(hint: Any) -> Target:
    """
    Resolve a type hint into a ``Target``.

    Named types (``datetime``, ``timedelta``, ``ParseResult``) are matched
    by exact type before the structural kinds.
    """
    origin = get_origin(hint)

    if origin is Annotated:
        inner, *extras = get_args(hint)
        target = resolve_target(inner)
        for extra in extras:
            if isinstance(extra, IntBits) and target.kind in (Kind.INT, Kind.UINT):
                kind = Kind.INT if extra.signed else Kind.UINT
                target = dataclasses.replace(target, kind=kind, bits=extra)
        return target

    if origin is Union or origin is types.UnionType:
        args = get_args(hint)
        present = [a for a in args if a is not type(None)]
        if len(present) != 1 or len(present) == len(args):
            return Target(Kind.UNSUPPORTED, hint)
        return dataclasses.replace(resolve_target(present[0]), optional=True)

    if origin is None and isinstance(hint, type):
        if hint in _NAMED_KINDS:
            return Target(_NAMED_KINDS[hint], hint)
        if hint in _SCALAR_KINDS:
            return Target(_SCALAR_KINDS[hint], hint)

    if origin is collections.abc.Callable or hint is collections.abc.Callable:
        return Target(Kind.FUNC, hint)

    if origin in _MAP_ORIGINS or hint in _MAP_ORIGINS:
        key_hint, value_hint = get_args(hint) or (str, str)
        return Target(Kind.MAP, dict, (resolve_target(key_hint), resolve_target(value_hint)))

    if origin in _SEQUENCE_ORIGINS or hint in _SEQUENCE_ORIGINS:
        item_hint, = get_args(hint) or (str,)
        return Target(Kind.SEQUENCE, list, (resolve_target(item_hint),))

    if origin is None and isinstance(hint, type):
        if issubclass(hint, EnvParser) or dataclasses.is_dataclass(hint):
            return Target(Kind.STRUCT, hint)

    return Target(Kind.UNSUPPORTED, hint)


def zero_value(target: Target) -> Any:
    """Return the value a field of `target` holds before anything is assigned."""
    if target.optional:
        return None
    if target.kind in _ZERO_VALUES:
        return _ZERO_VALUES[target.kind]
    if target.kind is Kind.MAP:
        return {}
    if target.kind is Kind.SEQUENCE:
        return []
    if target.kind is Kind.STRUCT:
        return zero_instance(target.type)
    return None


def zero_instance(cls: type) -> Any:
    """
    Instantiate `cls` without configuration.

    Dataclass fields keep their declared defaults; required fields receive
    the zero value of their kind. Other classes are called without arguments.
    """
    if not dataclasses.is_dataclass(cls):
        return cls()

    hints = get_type_hints(cls, include_extras=True)
    kwargs = {}
    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
            kwargs[f.name] = zero_value(resolve_target(hints.get(f.name, f.type)))
    return cls(**kwargs)
