"""
envstruct.exceptions
--------------------

Custom exceptions for envstruct.
"""


class EnvStructError(Exception):
    """
    Base class for every error raised by envstruct.
    """


class NotAPointer(EnvStructError, TypeError):
    """
    Raised when the destination cannot be populated in place
    (None, an immutable value or a frozen dataclass instance).
    """

    def __init__(self, dest):
        super().__init__(f"destination of type {type(dest).__name__} is not a mutable reference")
        self.dest = dest


class NotAStruct(EnvStructError, TypeError):
    """
    Raised when the destination is not a dataclass.
    """

    def __init__(self, dest):
        name = dest.__name__ if isinstance(dest, type) else type(dest).__name__
        super().__init__(f"destination is of type {name} and not a dataclass")
        self.dest = dest


class SourceError(EnvStructError):
    """
    Raised when a value source cannot load its backing store.
    """


class ParseFailure(EnvStructError, ValueError):
    """
    Raised when a resolved string cannot be turned into the target value.
    """


class BadFormat(ParseFailure):
    """
    Raised when a string does not match the syntax of its target kind.
    """

    def __init__(self, message, value=None, kind=None):
        super().__init__(message)
        self.value = value
        self.kind = kind


class TimeFormatExhausted(BadFormat):
    """
    Raised when no known time layout matches. `errors` holds one failure per layout tried.
    """

    def __init__(self, value, errors):
        super().__init__(
            f"{value!r} does not match any of {len(errors)} time layouts",
            value=value,
            kind="time",
        )
        self.errors = list(errors)
