"""
envstruct.base
--------------

The self-parsing capability.
"""

from abc import ABC, abstractmethod


class EnvParser(ABC):
    """
    Types that populate their own subtree.

    When a field's type subclasses ``EnvParser`` (or is registered with
    ``EnvParser.register``), the walker stops descending and calls
    ``parse_env`` on the field value instead. ``prefix`` is the dotted key
    of the field (e.g. ``"APP.DB"``); key transformation is up to the
    implementation. Exceptions raised here reach the caller unchanged.
    """

    @abstractmethod
    def parse_env(self, prefix: str) -> None:
        raise NotImplementedError
