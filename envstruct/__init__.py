# envstruct/__init__.py
"""
envstruct – Populate dataclasses from environment variables.

Import `Parser`, `parse_struct` and `env_field` from `envstruct.parser`,
`EnvParser` from `envstruct.base` and the errors from `envstruct.exceptions`.

Also available:
    - Value sources (`EnvSource`, `MappingSource`, `FileSource`) in ``envstruct.sources``
    - Single-key helpers (`get`, `get_default`, `Getter`) in ``envstruct.accessors``
    - Sized integer hints (`Int8` ... `UInt64`) in ``envstruct.kinds``
"""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
