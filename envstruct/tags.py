"""
envstruct.tags
--------------

Parser for the per-field annotation string.

Grammar::

    "<key>"                  key only, no default
    "<key>,default=<value>"  key with a default
    "<key>,<value>"          same, without the marker
    "-"                      skip the field

Everything after the first comma belongs to the default, so defaults such as
``"a:1,b:2"`` keep their commas.
"""

from typing import NamedTuple

TAG_NAME = "env"
SKIP_MARKER = "-"
DEFAULT_MARKER = "default="


class TagDirective(NamedTuple):
    """Parsed annotation: lookup key and default string."""

    key: str
    default: str

    @property
    def skip(self) -> bool:
        return not self.key


def parse_tag(tag: str) -> TagDirective:
    """
    Split an annotation string into its lookup key and default value.

    Args:
        tag: The raw annotation string (e.g. ``"PORT,default=8080"``).

    Returns:
        A ``TagDirective``. Both parts are empty for ``""`` and ``"-"``.

    Examples:
        >>> parse_tag("MAP,default=a:1,b:2")
        TagDirective(key='MAP', default='a:1,b:2')
        >>> parse_tag("NAME")
        TagDirective(key='NAME', default='')
    """
    tag = tag.strip()
    if tag in ("", SKIP_MARKER):
        return TagDirective("", "")

    parts = tag.split(",")
    key = parts[0].strip()
    if len(parts) < 2:
        return TagDirective(key, "")

    parts[1] = parts[1].replace(DEFAULT_MARKER, "")
    return TagDirective(key, ",".join(parts[1:]))
