import re
from enum import Enum

from bs4 import Tag

# Attribute names and values used to classify <meta> elements.
ATTR_CHARSET = "charset"
ATTR_NAME = "name"
ATTR_CONTENT = "content"
ATTR_AMP_BOILERPLATE = "amp-boilerplate"

META_NAME_VIEWPORT = "viewport"
META_NAME_AMP_SCRIPT_SRC = "amp-script-src"

_EQUALS_WHITESPACE = re.compile(r"\s*=\s*")


class MetaCategory(str, Enum):
    """
    Closed set of <meta> groupings.
    Declaration order is the order in which groups are written back into <head>.
    """
    CHARSET = "charset"
    VIEWPORT = "viewport"
    AMP_SCRIPT_SRC = "amp_script_src"
    OTHER = "other"


def classify_meta(element: Tag) -> MetaCategory:
    """Maps a <meta> element to its category. Name comparisons are exact."""
    if element.has_attr(ATTR_CHARSET):
        return MetaCategory.CHARSET

    name = element.get(ATTR_NAME)
    if name == META_NAME_VIEWPORT:
        return MetaCategory.VIEWPORT
    if name == META_NAME_AMP_SCRIPT_SRC:
        return MetaCategory.AMP_SCRIPT_SRC
    return MetaCategory.OTHER


def normalize_content_whitespace(value: str) -> str:
    """Strips whitespace around equal signs, e.g. 'width = device-width' -> 'width=device-width'."""
    return _EQUALS_WHITESPACE.sub("=", value)
