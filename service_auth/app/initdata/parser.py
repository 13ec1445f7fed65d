"""
Launch payload parser.
"""

import re
from typing import Dict
from urllib.parse import unquote_plus

from shared.errors import ParseError
from .models import FieldSet

# A '%' not followed by two hex digits
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _decode(component: str) -> str:
    if _BAD_ESCAPE.search(component):
        raise ParseError("Invalid percent-encoding in launch payload")
    try:
        return unquote_plus(component, encoding="utf-8", errors="strict")
    except UnicodeDecodeError as e:
        raise ParseError("Launch payload is not valid UTF-8") from e


def parse(raw: str) -> FieldSet:
    """Decode a ``key=value&key=value`` launch payload into a FieldSet.

    Both keys and values are percent-decoded, ``+`` meaning space. Empty
    segments are skipped and a segment without ``=`` maps to an empty value.

    Raises:
        ParseError: the payload is empty, badly encoded, repeats a key, has
            an empty key, or yields no fields at all.
    """
    if not isinstance(raw, str) or not raw.strip():
        raise ParseError("Launch payload is empty")

    fields: Dict[str, str] = {}
    for segment in raw.split("&"):
        if not segment:
            continue

        raw_key, _, raw_value = segment.partition("=")
        key = _decode(raw_key)
        if not key:
            raise ParseError("Launch payload has an empty field name")
        if key in fields:
            raise ParseError("Launch payload repeats a field", details={"field": key})

        fields[key] = _decode(raw_value)

    if not fields:
        raise ParseError("Launch payload has no fields")

    return FieldSet(fields)
