"""
Identity extraction from a verified launch payload.
"""

import json
from typing import Any, Dict, Optional

from shared.errors import MissingIdentity, MalformedIdentity
from .models import VerifiedFieldSet, VerifiedIdentity, USER_FIELD

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def _text(user: Dict[str, Any], key: str) -> str:
    value = user.get(key)
    return value if isinstance(value, str) else ""


def display_name(user: Dict[str, Any]) -> Optional[str]:
    """Prefer the username, else "first last" trimmed, else nothing."""
    username = _text(user, "username")
    if username:
        return username

    full_name = f"{_text(user, 'first_name')} {_text(user, 'last_name')}".strip()
    return full_name or None


def extract(fields: VerifiedFieldSet) -> VerifiedIdentity:
    """Build the VerifiedIdentity carried in the ``user`` field.

    Raises:
        MissingIdentity: the payload has no ``user`` field.
        MalformedIdentity: ``user`` is not a JSON object with an integer ``id``.
    """
    if not isinstance(fields, VerifiedFieldSet):
        raise TypeError("extract() requires a VerifiedFieldSet")

    raw_user = fields.get(USER_FIELD)
    if not raw_user:
        raise MissingIdentity()

    try:
        user = json.loads(raw_user)
    except ValueError as e:
        raise MalformedIdentity("Launch payload user is not valid JSON") from e

    if not isinstance(user, dict):
        raise MalformedIdentity("Launch payload user is not an object")

    subject_id = user.get("id")
    # bool is an int subclass; JSON true must not pass as an id
    if not isinstance(subject_id, int) or isinstance(subject_id, bool):
        raise MalformedIdentity("Launch payload user has no numeric id")
    if not INT64_MIN <= subject_id <= INT64_MAX:
        raise MalformedIdentity("Launch payload user id out of range")

    return VerifiedIdentity(subject_id=subject_id, display_name=display_name(user))
