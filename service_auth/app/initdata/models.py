"""
Typed records flowing through the launch payload pipeline.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Tuple

HASH_FIELD = "hash"
SIGNATURE_ALIAS_FIELD = "signature"
SIGNATURE_FIELDS = frozenset({HASH_FIELD, SIGNATURE_ALIAS_FIELD})
USER_FIELD = "user"


@dataclass(frozen=True)
class FieldSet:
    """Decoded launch payload fields. Keys are unique and case-sensitive."""

    fields: Mapping[str, str]

    def __post_init__(self):
        # Freeze a private copy so callers cannot mutate it after parsing
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def __contains__(self, key: object) -> bool:
        return key in self.fields

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.fields.get(key, default)

    def signed_items(self) -> Tuple[Tuple[str, str], ...]:
        """Fields covered by the signature, sorted by key byte value."""
        items = [(k, v) for k, v in self.fields.items() if k not in SIGNATURE_FIELDS]
        return tuple(sorted(items, key=lambda kv: kv[0].encode("utf-8")))

    def canonical_string(self) -> str:
        """The newline-joined ``key=value`` check string."""
        return "\n".join(f"{k}={v}" for k, v in self.signed_items())


@dataclass(frozen=True)
class VerifiedFieldSet(FieldSet):
    """A FieldSet whose signature has been checked. Only the verifier builds these."""


@dataclass(frozen=True)
class VerifiedIdentity:
    """The authenticated principal."""

    subject_id: int
    display_name: Optional[str] = field(default=None)

    @property
    def subject(self) -> str:
        """Subject id as the opaque string handed to downstream handlers."""
        return str(self.subject_id)
