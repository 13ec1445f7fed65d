"""
Launch payload signature verification.

The issuing platform signs the payload as:

    secret_key = HMAC_SHA256(key="WebAppData", msg=bot_token)
    hash       = hex(HMAC_SHA256(key=secret_key, msg=canonical_string))

where the canonical string is every field except the signature fields,
sorted by key and joined as ``key=value`` lines. The derivation must match
the platform byte for byte, so none of it is configurable.
"""

import hashlib
import hmac
from typing import Optional, Union

from shared.errors import MissingSignature, SignatureMismatch
from shared.logging import get_logger
from .models import FieldSet, VerifiedFieldSet, HASH_FIELD, SIGNATURE_ALIAS_FIELD

# Domain separator agreed with the issuing platform. Not a secret.
WEBAPP_DATA_KEY = b"WebAppData"

logger = get_logger("auth.verifier")


def _as_bytes(value: Union[str, bytes]) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else bytes(value)


def derive_secret_key(bot_token: Union[str, bytes]) -> bytes:
    """Scope the bot token to launch payload verification."""
    return hmac.new(WEBAPP_DATA_KEY, _as_bytes(bot_token), hashlib.sha256).digest()


def compute_signature(canonical_string: str, secret_key: bytes) -> str:
    """Lower-case hex HMAC-SHA256 of the canonical string."""
    return hmac.new(secret_key, canonical_string.encode("utf-8"), hashlib.sha256).hexdigest()


def _supplied_signature(fields: FieldSet, accept_signature_alias: bool) -> Optional[str]:
    supplied = fields.get(HASH_FIELD)
    if not supplied and accept_signature_alias:
        supplied = fields.get(SIGNATURE_ALIAS_FIELD)
    return supplied or None


def verify(fields: FieldSet, bot_token: Union[str, bytes], *,
           accept_signature_alias: bool = False,
           diagnostics: bool = False) -> VerifiedFieldSet:
    """Check the payload signature and return the fields as verified.

    Args:
        fields: Parsed launch payload.
        bot_token: Bot credential the secret key is derived from.
        accept_signature_alias: Also take ``signature`` as the carrier when
            ``hash`` is absent. Off unless explicitly configured.
        diagnostics: Log expected and received hashes on mismatch. Gated by
            startup configuration and refused in production.

    Raises:
        MissingSignature: no non-empty signature field; no HMAC is computed.
        SignatureMismatch: the supplied hash does not match.
    """
    supplied = _supplied_signature(fields, accept_signature_alias)
    if supplied is None:
        raise MissingSignature()

    canonical = fields.canonical_string()
    expected = compute_signature(canonical, derive_secret_key(bot_token))
    received = supplied.lower()

    # Compare bytes: compare_digest rejects non-ASCII str operands
    if not hmac.compare_digest(expected.encode("utf-8"), received.encode("utf-8")):
        if diagnostics:
            logger.debug(
                "signature_mismatch_diagnostics",
                expected_hash=expected,
                received_hash=received,
                canonical_string=canonical
            )
        raise SignatureMismatch()

    return VerifiedFieldSet(fields.fields)
