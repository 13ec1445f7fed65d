"""
Session token codec.

Tokens are compact JWS (JWT) signed with HS256 under the application
secret, which is unrelated to the bot token. Claims:

    sub       decimal subject id
    username  display name, omitted when unknown
    iat, exp  epoch seconds

The declared algorithm is pinned: a token whose header names anything but
HS256 is rejected before its signature is looked at.
"""

import math
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, Optional, Union

from jose import jwt
from jose.exceptions import JWTClaimsError, JWTError

from shared.errors import (
    ConfigurationError,
    TokenBadSignature,
    TokenExpired,
    TokenMalformed,
    TokenMissingClaims,
)
from shared.logging import get_logger
from ..initdata.models import VerifiedIdentity

ALGORITHM = "HS256"
DEFAULT_TTL = timedelta(hours=24)
MIN_TTL = timedelta(seconds=1)

logger = get_logger("auth.tokens")


@dataclass(frozen=True)
class SessionClaims:
    """Claims carried by a session token."""

    subject_id: int
    display_name: Optional[str]
    issued_at: int
    expires_at: int

    @property
    def identity(self) -> VerifiedIdentity:
        return VerifiedIdentity(subject_id=self.subject_id, display_name=self.display_name)

    def to_jwt(self) -> Dict[str, Any]:
        claims: Dict[str, Any] = {
            "sub": str(self.subject_id),
            "iat": self.issued_at,
            "exp": self.expires_at,
        }
        if self.display_name:
            claims["username"] = self.display_name
        return claims

    @classmethod
    def from_jwt(cls, claims: Dict[str, Any]) -> "SessionClaims":
        sub = claims.get("sub")
        try:
            subject_id = int(sub) if isinstance(sub, str) else None
        except ValueError:
            subject_id = None
        if subject_id is None:
            raise TokenMissingClaims("Session token has no subject")

        expires_at = claims.get("exp")
        if not isinstance(expires_at, int) or isinstance(expires_at, bool):
            raise TokenMissingClaims("Session token has no expiry")

        display_name = claims.get("username")
        issued_at = claims.get("iat", 0)
        if not isinstance(issued_at, int) or isinstance(issued_at, bool):
            raise TokenMissingClaims("Session token issue time is not an integer")
        return cls(
            subject_id=subject_id,
            display_name=display_name if isinstance(display_name, str) and display_name else None,
            issued_at=issued_at,
            expires_at=expires_at,
        )


def _require_secret(app_secret: Union[str, bytes]) -> Union[str, bytes]:
    if not app_secret:
        raise ConfigurationError("Session signing secret is empty")
    return app_secret


def issue(identity: VerifiedIdentity, app_secret: Union[str, bytes],
          ttl: timedelta = DEFAULT_TTL, now: Optional[float] = None) -> str:
    """Mint a session token for a verified identity, valid for ``ttl``."""
    if not isinstance(identity, VerifiedIdentity):
        raise TypeError("issue() requires a VerifiedIdentity")
    if ttl < MIN_TTL:
        raise ValueError("ttl must be at least one second")

    current = time.time() if now is None else now
    issued_at = int(current)
    claims = SessionClaims(
        subject_id=identity.subject_id,
        display_name=identity.display_name,
        issued_at=issued_at,
        expires_at=math.ceil(current + ttl.total_seconds()),
    )
    return jwt.encode(claims.to_jwt(), _require_secret(app_secret), algorithm=ALGORITHM)


def decode(token: str, app_secret: Union[str, bytes], now: Optional[float] = None) -> SessionClaims:
    """Verify a session token and return its claims.

    Raises:
        TokenMalformed: not a parseable JWT.
        TokenBadSignature: wrong algorithm or MAC mismatch.
        TokenExpired: ``now`` is at or past the embedded expiry.
        TokenMissingClaims: signed, but subject or expiry absent or mistyped.
    """
    key = _require_secret(app_secret)
    if not isinstance(token, str) or not token:
        raise TokenMalformed()

    try:
        header = jwt.get_unverified_header(token)
        jwt.get_unverified_claims(token)
    except JWTError as e:
        raise TokenMalformed() from e

    if header.get("alg") != ALGORITHM:
        logger.warning("Session token algorithm rejected", alg=str(header.get("alg")))
        raise TokenBadSignature("Session token algorithm not accepted")

    try:
        # Expiry is checked below against the injectable clock; claim types by SessionClaims
        raw_claims = jwt.decode(
            token,
            key,
            algorithms=[ALGORITHM],
            options={
                "verify_exp": False,
                "verify_aud": False,
                "verify_iat": False,
                "verify_sub": False,
            }
        )
    except JWTClaimsError as e:
        # Raised only once the MAC has checked out
        raise TokenMissingClaims("Session token claims invalid") from e
    except JWTError as e:
        raise TokenBadSignature() from e

    claims = SessionClaims.from_jwt(raw_claims)

    current = time.time() if now is None else now
    if current >= claims.expires_at:
        raise TokenExpired()

    return claims


def validate(token: str, app_secret: Union[str, bytes], now: Optional[float] = None) -> VerifiedIdentity:
    """Validate a presented session token and return the identity it asserts."""
    return decode(token, app_secret, now=now).identity
