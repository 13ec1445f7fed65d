"""
Shared error handling for the WebApp auth service.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: Dict[str, Any] = {}


class WebAppAuthError(Exception):
    """Base exception for the auth service."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class AuthenticationError(WebAppAuthError):
    """Per-request authentication failure.

    The concrete subclass and its code are internal: they are logged and
    counted, while the client only ever sees a generic 401.
    """

    def __init__(self, message: str = "Authentication failed", details: Optional[Dict[str, Any]] = None,
                 code: str = "AUTHENTICATION_ERROR"):
        super().__init__(code, message, details)


class ConfigurationError(WebAppAuthError):
    """Missing or inconsistent configuration. Fatal at startup."""

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)


# Launch payload parsing

class ParseError(AuthenticationError):
    """Launch payload is empty or not a well-formed query string."""

    def __init__(self, message: str = "Malformed launch payload", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, code="PARSE_ERROR")


# Signature verification

class VerificationError(AuthenticationError):
    """Launch payload signature could not be verified."""


class MissingSignature(VerificationError):

    def __init__(self, message: str = "Launch payload has no signature", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, code="MISSING_SIGNATURE")


class SignatureMismatch(VerificationError):

    def __init__(self, message: str = "Launch payload signature mismatch", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, code="SIGNATURE_MISMATCH")


# Identity extraction

class ExtractionError(AuthenticationError):
    """Verified payload does not carry a usable identity."""


class MissingIdentity(ExtractionError):

    def __init__(self, message: str = "Launch payload has no user", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, code="MISSING_IDENTITY")


class MalformedIdentity(ExtractionError):

    def __init__(self, message: str = "Launch payload user is malformed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, code="MALFORMED_IDENTITY")


# Session tokens

class TokenError(AuthenticationError):
    """Presented session token was rejected."""


class TokenMalformed(TokenError):

    def __init__(self, message: str = "Malformed session token", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, code="TOKEN_MALFORMED")


class TokenBadSignature(TokenError):

    def __init__(self, message: str = "Session token signature invalid", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, code="TOKEN_BAD_SIGNATURE")


class TokenExpired(TokenError):

    def __init__(self, message: str = "Session token expired", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, code="TOKEN_EXPIRED")


class TokenMissingClaims(TokenError):

    def __init__(self, message: str = "Session token missing claims", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, code="TOKEN_MISSING_CLAIMS")
