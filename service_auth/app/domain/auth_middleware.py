"""
Authentication middleware for protected routes.
"""

from fastapi import Request

from shared.errors import TokenMalformed
from shared.logging import get_logger, set_user_context
from ..initdata.models import VerifiedIdentity
from ..validation.launch_validator import LaunchValidator


class AuthMiddleware:
    """Admit requests carrying a valid session token."""

    def __init__(self, validator: LaunchValidator):
        self.validator = validator
        self.logger = get_logger("auth.middleware")

    @staticmethod
    def extract_bearer_token(auth_header: str) -> str:
        """Return the token from an ``Authorization: Bearer <token>`` value."""
        scheme, _, token = auth_header.strip().partition(" ")
        token = token.strip()
        if scheme.lower() != "bearer" or not token or " " in token:
            raise TokenMalformed("Invalid authorization header format")
        return token

    async def authenticate_request(self, request: Request) -> VerifiedIdentity:
        """Authenticate a request and attach the identity to its state."""
        auth_header = request.headers.get("Authorization")
        if not auth_header:
            error = TokenMalformed("Authorization header required")
            self.validator.record_outcome("session", error.code)
            raise error

        try:
            token = self.extract_bearer_token(auth_header)
        except TokenMalformed as e:
            self.validator.record_outcome("session", e.code)
            raise

        identity = self.validator.authenticate(token)

        request.state.identity = identity
        request.state.subject_id = identity.subject
        set_user_context(identity.subject)

        self.logger.info("Request authenticated", subject_id=identity.subject)
        return identity


async def require_identity(request: Request) -> VerifiedIdentity:
    """FastAPI dependency for routes that need an authenticated subject."""
    middleware: AuthMiddleware = request.app.state.auth_middleware
    return await middleware.authenticate_request(request)
