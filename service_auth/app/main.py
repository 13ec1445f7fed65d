"""
Auth service for the WebApp backend.
"""

from typing import Optional

from fastapi import Depends

from shared.base_service import BaseService
from shared.config import ServiceConfig
from .domain.auth_middleware import AuthMiddleware, require_identity
from .initdata.models import VerifiedIdentity
from .validation.launch_validator import LaunchValidator, LoginRequest, LoginResponse, SubjectResponse


class AuthService(BaseService):
    """Auth service implementation."""

    def __init__(self, config: Optional[ServiceConfig] = None):
        super().__init__("auth", 8010, config=config)
        # Raises ConfigurationError before any route can serve traffic
        self.launch_validator = LaunchValidator.from_config(self.config, metrics=self.metrics)
        self.app.state.auth_middleware = AuthMiddleware(self.launch_validator)

        if self.config.signature_diagnostics:
            self.logger.warning("Signature diagnostics enabled; mismatched hashes will be logged")

        self._setup_auth_routes()

    def _setup_auth_routes(self):
        """Set up auth-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "auth",
                "message": "WebApp Auth Service",
                "version": "1.0.0"
            }

        @self.app.post("/api/auth/login", response_model=LoginResponse)
        async def login(request: LoginRequest):
            """Exchange a launch payload for a session token."""
            token = self.launch_validator.login(request.init_data)
            return LoginResponse(token=token)

        @self.app.get("/api/auth/me", response_model=SubjectResponse)
        async def me(identity: VerifiedIdentity = Depends(require_identity)):
            """Describe the authenticated subject."""
            return SubjectResponse(
                user_id=identity.subject_id,
                username=identity.display_name
            )


def create_app(config: Optional[ServiceConfig] = None):
    """Create FastAPI application."""
    service = AuthService(config=config)
    return service.app


if __name__ == "__main__":
    service = AuthService()
    service.run()
