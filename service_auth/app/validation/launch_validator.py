"""
Launch payload login and session validation service for Auth service.
"""

from datetime import timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from shared.config import BaseConfig
from shared.errors import AuthenticationError
from shared.logging import get_logger
from shared.metrics import MetricsCollector
from ..initdata import identity, parser, verifier
from ..initdata.models import VerifiedIdentity
from ..session import tokens


class LoginRequest(BaseModel):
    """Request model for login."""
    model_config = ConfigDict(populate_by_name=True)

    init_data: str = Field(alias="initData")


class LoginResponse(BaseModel):
    """Response model for login."""
    token: str


class SubjectResponse(BaseModel):
    """Response model describing the authenticated subject."""
    user_id: int
    username: Optional[str] = None


class LaunchValidator:
    """Verify-then-issue and verify-then-admit."""

    def __init__(self, bot_token: str, jwt_secret: str,
                 session_ttl: timedelta = tokens.DEFAULT_TTL,
                 accept_signature_alias: bool = False,
                 signature_diagnostics: bool = False,
                 metrics: Optional[MetricsCollector] = None):
        self._bot_token = bot_token
        self._jwt_secret = jwt_secret
        self.session_ttl = session_ttl
        self.accept_signature_alias = accept_signature_alias
        self.signature_diagnostics = signature_diagnostics
        self.metrics = metrics
        self.logger = get_logger("auth.validator")

    @classmethod
    def from_config(cls, config: BaseConfig, metrics: Optional[MetricsCollector] = None) -> "LaunchValidator":
        """Build a validator from startup configuration."""
        config.require_secrets()
        return cls(
            bot_token=config.bot_token,
            jwt_secret=config.jwt_secret,
            session_ttl=timedelta(seconds=config.session_ttl_seconds),
            accept_signature_alias=config.accept_signature_alias,
            signature_diagnostics=config.signature_diagnostics,
            metrics=metrics
        )

    def record_outcome(self, flow: str, outcome: str):
        if self.metrics is not None:
            self.metrics.record_auth_attempt(flow, outcome)

    def verify_launch_payload(self, init_data: str) -> VerifiedIdentity:
        """Parse, verify and extract the identity from a raw launch payload."""
        fields = parser.parse(init_data)
        verified = verifier.verify(
            fields,
            self._bot_token,
            accept_signature_alias=self.accept_signature_alias,
            diagnostics=self.signature_diagnostics
        )
        return identity.extract(verified)

    def login(self, init_data: str, now: Optional[float] = None) -> str:
        """Exchange a launch payload for a session token."""
        try:
            subject = self.verify_launch_payload(init_data)
        except AuthenticationError as e:
            self.logger.warning("Launch payload rejected", error_code=e.code)
            self.record_outcome("login", e.code)
            raise

        token = tokens.issue(subject, self._jwt_secret, ttl=self.session_ttl, now=now)

        self.logger.info("Login successful", subject_id=subject.subject)
        self.record_outcome("login", "ok")
        return token

    def authenticate(self, token: str, now: Optional[float] = None) -> VerifiedIdentity:
        """Validate a presented session token."""
        try:
            subject = tokens.validate(token, self._jwt_secret, now=now)
        except AuthenticationError as e:
            self.logger.warning("Session token rejected", error_code=e.code)
            self.record_outcome("session", e.code)
            raise

        self.record_outcome("session", "ok")
        return subject
