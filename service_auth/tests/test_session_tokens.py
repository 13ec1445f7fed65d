"""
Unit tests for the session token codec.
"""

from datetime import timedelta

import pytest
from jose import jwt

from shared.errors import (
    ConfigurationError,
    TokenBadSignature,
    TokenExpired,
    TokenMalformed,
    TokenMissingClaims,
)
from shared.test_helpers import TEST_JWT_SECRET, MockTokenGenerator
from service_auth.app.initdata.models import VerifiedIdentity
from service_auth.app.session import tokens

NOW = 1_700_000_000


class TestSessionTokens:
    """Test cases for issue() and validate()."""

    @pytest.fixture
    def subject(self):
        return VerifiedIdentity(subject_id=42, display_name="alice")

    @pytest.fixture
    def generator(self):
        return MockTokenGenerator(TEST_JWT_SECRET)

    def test_issue_then_validate_round_trip(self, subject):
        token = tokens.issue(subject, TEST_JWT_SECRET)
        assert tokens.validate(token, TEST_JWT_SECRET) == subject

    def test_identity_without_display_name(self):
        subject = VerifiedIdentity(subject_id=5)
        token = tokens.issue(subject, TEST_JWT_SECRET, now=NOW)

        assert "username" not in jwt.get_unverified_claims(token)
        assert tokens.validate(token, TEST_JWT_SECRET, now=NOW) == subject

    def test_claims_layout(self, subject):
        token = tokens.issue(subject, TEST_JWT_SECRET, ttl=timedelta(minutes=5), now=NOW)

        assert jwt.get_unverified_header(token)["alg"] == "HS256"
        claims = jwt.get_unverified_claims(token)
        assert claims == {"sub": "42", "username": "alice", "iat": NOW, "exp": NOW + 300}

    def test_default_ttl_is_24_hours(self, subject):
        token = tokens.issue(subject, TEST_JWT_SECRET, now=NOW)
        claims = tokens.decode(token, TEST_JWT_SECRET, now=NOW)

        assert claims.expires_at - claims.issued_at == 86400

    def test_expired_after_ttl(self, subject):
        token = tokens.issue(subject, TEST_JWT_SECRET, ttl=timedelta(seconds=60), now=NOW)

        assert tokens.validate(token, TEST_JWT_SECRET, now=NOW + 59) == subject
        with pytest.raises(TokenExpired):
            tokens.validate(token, TEST_JWT_SECRET, now=NOW + 61)

    def test_expired_at_exact_expiry(self, subject):
        token = tokens.issue(subject, TEST_JWT_SECRET, ttl=timedelta(seconds=60), now=NOW)

        with pytest.raises(TokenExpired):
            tokens.validate(token, TEST_JWT_SECRET, now=NOW + 60)

    def test_different_secret_is_bad_signature(self, subject):
        token = tokens.issue(subject, TEST_JWT_SECRET)

        with pytest.raises(TokenBadSignature):
            tokens.validate(token, "another-secret")

    def test_tampered_payload_is_bad_signature(self, subject, generator):
        token = tokens.issue(subject, TEST_JWT_SECRET, now=NOW)
        header, _, signature = token.split(".")
        forged_payload = generator.generate({"sub": "1", "exp": NOW + 60}).split(".")[1]

        with pytest.raises(TokenBadSignature):
            tokens.validate(f"{header}.{forged_payload}.{signature}", TEST_JWT_SECRET, now=NOW)

    def test_other_hmac_algorithm_rejected(self, generator):
        token = generator.generate({"sub": "42", "exp": NOW + 60}, algorithm="HS512")

        with pytest.raises(TokenBadSignature):
            tokens.validate(token, TEST_JWT_SECRET, now=NOW)

    def test_alg_none_rejected(self):
        unsigned = "eyJhbGciOiJub25lIiwidHlwIjoiSldUIn0.eyJzdWIiOiI0MiIsImV4cCI6OTk5OTk5OTk5OX0."

        with pytest.raises(TokenBadSignature):
            tokens.validate(unsigned, TEST_JWT_SECRET, now=NOW)

    @pytest.mark.parametrize("token", ["", "garbage", "a.b", "a.b.c", "Bearer x.y.z"])
    def test_malformed(self, token):
        with pytest.raises(TokenMalformed):
            tokens.validate(token, TEST_JWT_SECRET, now=NOW)

    def test_missing_subject(self, generator):
        token = generator.generate({"exp": NOW + 60})

        with pytest.raises(TokenMissingClaims):
            tokens.validate(token, TEST_JWT_SECRET, now=NOW)

    def test_non_numeric_subject(self, generator):
        token = generator.generate({"sub": "alice", "exp": NOW + 60})

        with pytest.raises(TokenMissingClaims):
            tokens.validate(token, TEST_JWT_SECRET, now=NOW)

    def test_integer_subject_is_missing_claims(self, generator):
        token = generator.generate({"sub": 42, "exp": NOW + 60})

        with pytest.raises(TokenMissingClaims):
            tokens.validate(token, TEST_JWT_SECRET, now=NOW)

    def test_non_integer_issued_at_is_missing_claims(self, generator):
        token = generator.generate({"sub": "42", "exp": NOW + 60, "iat": "soon"})

        with pytest.raises(TokenMissingClaims):
            tokens.validate(token, TEST_JWT_SECRET, now=NOW)

    def test_non_integer_expiry_is_missing_claims(self, generator):
        token = generator.generate({"sub": "42", "exp": "later"})

        with pytest.raises(TokenMissingClaims):
            tokens.validate(token, TEST_JWT_SECRET, now=NOW)

    def test_missing_expiry(self, generator):
        token = generator.generate({"sub": "42"})

        with pytest.raises(TokenMissingClaims):
            tokens.validate(token, TEST_JWT_SECRET, now=NOW)

    def test_empty_secret_is_configuration_error(self, subject):
        with pytest.raises(ConfigurationError):
            tokens.issue(subject, "")

        token = tokens.issue(subject, TEST_JWT_SECRET)
        with pytest.raises(ConfigurationError):
            tokens.validate(token, b"")

    def test_bytes_secret(self, subject):
        token = tokens.issue(subject, TEST_JWT_SECRET.encode("utf-8"))
        assert tokens.validate(token, TEST_JWT_SECRET) == subject

    def test_non_positive_ttl_rejected(self, subject):
        with pytest.raises(ValueError):
            tokens.issue(subject, TEST_JWT_SECRET, ttl=timedelta(0))

    def test_sub_second_ttl_rejected(self, subject):
        with pytest.raises(ValueError):
            tokens.issue(subject, TEST_JWT_SECRET, ttl=timedelta(milliseconds=500), now=1000.0)

    def test_fractional_now_keeps_full_lifetime(self, subject):
        token = tokens.issue(subject, TEST_JWT_SECRET, ttl=timedelta(seconds=60), now=1000.9)

        assert tokens.validate(token, TEST_JWT_SECRET, now=1060.5) == subject
        with pytest.raises(TokenExpired):
            tokens.validate(token, TEST_JWT_SECRET, now=1061)

    def test_fractional_ttl_rounds_expiry_up(self, subject):
        token = tokens.issue(subject, TEST_JWT_SECRET, ttl=timedelta(seconds=1.5), now=NOW)

        claims = jwt.get_unverified_claims(token)
        assert claims["iat"] == NOW
        assert claims["exp"] == NOW + 2

    def test_issue_requires_verified_identity(self):
        with pytest.raises(TypeError):
            tokens.issue({"subject_id": 42}, TEST_JWT_SECRET)
