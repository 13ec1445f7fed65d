"""
Unit tests for identity extraction.
"""

import json

import pytest

from shared.errors import MalformedIdentity, MissingIdentity, SignatureMismatch
from shared.test_helpers import TEST_BOT_TOKEN, TestUser
from service_auth.app.initdata import identity, verifier
from service_auth.app.initdata.models import FieldSet, VerifiedFieldSet, VerifiedIdentity
from service_auth.app.initdata.parser import parse


def verified(fields):
    return VerifiedFieldSet(fields)


class TestExtract:
    """Test cases for extract()."""

    def test_concrete_scenario(self, factory, alice):
        raw = factory.create_init_data(alice, bot_token="BOTTOKEN")

        result = identity.extract(verifier.verify(parse(raw), "BOTTOKEN"))

        assert result == VerifiedIdentity(subject_id=42, display_name="alice")

    def test_missing_user_after_valid_signature(self, factory):
        raw = factory.create_init_data(user=None)

        fields = verifier.verify(parse(raw), TEST_BOT_TOKEN)
        with pytest.raises(MissingIdentity) as exc_info:
            identity.extract(fields)
        assert exc_info.value.code == "MISSING_IDENTITY"

    def test_zero_hash_never_reaches_extraction(self, factory, alice):
        fields = dict(factory.create_fields(alice), hash="0" * 64)

        with pytest.raises(SignatureMismatch):
            verifier.verify(FieldSet(fields), TEST_BOT_TOKEN)

    def test_requires_verified_fields(self):
        with pytest.raises(TypeError):
            identity.extract(FieldSet({"user": '{"id": 1}'}))

    def test_empty_user_is_missing(self):
        with pytest.raises(MissingIdentity):
            identity.extract(verified({"user": ""}))

    @pytest.mark.parametrize("raw_user", [
        "not json",
        "[1, 2]",
        '"42"',
        "{}",
        '{"id": "42"}',
        '{"id": 4.2}',
        '{"id": true}',
        '{"id": null}',
        '{"id": 9223372036854775808}',
    ])
    def test_malformed_user(self, raw_user):
        with pytest.raises(MalformedIdentity):
            identity.extract(verified({"user": raw_user}))

    def test_int64_bounds_accepted(self):
        result = identity.extract(verified({"user": json.dumps({"id": 2 ** 63 - 1})}))
        assert result.subject_id == 2 ** 63 - 1

    def test_full_name_fallback(self):
        user = TestUser(user_id=7, first_name="Bob", last_name="Stone")
        result = identity.extract(verified({"user": user.to_json()}))

        assert result.subject_id == 7
        assert result.display_name == "Bob Stone"

    def test_first_name_only_is_trimmed(self):
        user = TestUser(user_id=9001, first_name="Carol")
        result = identity.extract(verified({"user": user.to_json()}))

        assert result.display_name == "Carol"

    def test_empty_username_falls_back(self):
        raw_user = json.dumps({"id": 3, "username": "", "last_name": "Doe"})
        result = identity.extract(verified({"user": raw_user}))

        assert result.display_name == "Doe"

    def test_no_names_is_not_an_error(self):
        result = identity.extract(verified({"user": '{"id": 5}'}))

        assert result.subject_id == 5
        assert result.display_name is None

    def test_non_string_names_ignored(self):
        raw_user = json.dumps({"id": 6, "username": 12, "first_name": None})
        result = identity.extract(verified({"user": raw_user}))

        assert result.display_name is None

    def test_subject_is_opaque_string(self):
        result = identity.extract(verified({"user": '{"id": 42}'}))
        assert result.subject == "42"
