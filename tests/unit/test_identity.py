"""Unit tests for password hashing and access tokens."""

import uuid
from datetime import timedelta

from stackit.kernel.identity.jwt import JWTManager
from stackit.kernel.identity.password import (
    PasswordHasher,
    hash_password,
    verify_password,
)


class TestPasswordHasher:
    """Tests for PasswordHasher."""

    def test_hash_creates_different_hashes(self):
        """Same password should create different hashes (due to salt)."""
        hash1 = PasswordHasher.hash("TestPassword123")
        hash2 = PasswordHasher.hash("TestPassword123")

        assert hash1 != hash2
        assert hash1.startswith("$2b$")  # bcrypt prefix

    def test_verify(self):
        hashed = hash_password("TestPassword123")

        assert verify_password("TestPassword123", hashed) is True
        assert verify_password("WrongPassword", hashed) is False


class TestJWTManager:
    """Tests for access token round trips."""

    def test_token_carries_identity(self, jwt_manager: JWTManager):
        user_id = uuid.uuid4()
        token = jwt_manager.create_access_token(user_id, "alice")

        payload = jwt_manager.verify_access_token(token.access_token)

        assert payload.user_id == user_id
        assert payload.username == "alice"
        assert token.expires_in == 30 * 60

    def test_expired_token_rejected(self, jwt_manager: JWTManager):
        token = jwt_manager.create_access_token(
            uuid.uuid4(), "alice", expires_delta=timedelta(seconds=-1)
        )
        assert jwt_manager.verify_access_token(token.access_token) is None

    def test_foreign_signature_rejected(self, jwt_manager: JWTManager):
        other = JWTManager(secret_key="some-other-secret-key-entirely", algorithm="HS256")
        token = other.create_access_token(uuid.uuid4(), "mallory")

        assert jwt_manager.verify_access_token(token.access_token) is None

    def test_garbage_rejected(self, jwt_manager: JWTManager):
        assert jwt_manager.verify_access_token("not-a-jwt") is None
