"""Unit tests for app.services.auth: register, login and refresh rotation against an in-memory store."""

import unittest
import uuid
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

from app.core.security import decode_access_token, verify_password
from app.models import User
from app.repositories.users import ConcurrentUpdateError
from app.services.auth import (
    AuthService,
    InvalidCredentials,
    InvalidRefreshToken,
    TokenPair,
    UsernameTaken,
)
from fakes import TEST_AUTH_CONFIG, InMemoryUserStore


class AuthServiceTestCase(unittest.TestCase):
    """Service over an in-memory store with a clock the test can move."""

    def setUp(self) -> None:
        self.now = datetime.now(UTC)
        self.store = InMemoryUserStore()
        self.auth = AuthService(self.store, TEST_AUTH_CONFIG, clock=lambda: self.now)

    def _register_alice(self) -> User:
        user = self.auth.register("alice", "pw123", "User", "a@x.com")
        self.assertIsInstance(user, User)
        return user


class TestRegister(AuthServiceTestCase):
    def test_creates_user_with_hashed_password(self) -> None:
        user = self._register_alice()
        self.assertIsInstance(user.id, uuid.UUID)
        self.assertEqual(user.username, "alice")
        self.assertEqual(user.email, "a@x.com")
        self.assertEqual(user.role, "User")
        self.assertNotEqual(user.password_hash, "pw123")
        self.assertTrue(verify_password("pw123", user.password_hash))
        self.assertIsNone(user.refresh_token)
        self.assertIsNone(user.refresh_token_expiry)

    def test_duplicate_username_rejected_without_write(self) -> None:
        self._register_alice()
        result = self.auth.register("alice", "other", "Admin", "b@x.com")
        self.assertEqual(result, UsernameTaken(username="alice"))
        self.assertEqual(result.message, "Username already exists")
        self.assertEqual(len(self.store.users), 1)

    def test_username_comparison_is_case_sensitive(self) -> None:
        self._register_alice()
        self.assertIsInstance(self.auth.register("Alice", "pw", "User", "c@x.com"), User)
        self.assertEqual(len(self.store.users), 2)

    def test_insert_race_reported_as_taken(self) -> None:
        self.store.fail_next_add = True
        result = self.auth.register("alice", "pw123", "User", "a@x.com")
        self.assertIsInstance(result, UsernameTaken)
        self.assertEqual(len(self.store.users), 0)


class TestLogin(AuthServiceTestCase):
    def test_success_returns_pair_with_claims_and_stored_refresh_token(self) -> None:
        user = self._register_alice()
        result = self.auth.login("alice", "pw123")
        self.assertIsInstance(result, TokenPair)
        claims = decode_access_token(result.access_token, TEST_AUTH_CONFIG)
        self.assertEqual(claims["nameid"], str(user.id))
        self.assertEqual(claims["unique_name"], "alice")
        self.assertEqual(claims["role"], "User")
        self.assertEqual(self.store.users[user.id].refresh_token, result.refresh_token)
        self.assertEqual(
            self.store.users[user.id].refresh_token_expiry, self.now + timedelta(minutes=30)
        )

    def test_wrong_password_and_unknown_user_fail_identically(self) -> None:
        self._register_alice()
        wrong_password = self.auth.login("alice", "nope")
        unknown_user = self.auth.login("bob", "pw123")
        self.assertIsInstance(wrong_password, InvalidCredentials)
        self.assertEqual(wrong_password, unknown_user)
        self.assertEqual(wrong_password.message, "Username or password is incorrect")

    def test_unknown_user_still_runs_password_check(self) -> None:
        with patch("app.services.auth.verify_password", return_value=False) as verify:
            self.auth.login("ghost", "pw123")
        verify.assert_called_once()

    def test_failed_login_does_not_touch_refresh_token(self) -> None:
        user = self._register_alice()
        self.auth.login("alice", "nope")
        self.assertIsNone(user.refresh_token)
        self.assertEqual(self.store.save_count, 0)

    def test_second_login_rotates_refresh_token(self) -> None:
        self._register_alice()
        first = self.auth.login("alice", "pw123")
        second = self.auth.login("alice", "pw123")
        self.assertNotEqual(first.refresh_token, second.refresh_token)

    def test_write_conflict_propagates(self) -> None:
        self._register_alice()
        self.store.fail_next_save = True
        with self.assertRaises(ConcurrentUpdateError):
            self.auth.login("alice", "pw123")


class TestRefresh(AuthServiceTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user = self._register_alice()
        self.pair = self.auth.login("alice", "pw123")

    def test_success_rotates_refresh_token(self) -> None:
        result = self.auth.refresh(self.user.id, self.pair.refresh_token)
        self.assertIsInstance(result, TokenPair)
        self.assertNotEqual(result.refresh_token, self.pair.refresh_token)
        self.assertEqual(self.user.refresh_token, result.refresh_token)
        claims = decode_access_token(result.access_token, TEST_AUTH_CONFIG)
        self.assertEqual(claims["nameid"], str(self.user.id))

    def test_used_token_cannot_be_reused(self) -> None:
        self.auth.refresh(self.user.id, self.pair.refresh_token)
        self.assertEqual(
            self.auth.refresh(self.user.id, self.pair.refresh_token), InvalidRefreshToken()
        )

    def test_mismatch_rejected_without_mutation(self) -> None:
        saves = self.store.save_count
        result = self.auth.refresh(self.user.id, "not-the-token")
        self.assertIsInstance(result, InvalidRefreshToken)
        self.assertEqual(self.user.refresh_token, self.pair.refresh_token)
        self.assertEqual(self.store.save_count, saves)

    def test_expired_token_rejected_without_mutation(self) -> None:
        expiry = self.user.refresh_token_expiry
        self.now = self.now + timedelta(minutes=31)
        result = self.auth.refresh(self.user.id, self.pair.refresh_token)
        self.assertIsInstance(result, InvalidRefreshToken)
        self.assertEqual(self.user.refresh_token, self.pair.refresh_token)
        self.assertEqual(self.user.refresh_token_expiry, expiry)

    def test_unknown_user_rejected_before_building_claims(self) -> None:
        with patch("app.services.auth.create_access_token") as create:
            result = self.auth.refresh(uuid.uuid4(), self.pair.refresh_token)
        self.assertIsInstance(result, InvalidRefreshToken)
        create.assert_not_called()

    def test_lost_rotation_race_is_invalid(self) -> None:
        self.store.fail_next_save = True
        result = self.auth.refresh(self.user.id, self.pair.refresh_token)
        self.assertIsInstance(result, InvalidRefreshToken)


if __name__ == "__main__":
    unittest.main()
