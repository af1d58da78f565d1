"""Unit tests for mashebi.services.auth: input normalization and outcome mapping."""

import unittest
from unittest.mock import MagicMock

from mashebi.core.config import get_settings
from mashebi.schemas.auth import AccountRecord
from mashebi.services.auth import (
    AuthenticationError,
    LoginValidationError,
    login,
    normalize_credentials,
)
from mashebi.services.credentials import REASON_STORE_UNAVAILABLE, CredentialStoreError

ALICE = AccountRecord(id=7, username="Alice", account_name="Acme", email="a@x.com")


class TestNormalizeCredentials(unittest.TestCase):
    def test_trims_username_keeps_password(self) -> None:
        self.assertEqual(normalize_credentials(" alice ", " pw "), ("alice", " pw "))

    def test_none_values_rejected(self) -> None:
        with self.assertRaises(LoginValidationError):
            normalize_credentials(None, None)

    def test_whitespace_password_rejected(self) -> None:
        with self.assertRaises(LoginValidationError):
            normalize_credentials("alice", "\t \n")

    def test_nul_in_username_rejected(self) -> None:
        with self.assertRaises(LoginValidationError):
            normalize_credentials("al\x00ice", "secret123")

    def test_nul_in_password_rejected(self) -> None:
        with self.assertRaises(LoginValidationError):
            normalize_credentials("alice", "secret\x00123")

    def test_overlong_password_rejected(self) -> None:
        with self.assertRaises(LoginValidationError):
            normalize_credentials("alice", "p" * 1025)


class TestLogin(unittest.TestCase):
    def setUp(self) -> None:
        self.store = MagicMock()
        self.settings = get_settings()

    def test_success_builds_response(self) -> None:
        self.store.verify.return_value = ALICE
        result = login(self.store, "alice", "secret123", self.settings)
        self.assertEqual(result.account_id, 7)
        self.assertEqual(result.username, "Alice")
        self.assertTrue(result.token)
        self.assertEqual(
            result.model_dump(by_alias=True).keys(),
            {"token", "accountId", "username", "accountName", "email"},
        )

    def test_no_match_is_authentication_error(self) -> None:
        self.store.verify.return_value = None
        with self.assertRaises(AuthenticationError):
            login(self.store, "alice", "wrong", self.settings)

    def test_validation_error_skips_store(self) -> None:
        with self.assertRaises(LoginValidationError):
            login(self.store, "", "", self.settings)
        self.store.verify.assert_not_called()

    def test_store_error_propagates(self) -> None:
        self.store.verify.side_effect = CredentialStoreError("down", REASON_STORE_UNAVAILABLE)
        with self.assertRaises(CredentialStoreError):
            login(self.store, "alice", "secret123", self.settings)


if __name__ == "__main__":
    unittest.main()
