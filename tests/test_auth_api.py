"""HTTP tests for POST /api/auth/login and GET /api/auth/me."""

import unittest
from unittest.mock import MagicMock

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from mashebi.api.auth import INTERNAL_ERROR_MESSAGE, get_credential_store
from mashebi.core.config import get_settings
from mashebi.core.database import get_db
from mashebi.core.security import decode_access_token, hash_password
from mashebi.main import app
from mashebi.models import Account, Base
from mashebi.services.credentials import (
    REASON_PRIMITIVE_MISSING,
    CredentialStoreError,
)

LOGIN_URL = "/api/auth/login"


def _client_with_accounts() -> tuple[TestClient, sessionmaker]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    TestingSession = sessionmaker(bind=engine, autoflush=False)
    with TestingSession() as db:
        db.add_all(
            [
                Account(
                    id=7,
                    username="Alice",
                    account_name="Acme",
                    email="a@x.com",
                    password_hash=hash_password("secret123"),
                    is_active=True,
                ),
                Account(
                    id=9,
                    username="Carol",
                    account_name="Acme",
                    email="c@x.com",
                    password_hash=hash_password("secret123"),
                    is_active=False,
                ),
            ]
        )
        db.commit()

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app), TestingSession


class _AppTestCase(unittest.TestCase):
    def tearDown(self) -> None:
        app.dependency_overrides.clear()


class TestLoginSuccess(_AppTestCase):
    """Known active account with the right password gets a token and its stored identity."""

    def setUp(self) -> None:
        self.client, self.Session = _client_with_accounts()

    def test_alice_logs_in_with_lower_case_username(self) -> None:
        resp = self.client.post(LOGIN_URL, json={"username": "alice", "password": "secret123"})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["accountId"], 7)
        self.assertEqual(body["username"], "Alice")
        self.assertEqual(body["accountName"], "Acme")
        self.assertEqual(body["email"], "a@x.com")
        self.assertEqual(set(body), {"token", "accountId", "username", "accountName", "email"})

    def test_token_claims_match_account(self) -> None:
        resp = self.client.post(LOGIN_URL, json={"username": "alice", "password": "secret123"})
        claims = decode_access_token(resp.json()["token"], get_settings())
        self.assertEqual(claims["sub"], "7")
        self.assertEqual(claims["account_name"], "Acme")
        self.assertEqual(claims["unique_name"], "Alice")

    def test_username_is_trimmed(self) -> None:
        resp = self.client.post(LOGIN_URL, json={"username": "  alice  ", "password": "secret123"})
        self.assertEqual(resp.status_code, 200)

    def test_repeated_logins_give_distinct_tokens_and_leave_account_alone(self) -> None:
        with self.Session() as db:
            before = db.execute(select(Account.password_hash, Account.is_active).where(Account.id == 7)).one()
        tokens = set()
        for _ in range(3):
            resp = self.client.post(LOGIN_URL, json={"username": "alice", "password": "secret123"})
            self.assertEqual(resp.status_code, 200)
            tokens.add(resp.json()["token"])
        self.assertEqual(len(tokens), 3)
        with self.Session() as db:
            after = db.execute(select(Account.password_hash, Account.is_active).where(Account.id == 7)).one()
        self.assertEqual(tuple(before), tuple(after))

    def test_me_with_token(self) -> None:
        token = self.client.post(
            LOGIN_URL, json={"username": "alice", "password": "secret123"}
        ).json()["token"]
        resp = self.client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.json(), {"accountId": 7, "username": "Alice", "accountName": "Acme"}
        )


class TestLoginFailure(_AppTestCase):
    """Unknown user, wrong password and inactive account all produce the same 401."""

    def setUp(self) -> None:
        self.client, _ = _client_with_accounts()

    def _attempt(self, username: str, password: str):
        return self.client.post(LOGIN_URL, json={"username": username, "password": password})

    def test_wrong_password(self) -> None:
        resp = self._attempt("alice", "wrong")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.content, b"")

    def test_failures_are_indistinguishable(self) -> None:
        responses = [
            self._attempt("nobody", "secret123"),
            self._attempt("carol", "secret123"),
            self._attempt("alice", "wrong"),
        ]
        for resp in responses:
            self.assertEqual(resp.status_code, 401)
            self.assertEqual(resp.content, b"")
            self.assertEqual(resp.headers.get("www-authenticate"), "Bearer")
        self.assertEqual(len({r.headers.get("content-type") for r in responses}), 1)


class TestLoginValidation(_AppTestCase):
    """Empty or whitespace-only credentials are rejected with 400 before touching the store."""

    def setUp(self) -> None:
        self.store = MagicMock()
        app.dependency_overrides[get_credential_store] = lambda: self.store
        self.client = TestClient(app)

    def test_empty_credentials(self) -> None:
        cases = [
            {"username": "", "password": ""},
            {"username": "   ", "password": "secret123"},
            {"username": "alice", "password": "   "},
            {"username": "alice"},
            {"password": "secret123"},
            {},
        ]
        for body in cases:
            with self.subTest(body=body):
                resp = self.client.post(LOGIN_URL, json=body)
                self.assertEqual(resp.status_code, 400)
                self.assertEqual(set(resp.json()), {"message"})
        self.store.verify.assert_not_called()

    def test_overlong_username(self) -> None:
        resp = self.client.post(LOGIN_URL, json={"username": "a" * 256, "password": "secret123"})
        self.assertEqual(resp.status_code, 400)
        self.store.verify.assert_not_called()

    def test_raw_password_passed_to_store(self) -> None:
        self.store.verify.return_value = None
        resp = self.client.post(LOGIN_URL, json={"username": " alice ", "password": " secret123 "})
        self.assertEqual(resp.status_code, 401)
        self.store.verify.assert_called_once_with("alice", " secret123 ")

    def test_nul_character_rejected_before_store(self) -> None:
        for body in (
            {"username": "al\u0000ice", "password": "secret123"},
            {"username": "alice", "password": "secret\u0000123"},
        ):
            with self.subTest(body=body):
                resp = self.client.post(LOGIN_URL, json=body)
                self.assertEqual(resp.status_code, 400)
                self.assertEqual(set(resp.json()), {"message"})
        self.store.verify.assert_not_called()

    def test_non_string_field_is_422(self) -> None:
        resp = self.client.post(LOGIN_URL, json={"username": ["alice"], "password": "x"})
        self.assertEqual(resp.status_code, 422)


class TestLoginInfrastructureFault(_AppTestCase):
    """Store failures become a generic 500; the detail only goes to the log."""

    def setUp(self) -> None:
        self.store = MagicMock()
        self.store.verify.side_effect = CredentialStoreError(
            "Password verification function crypt() is not available",
            REASON_PRIMITIVE_MISSING,
        )
        app.dependency_overrides[get_credential_store] = lambda: self.store
        self.client = TestClient(app)

    def test_generic_message_and_logged_reason(self) -> None:
        with self.assertLogs("mashebi.api.auth", level="ERROR") as logs:
            resp = self.client.post(LOGIN_URL, json={"username": "alice", "password": "secret123"})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"message": INTERNAL_ERROR_MESSAGE})
        self.assertNotIn("crypt", resp.text)
        self.assertEqual(logs.records[0].reason, REASON_PRIMITIVE_MISSING)

    def test_process_keeps_serving(self) -> None:
        self.client.post(LOGIN_URL, json={"username": "alice", "password": "secret123"})
        self.store.verify.side_effect = None
        self.store.verify.return_value = None
        resp = self.client.post(LOGIN_URL, json={"username": "alice", "password": "secret123"})
        self.assertEqual(resp.status_code, 401)


class TestLoginUnexpectedError(_AppTestCase):
    """Errors outside the store's own taxonomy still produce the generic JSON 500."""

    def setUp(self) -> None:
        self.store = MagicMock()
        self.store.verify.side_effect = ValueError(
            "A string literal cannot contain NUL (0x00) characters."
        )
        app.dependency_overrides[get_credential_store] = lambda: self.store
        self.client = TestClient(app, raise_server_exceptions=False)

    def test_generic_json_body_and_logged_traceback(self) -> None:
        with self.assertLogs("mashebi.api.auth", level="ERROR") as logs:
            resp = self.client.post(LOGIN_URL, json={"username": "alice", "password": "secret123"})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.headers["content-type"], "application/json")
        self.assertEqual(resp.json(), {"message": INTERNAL_ERROR_MESSAGE})
        self.assertNotIn("NUL", resp.text)
        self.assertIsNotNone(logs.records[0].exc_info)


class TestCurrentAccount(_AppTestCase):
    """GET /api/auth/me requires a valid bearer token."""

    def setUp(self) -> None:
        self.client = TestClient(app)

    def test_missing_token(self) -> None:
        resp = self.client.get("/api/auth/me")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.headers.get("www-authenticate"), "Bearer")

    def test_garbage_token(self) -> None:
        resp = self.client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.jwt"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["detail"], "Invalid or expired token")


if __name__ == "__main__":
    unittest.main()
