"""
Tests for authentication routes.

Tests signup, signin, Google sign-in, session verification and signout
through the HTTP layer, including the session cookie contract.
"""

from datetime import timedelta

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from estateiq.config import SESSION_COOKIE_NAME
from estateiq.models.session import UserSession
from estateiq.models.user import User
from estateiq.utils.dates import utcnow

# Password of the test_user fixture
TEST_PASSWORD = "testpassword123"


SIGNUP_BODY = {
    "firstName": "New",
    "lastName": "Investor",
    "email": "new@example.com",
    "password": "newpassword123",
    "phone": "555-0199",
    "company": "New Co",
}


class TestSignup:
    """Test suite for account creation."""

    def test_signup_creates_user_and_sets_cookie(self, client: TestClient, db_session: Session):
        response = client.post("/signup", json=SIGNUP_BODY)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["user"]["email"] == "new@example.com"
        assert body["user"]["firstName"] == "New"
        assert body["user"]["company"] == "New Co"
        assert "passwordHash" not in body["user"]
        assert SESSION_COOKIE_NAME in response.cookies

        user = db_session.query(User).filter(User.email == "new@example.com").first()
        assert user is not None

    def test_signup_cookie_attributes(self, client: TestClient):
        response = client.post("/signup", json=SIGNUP_BODY)

        cookie_header = response.headers["set-cookie"].lower()
        assert f"{SESSION_COOKIE_NAME}=" in cookie_header
        assert "httponly" in cookie_header
        assert "samesite=lax" in cookie_header
        assert "max-age=604800" in cookie_header
        assert "path=/" in cookie_header
        # Not production, so not Secure
        assert "secure" not in cookie_header

    def test_signup_duplicate_email(self, client: TestClient, test_user: User):
        response = client.post("/signup", json={**SIGNUP_BODY, "email": test_user.email})
        assert response.status_code == 400
        assert "error" in response.json()

    def test_signup_invalid_email(self, client: TestClient, db_session: Session):
        response = client.post("/signup", json={**SIGNUP_BODY, "email": "not-an-email"})
        assert response.status_code == 400
        assert response.json()["error"] == "Please enter a valid email address"
        assert db_session.query(User).count() == 0

    def test_signup_short_password(self, client: TestClient):
        response = client.post("/signup", json={**SIGNUP_BODY, "password": "short"})
        assert response.status_code == 400

    def test_signup_missing_fields(self, client: TestClient):
        response = client.post("/signup", json={"email": "x@example.com"})
        assert response.status_code == 400

    def test_signup_non_json_body(self, client: TestClient):
        response = client.post("/signup", content="not json", headers={"content-type": "application/json"})
        assert response.status_code == 400
        assert "error" in response.json()

    def test_signup_api_prefix(self, client: TestClient):
        response = client.post("/api/auth/signup", json=SIGNUP_BODY)
        assert response.status_code == 201


class TestSignin:
    """Test suite for email/password sign-in."""

    def test_signin_with_valid_credentials(self, client: TestClient, test_user: User):
        response = client.post("/signin", json={"email": test_user.email, "password": TEST_PASSWORD})

        assert response.status_code == 200
        assert response.json()["user"]["id"] == test_user.id
        assert SESSION_COOKIE_NAME in response.cookies

    def test_signin_errors_do_not_reveal_which_part_failed(self, client: TestClient, test_user: User):
        wrong_password = client.post("/signin", json={"email": test_user.email, "password": "wrongpassword"})
        unknown_email = client.post("/signin", json={"email": "nobody@example.com", "password": TEST_PASSWORD})

        assert wrong_password.status_code == unknown_email.status_code == 400
        assert wrong_password.json() == unknown_email.json()
        assert SESSION_COOKIE_NAME not in wrong_password.cookies

    def test_signin_missing_fields(self, client: TestClient):
        response = client.post("/signin", json={"email": "x@example.com"})
        assert response.status_code == 400


class TestGoogleAuth:
    """Test suite for Google sign-in."""

    def test_google_auth_creates_user(self, client: TestClient, db_session: Session, make_google_credential):
        response = client.post("/auth/google", json={"credential": make_google_credential()})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["user"]["email"] == "googler@example.com"
        assert body["user"]["avatarUrl"] == "https://example.com/avatar.png"
        assert SESSION_COOKIE_NAME in response.cookies

        user = db_session.query(User).filter(User.email == "googler@example.com").one()
        assert user.password_hash is None

    def test_google_auth_links_existing_account(
        self, client: TestClient, db_session: Session, test_user: User, make_google_credential
    ):
        credential = make_google_credential(email=test_user.email, sub="linked-sub")
        response = client.post("/auth/google", json={"credential": credential})

        assert response.status_code == 200
        assert response.json()["user"]["id"] == test_user.id
        db_session.refresh(test_user)
        assert test_user.google_id == "linked-sub"

    def test_google_auth_missing_credential(self, client: TestClient):
        response = client.post("/auth/google", json={})
        assert response.status_code == 400
        assert response.json()["error"] == "Google credential is required"

    def test_google_auth_malformed_credential(self, client: TestClient):
        for credential in ["abc", "a.b", "a.!!!.c", "a.bm90IGpzb24.c"]:
            response = client.post("/auth/google", json={"credential": credential})
            assert response.status_code == 400
            assert "error" in response.json()


class TestVerify:
    """Test suite for session verification."""

    def test_verify_without_cookie(self, client: TestClient):
        response = client.get("/auth/verify")
        assert response.status_code == 200
        assert response.json() == {"valid": False, "user": None}

    def test_verify_with_valid_session(self, client: TestClient, test_user_with_auth: User):
        response = client.get("/auth/verify")
        assert response.status_code == 200
        body = response.json()
        assert body["valid"] is True
        assert body["user"]["email"] == test_user_with_auth.email

    def test_verify_with_unknown_token(self, client: TestClient):
        client.cookies.set(SESSION_COOKIE_NAME, "bogus-token")
        response = client.get("/auth/verify")
        assert response.status_code == 200
        assert response.json() == {"valid": False, "user": None}

    def test_verify_with_expired_session(self, client: TestClient, db_session: Session, test_user_with_auth: User):
        session = db_session.query(UserSession).filter(UserSession.user_id == test_user_with_auth.id).one()
        session.expires_at = utcnow() - timedelta(seconds=1)
        db_session.commit()

        response = client.get("/auth/verify")
        assert response.status_code == 200
        assert response.json()["valid"] is False

    def test_signup_then_verify(self, client: TestClient):
        client.post("/signup", json=SIGNUP_BODY)
        response = client.get("/auth/verify")
        assert response.json()["valid"] is True
        assert response.json()["user"]["email"] == SIGNUP_BODY["email"]


class TestSignout:
    """Test suite for signing out."""

    def test_signout_invalidates_session(self, client: TestClient, db_session: Session, test_user_with_auth: User):
        token = client.cookies.get(SESSION_COOKIE_NAME)
        response = client.post("/signout")

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert db_session.query(UserSession).filter(UserSession.token == token).first() is None

        client.cookies.set(SESSION_COOKIE_NAME, token)
        assert client.get("/auth/verify").json()["valid"] is False

    def test_signout_without_session(self, client: TestClient):
        response = client.post("/signout")
        assert response.status_code == 200
