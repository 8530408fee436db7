from datetime import timedelta

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from novelcraft.core.config import settings
from novelcraft.models.user import User
from novelcraft.repositories.users import UserRepository
from novelcraft.services.auth import generate_token, verify_token
from novelcraft.services.passkey import PasskeyCredential, PasskeyService

PASSWORD = "Str0ng!Pass"


class TestAuthenticationFlow:
    """Integration tests for the complete authentication flow."""

    def test_register_login_flow(self, client: TestClient, db: Session):
        """Test complete registration and login flow."""
        register_data = {
            "username": "newuser@example.com",
            "password": PASSWORD,
            "confirmPassword": PASSWORD,
        }

        response = client.post("/api/auth/register", json=register_data)
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["username"] == "newuser@example.com"
        assert body["data"]["auth_method"] == "password"
        assert "password_hash" not in body["data"]

        # Verify user was created in database
        user = db.query(User).filter(User.username == "newuser@example.com").first()
        assert user is not None
        assert user.password_hash != PASSWORD

        response = client.post(
            "/api/auth/login",
            json={"username": "newuser@example.com", "password": PASSWORD},
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["token_type"] == "bearer"
        assert data["expires_in"] == settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
        assert data["user"]["last_login_at"] is None
        assert response.cookies.get(settings.TOKEN_COOKIE_NAME) == data["token"]

        identity = verify_token(data["token"])
        assert identity.user_id == user.id
        assert identity.auth_method == "password"

        response = client.get(
            "/api/auth/me", headers={"Authorization": f"Bearer {data['token']}"}
        )
        assert response.status_code == 200
        assert response.json()["data"]["username"] == "newuser@example.com"

    def test_second_login_reports_previous_login(self, client: TestClient, test_user: User):
        credentials = {"username": test_user.username, "password": PASSWORD}
        client.post("/api/auth/login", json=credentials)

        response = client.post("/api/auth/login", json=credentials)
        assert response.status_code == 200
        assert response.json()["data"]["user"]["last_login_at"] is not None

    def test_register_duplicate_username(self, client: TestClient, test_user: User):
        response = client.post(
            "/api/auth/register",
            json={
                "username": test_user.username,
                "password": PASSWORD,
                "confirm_password": PASSWORD,
            },
        )
        assert response.status_code == 409
        assert response.json()["success"] is False
        assert response.json()["message"] == "Username already exists"

    def test_register_weak_password(self, client: TestClient):
        response = client.post(
            "/api/auth/register",
            json={"username": "a@b.co", "password": "weak", "confirm_password": "weak"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Password must be at least 8 characters long"

    def test_register_password_mismatch(self, client: TestClient):
        response = client.post(
            "/api/auth/register",
            json={"username": "a@b.co", "password": PASSWORD, "confirm_password": PASSWORD + "x"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Passwords do not match"

    def test_register_invalid_email(self, client: TestClient):
        response = client.post(
            "/api/auth/register",
            json={"username": "writer", "password": PASSWORD, "confirm_password": PASSWORD},
        )
        assert response.status_code == 400

    def test_register_missing_field(self, client: TestClient):
        response = client.post("/api/auth/register", json={"username": "a@b.co"})
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_registration_closed_in_production(self, client: TestClient, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")
        response = client.post(
            "/api/auth/register",
            json={"username": "a@b.co", "password": PASSWORD, "confirm_password": PASSWORD},
        )
        assert response.status_code == 403

    def test_login_wrong_password(self, client: TestClient, test_user: User):
        response = client.post(
            "/api/auth/login", json={"username": test_user.username, "password": "Wr0ng!Pass"}
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Incorrect username or password"

    def test_login_unknown_user_looks_like_wrong_password(self, client: TestClient):
        response = client.post(
            "/api/auth/login", json={"username": "ghost@example.com", "password": PASSWORD}
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Incorrect username or password"

    def test_login_rejects_non_email_username(self, client: TestClient):
        response = client.post("/api/auth/login", json={"username": "writer", "password": PASSWORD})
        assert response.status_code == 400

    def test_login_is_rate_limited_after_five_failures(self, client: TestClient, test_user: User):
        bad = {"username": test_user.username, "password": "Wr0ng!Pass"}
        for _ in range(5):
            assert client.post("/api/auth/login", json=bad).status_code == 401

        # Even the right password is refused while blocked
        response = client.post(
            "/api/auth/login", json={"username": test_user.username, "password": PASSWORD}
        )
        assert response.status_code == 429
        assert response.headers["Retry-After"] == "900"
        assert response.json()["success"] is False

    def test_successful_login_resets_the_count(self, client: TestClient, test_user: User):
        bad = {"username": test_user.username, "password": "Wr0ng!Pass"}
        good = {"username": test_user.username, "password": PASSWORD}
        for _ in range(4):
            client.post("/api/auth/login", json=bad)
        assert client.post("/api/auth/login", json=good).status_code == 200

        for _ in range(4):
            client.post("/api/auth/login", json=bad)
        assert client.post("/api/auth/login", json=good).status_code == 200

    def test_demo_login(self, client: TestClient):
        first = client.post("/api/auth/demo")
        assert first.status_code == 200
        data = first.json()["data"]
        assert data["user"]["username"] == settings.DEMO_USERNAME

        second = client.post("/api/auth/demo")
        assert second.json()["data"]["user"]["id"] == data["user"]["id"]

    def test_logout_clears_cookie(self, client: TestClient):
        response = client.post("/api/auth/logout")
        assert response.status_code == 200
        assert f"{settings.TOKEN_COOKIE_NAME}=" in response.headers["set-cookie"]


class TestProtectedRoutes:
    def test_missing_token_redirects_to_login(self, client: TestClient):
        response = client.get("/api/projects", follow_redirects=False)
        assert response.status_code == 307
        assert response.headers["location"] == "/login?redirect=%2Fapi%2Fprojects"

    def test_workbench_requires_login(self, client: TestClient):
        response = client.get("/workbench/1", follow_redirects=False)
        assert response.status_code == 307
        assert response.headers["location"].startswith("/login?redirect=")

    def test_invalid_token_redirects(self, client: TestClient):
        response = client.get(
            "/api/projects",
            headers={"Authorization": "Bearer not-a-token"},
            follow_redirects=False,
        )
        assert response.status_code == 307

    def test_expired_token_redirects(self, client: TestClient, test_user: User):
        token = generate_token(
            test_user.id, test_user.username, "password", expires_delta=timedelta(seconds=-5)
        )
        response = client.get(
            "/api/projects",
            headers={"Authorization": f"Bearer {token}"},
            follow_redirects=False,
        )
        assert response.status_code == 307

    def test_spoofed_identity_headers_are_ignored(self, client: TestClient, test_user: User):
        response = client.get(
            "/api/projects",
            headers={"x-user-id": str(test_user.id), "x-username": test_user.username},
            follow_redirects=False,
        )
        assert response.status_code == 307

    def test_cookie_token(self, client: TestClient, test_user: User):
        token = generate_token(test_user.id, test_user.username, "password")
        client.cookies.set(settings.TOKEN_COOKIE_NAME, token)
        response = client.get("/api/auth/me")
        assert response.status_code == 200
        assert response.json()["data"]["id"] == test_user.id

    def test_query_token(self, client: TestClient, test_user: User):
        token = generate_token(test_user.id, test_user.username, "password")
        response = client.get(f"/api/auth/me?token={token}")
        assert response.status_code == 200

    def test_public_pages(self, client: TestClient):
        assert client.get("/").status_code == 200
        assert client.get("/health").json()["status"] == "healthy"
        assert client.get("/openapi.json").status_code == 200


class TestPasskeyEndpoints:
    def test_status_without_user(self, client: TestClient):
        response = client.get("/api/auth/passkey/status")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["available"] is False
        assert data["devices"]

    def test_status_for_user(self, client: TestClient, test_user: User):
        response = client.get(f"/api/auth/passkey/status?username={test_user.username}")
        assert response.status_code == 200
        assert response.json()["data"]["passkey"]["enabled"] is False

        response = client.get("/api/auth/passkey/status?user_id=999")
        assert response.status_code == 404

    def test_registration_options_require_login(self, client: TestClient, auth_headers):
        response = client.get("/api/auth/passkey/register", follow_redirects=False)
        assert response.status_code == 307

        response = client.get("/api/auth/passkey/register", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["data"]["challenge"]

    def test_registration_verification_is_not_implemented(self, client: TestClient, auth_headers):
        response = client.post(
            "/api/auth/passkey/register",
            json={"credential": {"id": "cred"}, "challenge": "abc"},
            headers=auth_headers,
        )
        assert response.status_code == 501
        assert response.json()["success"] is False

    def test_registration_missing_fields(self, client: TestClient, auth_headers):
        response = client.post(
            "/api/auth/passkey/register", json={"challenge": "abc"}, headers=auth_headers
        )
        assert response.status_code == 400

    def test_authentication_checks(self, client: TestClient, test_user: User):
        assert client.get("/api/auth/passkey/authenticate").status_code == 400
        assert (
            client.get("/api/auth/passkey/authenticate?username=ghost@example.com").status_code
            == 404
        )
        # Password user has no passkey enabled
        assert (
            client.get(f"/api/auth/passkey/authenticate?username={test_user.username}").status_code
            == 400
        )

    def test_authentication_verification_is_not_implemented(
        self, client: TestClient, db: Session, test_user: User
    ):
        PasskeyService.save_credential(
            db, test_user.id, PasskeyCredential(id="cred-1", public_key="pk", algorithm="ES256")
        )
        options = client.get(f"/api/auth/passkey/authenticate?username={test_user.username}")
        assert options.status_code == 200

        response = client.post(
            "/api/auth/passkey/authenticate",
            json={
                "username": test_user.username,
                "credential": {"id": "cred-1"},
                "challenge": options.json()["data"]["challenge"],
            },
        )
        assert response.status_code == 501

    def test_authentication_options_with_unreadable_credential(
        self, client: TestClient, db: Session, test_user: User
    ):
        UserRepository.update_to_passkey_auth(db, test_user.id, "{not json")

        response = client.get(f"/api/auth/passkey/authenticate?username={test_user.username}")
        assert response.status_code == 200
        assert response.json()["data"]["options"]["allowCredentials"] == []
