from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from subsync.api.deps import get_outbound_mailer
from subsync.core.config import settings
from subsync.integrations.mailer import MockMailer
from subsync.main import app
from subsync.models.user import User


class TestAuthenticationFlow:
    """Register, sign in, use the session, sign out."""

    def test_register_login_flow(self, client: TestClient, db: Session):
        response = client.post("/auth/register", json={
            "email": "newuser@example.com",
            "password": "SecurePassword123!",
            "full_name": "New User",
        })
        assert response.status_code == 201
        assert response.json()["role"] == "user"
        assert db.query(User).filter(User.email == "newuser@example.com").one().full_name == "New User"

        response = client.post("/auth/login", json={
            "email": "newuser@example.com",
            "password": "SecurePassword123!",
        })
        assert response.status_code == 200
        token_data = response.json()
        assert token_data["token_type"] == "bearer"
        assert token_data["user"]["email"] == "newuser@example.com"
        assert settings.session_cookie_name in response.cookies

        headers = {"Authorization": f"Bearer {token_data['access_token']}"}
        client.cookies.clear()
        response = client.get("/auth/me", headers=headers)
        assert response.status_code == 200
        assert response.json()["email"] == "newuser@example.com"

        response = client.post("/auth/logout", headers=headers)
        assert response.status_code == 204
        assert client.get("/auth/me", headers=headers).status_code == 401

    def test_register_duplicate_email(self, client: TestClient, test_user):
        response = client.post("/auth/register", json={"email": test_user.email, "password": "whatever1"})
        assert response.status_code == 400
        assert response.json() == {"error": "AuthError", "detail": "Email already registered"}

    def test_register_weak_password(self, client: TestClient):
        response = client.post("/auth/register", json={"email": "weak@example.com", "password": "123"})
        assert response.status_code == 400

    def test_login_wrong_password(self, client: TestClient, test_user):
        response = client.post("/auth/login", json={"email": test_user.email, "password": "nope"})
        assert response.status_code == 401

    def test_me_requires_session(self, client: TestClient):
        assert client.get("/auth/me").status_code == 401
        assert client.get("/auth/me", headers={"Authorization": "Bearer junk"}).status_code == 401

    def test_cookie_session(self, client: TestClient, test_user):
        from conftest import PASSWORD

        client.post("/auth/login", json={"email": test_user.email, "password": PASSWORD})
        assert client.get("/auth/me").status_code == 200

    def test_profile_and_password(self, client: TestClient, auth_headers: dict, test_user):
        response = client.patch("/auth/me", json={"city": "Denver"}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["city"] == "Denver"

        response = client.post("/auth/password", json={"new_password": "another-pass"}, headers=auth_headers)
        assert response.status_code == 204
        response = client.post("/auth/login", json={"email": test_user.email, "password": "another-pass"})
        assert response.status_code == 200

    def test_password_reset_flow(self, client: TestClient, test_user):
        mailer = MockMailer()
        app.dependency_overrides[get_outbound_mailer] = lambda: mailer

        known = client.post("/auth/reset-password", json={"email": test_user.email})
        unknown = client.post("/auth/reset-password", json={"email": "nobody@example.com"})
        assert known.status_code == unknown.status_code == 202
        assert known.json() == unknown.json()
        assert len(mailer.outbox) == 1

        token = mailer.outbox[0]["body"].split("token=", 1)[1].split()[0]
        response = client.post("/auth/reset-password/confirm", json={"token": token, "new_password": "reset-pass-1"})
        assert response.status_code == 204

        response = client.post("/auth/login", json={"email": test_user.email, "password": "reset-pass-1"})
        assert response.status_code == 200

        response = client.post("/auth/reset-password/confirm", json={"token": token, "new_password": "reset-pass-2"})
        assert response.status_code == 400
        assert response.json()["error"] == "AuthError"
