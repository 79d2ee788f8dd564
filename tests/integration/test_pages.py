from fastapi.testclient import TestClient

from conftest import make_plan, make_subscription


class TestGuardedPages:
    def test_no_session_redirects_to_auth(self, client: TestClient):
        for path in ("/user", "/admin"):
            response = client.get(path, follow_redirects=False)
            assert response.status_code == 303
            assert response.headers["location"] == "/auth"

    def test_user_on_admin_page(self, client: TestClient, auth_headers: dict):
        response = client.get("/admin?section=analytics", headers=auth_headers, follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/user"

    def test_admin_on_user_page(self, client: TestClient, admin_headers: dict):
        response = client.get("/user", headers=admin_headers, follow_redirects=False)
        assert response.headers["location"] == "/admin"

    def test_user_dashboard(self, client: TestClient, db, auth_headers: dict, test_user):
        make_subscription(db, test_user, make_plan(db), usage_gb=320)

        response = client.get("/user", headers=auth_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["dashboard"] == "user"
        assert body["user"]["email"] == test_user.email
        assert body["active_section"] == "subscriptions"
        item = body["view"]["items"][0]
        assert item["usage_percentage"] == 64
        assert item["near_limit"] is False

    def test_admin_dashboard_sections(self, client: TestClient, admin_headers: dict):
        response = client.get("/admin?section=discounts", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["view"]["section"] == "discounts"

    def test_users_section_with_bad_plan_filter(self, client: TestClient, db, admin_headers: dict, test_user):
        make_subscription(db, test_user, make_plan(db))
        response = client.get("/admin?section=users&plan_id=abc", headers=admin_headers)
        assert response.status_code == 200
        assert len(response.json()["view"]["items"]) == 1

    def test_signed_in_user_skips_auth_page(self, client: TestClient, auth_headers: dict):
        response = client.get("/auth", headers=auth_headers, follow_redirects=False)
        assert response.headers["location"] == "/user"
        assert client.get("/auth").json()["page"] == "auth"

    def test_landing(self, client: TestClient, db):
        make_plan(db)
        body = client.get("/").json()
        assert body["signed_in"] is False
        assert [p["name"] for p in body["plans"]] == ["Fibernet Premium"]


class TestPageActions:
    def test_cancel_from_dashboard(self, client: TestClient, db, auth_headers: dict, test_user):
        sub = make_subscription(db, test_user, make_plan(db))

        response = client.post(
            "/user/subscriptions/actions/cancel", json={"subscription_id": sub.id}, headers=auth_headers
        )
        assert response.status_code == 200
        view = response.json()["view"]
        assert view["notice"] == "Subscription cancelled."
        assert view["items"][0]["status"] == "terminated"

    def test_actions_are_guarded(self, client: TestClient, auth_headers: dict):
        response = client.post(
            "/admin/plans/actions/create", json={"name": "x"}, headers=auth_headers, follow_redirects=False
        )
        assert response.status_code == 303
        assert response.headers["location"] == "/user"

    def test_unknown_section_and_action(self, client: TestClient, auth_headers: dict):
        assert client.post("/user/nope/actions/cancel", json={}, headers=auth_headers).status_code == 404
        assert client.post("/user/billing/actions/explode", json={}, headers=auth_headers).status_code == 404


class TestLogout:
    def test_logout_redirects_and_revokes(self, client: TestClient, auth_headers: dict):
        response = client.post("/logout", headers=auth_headers, follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/auth"
        assert client.get("/user", headers=auth_headers, follow_redirects=False).headers["location"] == "/auth"

    def test_logout_without_session(self, client: TestClient):
        response = client.post("/logout", follow_redirects=False)
        assert response.headers["location"] == "/auth"
