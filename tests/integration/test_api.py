from datetime import date

from fastapi.testclient import TestClient

from subsync.core.config import settings
from subsync.utils.dt import today

from conftest import make_discount, make_plan, make_subscription, make_user


class TestSubscriptionApi:
    def test_subscribe_and_manage(self, client: TestClient, db, auth_headers: dict, monkeypatch):
        monkeypatch.setattr(settings, "payment_mock_outcome", "approved")
        plan = make_plan(db, price=40.0)
        make_discount(db, code="FIBER20", percentage=20, valid_from=date(2024, 1, 1), valid_until=date(2099, 1, 1))

        response = client.post(
            "/subscriptions", json={"plan_id": plan.id, "discount_code": "fiber20"}, headers=auth_headers
        )
        assert response.status_code == 201
        body = response.json()
        sub_id = body["subscription"]["id"]
        assert body["subscription"]["status"] == "active"
        assert body["subscription"]["price"] == 32.0
        assert body["billing_record"]["status"] == "paid"
        assert body["billing_record"]["plan_name"] == "Fibernet Premium"

        response = client.post(f"/subscriptions/{sub_id}/usage", json={"usage_date": "2024-06-01", "usage_gb": 450},
                               headers=auth_headers)
        assert response.status_code == 200

        detail = client.get(f"/subscriptions/{sub_id}", headers=auth_headers).json()
        assert detail["usage_percentage"] == 90
        assert detail["near_limit"] is True

        notes = client.get("/notifications?category=usage", headers=auth_headers).json()
        assert [n["type"] for n in notes] == ["warning"]

        cancelled = client.post(f"/subscriptions/{sub_id}/cancel", headers=auth_headers)
        assert cancelled.json()["status"] == "terminated"
        again = client.post(f"/subscriptions/{sub_id}/cancel", headers=auth_headers)
        assert again.status_code == 200
        assert again.json()["status"] == "terminated"

        history = client.get("/billing/history", headers=auth_headers).json()
        assert [r["status"] for r in history] == ["paid"]
        assert client.get("/billing/summary", headers=auth_headers).json()["total_paid"] == 32.0

    def test_negative_usage(self, client: TestClient, db, auth_headers: dict, test_user):
        sub = make_subscription(db, test_user, make_plan(db), usage_gb=10)
        response = client.post(f"/subscriptions/{sub.id}/usage", json={"usage_date": "2024-06-01", "usage_gb": -5},
                                headers=auth_headers)
        assert response.status_code == 422
        assert client.get(f"/subscriptions/{sub.id}", headers=auth_headers).json()["usage_gb"] == 10

    def test_other_users_subscription(self, client: TestClient, db, auth_headers: dict):
        other = make_user(db, "other@example.com")
        sub = make_subscription(db, other, make_plan(db))
        assert client.post(f"/subscriptions/{sub.id}/cancel", headers=auth_headers).status_code == 403

    def test_validate_discount(self, client: TestClient, db, auth_headers: dict):
        make_discount(db)
        make_discount(db, code="FIBER20", percentage=20, valid_from=date(2024, 1, 1), valid_until=date(2099, 1, 1))

        assert client.post("/discounts/validate", json={"code": "SUMMER50"}, headers=auth_headers).status_code == 404
        response = client.post("/discounts/validate", json={"code": "fiber20"}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["percentage"] == 20

    def test_public_plans(self, client: TestClient, db):
        make_plan(db, name="Expensive", price=99.0)
        make_plan(db, name="Cheap", price=9.0)
        make_plan(db, name="Gone", price=1.0, status="inactive")
        assert [p["name"] for p in client.get("/plans").json()] == ["Cheap", "Expensive"]


class TestAdminApi:
    def test_requires_admin(self, client: TestClient, auth_headers: dict):
        response = client.get("/admin/analytics", headers=auth_headers)
        assert response.status_code == 403
        assert client.get("/admin/analytics").status_code == 401

    def test_plan_and_discount_management(self, client: TestClient, admin_headers: dict):
        response = client.post("/admin/plans", json={
            "name": "Copper Plus", "price": 34.99, "technology": "copper",
            "data_quota": "200GB", "speed": "Up to 100 Mbps",
        }, headers=admin_headers)
        assert response.status_code == 201
        plan_id = response.json()["id"]

        assert client.delete(f"/admin/plans/{plan_id}", headers=admin_headers).json()["status"] == "inactive"
        assert client.get("/plans").json() == []

        response = client.post("/admin/discounts", json={
            "code": "summer50", "percentage": 50,
            "valid_from": "2024-06-01", "valid_until": "2024-08-31",
        }, headers=admin_headers)
        assert response.status_code == 201
        assert response.json()["code"] == "SUMMER50"
        assert response.json()["status"] == ("expired" if today() > date(2024, 8, 31) else "active")

        response = client.post("/admin/discounts", json={
            "code": "bad", "percentage": 150, "valid_from": "2024-06-01", "valid_until": "2024-08-31",
        }, headers=admin_headers)
        assert response.status_code == 422

    def test_discount_window_is_checked_on_update(self, client: TestClient, db, admin_headers: dict):
        discount = make_discount(db)
        response = client.patch(f"/admin/discounts/{discount.id}", json={"valid_until": "2024-05-01"},
                                headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "DataError"

        stored = [d for d in client.get("/admin/discounts", headers=admin_headers).json() if d["id"] == discount.id]
        assert stored[0]["valid_until"] == "2024-08-31"

        response = client.post("/admin/discounts", json={
            "code": "backwards", "percentage": 10, "valid_from": "2024-08-01", "valid_until": "2024-07-01",
        }, headers=admin_headers)
        assert response.status_code == 400

    def test_users_roles_and_billing(self, client: TestClient, db, admin_headers: dict, admin_user, test_user):
        sub = make_subscription(db, test_user, make_plan(db))
        emails = {u["email"] for u in client.get("/admin/users", headers=admin_headers).json()}
        assert emails == {admin_user.email, test_user.email}

        rows = client.get("/admin/subscriptions", headers=admin_headers).json()
        assert rows[0]["user_email"] == test_user.email

        response = client.patch(f"/admin/subscriptions/{sub.id}/status", json={"status": "paused"},
                                headers=admin_headers)
        assert response.json()["status"] == "paused"

        response = client.patch(f"/admin/users/{admin_user.id}/role", json={"role": "user"}, headers=admin_headers)
        assert response.status_code == 400
        response = client.patch(f"/admin/users/{test_user.id}/role", json={"role": "admin"}, headers=admin_headers)
        assert response.json()["role"] == "admin"

    def test_billing_status_transition(self, client: TestClient, db, admin_headers: dict, test_user):
        from subsync.repositories.access import DataAccess

        sub = make_subscription(db, test_user, make_plan(db))
        record = DataAccess(db).billing.create(
            user_id=test_user.id, subscription_id=sub.id, amount=49.99, billing_date=date(2024, 6, 1),
            due_date=date(2024, 6, 16), invoice_id="INV-2024-001",
        )
        url = f"/admin/billing/{record.id}/status"
        assert client.patch(url, json={"status": "paid"}, headers=admin_headers).json()["status"] == "paid"
        assert client.patch(url, json={"status": "pending"}, headers=admin_headers).status_code == 409

    def test_analytics_and_inbox(self, client: TestClient, db, admin_headers: dict, auth_headers: dict, test_user):
        make_subscription(db, test_user, make_plan(db))

        body = client.get("/admin/analytics", headers=admin_headers).json()
        assert body["metrics"]["active_subscriptions"] == 1
        assert body["plan_distribution"][0]["subscribers"] == 1

        response = client.post("/admin/recommendations", json={
            "user_id": test_user.id, "title": "Go unlimited", "description": "d", "reason": "r",
            "plan_name": "Fibernet Enterprise", "priority": "high", "category": "usage",
        }, headers=admin_headers)
        assert response.status_code == 201

        recs = client.get("/recommendations", headers=auth_headers).json()
        assert [r["title"] for r in recs] == ["Go unlimited"]
        client.post(f"/recommendations/{recs[0]['id']}/read", headers=auth_headers)
        assert client.get("/recommendations", headers=auth_headers).json() == []


def test_health(client: TestClient):
    assert client.get("/health").json()["status"] == "ok"
