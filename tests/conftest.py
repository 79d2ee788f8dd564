import os

# Settings are read at import time; point them at a throwaway database first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["DB_AUTO_CREATE"] = "false"
os.environ.setdefault("JWT_SECRET", "test-secret")

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from subsync.main import app
from subsync.db.base import Base
from subsync.db.session import get_db
from subsync.core.security import hash_password
from subsync.models.discount import Discount
from subsync.models.plan import Plan
from subsync.models.subscription import Subscription
from subsync.models.user import User
from subsync.repositories.access import DataAccess
from subsync.services.auth_gateway import AuthGateway
import subsync.models  # noqa: F401

# In-memory SQLite shared across threads (TestClient runs sync routes in a pool)
engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

PASSWORD = "testpassword"


@pytest.fixture(scope="function")
def db():
    """Fresh schema per test."""
    Base.metadata.create_all(bind=engine)
    db_session = TestingSessionLocal()
    try:
        yield db_session
    finally:
        db_session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session):
    """Create a test client with the test database."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def data(db: Session) -> DataAccess:
    return DataAccess(db)


# ---------------------------
# factories
# ---------------------------

def make_user(db: Session, email: str = "user@example.com", role: str = "user", **fields) -> User:
    user = User(email=email, password_hash=hash_password(PASSWORD), role=role, **fields)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_plan(db: Session, **fields) -> Plan:
    values = {
        "name": "Fibernet Premium",
        "price": 49.99,
        "billing_type": "monthly",
        "technology": "fibernet",
        "data_quota": "500GB",
        "speed": "Up to 500 Mbps",
        "features": ["500GB Data Quota"],
    }
    values.update(fields)
    plan = Plan(**values)
    db.add(plan)
    db.commit()
    db.refresh(plan)
    return plan


def make_subscription(db: Session, user: User, plan: Plan, **fields) -> Subscription:
    values = {
        "status": "active",
        "start_date": date(2024, 6, 1),
        "end_date": date(2024, 7, 1),
        "price": plan.price,
    }
    values.update(fields)
    sub = Subscription(user_id=user.id, plan_id=plan.id, **values)
    db.add(sub)
    db.commit()
    db.refresh(sub)
    return sub


def make_discount(db: Session, **fields) -> Discount:
    values = {
        "code": "SUMMER50",
        "percentage": 50,
        "valid_from": date(2024, 6, 1),
        "valid_until": date(2024, 8, 31),
        "status": "active",
        "usage_limit": 100,
    }
    values.update(fields)
    discount = Discount(**values)
    db.add(discount)
    db.commit()
    db.refresh(discount)
    return discount


@pytest.fixture
def test_user(db: Session) -> User:
    return make_user(db, "user@example.com", full_name="Test User")


@pytest.fixture
def admin_user(db: Session) -> User:
    return make_user(db, "admin@example.com", role="admin", full_name="Admin User")


def login(client: TestClient, email: str) -> dict:
    response = client.post("/auth/login", json={"email": email, "password": PASSWORD})
    assert response.status_code == 200, response.text
    # Keep tests on explicit bearer tokens
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def auth_headers(client: TestClient, test_user: User) -> dict:
    return login(client, test_user.email)


@pytest.fixture
def admin_headers(client: TestClient, admin_user: User) -> dict:
    return login(client, admin_user.email)


@pytest.fixture
def signed_in(db: Session, test_user: User) -> AuthGateway:
    gateway = AuthGateway(db)
    gateway.sign_in(test_user.email, PASSWORD)
    return gateway


@pytest.fixture
def signed_in_admin(db: Session, admin_user: User) -> AuthGateway:
    gateway = AuthGateway(db)
    gateway.sign_in(admin_user.email, PASSWORD)
    return gateway
