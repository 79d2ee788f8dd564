"""
Seed the catalogue: broadband plans, a few discount codes and a demo admin.

    python scripts/seed_plans.py

Re-running is safe; existing rows (matched by plan name, discount code and
admin email) are updated in place.
"""

import logging
from datetime import date

from sqlalchemy.orm import Session
from subsync.core.config import settings
from subsync.core.logging_config import configure_logging
from subsync.core.security import hash_password
from subsync.db.session import SessionLocal, init_db
from subsync.models.discount import Discount
from subsync.models.plan import Plan
from subsync.models.user import User

logger = logging.getLogger("seed")

PLANS = [
    # Fibernet
    {"name": "Fibernet Basic", "price": 29.99, "billing_type": "monthly", "technology": "fibernet",
     "data_quota": "100GB", "speed": "Up to 100 Mbps",
     "features": ["100GB Data Quota", "Up to 100 Mbps", "24/7 Support", "Basic Analytics"]},

    {"name": "Fibernet Premium", "price": 49.99, "billing_type": "monthly", "technology": "fibernet",
     "data_quota": "500GB", "speed": "Up to 500 Mbps", "is_popular": True,
     "features": ["500GB Data Quota", "Up to 500 Mbps", "Priority Support", "Advanced Analytics", "Unlimited Streaming"]},

    {"name": "Fibernet Enterprise", "price": 99.99, "billing_type": "monthly", "technology": "fibernet",
     "data_quota": "Unlimited", "speed": "Up to 1 Gbps",
     "features": ["Unlimited Data", "Up to 1 Gbps", "24/7 Phone Support", "Team Collaboration", "API Access", "SLA Guarantee"]},

    # Copper
    {"name": "Copper Standard", "price": 19.99, "billing_type": "monthly", "technology": "copper",
     "data_quota": "50GB", "speed": "Up to 50 Mbps",
     "features": ["50GB Data Quota", "Up to 50 Mbps", "Email Support", "Basic Features"]},

    {"name": "Copper Plus", "price": 34.99, "billing_type": "monthly", "technology": "copper",
     "data_quota": "200GB", "speed": "Up to 100 Mbps",
     "features": ["200GB Data Quota", "Up to 100 Mbps", "Priority Support", "Enhanced Features"]},

    # Yearly
    {"name": "Fibernet Premium Yearly", "price": 499.99, "billing_type": "yearly", "technology": "fibernet",
     "data_quota": "500GB", "speed": "Up to 500 Mbps",
     "features": ["500GB Data Quota", "Up to 500 Mbps", "2 Months Free", "Priority Support", "Advanced Analytics"]},
]

DISCOUNTS = [
    {"code": "FIBER20", "percentage": 20, "description": "20% off any Fibernet plan",
     "valid_from": date(2024, 1, 1), "valid_until": date(2030, 12, 31), "usage_limit": 500},
    {"code": "SUMMER50", "percentage": 50, "description": "Summer promotion",
     "conditions": "First month only", "valid_from": date(2024, 6, 1), "valid_until": date(2024, 8, 31),
     "usage_limit": 100},
    {"code": "COPPER15", "percentage": 15, "description": "15% off Copper plans",
     "valid_from": date(2024, 1, 1), "valid_until": date(2030, 12, 31)},
]

ADMIN_EMAIL = settings.seed_admin_email
ADMIN_PASSWORD = settings.seed_admin_password

def upsert(db: Session, model, key: str, data: dict):
    row = db.query(model).filter(getattr(model, key) == data[key]).first()
    if row:
        for k, v in data.items():
            setattr(row, k, v)
        return row

    row = model(**data)
    db.add(row)
    return row

def seed_admin(db: Session) -> User:
    admin = db.query(User).filter(User.email == ADMIN_EMAIL).first()
    if admin is None:
        admin = User(email=ADMIN_EMAIL, password_hash=hash_password(ADMIN_PASSWORD), full_name="Lumen Admin")
        db.add(admin)
    admin.role = "admin"
    return admin

def main():
    configure_logging()
    init_db()
    db = SessionLocal()
    try:
        seed_admin(db)
        plans = {p["name"]: upsert(db, Plan, "name", p) for p in PLANS}
        db.flush()  # assigns plan ids

        fibernet = [p.id for p in plans.values() if p.technology == "fibernet"]
        copper = [p.id for p in plans.values() if p.technology == "copper"]
        for data in DISCOUNTS:
            applicable = {"FIBER20": fibernet, "COPPER15": copper}.get(data["code"], [])
            upsert(db, Discount, "code", {**data, "applicable_plans": applicable})

        db.commit()
        logger.info("seeded plans: %s", list(plans))
        logger.info("seeded discounts: %s", [d["code"] for d in DISCOUNTS])
        logger.info("admin account: %s", ADMIN_EMAIL)
    finally:
        db.close()

if __name__ == "__main__":
    main()
