"""
Read-only reporting projections for the admin analytics view.

Rows are aggregated per calendar month ("YYYY-MM") and returned newest first,
capped at the last twelve months that have any activity.
"""

from collections import defaultdict

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from subsync.models.billing_record import BillingRecord
from subsync.models.plan import Plan
from subsync.models.subscription import Subscription
from subsync.models.user import User
from subsync.repositories.base import backend_errors
from subsync.schemas.analytics import KeyMetrics, PlanShare, SubscriptionAnalyticsRow, UserAnalyticsRow
from subsync.utils.dt import month_key

MONTHS = 12


class AnalyticsRepository:
    def __init__(self, db: Session):
        self.db = db

    def _all(self, query) -> list:
        with backend_errors(self.db, "Loading analytics"):
            return list(self.db.execute(query).all())

    def subscription_analytics(self) -> list[SubscriptionAnalyticsRow]:
        rows = self._all(select(Subscription.created_at, Subscription.status, Subscription.price))

        buckets: dict[str, dict] = defaultdict(
            lambda: {"total": 0, "active": 0, "terminated": 0, "revenue": 0.0}
        )
        for created_at, status, price in rows:
            b = buckets[month_key(created_at)]
            b["total"] += 1
            b["revenue"] += price or 0.0
            if status == "active":
                b["active"] += 1
            elif status == "terminated":
                b["terminated"] += 1

        out = []
        for month in sorted(buckets, reverse=True)[:MONTHS]:
            b = buckets[month]
            out.append(
                SubscriptionAnalyticsRow(
                    month=month,
                    total_subscriptions=b["total"],
                    active_subscriptions=b["active"],
                    terminated_subscriptions=b["terminated"],
                    total_revenue=round(b["revenue"], 2),
                    average_price=round(b["revenue"] / b["total"], 2),
                )
            )
        return out

    def user_analytics(self) -> list[UserAnalyticsRow]:
        rows = self._all(select(User.created_at, User.last_login))

        new_users: dict[str, int] = defaultdict(int)
        active_users: dict[str, int] = defaultdict(int)
        for created_at, last_login in rows:
            new_users[month_key(created_at)] += 1
            if last_login is not None:
                active_users[month_key(last_login)] += 1

        months = sorted(set(new_users) | set(active_users), reverse=True)[:MONTHS]
        return [
            UserAnalyticsRow(month=m, new_users=new_users.get(m, 0), active_users=active_users.get(m, 0))
            for m in months
        ]

    def plan_distribution(self) -> list[PlanShare]:
        query = (
            select(Plan.id, Plan.name, func.count(Subscription.id), func.coalesce(func.sum(Subscription.price), 0.0))
            .join(Subscription, Subscription.plan_id == Plan.id)
            .where(Subscription.status == "active")
            .group_by(Plan.id, Plan.name)
        )
        shares = [
            PlanShare(plan_id=plan_id, plan_name=name, subscribers=count, revenue=round(float(revenue), 2))
            for plan_id, name, count, revenue in self._all(query)
        ]
        return sorted(shares, key=lambda s: (-s.subscribers, s.plan_name))

    def key_metrics(self) -> KeyMetrics:
        with backend_errors(self.db, "Loading analytics"):
            total_revenue = self.db.execute(
                select(func.coalesce(func.sum(BillingRecord.amount), 0.0)).where(BillingRecord.status == "paid")
            ).scalar_one()
            counts = dict(
                self.db.execute(
                    select(Subscription.status, func.count(Subscription.id)).group_by(Subscription.status)
                ).all()
            )
            total_users = self.db.execute(select(func.count(User.id))).scalar_one()

        total_subs = sum(counts.values())
        total_revenue = float(total_revenue)
        return KeyMetrics(
            total_revenue=round(total_revenue, 2),
            active_subscriptions=counts.get("active", 0),
            total_users=total_users,
            average_revenue_per_user=round(total_revenue / total_users, 2) if total_users else 0.0,
            churn_rate=round(counts.get("terminated", 0) / total_subs * 100, 1) if total_subs else 0.0,
        )
