from sqlalchemy import select
from sqlalchemy.orm import joinedload

from subsync.core.errors import DataError
from subsync.models.plan import Plan
from subsync.models.subscription import Subscription
from subsync.repositories.base import BaseRepository


class SubscriptionRepository(BaseRepository[Subscription]):
    model = Subscription
    label = "Subscription"

    def list_for_user(self, user_id: int) -> list[Subscription]:
        query = (
            select(Subscription)
            .options(joinedload(Subscription.plan))
            .where(Subscription.user_id == user_id)
            .order_by(Subscription.created_at.desc(), Subscription.id.desc())
        )
        with self.backend("Listing subscriptions"):
            return list(self.db.execute(query).scalars().all())

    def list_all(self) -> list[Subscription]:
        query = (
            select(Subscription)
            .options(joinedload(Subscription.plan), joinedload(Subscription.user))
            .order_by(Subscription.created_at.desc(), Subscription.id.desc())
        )
        with self.backend("Listing subscriptions"):
            return list(self.db.execute(query).scalars().all())

    def set_status(self, id: int, status: str) -> Subscription:
        return self.update(id, status=status)

    def cancel(self, id: int) -> Subscription:
        """Terminate the subscription. Billing records are left untouched."""
        return self.set_status(id, "terminated")

    def renew(self, id: int) -> Subscription:
        return self.set_status(id, "active")

    def change_plan(self, id: int, plan_id: int) -> Subscription:
        """Upgrade/downgrade: move to another active plan at its current price."""
        sub = self.require(id)
        if sub.status == "terminated":
            raise DataError("Terminated subscriptions cannot change plan", status_code=409)
        plan = self.db.get(Plan, plan_id)
        if plan is None or plan.status != "active":
            raise DataError("Plan is not available", status_code=404)
        return self.update(id, plan_id=plan.id, price=plan.price)

    def delete(self, id: int) -> None:
        # Subscriptions are never removed, only terminated
        self.cancel(id)
