"""Views of the admin dashboard. These read and write across all accounts."""

from subsync.core.errors import DataError
from subsync.models.subscription import SUBSCRIPTION_STATUSES
from subsync.schemas.analytics import AnalyticsOut
from subsync.schemas.discount import DiscountCreate, DiscountUpdate, discount_out
from subsync.schemas.plan import PlanCreate, PlanOut, PlanUpdate
from subsync.schemas.subscription import subscription_detail
from subsync.web.views.base import FeatureView


def _plan_filter(value) -> int | None:
    # "all", blank or anything non-numeric means no plan filter
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class AdminPlansView(FeatureView):
    section = "plans"
    title = "Manage Plans"
    empty_message = "No plans yet. Create the first one."
    actions = {"create": "create", "update": "update", "delete": "delete"}

    def fetch(self):
        return [PlanOut.model_validate(p) for p in self.data.plans.list_all()]

    def create(self, **fields):
        payload = PlanCreate(**fields)
        plan = self.data.plans.create(**payload.model_dump(), created_by=self.user.id)
        return self._prepended(PlanOut.model_validate(plan), f"Plan {plan.name} created.")

    def update(self, plan_id: int, **fields):
        payload = PlanUpdate(**fields)
        plan = self.data.plans.update(plan_id, **payload.model_dump(exclude_unset=True))
        return self._patched(PlanOut.model_validate(plan), f"Plan {plan.name} updated.")

    def delete(self, plan_id: int):
        self.data.plans.delete(plan_id)
        plan = self.data.plans.require(plan_id)
        return self._patched(PlanOut.model_validate(plan), f"Plan {plan.name} deactivated.")


class AnalyticsView(FeatureView):
    section = "analytics"
    title = "Analytics"
    empty_message = "No subscription activity to report yet."

    def fetch(self):
        return self.data.analytics.subscription_analytics()

    def summarize(self, items):
        analytics = self.data.analytics
        return AnalyticsOut(
            metrics=analytics.key_metrics(),
            subscriptions=list(items),
            users=analytics.user_analytics(),
            plan_distribution=analytics.plan_distribution(),
        )


class UsersView(FeatureView):
    """
    All subscriptions with their user and plan.
    Filters: search (name or email), status, plan_id.
    """

    section = "users"
    title = "Users & Subscriptions"
    empty_message = "No subscriptions match the current filters."
    actions = {"update_status": "update_status", "change_role": "change_role"}

    def __init__(self, data, user, search: str | None = None, status: str | None = None, plan_id=None, **filters):
        if status in ("", "all"):
            status = None
        super().__init__(
            data,
            user,
            search=(search or "").strip() or None,
            status=status,
            plan_id=_plan_filter(plan_id),
            **filters,
        )

    def _matches(self, sub) -> bool:
        search = self.filters.get("search")
        if search:
            needle = search.lower()
            if needle not in (sub.user_email or "").lower() and needle not in (sub.user_name or "").lower():
                return False
        if self.filters.get("status") and sub.status != self.filters["status"]:
            return False
        if self.filters.get("plan_id") and sub.plan_id != self.filters["plan_id"]:
            return False
        return True

    def fetch(self):
        rows = [subscription_detail(s, include_user=True) for s in self.data.subscriptions.list_all()]
        return [s for s in rows if self._matches(s)]

    def summarize(self, items):
        counts = {status: 0 for status in SUBSCRIPTION_STATUSES}
        for s in items:
            counts[s.status] += 1
        return {"total": len(items), **counts}

    def update_status(self, subscription_id: int, status: str):
        if status not in SUBSCRIPTION_STATUSES:
            raise DataError(f"Unknown subscription status: {status}")
        sub = self.data.subscriptions.set_status(subscription_id, status)
        detail = subscription_detail(sub, include_user=True)
        if not self._matches(detail):
            return self._without(subscription_id, f"Subscription #{sub.id} is now {status}.")
        return self._patched(detail, f"Subscription #{sub.id} is now {status}.")

    def change_role(self, user_id: int, role: str):
        if user_id == self.user.id:
            raise DataError("You cannot change your own role")
        target = self.data.users.update_role(user_id, role)
        return self._replace(notice=f"{target.email} is now {role}.")


class DiscountsView(FeatureView):
    section = "discounts"
    title = "Discounts"
    empty_message = "No discount codes yet."
    actions = {"create": "create", "update": "update", "delete": "delete"}

    def fetch(self):
        return [discount_out(d) for d in self.data.discounts.list_all()]

    def summarize(self, items):
        return {
            "active": sum(1 for d in items if d.status == "active"),
            "redemptions": sum(d.usage_count for d in items),
        }

    def create(self, **fields):
        payload = DiscountCreate(**fields)
        discount = self.data.discounts.create(**payload.model_dump(), created_by=self.user.id)
        return self._prepended(discount_out(discount), f"Discount {discount.code} created.")

    def update(self, discount_id: int, **fields):
        changes = DiscountUpdate(**fields).model_dump(exclude_unset=True)
        discount = self.data.discounts.update(discount_id, **changes)
        return self._patched(discount_out(discount), f"Discount {discount.code} updated.")

    def delete(self, discount_id: int):
        discount = self.data.discounts.require(discount_id)
        code = discount.code
        self.data.discounts.delete(discount_id)
        return self._without(discount_id, f"Discount {code} deleted.")
