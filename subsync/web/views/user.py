"""Views of the user dashboard. Everything is scoped to the signed-in user."""

from subsync.core.errors import DataError
from subsync.repositories.discounts import normalize_code
from subsync.schemas.billing import billing_record_out
from subsync.schemas.discount import discount_out
from subsync.schemas.inbox import NotificationOut, RecommendationOut
from subsync.schemas.plan import PlanOut
from subsync.schemas.subscription import subscription_detail
from subsync.services.checkout import subscribe
from subsync.web.views.base import FeatureView

NOTIFICATION_FILTERS = ("all", "unread", "subscription", "billing", "usage", "system")


class SubscriptionsView(FeatureView):
    section = "subscriptions"
    title = "My Subscriptions"
    empty_message = "You don't have any subscriptions yet. Browse plans to get started."
    actions = {"cancel": "cancel", "renew": "renew", "change_plan": "change_plan"}

    def fetch(self):
        return [subscription_detail(s) for s in self.data.subscriptions.list_for_user(self.user.id)]

    def summarize(self, items):
        return {
            "active": sum(1 for s in items if s.status == "active"),
            "near_limit": sum(1 for s in items if s.near_limit),
        }

    def _own(self, subscription_id: int):
        sub = self.data.subscriptions.require(subscription_id)
        return self._require_owner(sub, "subscription")

    def cancel(self, subscription_id: int):
        self._own(subscription_id)
        sub = self.data.subscriptions.cancel(subscription_id)
        return self._patched(subscription_detail(sub), "Subscription cancelled.")

    def renew(self, subscription_id: int):
        self._own(subscription_id)
        sub = self.data.subscriptions.renew(subscription_id)
        return self._patched(subscription_detail(sub), "Subscription renewed.")

    def change_plan(self, subscription_id: int, plan_id: int):
        self._own(subscription_id)
        sub = self.data.subscriptions.change_plan(subscription_id, plan_id)
        return self._patched(subscription_detail(sub), f"Switched to {sub.plan.name}.")


class PlansView(FeatureView):
    section = "plans"
    title = "Browse Plans"
    empty_message = "No plans are available right now."
    actions = {"subscribe": "subscribe", "check_discount": "check_discount"}

    def fetch(self):
        return [PlanOut.model_validate(p) for p in self.data.plans.list_active()]

    def check_discount(self, code: str, plan_id: int | None = None):
        discount = self.data.discounts.validate_discount_code(code)
        if discount is None:
            raise DataError(f"Discount code {normalize_code(code)} is not valid")
        if plan_id is not None and not discount.applies_to(plan_id):
            raise DataError(f"Discount code {discount.code} does not apply to this plan")
        info = discount_out(discount)
        return self._replace(notice=f"{info.code}: {info.percentage}% off", summary={"discount": info})

    def subscribe(self, plan_id: int, discount_code: str | None = None, payment_method: str = "card"):
        sub, record = subscribe(
            self.data,
            user_id=self.user.id,
            plan_id=plan_id,
            discount_code=discount_code,
            payment_method=payment_method,
        )
        if record.status == "paid":
            notice = f"Subscribed to {sub.plan.name} for ${record.amount:.2f}."
        elif record.status == "pending":
            notice = f"Subscription to {sub.plan.name} is awaiting payment (invoice {record.invoice_id})."
        else:
            notice = f"Payment for {sub.plan.name} failed (invoice {record.invoice_id})."
        return self._replace(notice=notice)


class BillingView(FeatureView):
    section = "billing"
    title = "Billing History"
    empty_message = "No billing records yet."

    def fetch(self):
        self._records = self.data.billing.list_for_user(self.user.id)
        return [billing_record_out(r) for r in self._records]

    def summarize(self, items):
        return self.data.billing.summary(self._records)


class RecommendationsView(FeatureView):
    section = "recommendations"
    title = "Recommendations"
    empty_message = "No new recommendations. We'll let you know when we find a better fit."
    actions = {"mark_read": "mark_read"}

    def fetch(self):
        return [RecommendationOut.model_validate(r) for r in self.data.recommendations.list_unread_for_user(self.user.id)]

    def mark_read(self, recommendation_id: int):
        rec = self.data.recommendations.require(recommendation_id)
        self._require_owner(rec, "recommendation")
        self.data.recommendations.mark_read(recommendation_id)
        return self._without(recommendation_id)


class NotificationsView(FeatureView):
    """
    filter: "all", "unread" or a notification category.
    """

    section = "notifications"
    title = "Notifications"
    empty_message = "You're all caught up."
    actions = {"mark_read": "mark_read", "mark_all_read": "mark_all_read", "delete": "delete"}

    def __init__(self, data, user, filter: str | None = None, **filters):
        filter = filter or "all"
        if filter not in NOTIFICATION_FILTERS:
            filter = "all"
        super().__init__(data, user, filter=filter, **filters)

    def fetch(self):
        f = self.filters["filter"]
        rows = self.data.notifications.list_for_user(
            self.user.id,
            unread_only=f == "unread",
            category=None if f in ("all", "unread") else f,
        )
        return [NotificationOut.model_validate(n) for n in rows]

    def summarize(self, items):
        return {"unread": sum(1 for n in items if not n.is_read)}

    def _own(self, notification_id: int):
        return self._require_owner(self.data.notifications.require(notification_id), "notification")

    def mark_read(self, notification_id: int):
        self._own(notification_id)
        row = self.data.notifications.mark_read(notification_id)
        if self.filters["filter"] == "unread":
            return self._without(notification_id)
        return self._patched(NotificationOut.model_validate(row))

    def mark_all_read(self):
        self.data.notifications.mark_all_read(self.user.id)
        if self.filters["filter"] == "unread":
            return self._set_items([], "All notifications marked as read.")
        items = [n.model_copy(update={"is_read": True}) for n in self.snapshot.items]
        return self._set_items(items, "All notifications marked as read.")

    def delete(self, notification_id: int):
        self._own(notification_id)
        self.data.notifications.delete(notification_id)
        return self._without(notification_id, "Notification deleted.")
