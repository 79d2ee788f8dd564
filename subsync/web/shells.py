"""
Dashboard shells: a menu plus whichever feature view the active section
dispatches to. Unknown sections fall back to the default one.
"""

from typing import Any, ClassVar

from subsync.repositories.access import DataAccess
from subsync.schemas.user import CurrentUser
from subsync.web.views.admin import AdminPlansView, AnalyticsView, DiscountsView, UsersView
from subsync.web.views.base import FeatureView, ViewFactory
from subsync.web.views.user import (
    BillingView,
    NotificationsView,
    PlansView,
    RecommendationsView,
    SubscriptionsView,
)


class DashboardShell:
    name: ClassVar[str]
    route: ClassVar[str]
    default_section: ClassVar[str]
    # (section id, label, view factory), in menu order
    sections: ClassVar[list[tuple[str, str, ViewFactory]]]

    def __init__(self, data: DataAccess, user: CurrentUser, section: str | None = None, **filters: Any):
        self.data = data
        self.user = user
        self.dispatch = {sid: factory for sid, _, factory in self.sections}
        self.active_section = section if section in self.dispatch else self.default_section
        self.view: FeatureView = self.dispatch[self.active_section](data, user, **filters)

    def badges(self) -> dict[str, int]:
        return {}

    def menu(self) -> list[dict]:
        badges = self.badges()
        return [
            {
                "id": sid,
                "label": label,
                "href": f"{self.route}?section={sid}",
                "active": sid == self.active_section,
                **({"badge": badges[sid]} if badges.get(sid) else {}),
            }
            for sid, label, _ in self.sections
        ]

    def render(self) -> dict:
        if self.view.snapshot.loading:
            self.view.load()
        return {
            "dashboard": self.name,
            "user": self.user.model_dump(),
            "menu": self.menu(),
            "active_section": self.active_section,
            "view": self.view.render(),
        }


class UserDashboard(DashboardShell):
    name = "user"
    route = "/user"
    default_section = "subscriptions"
    sections = [
        ("subscriptions", "My Subscriptions", SubscriptionsView),
        ("plans", "Browse Plans", PlansView),
        ("billing", "Billing History", BillingView),
        ("recommendations", "Recommendations", RecommendationsView),
        ("notifications", "Notifications", NotificationsView),
    ]

    def badges(self) -> dict[str, int]:
        return {"notifications": self.data.notifications.unread_count(self.user.id)}


class AdminDashboard(DashboardShell):
    name = "admin"
    route = "/admin"
    default_section = "plans"
    sections = [
        ("plans", "Manage Plans", AdminPlansView),
        ("analytics", "Analytics", AnalyticsView),
        ("users", "Users & Subscriptions", UsersView),
        ("discounts", "Discounts", DiscountsView),
    ]


SHELLS: dict[str, type[DashboardShell]] = {
    "user": UserDashboard,
    "admin": AdminDashboard,
}
