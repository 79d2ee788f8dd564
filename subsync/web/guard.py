"""
Route guard: gates a page on authentication and, optionally, on a role.

    checking -> authorized    signed in, role matches (or none required)
    checking -> redirecting   not signed in            -> /auth
                              signed in, wrong role    -> that role's dashboard

Guarded content is only ever built in the authorized state.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable

from subsync.schemas.user import CurrentUser
from subsync.services.auth_gateway import AuthGateway

logger = logging.getLogger(__name__)

LANDING_ROUTE = "/"
AUTH_ROUTE = "/auth"
USER_ROUTE = "/user"
ADMIN_ROUTE = "/admin"

PLACEHOLDER = {"status": "checking", "message": "Checking your session..."}


class GuardState(str, enum.Enum):
    CHECKING = "checking"
    AUTHORIZED = "authorized"
    REDIRECTING = "redirecting"


def dashboard_for(role: str) -> str:
    return ADMIN_ROUTE if role == "admin" else USER_ROUTE


@dataclass
class GuardOutcome:
    state: GuardState
    user: CurrentUser | None = None
    redirect_to: str | None = None
    body: Any = None


class RouteGuard:
    def __init__(self, gateway: AuthGateway, required_role: str | None = None):
        self.gateway = gateway
        self.required_role = required_role
        self.state = GuardState.CHECKING
        self.user: CurrentUser | None = None
        self.redirect_to: str | None = None

    def _redirect(self, target: str) -> None:
        self.state = GuardState.REDIRECTING
        self.user = None
        self.redirect_to = target

    def check(self) -> GuardState:
        self.state = GuardState.CHECKING
        self.user = None
        self.redirect_to = None

        try:
            user = self.gateway.get_current_user()
        except Exception:
            # unknown identity is no identity
            logger.warning("auth check failed, redirecting to %s", AUTH_ROUTE, exc_info=True)
            user = None

        if user is None:
            self._redirect(AUTH_ROUTE)
        elif self.required_role and user.role != self.required_role:
            target = dashboard_for(user.role)
            logger.info("user id=%s (%s) denied %s page, redirecting to %s", user.id, user.role, self.required_role, target)
            self._redirect(target)
        else:
            self.state = GuardState.AUTHORIZED
            self.user = user
        return self.state

    def render(self, content: Callable[[CurrentUser], Any], placeholder: Any = PLACEHOLDER) -> GuardOutcome:
        """
        Run the check and build `content` for the signed-in user only when
        authorized; otherwise return the neutral placeholder untouched.
        """
        if self.check() is GuardState.AUTHORIZED:
            return GuardOutcome(self.state, user=self.user, body=content(self.user))
        return GuardOutcome(self.state, redirect_to=self.redirect_to, body=placeholder)
