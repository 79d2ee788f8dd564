"""
Page routes. Each dashboard page goes through the route guard; a redirect
decision becomes a 303 and the dashboard is never built.
"""

import logging

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import RedirectResponse

from subsync.core.config import settings
from subsync.core.errors import AuthError, DataError
from subsync.repositories.access import DataAccess
from subsync.schemas.plan import PlanOut
from subsync.services.auth_gateway import AuthGateway
from subsync.web.guard import AUTH_ROUTE, RouteGuard, dashboard_for
from subsync.web.shells import SHELLS
from subsync.api.deps import get_data, get_gateway
from subsync.api.auth import clear_session_cookie

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"])

# query parameters handed through to the active view
VIEW_FILTERS = ("filter", "search", "status", "plan_id")


def _view_filters(request: Request) -> dict:
    return {k: request.query_params[k] for k in VIEW_FILTERS if k in request.query_params}


def _redirect(target: str) -> RedirectResponse:
    return RedirectResponse(target, status_code=303)


@router.get("/")
def landing(gateway: AuthGateway = Depends(get_gateway), data: DataAccess = Depends(get_data)):
    user = gateway.get_current_user()
    return {
        "page": "landing",
        "app": settings.app_name,
        "signed_in": user is not None,
        "dashboard": dashboard_for(user.role) if user else None,
        "plans": [PlanOut.model_validate(p).model_dump(mode="json") for p in data.plans.list_active()],
    }


@router.get("/auth")
def auth_page(gateway: AuthGateway = Depends(get_gateway)):
    user = gateway.get_current_user()
    if user is not None:
        return _redirect(dashboard_for(user.role))
    return {
        "page": "auth",
        "modes": ["sign_in", "sign_up"],
        "password_min_length": settings.password_min_length,
    }


def _dashboard_page(role: str, request: Request, gateway: AuthGateway, data: DataAccess):
    section = request.query_params.get("section")
    outcome = RouteGuard(gateway, required_role=role).render(
        lambda user: SHELLS[role](data, user, section=section, **_view_filters(request)).render()
    )
    if outcome.redirect_to:
        return _redirect(outcome.redirect_to)
    return outcome.body


@router.get("/user")
def user_dashboard(request: Request, gateway: AuthGateway = Depends(get_gateway), data: DataAccess = Depends(get_data)):
    return _dashboard_page("user", request, gateway, data)


@router.get("/admin")
def admin_dashboard(request: Request, gateway: AuthGateway = Depends(get_gateway), data: DataAccess = Depends(get_data)):
    return _dashboard_page("admin", request, gateway, data)


@router.post("/{dashboard}/{section}/actions/{action}")
def dashboard_action(
    dashboard: str,
    section: str,
    action: str,
    request: Request,
    params: dict | None = Body(default=None),
    gateway: AuthGateway = Depends(get_gateway),
    data: DataAccess = Depends(get_data),
):
    shell_cls = SHELLS.get(dashboard)
    if shell_cls is None:
        raise DataError(f"Unknown dashboard '{dashboard}'", status_code=404)

    def run(user):
        shell = shell_cls(data, user, section=section, **_view_filters(request))
        if shell.active_section != section:
            raise DataError(f"Unknown section '{section}'", status_code=404)
        shell.view.load()
        shell.view.run(action, params)
        return shell.render()

    outcome = RouteGuard(gateway, required_role=dashboard).render(run)
    if outcome.redirect_to:
        return _redirect(outcome.redirect_to)
    return outcome.body


@router.post("/logout")
def logout(gateway: AuthGateway = Depends(get_gateway)):
    try:
        gateway.sign_out()
    except AuthError as exc:
        # the browser leaves either way
        logger.warning("sign-out failed: %s", exc.message)
    response = _redirect(AUTH_ROUTE)
    clear_session_cookie(response)
    return response
