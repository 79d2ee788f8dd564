from fastapi import APIRouter, Depends, Response

from subsync.core.config import settings
from subsync.schemas.auth import (
    RegisterIn,
    LoginIn,
    SessionOut,
    PasswordUpdateIn,
    PasswordResetIn,
    PasswordResetConfirmIn,
)
from subsync.integrations.mailer import MockMailer
from subsync.schemas.user import CurrentUser, UserOut, ProfileUpdateIn
from subsync.services.auth_gateway import AuthGateway
from subsync.api.deps import get_gateway, get_current_user, get_data, get_outbound_mailer
from subsync.repositories.access import DataAccess

router = APIRouter(prefix="/auth", tags=["auth"])

def set_session_cookie(response: Response, session: SessionOut) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        session.access_token,
        max_age=session.expires_in,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )

def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(settings.session_cookie_name)

@router.post("/register", response_model=UserOut, status_code=201)
def register(payload: RegisterIn, gateway: AuthGateway = Depends(get_gateway)):
    return gateway.sign_up(payload.email, payload.password, full_name=payload.full_name)

@router.post("/login", response_model=SessionOut)
def login(payload: LoginIn, response: Response, gateway: AuthGateway = Depends(get_gateway)):
    session = gateway.sign_in(payload.email, payload.password)
    # Browser clients ride on the cookie, API clients on the returned token
    set_session_cookie(response, session)
    return session

@router.post("/logout", status_code=204)
def logout(response: Response, gateway: AuthGateway = Depends(get_gateway)):
    try:
        gateway.sign_out()
    finally:
        clear_session_cookie(response)

@router.get("/me", response_model=UserOut)
def me(current_user: CurrentUser = Depends(get_current_user), data: DataAccess = Depends(get_data)):
    return data.users.require(current_user.id)

@router.patch("/me", response_model=UserOut)
def update_profile(payload: ProfileUpdateIn, gateway: AuthGateway = Depends(get_gateway)):
    return gateway.update_profile(**payload.model_dump(exclude_unset=True))

@router.post("/password", status_code=204)
def update_password(payload: PasswordUpdateIn, gateway: AuthGateway = Depends(get_gateway)):
    gateway.update_password(payload.new_password)

# Same answer whether or not the account exists
@router.post("/reset-password", status_code=202)
def reset_password(
    payload: PasswordResetIn,
    gateway: AuthGateway = Depends(get_gateway),
    mailer: MockMailer = Depends(get_outbound_mailer),
) -> dict:
    gateway.reset_password(payload.email, mailer=mailer)
    return {"detail": "If the account exists, a reset link has been sent"}

@router.post("/reset-password/confirm", status_code=204)
def confirm_password_reset(payload: PasswordResetConfirmIn, gateway: AuthGateway = Depends(get_gateway)):
    gateway.confirm_password_reset(payload.token, payload.new_password)
