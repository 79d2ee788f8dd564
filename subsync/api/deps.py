from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from subsync.core.config import settings
from subsync.core.errors import AuthError
from subsync.db.session import get_db
from subsync.integrations.mailer import MockMailer, get_mailer
from subsync.integrations.payments import MockPaymentGateway, get_payment_gateway
from subsync.repositories.access import DataAccess
from subsync.schemas.user import CurrentUser
from subsync.services.auth_gateway import AuthGateway

bearer_scheme = HTTPBearer(auto_error=False)

def get_gateway(
        request: Request,
        creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
        db: Session = Depends(get_db),
) -> AuthGateway:
    # Bearer header wins over the session cookie
    token = creds.credentials if creds else request.cookies.get(settings.session_cookie_name)
    return AuthGateway(db, access_token=token)

def get_data(db: Session = Depends(get_db)) -> DataAccess:
    return DataAccess(db)

def get_payments() -> MockPaymentGateway:
    return get_payment_gateway()

def get_outbound_mailer() -> MockMailer:
    return get_mailer()

def get_current_user(gateway: AuthGateway = Depends(get_gateway)) -> CurrentUser:
    user = gateway.get_current_user()
    if user is None:
        raise AuthError("Invalid or expired session", status_code=401)
    return user

def require_role(role: str):
    def _dep(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role != role:
            raise AuthError(f"{role.capitalize()} access required", status_code=403)
        return user
    return _dep

require_admin = require_role("admin")
