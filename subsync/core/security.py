from datetime import datetime, timedelta, timezone
from uuid import uuid4
from passlib.context import CryptContext
from jose import jwt
from subsync.core.config import settings
import hashlib
import secrets

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

def _bcrypt_input(password: str) -> str:
    """
    Bcrypt has a 72-byte input limit.
    We pre-hash with SHA-256 to make the input fixed-length and safe,
    then bcrypt the hex digest (64 chars ASCII).
    """
    return hashlib.sha256(password.encode("utf-8")).hexdigest()

def hash_password(password: str) -> str:
    return pwd_context.hash(_bcrypt_input(password))

def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(_bcrypt_input(password), password_hash)

def new_session_id() -> str:
    return uuid4().hex

def create_access_token(subject: str, session_id: str, expires_at: datetime) -> str:
    # subject = the user id, jti = the persisted auth session it belongs to
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "jti": session_id,
        "iat": int(now.timestamp()), # issued at
        "exp": int(expires_at.timestamp()), # expiration time
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_alg)

def access_token_expiry() -> datetime:
    return datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_access_ttl_min)

def decode_token(token: str) -> dict:
    # Returns the token payload if valid, raises JWTError if invalid
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_alg])

def new_reset_token() -> str:
    return secrets.token_urlsafe(32)

def hash_reset_token(token: str) -> str:
    # only the digest is stored; the raw token exists in the user's inbox
    return hashlib.sha256(token.encode("utf-8")).hexdigest()

def reset_token_expiry() -> datetime:
    return datetime.now(timezone.utc) + timedelta(minutes=settings.password_reset_ttl_min)
