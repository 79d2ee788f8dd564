from datetime import datetime
from pydantic import BaseModel, EmailStr
from subsync.schemas.user import CurrentUser

class RegisterIn(BaseModel):
    email: EmailStr
    password: str
    full_name: str | None = None

class LoginIn(BaseModel):
    email: EmailStr
    password: str

class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int

class PasswordUpdateIn(BaseModel):
    new_password: str

class SessionOut(TokenOut):
    expires_at: datetime
    user: CurrentUser

class PasswordResetIn(BaseModel):
    email: EmailStr

class PasswordResetConfirmIn(BaseModel):
    token: str
    new_password: str
