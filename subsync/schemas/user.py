from datetime import datetime
from typing import Literal
from pydantic import BaseModel

Role = Literal["user", "admin"]

class CurrentUser(BaseModel):
    """The resolved identity handed from the route guard to shells and views."""
    id: int
    email: str
    role: Role
    full_name: str | None = None

    class Config:
        from_attributes = True
        frozen = True

class UserOut(BaseModel):
    id: int
    email: str
    role: Role
    full_name: str | None
    phone: str | None
    address: str | None
    city: str | None
    state: str | None
    zip_code: str | None
    country: str
    is_active: bool
    created_at: datetime
    last_login: datetime | None

    class Config:
        from_attributes = True

class ProfileUpdateIn(BaseModel):
    full_name: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None

class RoleUpdateIn(BaseModel):
    role: Role
