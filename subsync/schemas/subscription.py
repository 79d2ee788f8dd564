from datetime import date, datetime
from typing import Literal
from pydantic import BaseModel, Field
from subsync.utils.quota import is_near_limit, usage_percentage

SubscriptionStatus = Literal["pending", "active", "paused", "terminated"]

class SubscriptionOut(BaseModel):
    id: int
    user_id: int
    plan_id: int
    status: SubscriptionStatus
    start_date: date
    end_date: date
    price: float
    usage_gb: float
    auto_renewal: bool
    created_at: datetime

    class Config:
        from_attributes = True

class SubscriptionDetail(SubscriptionOut):
    """Subscription joined with its plan (and owner, for admin listings)."""
    plan_name: str
    technology: str
    data_quota: str
    speed: str
    usage_percentage: int
    near_limit: bool
    user_email: str | None = None
    user_name: str | None = None

class SubscribeIn(BaseModel):
    plan_id: int
    discount_code: str | None = None
    payment_method: str = "card"

class ChangePlanIn(BaseModel):
    plan_id: int

class SubscriptionStatusIn(BaseModel):
    status: SubscriptionStatus

class UsageIn(BaseModel):
    usage_date: date
    usage_gb: float = Field(ge=0)

class UsageOut(BaseModel):
    id: int
    subscription_id: int
    usage_date: date
    usage_gb: float

    class Config:
        from_attributes = True

def subscription_detail(sub, include_user: bool = False) -> SubscriptionDetail:
    """Flatten a Subscription row with its plan (and owner) into the API shape."""
    plan = sub.plan
    data = SubscriptionOut.model_validate(sub).model_dump()
    data.update(
        plan_name=plan.name,
        technology=plan.technology,
        data_quota=plan.data_quota,
        speed=plan.speed,
        usage_percentage=usage_percentage(sub.usage_gb, plan.data_quota),
        near_limit=is_near_limit(sub.usage_gb, plan.data_quota),
    )
    if include_user and sub.user is not None:
        data.update(user_email=sub.user.email, user_name=sub.user.full_name)
    return SubscriptionDetail(**data)
