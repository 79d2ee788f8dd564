from datetime import datetime
from typing import Literal
from pydantic import BaseModel, Field

BillingType = Literal["monthly", "yearly"]
Technology = Literal["fibernet", "copper"]
PlanStatus = Literal["active", "inactive"]

class PlanOut(BaseModel):
    id: int
    name: str
    description: str | None
    price: float
    billing_type: BillingType
    technology: Technology
    data_quota: str
    speed: str
    features: list[str]
    auto_renewal: bool
    is_popular: bool
    status: PlanStatus
    created_at: datetime

    class Config:
        from_attributes = True

class PlanCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: str | None = None
    price: float = Field(ge=0)
    billing_type: BillingType = "monthly"
    technology: Technology
    data_quota: str
    speed: str
    features: list[str] = []
    auto_renewal: bool = True
    is_popular: bool = False
    status: PlanStatus = "active"

class PlanUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    billing_type: BillingType | None = None
    technology: Technology | None = None
    data_quota: str | None = None
    speed: str | None = None
    features: list[str] | None = None
    auto_renewal: bool | None = None
    is_popular: bool | None = None
    status: PlanStatus | None = None
