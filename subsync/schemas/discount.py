from datetime import date
from typing import Literal
from pydantic import BaseModel, Field, field_validator

DiscountStatus = Literal["active", "inactive", "expired"]

class DiscountOut(BaseModel):
    id: int
    code: str
    percentage: int
    description: str | None
    conditions: str | None
    valid_from: date
    valid_until: date
    status: DiscountStatus
    usage_limit: int | None
    usage_count: int
    applicable_plans: list[int]

    class Config:
        from_attributes = True

class DiscountCreate(BaseModel):
    code: str = Field(min_length=2, max_length=32)
    percentage: int = Field(ge=1, le=100)
    description: str | None = None
    conditions: str | None = None
    valid_from: date
    valid_until: date
    status: DiscountStatus = "active"
    usage_limit: int | None = Field(default=None, ge=0)
    applicable_plans: list[int] = []

    @field_validator("code")
    @classmethod
    def upper_code(cls, v: str) -> str:
        return v.strip().upper()

class DiscountUpdate(BaseModel):
    code: str | None = Field(default=None, min_length=2, max_length=32)
    percentage: int | None = Field(default=None, ge=1, le=100)
    description: str | None = None
    conditions: str | None = None
    valid_from: date | None = None
    valid_until: date | None = None
    status: DiscountStatus | None = None
    usage_limit: int | None = Field(default=None, ge=0)
    applicable_plans: list[int] | None = None

    @field_validator("code")
    @classmethod
    def upper_code(cls, v: str | None) -> str | None:
        return v.strip().upper() if v else v

def discount_out(discount) -> DiscountOut:
    # Elapsed discounts read as expired regardless of the stored status
    return DiscountOut.model_validate(discount).model_copy(update={"status": discount.effective_status()})
