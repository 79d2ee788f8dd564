from datetime import date
from typing import Literal
from pydantic import BaseModel

BillingStatus = Literal["pending", "paid", "failed", "refunded"]

class BillingRecordOut(BaseModel):
    id: int
    subscription_id: int
    amount: float
    billing_date: date
    due_date: date
    status: BillingStatus
    invoice_id: str
    payment_method: str | None
    payment_reference: str | None
    plan_name: str | None = None

    class Config:
        from_attributes = True

class BillingSummary(BaseModel):
    total_paid: float
    paid_count: int
    pending_count: int
    failed_count: int
    refunded_count: int

class BillingStatusIn(BaseModel):
    status: BillingStatus

def billing_record_out(record) -> BillingRecordOut:
    out = BillingRecordOut.model_validate(record)
    sub = record.subscription
    if sub is not None and sub.plan is not None:
        out.plan_name = sub.plan.name
    return out
