from fastapi import APIRouter, Depends

from subsync.core.errors import AuthError
from subsync.integrations.payments import MockPaymentGateway
from subsync.models.subscription import Subscription
from subsync.repositories.access import DataAccess
from subsync.schemas.billing import BillingRecordOut, billing_record_out
from subsync.schemas.subscription import (
    SubscriptionDetail,
    SubscribeIn,
    ChangePlanIn,
    UsageIn,
    UsageOut,
    subscription_detail,
)
from subsync.schemas.user import CurrentUser
from subsync.services.checkout import subscribe
from subsync.api.deps import get_current_user, get_data, get_payments

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])

def _owned(data: DataAccess, subscription_id: int, user: CurrentUser) -> Subscription:
    sub = data.subscriptions.require(subscription_id)
    if sub.user_id != user.id:
        raise AuthError("This subscription belongs to another account", status_code=403)
    return sub

@router.get("", response_model=list[SubscriptionDetail])
def my_subscriptions(data: DataAccess = Depends(get_data), user: CurrentUser = Depends(get_current_user)):
    return [subscription_detail(s) for s in data.subscriptions.list_for_user(user.id)]

@router.post("", status_code=201)
def create_subscription(
    payload: SubscribeIn,
    data: DataAccess = Depends(get_data),
    user: CurrentUser = Depends(get_current_user),
    payments: MockPaymentGateway = Depends(get_payments),
) -> dict:
    sub, record = subscribe(
        data,
        user_id=user.id,
        plan_id=payload.plan_id,
        discount_code=payload.discount_code,
        payment_method=payload.payment_method,
        gateway=payments,
    )
    return {
        "subscription": subscription_detail(sub).model_dump(mode="json"),
        "billing_record": billing_record_out(record).model_dump(mode="json"),
    }

@router.get("/usage", response_model=list[UsageOut])
def my_usage(data: DataAccess = Depends(get_data), user: CurrentUser = Depends(get_current_user)):
    return data.usage.list_for_user(user.id)

@router.get("/{subscription_id}", response_model=SubscriptionDetail)
def get_subscription(subscription_id: int, data: DataAccess = Depends(get_data), user: CurrentUser = Depends(get_current_user)):
    return subscription_detail(_owned(data, subscription_id, user))

@router.post("/{subscription_id}/cancel", response_model=SubscriptionDetail)
def cancel_subscription(subscription_id: int, data: DataAccess = Depends(get_data), user: CurrentUser = Depends(get_current_user)):
    _owned(data, subscription_id, user)
    return subscription_detail(data.subscriptions.cancel(subscription_id))

@router.post("/{subscription_id}/renew", response_model=SubscriptionDetail)
def renew_subscription(subscription_id: int, data: DataAccess = Depends(get_data), user: CurrentUser = Depends(get_current_user)):
    _owned(data, subscription_id, user)
    return subscription_detail(data.subscriptions.renew(subscription_id))

@router.post("/{subscription_id}/change-plan", response_model=SubscriptionDetail)
def change_plan(
    subscription_id: int,
    payload: ChangePlanIn,
    data: DataAccess = Depends(get_data),
    user: CurrentUser = Depends(get_current_user),
):
    _owned(data, subscription_id, user)
    return subscription_detail(data.subscriptions.change_plan(subscription_id, payload.plan_id))

@router.post("/{subscription_id}/usage", response_model=UsageOut)
def record_usage(
    subscription_id: int,
    payload: UsageIn,
    data: DataAccess = Depends(get_data),
    user: CurrentUser = Depends(get_current_user),
):
    _owned(data, subscription_id, user)
    return data.usage.record_usage(subscription_id, payload.usage_date, payload.usage_gb)

@router.get("/{subscription_id}/billing", response_model=list[BillingRecordOut])
def subscription_billing(subscription_id: int, data: DataAccess = Depends(get_data), user: CurrentUser = Depends(get_current_user)):
    _owned(data, subscription_id, user)
    return [billing_record_out(r) for r in data.billing.list_for_user(user.id) if r.subscription_id == subscription_id]
