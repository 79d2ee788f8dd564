from fastapi import APIRouter, Depends

from subsync.core.errors import DataError
from subsync.repositories.access import DataAccess
from subsync.schemas.analytics import AnalyticsOut
from subsync.schemas.billing import BillingRecordOut, BillingStatusIn, billing_record_out
from subsync.schemas.discount import DiscountCreate, DiscountOut, DiscountUpdate, discount_out
from subsync.schemas.inbox import NotificationCreate, NotificationOut, RecommendationCreate, RecommendationOut
from subsync.schemas.plan import PlanCreate, PlanOut, PlanUpdate
from subsync.schemas.subscription import SubscriptionDetail, SubscriptionStatusIn, subscription_detail
from subsync.schemas.user import CurrentUser, RoleUpdateIn, UserOut
from subsync.api.deps import get_data, require_admin

# Every route below is admin-only
router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])

# ---------------------------
# plans
# ---------------------------

@router.get("/plans", response_model=list[PlanOut])
def all_plans(data: DataAccess = Depends(get_data)):
    return data.plans.list_all()

@router.post("/plans", response_model=PlanOut, status_code=201)
def create_plan(payload: PlanCreate, data: DataAccess = Depends(get_data), admin: CurrentUser = Depends(require_admin)):
    return data.plans.create(**payload.model_dump(), created_by=admin.id)

@router.patch("/plans/{plan_id}", response_model=PlanOut)
def update_plan(plan_id: int, payload: PlanUpdate, data: DataAccess = Depends(get_data)):
    return data.plans.update(plan_id, **payload.model_dump(exclude_unset=True))

@router.delete("/plans/{plan_id}", response_model=PlanOut)
def delete_plan(plan_id: int, data: DataAccess = Depends(get_data)):
    data.plans.delete(plan_id)
    return data.plans.require(plan_id)

# ---------------------------
# discounts
# ---------------------------

@router.get("/discounts", response_model=list[DiscountOut])
def all_discounts(data: DataAccess = Depends(get_data)):
    return [discount_out(d) for d in data.discounts.list_all()]

@router.post("/discounts", response_model=DiscountOut, status_code=201)
def create_discount(payload: DiscountCreate, data: DataAccess = Depends(get_data), admin: CurrentUser = Depends(require_admin)):
    return discount_out(data.discounts.create(**payload.model_dump(), created_by=admin.id))

@router.patch("/discounts/{discount_id}", response_model=DiscountOut)
def update_discount(discount_id: int, payload: DiscountUpdate, data: DataAccess = Depends(get_data)):
    return discount_out(data.discounts.update(discount_id, **payload.model_dump(exclude_unset=True)))

@router.delete("/discounts/{discount_id}", status_code=204)
def delete_discount(discount_id: int, data: DataAccess = Depends(get_data)):
    data.discounts.delete(discount_id)

# ---------------------------
# users & subscriptions
# ---------------------------

@router.get("/users", response_model=list[UserOut])
def all_users(data: DataAccess = Depends(get_data)):
    return data.users.list_all()

@router.patch("/users/{user_id}/role", response_model=UserOut)
def update_user_role(
    user_id: int,
    payload: RoleUpdateIn,
    data: DataAccess = Depends(get_data),
    admin: CurrentUser = Depends(require_admin),
):
    if user_id == admin.id:
        raise DataError("You cannot change your own role")
    return data.users.update_role(user_id, payload.role)

@router.get("/subscriptions", response_model=list[SubscriptionDetail])
def all_subscriptions(data: DataAccess = Depends(get_data)):
    return [subscription_detail(s, include_user=True) for s in data.subscriptions.list_all()]

@router.patch("/subscriptions/{subscription_id}/status", response_model=SubscriptionDetail)
def update_subscription_status(subscription_id: int, payload: SubscriptionStatusIn, data: DataAccess = Depends(get_data)):
    return subscription_detail(data.subscriptions.set_status(subscription_id, payload.status), include_user=True)

@router.patch("/billing/{record_id}/status", response_model=BillingRecordOut)
def update_billing_status(record_id: int, payload: BillingStatusIn, data: DataAccess = Depends(get_data)):
    return billing_record_out(data.billing.update_status(record_id, payload.status))

# ---------------------------
# inbox
# ---------------------------

@router.post("/recommendations", response_model=RecommendationOut, status_code=201)
def create_recommendation(payload: RecommendationCreate, data: DataAccess = Depends(get_data)):
    data.users.require(payload.user_id)
    return data.recommendations.create(**payload.model_dump())

@router.post("/notifications", response_model=NotificationOut, status_code=201)
def create_notification(payload: NotificationCreate, data: DataAccess = Depends(get_data)):
    data.users.require(payload.user_id)
    return data.notifications.create(**payload.model_dump())

# ---------------------------
# analytics
# ---------------------------

@router.get("/analytics", response_model=AnalyticsOut)
def analytics(data: DataAccess = Depends(get_data)):
    a = data.analytics
    return AnalyticsOut(
        metrics=a.key_metrics(),
        subscriptions=a.subscription_analytics(),
        users=a.user_analytics(),
        plan_distribution=a.plan_distribution(),
    )
