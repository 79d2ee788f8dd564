from fastapi import APIRouter, Depends

from subsync.core.errors import DataError
from subsync.schemas.plan import PlanOut
from subsync.repositories.access import DataAccess
from subsync.api.deps import get_data

router = APIRouter(prefix="/plans", tags=["plans"])

# Display available subscription plans, cheapest first
@router.get("", response_model=list[PlanOut])
def list_plans(data: DataAccess = Depends(get_data)):
    return data.plans.list_active()

@router.get("/{plan_id}", response_model=PlanOut)
def get_plan(plan_id: int, data: DataAccess = Depends(get_data)):
    plan = data.plans.get_by_id(plan_id)
    if plan is None or plan.status != "active":
        raise DataError("Plan not found", status_code=404)
    return plan
