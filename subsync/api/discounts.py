from fastapi import APIRouter, Depends
from pydantic import BaseModel

from subsync.core.errors import DataError
from subsync.repositories.access import DataAccess
from subsync.schemas.discount import DiscountOut
from subsync.schemas.user import CurrentUser
from subsync.api.deps import get_current_user, get_data

router = APIRouter(prefix="/discounts", tags=["discounts"])

class ValidateCodeIn(BaseModel):
    code: str
    plan_id: int | None = None

@router.post("/validate", response_model=DiscountOut)
def validate_code(
    payload: ValidateCodeIn,
    data: DataAccess = Depends(get_data),
    user: CurrentUser = Depends(get_current_user),
):
    discount = data.discounts.validate_discount_code(payload.code)
    if discount is None:
        raise DataError("Invalid or expired discount code", status_code=404)
    if payload.plan_id is not None and not discount.applies_to(payload.plan_id):
        raise DataError(f"Discount {discount.code} does not apply to this plan")
    return discount
