from fastapi import APIRouter, Depends

from subsync.repositories.access import DataAccess
from subsync.schemas.billing import BillingRecordOut, BillingSummary, billing_record_out
from subsync.schemas.user import CurrentUser
from subsync.api.deps import get_current_user, get_data

router = APIRouter(prefix="/billing", tags=["billing"])

# Current user's billing history, newest first
@router.get("/history", response_model=list[BillingRecordOut])
def billing_history(data: DataAccess = Depends(get_data), user: CurrentUser = Depends(get_current_user)):
    return [billing_record_out(r) for r in data.billing.list_for_user(user.id)]

@router.get("/summary", response_model=BillingSummary)
def billing_summary(data: DataAccess = Depends(get_data), user: CurrentUser = Depends(get_current_user)):
    return data.billing.summary(data.billing.list_for_user(user.id))
