from fastapi import APIRouter, Depends

from subsync.core.errors import AuthError
from subsync.repositories.access import DataAccess
from subsync.schemas.inbox import NotificationCategory, NotificationOut, RecommendationOut
from subsync.schemas.user import CurrentUser
from subsync.api.deps import get_current_user, get_data

router = APIRouter(tags=["inbox"])

def _check_owner(obj, user: CurrentUser) -> None:
    if obj.user_id != user.id:
        raise AuthError("This item belongs to another account", status_code=403)

# ---------------------------
# recommendations
# ---------------------------

@router.get("/recommendations", response_model=list[RecommendationOut])
def my_recommendations(data: DataAccess = Depends(get_data), user: CurrentUser = Depends(get_current_user)):
    return data.recommendations.list_unread_for_user(user.id)

@router.post("/recommendations/{recommendation_id}/read", response_model=RecommendationOut)
def mark_recommendation_read(
    recommendation_id: int,
    data: DataAccess = Depends(get_data),
    user: CurrentUser = Depends(get_current_user),
):
    _check_owner(data.recommendations.require(recommendation_id), user)
    return data.recommendations.mark_read(recommendation_id)

# ---------------------------
# notifications
# ---------------------------

@router.get("/notifications", response_model=list[NotificationOut])
def my_notifications(
    unread: bool = False,
    category: NotificationCategory | None = None,
    data: DataAccess = Depends(get_data),
    user: CurrentUser = Depends(get_current_user),
):
    return data.notifications.list_for_user(user.id, unread_only=unread, category=category)

@router.post("/notifications/read-all")
def mark_all_notifications_read(data: DataAccess = Depends(get_data), user: CurrentUser = Depends(get_current_user)) -> dict:
    return {"updated": data.notifications.mark_all_read(user.id)}

@router.post("/notifications/{notification_id}/read", response_model=NotificationOut)
def mark_notification_read(
    notification_id: int,
    data: DataAccess = Depends(get_data),
    user: CurrentUser = Depends(get_current_user),
):
    _check_owner(data.notifications.require(notification_id), user)
    return data.notifications.mark_read(notification_id)

@router.delete("/notifications/{notification_id}", status_code=204)
def delete_notification(
    notification_id: int,
    data: DataAccess = Depends(get_data),
    user: CurrentUser = Depends(get_current_user),
):
    _check_owner(data.notifications.require(notification_id), user)
    data.notifications.delete(notification_id)
