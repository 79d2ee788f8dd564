from datetime import datetime
from typing import Literal
from pydantic import BaseModel

Priority = Literal["high", "medium", "low"]
RecommendationCategory = Literal["usage", "cost", "performance", "technology"]
NotificationType = Literal["info", "warning", "success", "error"]
NotificationCategory = Literal["subscription", "billing", "usage", "system"]

class RecommendationOut(BaseModel):
    id: int
    user_id: int
    title: str
    description: str
    reason: str
    plan_name: str
    current_plan: str | None
    savings: str | None
    priority: Priority
    category: RecommendationCategory
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True

class RecommendationCreate(BaseModel):
    user_id: int
    title: str
    description: str
    reason: str
    plan_name: str
    current_plan: str | None = None
    savings: str | None = None
    priority: Priority = "medium"
    category: RecommendationCategory
    expires_at: datetime | None = None

class NotificationOut(BaseModel):
    id: int
    user_id: int
    title: str
    message: str
    type: NotificationType
    category: NotificationCategory
    is_read: bool
    action_url: str | None
    created_at: datetime

    class Config:
        from_attributes = True

class NotificationCreate(BaseModel):
    user_id: int
    title: str
    message: str
    type: NotificationType = "info"
    category: NotificationCategory = "system"
    action_url: str | None = None
    expires_at: datetime | None = None
