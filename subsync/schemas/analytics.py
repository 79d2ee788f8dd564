from pydantic import BaseModel

class SubscriptionAnalyticsRow(BaseModel):
    month: str
    total_subscriptions: int
    active_subscriptions: int
    terminated_subscriptions: int
    total_revenue: float
    average_price: float

class UserAnalyticsRow(BaseModel):
    month: str
    new_users: int
    active_users: int

class PlanShare(BaseModel):
    plan_id: int
    plan_name: str
    subscribers: int
    revenue: float

class KeyMetrics(BaseModel):
    total_revenue: float
    active_subscriptions: int
    total_users: int
    average_revenue_per_user: float
    churn_rate: float

class AnalyticsOut(BaseModel):
    metrics: KeyMetrics
    subscriptions: list[SubscriptionAnalyticsRow]
    users: list[UserAnalyticsRow]
    plan_distribution: list[PlanShare]
