from sqlalchemy.orm import Session

from subsync.repositories.analytics import AnalyticsRepository
from subsync.repositories.billing import BillingRepository
from subsync.repositories.discounts import DiscountRepository
from subsync.repositories.inbox import NotificationRepository, RecommendationRepository
from subsync.repositories.plans import PlanRepository
from subsync.repositories.subscriptions import SubscriptionRepository
from subsync.repositories.usage import UsageRepository
from subsync.repositories.users import UserRepository


class DataAccess:
    """Every repository bound to one session."""

    def __init__(self, db: Session):
        self.db = db
        self.plans = PlanRepository(db)
        self.subscriptions = SubscriptionRepository(db)
        self.billing = BillingRepository(db)
        self.discounts = DiscountRepository(db)
        self.recommendations = RecommendationRepository(db)
        self.notifications = NotificationRepository(db)
        self.users = UserRepository(db)
        self.usage = UsageRepository(db)
        self.analytics = AnalyticsRepository(db)
