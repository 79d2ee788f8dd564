import logging
from datetime import date

from sqlalchemy import func, select

from subsync.core.config import settings
from subsync.core.errors import DataError
from subsync.models.notification import Notification
from subsync.models.subscription import Subscription
from subsync.models.usage_record import UsageRecord
from subsync.repositories.base import BaseRepository
from subsync.utils.quota import is_near_limit, usage_percentage

logger = logging.getLogger(__name__)

USAGE_WARNING_TITLE = "Data usage alert"


class UsageRepository(BaseRepository[UsageRecord]):
    model = UsageRecord
    label = "Usage record"

    def list_for_user(self, user_id: int, limit: int = 30) -> list[UsageRecord]:
        query = (
            select(UsageRecord)
            .join(Subscription, UsageRecord.subscription_id == Subscription.id)
            .where(Subscription.user_id == user_id)
            .order_by(UsageRecord.usage_date.desc(), UsageRecord.id.desc())
            .limit(limit)
        )
        with self.backend("Listing usage"):
            return list(self.db.execute(query).scalars().all())

    def record_usage(self, subscription_id: int, usage_date: date, usage_gb: float) -> UsageRecord:
        """
        Upsert the day's usage and refresh the subscription's usage counter.
        Crossing the alert threshold leaves the owner a warning notification.
        """
        if usage_gb < 0:
            raise DataError("Usage cannot be negative")
        sub = self.db.get(Subscription, subscription_id)
        if sub is None:
            raise DataError("Subscription not found", status_code=404)

        quota = sub.plan.data_quota
        was_near = is_near_limit(sub.usage_gb, quota)

        with self.backend("Recording usage"):
            record = self.db.execute(
                select(UsageRecord).where(
                    UsageRecord.subscription_id == subscription_id,
                    UsageRecord.usage_date == usage_date,
                )
            ).scalar_one_or_none()
            if record is None:
                record = UsageRecord(subscription_id=subscription_id, usage_date=usage_date, usage_gb=usage_gb)
                self.db.add(record)
            else:
                record.usage_gb = usage_gb
            self.db.flush()

            total = self.db.execute(
                select(func.coalesce(func.sum(UsageRecord.usage_gb), 0.0)).where(
                    UsageRecord.subscription_id == subscription_id
                )
            ).scalar_one()
            sub.usage_gb = float(total)

            if not was_near and is_near_limit(sub.usage_gb, quota):
                pct = usage_percentage(sub.usage_gb, quota)
                logger.info("subscription id=%s crossed usage threshold (%s%%)", sub.id, pct)
                self.db.add(
                    Notification(
                        user_id=sub.user_id,
                        title=USAGE_WARNING_TITLE,
                        message=(
                            f"You have used {pct}% of your {quota} data allowance "
                            f"(alert threshold {settings.usage_alert_threshold}%)."
                        ),
                        type="warning",
                        category="usage",
                        action_url="/user?section=subscriptions",
                    )
                )

            self.db.commit()
            self.db.refresh(record)
        return record
