from sqlalchemy import case, update

from subsync.models.notification import Notification
from subsync.models.recommendation import PRIORITIES, Recommendation
from subsync.repositories.base import BaseRepository

# high -> 0, medium -> 1, low -> 2
_PRIORITY_RANK = case(
    {priority: rank for rank, priority in enumerate(PRIORITIES)},
    value=Recommendation.priority,
    else_=len(PRIORITIES),
)


class RecommendationRepository(BaseRepository[Recommendation]):
    model = Recommendation
    label = "Recommendation"

    def list_unread_for_user(self, user_id: int) -> list[Recommendation]:
        return self.list(
            user_id=user_id,
            is_read=False,
            order_by=[_PRIORITY_RANK, Recommendation.created_at.desc(), Recommendation.id.desc()],
        )

    def mark_read(self, id: int) -> Recommendation:
        return self.update(id, is_read=True)


class NotificationRepository(BaseRepository[Notification]):
    model = Notification
    label = "Notification"

    def list_for_user(
        self,
        user_id: int,
        *,
        unread_only: bool = False,
        category: str | None = None,
    ) -> list[Notification]:
        return self.list(
            user_id=user_id,
            is_read=False if unread_only else None,
            category=category,
            order_by=[Notification.created_at.desc(), Notification.id.desc()],
        )

    def mark_read(self, id: int) -> Notification:
        return self.update(id, is_read=True)

    def mark_all_read(self, user_id: int) -> int:
        stmt = (
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True)
        )
        with self.backend("Marking notifications read"):
            result = self.db.execute(stmt)
            self.db.commit()
        return result.rowcount or 0

    def unread_count(self, user_id: int) -> int:
        return len(self.list(user_id=user_id, is_read=False))
