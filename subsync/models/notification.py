from datetime import datetime
from sqlalchemy import ForeignKey, Enum, DateTime, Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from subsync.db.base import Base
from subsync.utils.dt import utcnow

NOTIFICATION_TYPES = ("info", "warning", "success", "error")
NOTIFICATION_CATEGORIES = ("subscription", "billing", "usage", "system")

class Notification(Base):
    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)

    title: Mapped[str] = mapped_column(String(200))
    message: Mapped[str] = mapped_column(Text)
    type: Mapped[str] = mapped_column(Enum(*NOTIFICATION_TYPES, name="notification_type"), default="info")
    category: Mapped[str] = mapped_column(
        Enum(*NOTIFICATION_CATEGORIES, name="notification_category"), default="system"
    )

    is_read: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    action_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
