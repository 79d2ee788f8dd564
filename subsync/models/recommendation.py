from datetime import datetime
from sqlalchemy import ForeignKey, Enum, DateTime, Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from subsync.db.base import Base
from subsync.utils.dt import utcnow

PRIORITIES = ("high", "medium", "low")
RECOMMENDATION_CATEGORIES = ("usage", "cost", "performance", "technology")

class Recommendation(Base):
    __tablename__ = "recommendations"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)

    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(Text)
    reason: Mapped[str] = mapped_column(Text)
    plan_name: Mapped[str] = mapped_column(String(120))
    current_plan: Mapped[str | None] = mapped_column(String(120), nullable=True)
    savings: Mapped[str | None] = mapped_column(String(120), nullable=True)

    priority: Mapped[str] = mapped_column(Enum(*PRIORITIES, name="recommendation_priority"), default="medium")
    category: Mapped[str] = mapped_column(Enum(*RECOMMENDATION_CATEGORIES, name="recommendation_category"))

    is_read: Mapped[bool] = mapped_column(Boolean, default=False, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
