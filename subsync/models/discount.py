from datetime import date, datetime
from sqlalchemy import ForeignKey, Enum, Date, DateTime, Integer, String, Text, JSON, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from subsync.db.base import Base
from subsync.utils.dt import utcnow, today

DISCOUNT_STATUSES = ("active", "inactive", "expired")

class Discount(Base):
    __tablename__ = "discounts"

    id: Mapped[int] = mapped_column(primary_key=True)

    # Stored upper-case, e.g. "SUMMER50"
    code: Mapped[str] = mapped_column(String(32), unique=True, index=True)
    percentage: Mapped[int] = mapped_column(Integer)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    conditions: Mapped[str | None] = mapped_column(Text, nullable=True)

    valid_from: Mapped[date] = mapped_column(Date)
    valid_until: Mapped[date] = mapped_column(Date)

    status: Mapped[str] = mapped_column(Enum(*DISCOUNT_STATUSES, name="discount_status"), default="active")

    # None = unlimited
    usage_limit: Mapped[int | None] = mapped_column(Integer, nullable=True)
    usage_count: Mapped[int] = mapped_column(Integer, default=0)

    # Plan ids; empty list = every plan
    applicable_plans: Mapped[list[int]] = mapped_column(JSON, default=list)

    created_by: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint("percentage >= 1 AND percentage <= 100", name="ck_discounts_percentage"),
        CheckConstraint(
            "usage_limit IS NULL OR usage_count <= usage_limit",
            name="ck_discounts_usage_within_limit",
        ),
    )

    def effective_status(self, on: date | None = None) -> str:
        """Stored status, except that an elapsed window always reads as expired."""
        if self.status == "inactive":
            return "inactive"
        if self.valid_until < (on or today()):
            return "expired"
        return self.status

    def applies_to(self, plan_id: int) -> bool:
        return not self.applicable_plans or plan_id in self.applicable_plans

    @property
    def is_exhausted(self) -> bool:
        return self.usage_limit is not None and self.usage_count >= self.usage_limit
