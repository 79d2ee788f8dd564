from datetime import date

from sqlalchemy import func, select
from sqlalchemy.orm import joinedload

from subsync.core.config import settings
from subsync.core.errors import DataError
from subsync.models.billing_record import BILLING_TRANSITIONS, BillingRecord
from subsync.models.subscription import Subscription
from subsync.repositories.base import BaseRepository
from subsync.schemas.billing import BillingSummary


class BillingRepository(BaseRepository[BillingRecord]):
    model = BillingRecord
    label = "Billing record"

    def list_for_user(self, user_id: int) -> list[BillingRecord]:
        query = (
            select(BillingRecord)
            .options(joinedload(BillingRecord.subscription).joinedload(Subscription.plan))
            .where(BillingRecord.user_id == user_id)
            .order_by(BillingRecord.billing_date.desc(), BillingRecord.id.desc())
        )
        with self.backend("Listing billing history"):
            return list(self.db.execute(query).scalars().all())

    def update_status(self, id: int, status: str) -> BillingRecord:
        record = self.require(id)
        if status == record.status:
            return record
        if status not in BILLING_TRANSITIONS.get(record.status, ()):
            raise DataError(
                f"Billing record cannot move from {record.status} to {status}",
                status_code=409,
            )
        return self.update(id, status=status)

    def next_invoice_id(self, on: date) -> str:
        # INV-2024-001, INV-2024-002, ... numbered per year
        prefix = f"{settings.invoice_prefix}-{on.year}-"
        with self.backend("Numbering invoice"):
            count = self.db.execute(
                select(func.count(BillingRecord.id)).where(BillingRecord.invoice_id.like(f"{prefix}%"))
            ).scalar_one()
        return f"{prefix}{count + 1:03d}"

    def summary(self, records: list[BillingRecord]) -> BillingSummary:
        counts = {status: 0 for status in BILLING_TRANSITIONS}
        total_paid = 0.0
        for record in records:
            counts[record.status] += 1
            if record.status == "paid":
                total_paid += record.amount
        return BillingSummary(
            total_paid=round(total_paid, 2),
            paid_count=counts["paid"],
            pending_count=counts["pending"],
            failed_count=counts["failed"],
            refunded_count=counts["refunded"],
        )

    def delete(self, id: int) -> None:
        raise DataError("Billing records are append-only", status_code=409)
