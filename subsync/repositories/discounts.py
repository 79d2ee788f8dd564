import logging
from datetime import date

from sqlalchemy import select

from subsync.core.errors import DataError
from subsync.models.discount import Discount
from subsync.repositories.base import BaseRepository
from subsync.utils.dt import today

logger = logging.getLogger(__name__)


def normalize_code(code: str) -> str:
    return code.strip().upper()


class DiscountRepository(BaseRepository[Discount]):
    model = Discount
    label = "Discount"

    def list_all(self) -> list[Discount]:
        return self.list(order_by=[Discount.created_at.desc(), Discount.id.desc()])

    def list_active(self, on: date | None = None) -> list[Discount]:
        on = on or today()
        query = (
            select(Discount)
            .where(Discount.status == "active", Discount.valid_until >= on)
            .order_by(Discount.created_at.desc(), Discount.id.desc())
        )
        with self.backend("Listing discounts"):
            return list(self.db.execute(query).scalars().all())

    def _check_window(self, valid_from: date | None, valid_until: date | None) -> None:
        if valid_from is not None and valid_until is not None and valid_until < valid_from:
            raise DataError("valid_until must not be before valid_from")

    def create(self, **values) -> Discount:
        self._check_window(values.get("valid_from"), values.get("valid_until"))
        return super().create(**values)

    def update(self, id: int, **values) -> Discount:
        current = self.require(id)
        self._check_window(
            values.get("valid_from", current.valid_from),
            values.get("valid_until", current.valid_until),
        )
        return super().update(id, **values)

    def get_by_code(self, code: str) -> Discount | None:
        with self.backend("Loading discount"):
            return self.db.execute(
                select(Discount).where(Discount.code == normalize_code(code))
            ).scalar_one_or_none()

    def validate_discount_code(self, code: str, on: date | None = None) -> Discount | None:
        """
        The active discount for `code`, or None for an unknown code, an
        inactive one, or one whose valid_until lies before `on`.
        """
        if not code or not code.strip():
            return None
        discount = self.get_by_code(code)
        if discount is None or discount.effective_status(on or today()) != "active":
            return None
        return discount

    def redeem(self, id: int) -> Discount:
        discount = self.require(id)
        if discount.is_exhausted:
            raise DataError(f"Discount {discount.code} has reached its usage limit", status_code=409)
        logger.info("redeeming discount %s (%s/%s)", discount.code, discount.usage_count + 1, discount.usage_limit)
        return self.update(id, usage_count=discount.usage_count + 1)
