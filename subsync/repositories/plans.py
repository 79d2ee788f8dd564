from subsync.models.plan import Plan
from subsync.repositories.base import BaseRepository


class PlanRepository(BaseRepository[Plan]):
    model = Plan
    label = "Plan"

    def list_active(self) -> list[Plan]:
        return self.list(status="active", order_by=[Plan.price.asc(), Plan.id.asc()])

    def list_all(self) -> list[Plan]:
        return self.list(order_by=Plan.created_at.desc())

    def delete(self, id: int) -> None:
        # Subscriptions keep pointing at old plans, so a plan is only retired
        self.update(id, status="inactive")
