import logging

from subsync.core.errors import DataError
from subsync.models.user import ROLES, User
from subsync.repositories.base import BaseRepository
from subsync.services.auth_gateway import PROFILE_FIELDS

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    model = User
    label = "User"

    def list_all(self) -> list[User]:
        return self.list(order_by=[User.created_at.desc(), User.id.desc()])

    def update_role(self, id: int, role: str) -> User:
        if role not in ROLES:
            raise DataError(f"Unknown role: {role}")
        user = self.update(id, role=role)
        logger.info("user id=%s is now %s", id, role)
        return user

    def update_profile(self, id: int, **fields) -> User:
        unknown = set(fields) - set(PROFILE_FIELDS)
        if unknown:
            raise DataError(f"Not profile fields: {', '.join(sorted(unknown))}")
        return self.update(id, **fields)

    def delete(self, id: int) -> None:
        # Billing history references users; accounts are deactivated instead
        self.update(id, is_active=False)
