"""Request context for ownership enforcement."""

from dataclasses import dataclass
from uuid import UUID

from backend.app.models.common import UserRole


@dataclass(frozen=True)
class RequestContext:
    """Request context containing the caller's identity.

    Used to enforce ownership in all trip and expense operations.
    """

    user_id: UUID
    role: UserRole = UserRole.user

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin

    def can_access(self, owner_id: UUID) -> bool:
        """Owners and admins may access a resource."""
        return self.is_admin or owner_id == self.user_id
