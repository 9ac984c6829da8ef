"""User models for account administration."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from backend.app.models.common import UserRole
from backend.app.models.trip import DashboardStats


class UserOut(BaseModel):
    """User account as returned by the admin API."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    role: UserRole
    is_active: bool
    created_at: datetime | None = None


class UserList(BaseModel):
    """One page of users with the total match count."""

    users: list[UserOut]
    total: int
    limit: int
    offset: int


class UserDetail(BaseModel):
    """A user with their trip statistics."""

    user: UserOut
    stats: DashboardStats


class UserUpdate(BaseModel):
    """Admin changes to an account."""

    is_active: bool | None = None
    role: UserRole | None = None
