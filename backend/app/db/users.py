"""Repository for user account administration.

Accounts are created by the auth collaborator; admins can list, inspect,
activate or deactivate, change the role of, and delete them.
"""

import logging
import uuid
from typing import Any

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.context import RequestContext
from backend.app.db.models import Expense, Trip, User
from backend.app.errors import InvalidOperationError, NotFoundError
from backend.app.models.common import UserRole
from backend.app.models.user import UserUpdate

logger = logging.getLogger(__name__)


async def list_users(
    session: AsyncSession, limit: int = 50, offset: int = 0, search: str | None = None
) -> tuple[list[User], int]:
    """List users newest first, optionally filtered by name or email.

    Returns:
        The page of users and the total number of matches
    """
    query = select(User)
    count_query = select(func.count(User.id))
    if search:
        pattern = f"%{search}%"
        condition = or_(User.name.ilike(pattern), User.email.ilike(pattern))
        query = query.where(condition)
        count_query = count_query.where(condition)

    result = await session.execute(
        query.order_by(User.created_at.desc(), User.email).limit(limit).offset(offset)
    )
    total = (await session.execute(count_query)).scalar_one()
    return list(result.scalars().all()), total


async def get_user(session: AsyncSession, user_id: uuid.UUID) -> User:
    """Fetch a user by id.

    Raises:
        NotFoundError: If the user does not exist
    """
    user = await session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def update_user(
    session: AsyncSession, ctx: RequestContext, user_id: uuid.UUID, data: UserUpdate
) -> tuple[User, dict[str, dict[str, Any]]]:
    """Apply admin changes to an account.

    Returns:
        The updated user and the changed fields as {field: {old, new}}

    Raises:
        NotFoundError: If the user does not exist
        InvalidOperationError: If an admin would deactivate or demote themselves
    """
    user = await get_user(session, user_id)

    if user_id == ctx.user_id:
        if data.is_active is False:
            raise InvalidOperationError("You cannot deactivate your own account")
        if data.role is not None and data.role != UserRole.admin:
            raise InvalidOperationError("You cannot remove your own admin role")

    changes: dict[str, dict[str, Any]] = {}
    if data.is_active is not None and data.is_active != user.is_active:
        changes["is_active"] = {"old": user.is_active, "new": data.is_active}
        user.is_active = data.is_active
    if data.role is not None and data.role.value != user.role:
        changes["role"] = {"old": user.role, "new": data.role.value}
        user.role = data.role.value

    await session.flush()
    return user, changes


async def delete_user(session: AsyncSession, ctx: RequestContext, user_id: uuid.UUID) -> User:
    """Delete an account with its trips and their expenses.

    Raises:
        NotFoundError: If the user does not exist
        InvalidOperationError: If an admin would delete themselves
    """
    user = await get_user(session, user_id)
    if user_id == ctx.user_id:
        raise InvalidOperationError("You cannot delete your own account")

    user_trips = select(Trip.id).where(Trip.user_id == user_id)
    await session.execute(
        delete(Expense)
        .where(Expense.trip_id.in_(user_trips))
        .execution_options(synchronize_session=False)
    )
    await session.execute(
        delete(Trip).where(Trip.user_id == user_id).execution_options(synchronize_session=False)
    )
    await session.execute(
        delete(User).where(User.id == user_id).execution_options(synchronize_session=False)
    )
    session.expunge(user)
    logger.info(f"Deleted user {user_id} and their trips")
    return user
