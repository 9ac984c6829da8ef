"""Minimal auth dependencies.

Token issuance is handled outside this service. The stub accepts
"Bearer <user_id>" or "Bearer <user_id>:admin"; the user must exist and be
active, and the admin claim only holds for accounts with the admin role.
"""

import uuid
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.context import RequestContext
from backend.app.db.engine import get_session
from backend.app.db.models import User
from backend.app.models.common import UserRole


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def parse_bearer_token(authorization: str | None) -> RequestContext:
    """Extract the claimed identity from an authorization header.

    Args:
        authorization: Authorization header (e.g., "Bearer <token>")

    Returns:
        RequestContext with the claimed user_id and role

    Raises:
        HTTPException: If authorization is missing or invalid
    """
    if not authorization:
        raise _unauthorized("Access denied. No token provided.")

    if not authorization.startswith("Bearer "):
        raise _unauthorized("Invalid authorization header format")

    token = authorization[7:]  # Strip "Bearer "
    user_id_str, _, role_str = token.partition(":")

    try:
        user_id = uuid.UUID(user_id_str)
        role = UserRole(role_str) if role_str else UserRole.user
    except ValueError as e:
        raise _unauthorized("Invalid token format (expected user_id[:role])") from e

    return RequestContext(user_id=user_id, role=role)


async def get_current_context(
    session: Annotated[AsyncSession, Depends(get_session)],
    authorization: Annotated[str | None, Header()] = None,
) -> RequestContext:
    """Resolve the caller against the users table.

    Raises:
        HTTPException: 401 if the token is invalid or the user is unknown or inactive
    """
    claimed = parse_bearer_token(authorization)

    user = await session.get(User, claimed.user_id)
    if user is None or not user.is_active:
        raise _unauthorized("User not found or inactive")

    # An admin claim from a non-admin account falls back to a plain user
    if claimed.is_admin and user.role != UserRole.admin.value:
        return RequestContext(user_id=user.id, role=UserRole.user)
    return claimed


async def require_admin(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
) -> RequestContext:
    """Require an admin caller.

    Raises:
        HTTPException: 403 if the caller is not an admin
    """
    if not ctx.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return ctx
