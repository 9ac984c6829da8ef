"""Admin endpoints - user accounts, emission factors and the audit log.

Every mutation writes an audit entry in the same transaction.
"""

import uuid
from datetime import datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.auth import require_admin
from backend.app.db import emission_factors as factor_repo
from backend.app.db import users as user_repo
from backend.app.db.audit import list_audit_logs, record_admin_action
from backend.app.db.context import RequestContext
from backend.app.db.engine import get_session
from backend.app.db.trips import dashboard_stats
from backend.app.models.carbon import (
    EmissionFactorCreate,
    EmissionFactorOut,
    EmissionFactorUpdate,
)
from backend.app.models.common import FactorCategory
from backend.app.models.user import UserDetail, UserList, UserOut, UserUpdate

router = APIRouter(prefix="/admin", tags=["admin"])

FACTOR_RESOURCE = "emission_factor"
USER_RESOURCE = "user"


class AuditLogOut(BaseModel):
    """Audit entry as returned by the admin API."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    admin_user_id: uuid.UUID
    action: str
    target_resource: str
    target_id: str | None
    details: dict[str, Any] | None
    ip_address: str | None
    user_agent: str | None
    created_at: datetime | None = None


async def _audit(
    session: AsyncSession,
    ctx: RequestContext,
    request: Request,
    action: str,
    target_id: uuid.UUID,
    details: dict[str, Any],
    target_resource: str = FACTOR_RESOURCE,
) -> None:
    await record_admin_action(
        session,
        ctx,
        action=action,
        target_resource=target_resource,
        target_id=target_id,
        details=details,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


@router.get("/users", response_model=UserList)
async def list_users(
    ctx: Annotated[RequestContext, Depends(require_admin)],
    session: Annotated[AsyncSession, Depends(get_session)],
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
    search: str | None = None,
) -> UserList:
    """Page through accounts, optionally matching name or email."""
    users, total = await user_repo.list_users(session, limit=limit, offset=offset, search=search)
    return UserList(
        users=[UserOut.model_validate(u) for u in users], total=total, limit=limit, offset=offset
    )


@router.get("/users/{user_id}", response_model=UserDetail)
async def get_user(
    user_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(require_admin)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> UserDetail:
    user = await user_repo.get_user(session, user_id)
    stats = await dashboard_stats(session, RequestContext(user_id=user.id))
    return UserDetail(user=UserOut.model_validate(user), stats=stats)


@router.put("/users/{user_id}", response_model=UserOut)
async def update_user(
    user_id: uuid.UUID,
    data: UserUpdate,
    request: Request,
    ctx: Annotated[RequestContext, Depends(require_admin)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> UserOut:
    """Activate, deactivate or change the role of an account."""
    user, changes = await user_repo.update_user(session, ctx, user_id, data)
    await _audit(
        session, ctx, request, "user.update", user.id, {"changes": changes}, USER_RESOURCE
    )
    await session.commit()
    return UserOut.model_validate(user)


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: uuid.UUID,
    request: Request,
    ctx: Annotated[RequestContext, Depends(require_admin)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> dict[str, object]:
    """Delete an account together with its trips and expenses."""
    user = await user_repo.delete_user(session, ctx, user_id)
    await _audit(
        session, ctx, request, "user.delete", user_id, {"email": user.email}, USER_RESOURCE
    )
    await session.commit()
    return {"success": True, "message": "User deleted successfully"}


@router.get("/emission-factors", response_model=list[EmissionFactorOut])
async def list_emission_factors(
    ctx: Annotated[RequestContext, Depends(require_admin)],
    session: Annotated[AsyncSession, Depends(get_session)],
    category: FactorCategory | None = None,
    include_inactive: bool = True,
) -> list[EmissionFactorOut]:
    factors = await factor_repo.list_factors(session, category, include_inactive)
    return [EmissionFactorOut.model_validate(f) for f in factors]


@router.get("/emission-factors/{factor_id}", response_model=EmissionFactorOut)
async def get_emission_factor(
    factor_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(require_admin)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> EmissionFactorOut:
    return EmissionFactorOut.model_validate(await factor_repo.get_factor(session, factor_id))


@router.post(
    "/emission-factors", response_model=EmissionFactorOut, status_code=status.HTTP_201_CREATED
)
async def create_emission_factor(
    data: EmissionFactorCreate,
    request: Request,
    ctx: Annotated[RequestContext, Depends(require_admin)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> EmissionFactorOut:
    """Create a factor; 409 if an active one exists for the same pair."""
    factor = await factor_repo.create_factor(session, data)
    await _audit(
        session, ctx, request, "emission_factor.create", factor.id, data.model_dump(mode="json")
    )
    await session.commit()
    return EmissionFactorOut.model_validate(factor)


@router.put("/emission-factors/{factor_id}", response_model=EmissionFactorOut)
async def update_emission_factor(
    factor_id: uuid.UUID,
    data: EmissionFactorUpdate,
    request: Request,
    ctx: Annotated[RequestContext, Depends(require_admin)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> EmissionFactorOut:
    factor, changes = await factor_repo.update_factor(session, factor_id, data)
    await _audit(session, ctx, request, "emission_factor.update", factor.id, {"changes": changes})
    await session.commit()
    return EmissionFactorOut.model_validate(factor)


@router.delete("/emission-factors/{factor_id}")
async def delete_emission_factor(
    factor_id: uuid.UUID,
    request: Request,
    ctx: Annotated[RequestContext, Depends(require_admin)],
    session: Annotated[AsyncSession, Depends(get_session)],
    hard: Annotated[bool, Query()] = False,
) -> dict[str, object]:
    """Deactivate a factor, or remove it with ?hard=true."""
    factor = await factor_repo.delete_factor(session, factor_id, hard=hard)
    await _audit(
        session,
        ctx,
        request,
        "emission_factor.delete" if hard else "emission_factor.deactivate",
        factor_id,
        {"category": factor.category, "sub_category": factor.sub_category},
    )
    await session.commit()
    message = "Emission factor deleted" if hard else "Emission factor deactivated"
    return {"success": True, "message": message}


@router.get("/audit-logs", response_model=list[AuditLogOut])
async def get_audit_logs(
    ctx: Annotated[RequestContext, Depends(require_admin)],
    session: Annotated[AsyncSession, Depends(get_session)],
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
    action: str | None = None,
) -> list[AuditLogOut]:
    entries = await list_audit_logs(session, limit=limit, offset=offset, action=action)
    return [AuditLogOut.model_validate(entry) for entry in entries]
