"""Repository for the admin audit log."""

import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.context import RequestContext
from backend.app.db.models import AdminAuditLog


async def record_admin_action(
    session: AsyncSession,
    ctx: RequestContext,
    action: str,
    target_resource: str,
    target_id: uuid.UUID | str | None = None,
    details: dict[str, Any] | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> uuid.UUID:
    """Append an audit entry for an admin mutation.

    Args:
        session: Database session
        ctx: Request context of the acting admin
        action: Action name (e.g. "emission_factor.create")
        target_resource: Resource type affected
        target_id: Affected resource id
        details: JSON-serializable details of the change
        ip_address: Client address, if known
        user_agent: Client user agent, if known

    Returns:
        Audit entry ID
    """
    entry = AdminAuditLog(
        id=uuid.uuid4(),
        admin_user_id=ctx.user_id,
        action=action,
        target_resource=target_resource,
        target_id=str(target_id) if target_id is not None else None,
        details=details or {},
        ip_address=ip_address,
        user_agent=user_agent,
    )
    session.add(entry)
    await session.flush()
    return entry.id


async def list_audit_logs(
    session: AsyncSession,
    limit: int = 50,
    offset: int = 0,
    action: str | None = None,
) -> list[AdminAuditLog]:
    """List audit entries, newest first."""
    query = select(AdminAuditLog).order_by(AdminAuditLog.created_at.desc()).limit(limit).offset(offset)
    if action is not None:
        query = query.where(AdminAuditLog.action == action)

    result = await session.execute(query)
    return list(result.scalars().all())
