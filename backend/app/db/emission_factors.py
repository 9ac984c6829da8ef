"""Repository for emission factor operations."""

import logging
import uuid
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.carbon.factors import DEFAULT_EMISSION_FACTORS
from backend.app.db.models import EmissionFactor
from backend.app.errors import ConflictError, NotFoundError
from backend.app.models.carbon import EmissionFactorCreate, EmissionFactorUpdate
from backend.app.models.common import FactorCategory

logger = logging.getLogger(__name__)


class SqlFactorStore:
    """FactorStore backed by the emission_factors table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_active_factor(self, category: FactorCategory, sub_category: str) -> float | None:
        """Return the active factor value, or None if no active row exists."""
        result = await self._session.execute(
            select(EmissionFactor.factor_kg_per_unit).where(
                EmissionFactor.category == category.value,
                EmissionFactor.sub_category == sub_category,
                EmissionFactor.is_active.is_(True),
            )
        )
        value = result.scalars().first()
        return float(value) if value is not None else None


async def _ensure_no_active_duplicate(
    session: AsyncSession,
    category: str,
    sub_category: str,
    exclude_id: uuid.UUID | None = None,
) -> None:
    query = select(EmissionFactor.id).where(
        EmissionFactor.category == category,
        EmissionFactor.sub_category == sub_category,
        EmissionFactor.is_active.is_(True),
    )
    if exclude_id is not None:
        query = query.where(EmissionFactor.id != exclude_id)

    result = await session.execute(query)
    if result.scalars().first() is not None:
        raise ConflictError(f"An active emission factor already exists for {category}/{sub_category}")


async def list_factors(
    session: AsyncSession,
    category: FactorCategory | None = None,
    include_inactive: bool = True,
) -> list[EmissionFactor]:
    """List emission factors ordered by category and sub-category."""
    query = select(EmissionFactor).order_by(EmissionFactor.category, EmissionFactor.sub_category)
    if category is not None:
        query = query.where(EmissionFactor.category == category.value)
    if not include_inactive:
        query = query.where(EmissionFactor.is_active.is_(True))

    result = await session.execute(query)
    return list(result.scalars().all())


async def get_factor(session: AsyncSession, factor_id: uuid.UUID) -> EmissionFactor:
    """Fetch one factor by id.

    Raises:
        NotFoundError: If the factor does not exist
    """
    factor = await session.get(EmissionFactor, factor_id)
    if factor is None:
        raise NotFoundError(f"Emission factor {factor_id} not found")
    return factor


async def create_factor(session: AsyncSession, data: EmissionFactorCreate) -> EmissionFactor:
    """Create a new active factor.

    Raises:
        ConflictError: If an active factor already exists for the pair
    """
    await _ensure_no_active_duplicate(session, data.category.value, data.sub_category)

    factor = EmissionFactor(
        id=uuid.uuid4(),
        category=data.category.value,
        sub_category=data.sub_category,
        factor_kg_per_unit=Decimal(str(data.factor_kg_per_unit)),
        unit=data.unit,
        source=data.source,
        description=data.description,
        is_active=True,
    )
    session.add(factor)
    await session.flush()
    return factor


async def update_factor(
    session: AsyncSession, factor_id: uuid.UUID, data: EmissionFactorUpdate
) -> tuple[EmissionFactor, dict]:
    """Apply a partial update.

    Returns:
        The updated factor and a dict of changed fields (old, new) for auditing

    Raises:
        NotFoundError: If the factor does not exist
        ConflictError: If the update would create a second active factor
    """
    factor = await get_factor(session, factor_id)
    updates = data.model_dump(exclude_unset=True)

    sub_category = updates.get("sub_category") or factor.sub_category
    is_active = updates.get("is_active", factor.is_active)
    if is_active:
        await _ensure_no_active_duplicate(session, factor.category, sub_category, exclude_id=factor.id)

    changes: dict = {}
    for field, value in updates.items():
        if value is None and field != "description":
            continue
        if field == "factor_kg_per_unit":
            value = Decimal(str(value))
        old = getattr(factor, field)
        if old != value:
            changes[field] = {"old": _jsonable(old), "new": _jsonable(value)}
            setattr(factor, field, value)

    await session.flush()
    await session.refresh(factor)
    return factor, changes


async def delete_factor(session: AsyncSession, factor_id: uuid.UUID, hard: bool = False) -> EmissionFactor:
    """Deactivate a factor, or remove the row when hard is set.

    Raises:
        NotFoundError: If the factor does not exist
    """
    factor = await get_factor(session, factor_id)
    if hard:
        await session.delete(factor)
    else:
        factor.is_active = False
    await session.flush()
    return factor


async def seed_default_factors(session: AsyncSession) -> int:
    """Insert any default DEFRA factor that has no row yet.

    Safe to run repeatedly; existing rows (active or not) are left untouched.

    Returns:
        Number of rows inserted
    """
    result = await session.execute(select(EmissionFactor.category, EmissionFactor.sub_category))
    existing = {(category, sub_category) for category, sub_category in result.all()}

    inserted = 0
    for seed in DEFAULT_EMISSION_FACTORS:
        if (seed.category.value, seed.sub_category) in existing:
            continue
        session.add(
            EmissionFactor(
                id=uuid.uuid4(),
                category=seed.category.value,
                sub_category=seed.sub_category,
                factor_kg_per_unit=Decimal(str(seed.factor_kg_per_unit)),
                unit=seed.unit,
                source=seed.source,
                description=seed.description,
                is_active=True,
            )
        )
        inserted += 1

    await session.flush()
    logger.info(f"Seeded {inserted} emission factors ({len(existing)} already present)")
    return inserted


def _jsonable(value: object) -> object:
    if isinstance(value, Decimal):
        return float(value)
    return value
