"""Repository for expense operations."""

import uuid
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.context import RequestContext
from backend.app.db.models import Expense
from backend.app.db.trips import get_trip
from backend.app.errors import NotFoundError
from backend.app.models.expense import ExpenseCreate, ExpenseSummary, ExpenseUpdate


async def list_expenses(
    session: AsyncSession, ctx: RequestContext, trip_id: uuid.UUID
) -> list[Expense]:
    """List a trip's expenses by date."""
    await get_trip(session, ctx, trip_id)
    result = await session.execute(
        select(Expense)
        .where(Expense.trip_id == trip_id)
        .order_by(Expense.expense_date, Expense.created_at)
    )
    return list(result.scalars().all())


async def create_expense(
    session: AsyncSession, ctx: RequestContext, trip_id: uuid.UUID, data: ExpenseCreate
) -> Expense:
    """Record an expense against a trip the caller may access."""
    await get_trip(session, ctx, trip_id)
    expense = Expense(
        id=uuid.uuid4(),
        trip_id=trip_id,
        category=data.category.value,
        amount=Decimal(str(data.amount)),
        description=data.description,
        expense_date=data.expense_date,
    )
    session.add(expense)
    await session.flush()
    return expense


async def _get_expense(
    session: AsyncSession, ctx: RequestContext, trip_id: uuid.UUID, expense_id: uuid.UUID
) -> Expense:
    await get_trip(session, ctx, trip_id)
    expense = await session.get(Expense, expense_id)
    if expense is None or expense.trip_id != trip_id:
        raise NotFoundError(f"Expense {expense_id} not found")
    return expense


async def update_expense(
    session: AsyncSession,
    ctx: RequestContext,
    trip_id: uuid.UUID,
    expense_id: uuid.UUID,
    data: ExpenseUpdate,
) -> Expense:
    """Apply a partial update to an expense.

    Raises:
        NotFoundError: If the trip or expense does not exist
        PermissionDeniedError: If the caller may not access the trip
    """
    expense = await _get_expense(session, ctx, trip_id, expense_id)
    updates = data.model_dump(exclude_unset=True)

    if updates.get("category") is not None:
        expense.category = updates["category"].value
    if updates.get("amount") is not None:
        expense.amount = Decimal(str(updates["amount"]))
    if "description" in updates:
        expense.description = updates["description"]
    if updates.get("expense_date") is not None:
        expense.expense_date = updates["expense_date"]

    await session.flush()
    await session.refresh(expense)
    return expense


async def delete_expense(
    session: AsyncSession, ctx: RequestContext, trip_id: uuid.UUID, expense_id: uuid.UUID
) -> None:
    """Delete an expense.

    Raises:
        NotFoundError: If the trip or expense does not exist
        PermissionDeniedError: If the caller may not access the trip
    """
    expense = await _get_expense(session, ctx, trip_id, expense_id)
    await session.delete(expense)
    await session.flush()


async def expense_summary(
    session: AsyncSession, ctx: RequestContext, trip_id: uuid.UUID
) -> ExpenseSummary:
    """Total actual spend per category against the trip budget."""
    trip = await get_trip(session, ctx, trip_id)
    result = await session.execute(
        select(Expense.category, func.sum(Expense.amount))
        .where(Expense.trip_id == trip_id)
        .group_by(Expense.category)
    )
    by_category = {category: round(float(amount), 2) for category, amount in result.all()}
    total_spent = round(sum(by_category.values()), 2)
    budget = float(trip.budget)

    return ExpenseSummary(
        trip_id=trip_id,
        budget=budget,
        total_spent=total_spent,
        remaining_budget=round(budget - total_spent, 2),
        by_category=by_category,
    )
