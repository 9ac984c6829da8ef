"""Expense endpoints, nested under a trip."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.auth import get_current_context
from backend.app.db import expenses as expense_repo
from backend.app.db.context import RequestContext
from backend.app.db.engine import get_session
from backend.app.models.expense import ExpenseCreate, ExpenseOut, ExpenseSummary, ExpenseUpdate

router = APIRouter(prefix="/trips/{trip_id}/expenses", tags=["expenses"])


@router.get("", response_model=list[ExpenseOut])
async def list_expenses(
    trip_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[ExpenseOut]:
    expenses = await expense_repo.list_expenses(session, ctx, trip_id)
    return [ExpenseOut.model_validate(expense) for expense in expenses]


@router.get("/summary", response_model=ExpenseSummary)
async def expense_summary(
    trip_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ExpenseSummary:
    """Actual spend per category against the trip budget."""
    return await expense_repo.expense_summary(session, ctx, trip_id)


@router.post("", response_model=ExpenseOut, status_code=status.HTTP_201_CREATED)
async def create_expense(
    trip_id: uuid.UUID,
    data: ExpenseCreate,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ExpenseOut:
    expense = await expense_repo.create_expense(session, ctx, trip_id, data)
    await session.commit()
    return ExpenseOut.model_validate(expense)


@router.put("/{expense_id}", response_model=ExpenseOut)
async def update_expense(
    trip_id: uuid.UUID,
    expense_id: uuid.UUID,
    data: ExpenseUpdate,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ExpenseOut:
    expense = await expense_repo.update_expense(session, ctx, trip_id, expense_id, data)
    await session.commit()
    return ExpenseOut.model_validate(expense)


@router.delete("/{expense_id}")
async def delete_expense(
    trip_id: uuid.UUID,
    expense_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> dict[str, object]:
    await expense_repo.delete_expense(session, ctx, trip_id, expense_id)
    await session.commit()
    return {"success": True, "message": "Expense deleted successfully"}
