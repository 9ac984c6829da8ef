"""Expense models - user-entered actual spend against a trip."""

from datetime import date, datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from backend.app.models.common import ExpenseCategory
from backend.app.models.trip import MAX_BUDGET


class ExpenseCreate(BaseModel):
    """Request body for recording an expense."""

    category: ExpenseCategory
    amount: Annotated[float, Field(gt=0, le=MAX_BUDGET)]
    description: str | None = None
    expense_date: date


class ExpenseUpdate(BaseModel):
    """Partial expense update."""

    category: ExpenseCategory | None = None
    amount: Annotated[float | None, Field(gt=0, le=MAX_BUDGET)] = None
    description: str | None = None
    expense_date: date | None = None


class ExpenseOut(BaseModel):
    """Expense as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    trip_id: UUID
    category: ExpenseCategory
    amount: float
    description: str | None
    expense_date: date
    created_at: datetime | None = None


class ExpenseSummary(BaseModel):
    """Actual spend for a trip against its budget."""

    trip_id: UUID
    budget: float
    total_spent: float
    remaining_budget: float
    by_category: dict[str, float]
