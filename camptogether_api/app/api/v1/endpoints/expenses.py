"""
Expense endpoints for API v1.
"""

from typing import Any, List

from fastapi import APIRouter, Body, Depends, status

from camptogether_api.app.core.security import Identity, get_current_identity
from camptogether_api.app.schemas.common import request_body_schema
from camptogether_api.app.schemas.expense import ExpenseCreate, ExpenseRead
from camptogether_api.app.services.expense_service import ExpenseService

router = APIRouter()


@router.get("/{event_id}/expenses", response_model=List[ExpenseRead])
async def list_expenses(
    event_id: str,
    current_user: Identity = Depends(get_current_identity),
) -> List[ExpenseRead]:
    return await ExpenseService.list_expenses(event_id, current_user)


@router.post(
    "/{event_id}/expenses",
    response_model=ExpenseRead,
    status_code=status.HTTP_201_CREATED,
    openapi_extra=request_body_schema(ExpenseCreate),
)
async def add_expense(
    event_id: str,
    payload: Any = Body(None, description="ExpenseCreate, validated after the membership check"),
    current_user: Identity = Depends(get_current_identity),
) -> ExpenseRead:
    """Record an expense.  The caller is always the payer."""
    return await ExpenseService.add_expense(event_id, payload, current_user)
