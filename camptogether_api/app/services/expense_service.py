"""
Business logic for event expenses.

Expenses are stored as entered.  Splitting is recorded through
``split_among_ids`` but never settled or computed here.
"""

import logging
from typing import Any, List, Optional

from ..core.db import Collections, FirestoreOperators, get_store
from ..core.security import Identity
from ..schemas.common import parse_payload
from ..schemas.expense import ExpenseCreate, ExpenseRead
from .common import utcnow
from .event_service import EventService

logger = logging.getLogger(__name__)


class ExpenseService:
    """Service for expenses scoped to an event."""

    @classmethod
    async def list_expenses(cls, event_id: str, caller: Optional[Identity]) -> List[ExpenseRead]:
        await EventService.load_for_member(event_id, caller)
        documents = await get_store().query(
            Collections.EXPENSES,
            filters=[("event_id", FirestoreOperators.EQ, event_id)],
        )
        expenses = [ExpenseRead(**doc) for doc in documents]
        expenses.sort(key=lambda expense: (expense.created_at is None, expense.created_at))
        return expenses

    @classmethod
    async def add_expense(cls, event_id: str, payload: Any, caller: Optional[Identity]) -> ExpenseRead:
        """Record an expense paid by the caller.

        ``payload`` is validated after the membership check.
        """
        await EventService.load_for_member(event_id, caller)
        data = parse_payload(ExpenseCreate, payload)
        expense_data = {
            "event_id": event_id,
            "description": data.description,
            "amount": data.amount,
            "payer_id": caller.id,
            "split_among_ids": data.split_among_ids,
            "created_at": utcnow(),
        }
        expense_id = await get_store().add(Collections.EXPENSES, expense_data)
        logger.info(
            "User %s added expense %s (%.2f) to event %s",
            caller.id,
            expense_id,
            data.amount,
            event_id,
            extra={"operation": "add_expense", "user_id": caller.id, "event_id": event_id, "expense_id": expense_id},
        )
        return ExpenseRead(id=expense_id, **expense_data)
