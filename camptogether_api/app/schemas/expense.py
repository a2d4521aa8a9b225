"""
Pydantic models for shared expenses.

Expenses are only recorded; nothing here computes who owes whom.  The
payer is always the authenticated caller, so ``ExpenseCreate`` has no
``payer_id`` field and any value a client sends is dropped.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class ExpenseCreate(BaseModel):
    description: str = Field(..., min_length=1, max_length=200, examples=["Firewood"])
    # Lax mode coerces numeric strings such as "12.50".
    amount: float = Field(..., gt=0, allow_inf_nan=False, examples=[12.5])
    split_among_ids: List[str] = Field(default_factory=list)

    @field_validator("split_among_ids")
    @classmethod
    def _dedupe(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(value))


class ExpenseRead(BaseModel):
    id: str
    event_id: str
    description: str
    amount: float
    payer_id: str
    split_among_ids: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
