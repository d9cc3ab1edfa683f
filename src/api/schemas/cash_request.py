"""Request schemas for Cash API"""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field
from src.domain.cash_movement import MovementType


class CreateBusinessRequestSchema(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = Field(default=None, max_length=500)
    initial_capital: Decimal = Field(default=Decimal("0"), ge=0)


class RecordMovementRequestSchema(BaseModel):
    """
    Request schema for recording a ledger movement

    Used for POST /cash/movements endpoint.
    """

    business_id: str = Field(..., min_length=1)
    type: MovementType
    amount: Decimal = Field(..., gt=0)
    description: Optional[str] = Field(default=None, min_length=3, max_length=200)
    related_credit_id: Optional[str] = None
    related_payment_id: Optional[str] = None


class CapitalRequestSchema(BaseModel):
    """Request schema for capital injections and withdrawals"""

    business_id: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    description: Optional[str] = Field(default=None, min_length=3, max_length=200)
