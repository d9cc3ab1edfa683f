"""Data Transfer Objects for Cash Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime, date
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field
from src.domain.business import Business
from src.domain.cash_movement import CashMovement, MovementType


class CreateBusinessCommandDTO(BaseModel):
    """Command DTO for opening a new business with its initial capital"""

    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = Field(default=None, max_length=500)
    initial_capital: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Opening cash (immutable once set)"
    )


class BusinessResponseDTO(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    initial_capital: Decimal
    current_balance: Decimal
    created_at: datetime

    @classmethod
    def from_entity(cls, business: Business) -> "BusinessResponseDTO":
        return cls(
            id=business.id,
            name=business.name,
            description=business.description,
            initial_capital=business.initial_capital,
            current_balance=business.current_balance,
            created_at=business.created_at,
        )


class RecordMovementCommandDTO(BaseModel):
    """
    Command DTO for recording an arbitrary ledger movement

    Used as input to RecordMovement use case.
    """

    business_id: str = Field(..., description="Business identifier")

    type: MovementType = Field(..., description="Movement type")

    amount: Decimal = Field(
        ...,
        gt=0,
        description="Movement amount (must be > 0, sign comes from type)"
    )

    description: Optional[str] = Field(default=None, min_length=3, max_length=200)

    related_credit_id: Optional[str] = Field(default=None)

    related_payment_id: Optional[str] = Field(default=None)

    class Config:
        json_schema_extra = {
            "example": {
                "business_id": "3f0c7a52-8d7e-4b2a-9a51-0c8f9d6e2b11",
                "type": "capital_injection",
                "amount": "500000.00",
                "description": "Owner contribution"
            }
        }


class CapitalCommandDTO(BaseModel):
    """Command DTO for capital injections and withdrawals"""

    business_id: str = Field(..., description="Business identifier")
    amount: Decimal = Field(..., gt=0, description="Amount (must be > 0)")
    description: Optional[str] = Field(default=None, min_length=3, max_length=200)


class CashMovementDTO(BaseModel):
    id: int
    business_id: str
    type: str
    amount: Decimal
    balance_after: Decimal
    description: Optional[str] = None
    related_credit_id: Optional[str] = None
    related_payment_id: Optional[str] = None
    created_by_id: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, movement: CashMovement) -> "CashMovementDTO":
        return cls(
            id=movement.id,
            business_id=movement.business_id,
            type=MovementType(movement.type).value,
            amount=movement.amount,
            balance_after=movement.balance_after,
            description=movement.description,
            related_credit_id=movement.related_credit_id,
            related_payment_id=movement.related_payment_id,
            created_by_id=movement.created_by_id,
            created_at=movement.created_at,
        )


class CashFlowSummaryDTO(BaseModel):
    total_income: Decimal = Field(..., description="Sum of income movements")
    total_expenses: Decimal = Field(..., description="Sum of expense movements")
    net: Decimal = Field(..., description="total_income - total_expenses")


class CashFlowResponseDTO(BaseModel):
    """
    Response DTO for cash flow queries

    Movements are ordered most recent first.
    """

    business_id: str
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    movements: List[CashMovementDTO]
    summary: CashFlowSummaryDTO


class ReconciliationResponseDTO(BaseModel):
    """
    Response DTO for a single business reconciliation

    is_reconciled compares current_balance with the latest balance_after
    (initial_capital when there are no movements). The replay fields come
    from re-walking every movement from initial_capital.
    """

    business_id: str
    is_reconciled: bool
    current_balance: Decimal
    last_recorded_balance: Decimal
    discrepancy: Decimal = Field(..., description="current_balance - last_recorded_balance")
    replayed_balance: Decimal = Field(..., description="initial_capital +/- every movement")
    replay_matches: bool
    broken_movement_ids: List[int] = Field(
        default_factory=list,
        description="Movements whose balance_after does not follow from the previous one"
    )


class ReconciliationSummaryDTO(BaseModel):
    """Result of reconciling every business (worker run)"""

    total_businesses_checked: int
    discrepancies_found: int
    discrepancies: List[ReconciliationResponseDTO]
    reconciliation_time: datetime
    execution_time_ms: int


class ForecastResponseDTO(BaseModel):
    business_id: str
    target_date: date
    current_balance: Decimal
    expected_income: Decimal = Field(
        ...,
        description="Outstanding amount of pending/partial installments due by target_date"
    )
    projected_balance: Decimal
    installments_counted: int
