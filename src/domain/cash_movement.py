"""Cash Movement Domain Entity

Immutable append-only ledger of a business's cash.
Each movement records the business balance right after it was applied.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, CheckConstraint, ForeignKey, Integer, Numeric, String
from src.domain.base import BaseModel


class MovementType(str, Enum):
    """Cash movement types"""
    INITIAL_CAPITAL = "initial_capital"      # Opening capital
    CAPITAL_INJECTION = "capital_injection"  # Owner adds cash
    WITHDRAWAL = "withdrawal"                # Owner takes cash out
    LOAN_DISBURSEMENT = "loan_disbursement"  # Credit principal handed to a client
    PAYMENT_RECEIVED = "payment_received"    # Installment collected
    INTEREST_EARNED = "interest_earned"      # Interest booked separately

    @property
    def is_income(self) -> bool:
        return self not in EXPENSE_TYPES


EXPENSE_TYPES = frozenset({MovementType.WITHDRAWAL, MovementType.LOAN_DISBURSEMENT})


class CashMovement(BaseModel, table=True):
    """
    Cash Movement - append-only ledger entry

    Domain Rules:
    - Movements are immutable (append-only)
    - amount is always positive; the type decides the sign
    - balance_after(n) = balance_after(n-1) +/- amount(n), ordered by id
    - The owning business's current_balance equals the latest balance_after
    """

    __tablename__ = "cash_movements"
    __table_args__ = (
        CheckConstraint('amount > 0', name='movement_amount_positive'),
        CheckConstraint('balance_after >= 0', name='movement_balance_non_negative'),
        Index('ix_cash_movements_business_created', 'business_id', 'created_at'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(
            BigInteger().with_variant(Integer, "sqlite"),
            primary_key=True,
            autoincrement=True,
        ),
        description="Movement identifier (auto-increment, creation order)"
    )

    business_id: str = Field(
        sa_column=Column(String, ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False),
        description="Owning business"
    )

    type: MovementType = Field(description="Movement type")

    amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Movement amount (always positive)"
    )

    balance_after: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Business balance right after this movement"
    )

    description: Optional[str] = Field(
        default=None,
        sa_column=Column(String(200), nullable=True),
    )

    related_credit_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String, ForeignKey("credits.id", ondelete="SET NULL"), nullable=True),
    )

    related_payment_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String, ForeignKey("payments.id", ondelete="SET NULL"), nullable=True),
    )

    created_by_id: Optional[str] = Field(default=None)

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Movement timestamp (immutable)"
    )

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if MovementType(self.type).is_income else -self.amount
