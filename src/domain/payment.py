"""Payment Domain Entity

Immutable receipt of money collected against a credit.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, Numeric, String
from src.domain.base import BaseModel, generate_uuid


class Payment(BaseModel, table=True):
    """
    Payment - receipt

    Domain Rules:
    - Created once, never mutated or deleted
    - payment_date is never in the future
    - remaining_balance_after snapshots the credit balance right after applying it
    """

    __tablename__ = "payments"
    __table_args__ = (
        Index('ix_payments_credit_date', 'credit_id', 'payment_date'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Payment identifier (UUID)"
    )

    credit_id: str = Field(
        sa_column=Column(String, ForeignKey("credits.id", ondelete="CASCADE"), nullable=False),
        description="Credit the payment was applied to"
    )

    installment_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String, ForeignKey("payment_schedules.id", ondelete="SET NULL"), nullable=True),
        description="Targeted installment, if the payment was not distributed"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Amount received"
    )

    payment_date: datetime = Field(description="When the money was received")

    amount_to_principal: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Share of the payment attributed to principal"
    )

    amount_to_interest: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Share of the payment attributed to interest"
    )

    remaining_balance_after: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Credit remaining balance right after this payment"
    )

    payment_method: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
        description="Cash, transfer, ..."
    )

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(String(300), nullable=True),
    )

    created_by_id: Optional[str] = Field(default=None)

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Receipt timestamp (immutable)"
    )
