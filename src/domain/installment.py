"""Installment Domain Entity

One scheduled repayment row of a credit.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, Date, ForeignKey, Numeric, String
from src.domain.base import BaseModel, generate_uuid


class InstallmentStatus(str, Enum):
    """Installment status, always derivable from amounts and due date"""
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
    OVERDUE = "overdue"


class Installment(BaseModel, table=True):
    """
    Installment - payment schedule row

    Domain Rules:
    - 0 <= paid_amount <= scheduled_amount
    - status is a pure function of (paid_amount, scheduled_amount, due_date, as_of),
      see src.domain.schedule.derive_status
    """

    __tablename__ = "payment_schedules"
    __table_args__ = (
        CheckConstraint('paid_amount >= 0', name='paid_amount_non_negative'),
        Index('ix_payment_schedules_credit_number', 'credit_id', 'installment_number'),
        Index('ix_payment_schedules_due_status', 'due_date', 'status'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Installment identifier (UUID)"
    )

    credit_id: str = Field(
        sa_column=Column(String, ForeignKey("credits.id", ondelete="CASCADE"), nullable=False),
        description="Owning credit"
    )

    installment_number: int = Field(description="1-based ordering key")

    due_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Due date"
    )

    scheduled_amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Amount due"
    )

    paid_amount: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Amount collected so far"
    )

    status: InstallmentStatus = Field(
        default=InstallmentStatus.PENDING,
        description="Installment status (pending, partial, paid, overdue)"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Creation timestamp"
    )

    @property
    def outstanding(self) -> Decimal:
        """scheduled_amount - paid_amount"""
        return self.scheduled_amount - self.paid_amount
