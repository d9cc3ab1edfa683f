"""Credit Domain Entity

A loan agreement disbursed from a business's cash to one of its clients.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, Date, ForeignKey, Numeric, String
from src.domain.base import BaseModel, generate_uuid


class PaymentFrequency(str, Enum):
    """Installment frequency"""
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


class CreditStatus(str, Enum):
    """Credit lifecycle status"""
    ACTIVE = "active"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class Credit(BaseModel, table=True):
    """
    Credit - Loan agreement

    Domain Rules:
    - amount, interest_rate and total_with_interest are immutable after creation
    - remaining_balance = total obligation - applied payments; it only increases
      through an explicit schedule edit
    - Cancellation is a status, credits are never deleted
    - business_id always equals the client's business_id
    """

    __tablename__ = "credits"
    __table_args__ = (
        CheckConstraint('amount > 0', name='credit_amount_positive'),
        CheckConstraint('remaining_balance >= 0', name='credit_remaining_non_negative'),
        Index('ix_credits_business_status', 'business_id', 'status'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Credit identifier (UUID)"
    )

    business_id: str = Field(
        sa_column=Column(String, ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False),
        description="Business that disbursed the credit"
    )

    client_id: str = Field(
        sa_column=Column(String, ForeignKey("clients.id"), nullable=False, index=True),
        description="Borrowing client"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Principal (immutable)"
    )

    interest_rate: Decimal = Field(
        sa_column=Column(Numeric(9, 4), nullable=False),
        description="Monthly interest rate in percent (immutable)"
    )

    payment_frequency: PaymentFrequency = Field(
        description="Installment frequency (daily, weekly, biweekly, monthly)"
    )

    start_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Disbursement date"
    )

    end_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="start_date + term_days"
    )

    term_days: int = Field(description="Term in days")

    total_interest: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Prorated flat interest over the whole term"
    )

    total_with_interest: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Principal + total interest (immutable)"
    )

    remaining_balance: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Outstanding obligation"
    )

    status: CreditStatus = Field(
        default=CreditStatus.ACTIVE,
        description="Credit status (active, paid, overdue, cancelled)"
    )

    created_by_id: Optional[str] = Field(
        default=None,
        description="User that created the credit"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )
