"""Business Domain Entity

An isolated accounting unit. Owns its clients, credits and cash movements.
current_balance is only mutated by the cash ledger.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, Numeric, String
from src.domain.base import BaseModel, generate_uuid


class Business(BaseModel, table=True):
    """
    Business - Ledger owner

    Domain Rules:
    - initial_capital is set once at creation and never mutated
    - current_balance must be non-negative after every committed movement
    - current_balance equals the balance_after of the latest cash movement
      (or initial_capital when no movement exists)
    """

    __tablename__ = "businesses"
    __table_args__ = (
        CheckConstraint('current_balance >= 0', name='current_balance_non_negative'),
        CheckConstraint('initial_capital >= 0', name='initial_capital_non_negative'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Business identifier (UUID)"
    )

    name: str = Field(
        sa_column=Column(String(120), nullable=False),
        description="Business display name"
    )

    description: Optional[str] = Field(
        default=None,
        sa_column=Column(String(500), nullable=True),
        description="Optional description"
    )

    initial_capital: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Capital at creation (immutable, precision: 18,2)"
    )

    current_balance: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Available cash (must be >= 0, precision: 18,2)"
    )

    created_by_id: Optional[str] = Field(
        default=None,
        description="User that created the business"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last balance update timestamp"
    )
