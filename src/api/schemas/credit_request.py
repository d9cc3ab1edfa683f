"""Request schemas for Credit API

Pydantic models for validating incoming HTTP requests.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator
from src.domain.credit import PaymentFrequency


class SimulateCreditRequestSchema(BaseModel):
    """
    Request schema for simulating a credit

    Used for POST /credits/simulate endpoint.
    """

    amount: Decimal = Field(..., gt=0, description="Principal (must be > 0)")

    interest_rate: Decimal = Field(
        ...,
        ge=0,
        le=100,
        description="Monthly interest rate in percent"
    )

    term_days: int = Field(..., gt=0, le=3650, description="Term in days")

    payment_frequency: PaymentFrequency = Field(..., description="daily, weekly, biweekly or monthly")

    start_date: Optional[date] = Field(default=None, description="Defaults to today")

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v):
        """Money has at most two decimals"""
        if v.as_tuple().exponent < -2:
            raise ValueError("Amount cannot have more than 2 decimal places")
        return v


class CreateCreditRequestSchema(SimulateCreditRequestSchema):
    """
    Request schema for creating a credit

    Used for POST /credits endpoint.
    """

    client_id: str = Field(..., min_length=1, description="Borrowing client")

    business_id: Optional[str] = Field(
        default=None,
        description="Required for admins; regular users default to their assigned business"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "client_id": "0b4c62a1-2f55-4d5e-8a32-6c8f4b1f7e90",
                "amount": "1000000.00",
                "interest_rate": "10",
                "term_days": 30,
                "payment_frequency": "weekly"
            }
        }


class RegisterPaymentRequestSchema(BaseModel):
    """
    Request schema for registering a payment

    Used for POST /payments endpoint.
    """

    credit_id: str = Field(..., min_length=1)

    amount: Decimal = Field(..., gt=0, description="Amount received (must be > 0)")

    payment_date: Optional[datetime] = Field(default=None, description="Defaults to now")

    payment_method: Optional[str] = Field(default=None, max_length=50)

    notes: Optional[str] = Field(default=None, max_length=300)

    schedule_id: Optional[str] = Field(
        default=None,
        description="Pay one installment instead of distributing the amount"
    )

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v):
        """Money has at most two decimals"""
        if v.as_tuple().exponent < -2:
            raise ValueError("Amount cannot have more than 2 decimal places")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "credit_id": "8a1d2c3b-4e5f-4a6b-9c7d-0e1f2a3b4c5d",
                "amount": "275000.00",
                "payment_method": "cash"
            }
        }


class ScheduleRowSchema(BaseModel):
    id: Optional[str] = None
    installment_number: Optional[int] = Field(default=None, gt=0)
    due_date: date
    scheduled_amount: Decimal = Field(..., ge=0)


class UpdateScheduleRequestSchema(BaseModel):
    """
    Request schema for re-amortizing a credit

    Used for PUT /credits/{credit_id}/schedule endpoint.
    """

    installments: List[ScheduleRowSchema] = Field(..., min_length=1)
