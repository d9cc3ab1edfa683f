"""Data Transfer Objects for Credit Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime, date
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field
from src.domain.amortization import CreditPlan
from src.domain.credit import Credit, CreditStatus, PaymentFrequency
from src.domain.installment import Installment, InstallmentStatus
from src.domain.payment import Payment
from src.domain.schedule import Allocation


class SimulateCreditCommandDTO(BaseModel):
    """Command DTO for previewing a credit plan without persisting anything"""

    amount: Decimal = Field(..., gt=0, description="Principal to disburse")

    interest_rate: Decimal = Field(
        ...,
        ge=0,
        description="Monthly interest rate in percent (10 means 10%)"
    )

    term_days: int = Field(..., gt=0, description="Term in days")

    payment_frequency: PaymentFrequency = Field(..., description="Installment frequency")

    start_date: Optional[date] = Field(
        default=None,
        description="Disbursement date (defaults to today)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "amount": "1000000.00",
                "interest_rate": "10",
                "term_days": 30,
                "payment_frequency": "weekly"
            }
        }


class CreateCreditCommandDTO(SimulateCreditCommandDTO):
    """
    Command DTO for disbursing a credit to a client

    Used as input to CreateCredit use case.
    """

    client_id: str = Field(..., description="Borrowing client")

    business_id: Optional[str] = Field(
        default=None,
        description="Target business; required for actors that may access any business"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "client_id": "0b4c62a1-2f55-4d5e-8a32-6c8f4b1f7e90",
                "business_id": "3f0c7a52-8d7e-4b2a-9a51-0c8f9d6e2b11",
                "amount": "1000000.00",
                "interest_rate": "10",
                "term_days": 30,
                "payment_frequency": "weekly"
            }
        }


class PlannedInstallmentDTO(BaseModel):
    installment_number: int
    due_date: date
    scheduled_amount: Decimal


class SimulationResponseDTO(BaseModel):
    """Response DTO for a simulated credit plan"""

    amount: Decimal
    interest_rate: Decimal
    term_days: int
    payment_frequency: PaymentFrequency
    start_date: date
    end_date: date
    number_of_installments: int
    installment_amount: Decimal
    total_interest: Decimal
    total_with_interest: Decimal
    installments: List[PlannedInstallmentDTO]

    @classmethod
    def from_plan(
        cls,
        plan: CreditPlan,
        command: SimulateCreditCommandDTO,
        start_date: date,
        end_date: date,
    ) -> "SimulationResponseDTO":
        return cls(
            amount=command.amount,
            interest_rate=command.interest_rate,
            term_days=command.term_days,
            payment_frequency=command.payment_frequency,
            start_date=start_date,
            end_date=end_date,
            number_of_installments=plan.number_of_installments,
            installment_amount=plan.installment_amount,
            total_interest=plan.total_interest,
            total_with_interest=plan.total_with_interest,
            installments=[
                PlannedInstallmentDTO(
                    installment_number=p.installment_number,
                    due_date=p.due_date,
                    scheduled_amount=p.scheduled_amount,
                )
                for p in plan.installments
            ],
        )


class InstallmentDTO(BaseModel):
    id: str
    installment_number: int
    due_date: date
    scheduled_amount: Decimal
    paid_amount: Decimal
    status: InstallmentStatus

    @classmethod
    def from_entity(cls, installment: Installment) -> "InstallmentDTO":
        return cls(
            id=installment.id,
            installment_number=installment.installment_number,
            due_date=installment.due_date,
            scheduled_amount=installment.scheduled_amount,
            paid_amount=installment.paid_amount,
            status=installment.status,
        )


class CreditResponseDTO(BaseModel):
    """Response DTO for a credit, optionally with its schedule"""

    id: str
    business_id: str
    client_id: str
    amount: Decimal
    interest_rate: Decimal
    payment_frequency: PaymentFrequency
    start_date: date
    end_date: date
    term_days: int
    total_interest: Decimal
    total_with_interest: Decimal
    remaining_balance: Decimal
    status: CreditStatus
    created_at: datetime
    installments: List[InstallmentDTO] = Field(default_factory=list)

    @classmethod
    def from_entity(
        cls,
        credit: Credit,
        installments: Optional[List[Installment]] = None,
    ) -> "CreditResponseDTO":
        return cls(
            id=credit.id,
            business_id=credit.business_id,
            client_id=credit.client_id,
            amount=credit.amount,
            interest_rate=credit.interest_rate,
            payment_frequency=credit.payment_frequency,
            start_date=credit.start_date,
            end_date=credit.end_date,
            term_days=credit.term_days,
            total_interest=credit.total_interest,
            total_with_interest=credit.total_with_interest,
            remaining_balance=credit.remaining_balance,
            status=credit.status,
            created_at=credit.created_at,
            installments=[InstallmentDTO.from_entity(i) for i in installments or []],
        )


class RegisterPaymentCommandDTO(BaseModel):
    """
    Command DTO for collecting a payment against a credit

    Used as input to RegisterPayment use case. Without schedule_id the
    amount is distributed across installments, overdue ones first.
    """

    credit_id: str = Field(..., description="Credit being paid")

    amount: Decimal = Field(..., gt=0, description="Amount received")

    payment_date: Optional[datetime] = Field(
        default=None,
        description="When the money was received (defaults to now, never in the future)"
    )

    payment_method: Optional[str] = Field(default=None, max_length=50)

    notes: Optional[str] = Field(default=None, max_length=300)

    schedule_id: Optional[str] = Field(
        default=None,
        description="Apply the whole amount to this installment only"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "credit_id": "8a1d2c3b-4e5f-4a6b-9c7d-0e1f2a3b4c5d",
                "amount": "275000.00",
                "payment_method": "cash"
            }
        }


class PaymentDTO(BaseModel):
    id: str
    credit_id: str
    installment_id: Optional[str] = None
    amount: Decimal
    payment_date: datetime
    amount_to_principal: Decimal
    amount_to_interest: Decimal
    remaining_balance_after: Decimal
    payment_method: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, payment: Payment) -> "PaymentDTO":
        return cls(
            id=payment.id,
            credit_id=payment.credit_id,
            installment_id=payment.installment_id,
            amount=payment.amount,
            payment_date=payment.payment_date,
            amount_to_principal=payment.amount_to_principal,
            amount_to_interest=payment.amount_to_interest,
            remaining_balance_after=payment.remaining_balance_after,
            payment_method=payment.payment_method,
            notes=payment.notes,
            created_at=payment.created_at,
        )


class AllocationDTO(BaseModel):
    installment_id: str
    applied: Decimal
    paid_amount: Decimal
    status: InstallmentStatus

    @classmethod
    def from_allocation(cls, allocation: Allocation) -> "AllocationDTO":
        return cls(
            installment_id=allocation.installment_id,
            applied=allocation.applied,
            paid_amount=allocation.new_paid_amount,
            status=allocation.new_status,
        )


class PaymentResponseDTO(BaseModel):
    """Response DTO for a registered payment"""

    payment: PaymentDTO
    allocations: List[AllocationDTO]
    credit_remaining_balance: Decimal
    credit_status: CreditStatus


class CreditDetailResponseDTO(CreditResponseDTO):
    """Credit with its schedule and payments (most recent first)"""

    payments: List[PaymentDTO] = Field(default_factory=list)


class ScheduleRowDTO(BaseModel):
    """One row of an edited schedule"""

    id: Optional[str] = Field(
        default=None,
        description="Existing installment (required once anything is paid)"
    )

    installment_number: Optional[int] = Field(
        default=None,
        gt=0,
        description="Defaults to the row position"
    )

    due_date: date

    scheduled_amount: Decimal = Field(..., ge=0)


class UpdateScheduleCommandDTO(BaseModel):
    """
    Command DTO for re-amortizing a credit

    Used as input to UpdateSchedule use case.
    """

    credit_id: str

    installments: List[ScheduleRowDTO] = Field(..., min_length=1)


class ListCreditsResponseDTO(BaseModel):
    credits: List[CreditResponseDTO]
    total: int


class ListPaymentsResponseDTO(BaseModel):
    payments: List[PaymentDTO]
    total: int
    total_amount: Decimal


class OverdueRefreshResultDTO(BaseModel):
    """Result of an overdue status sweep"""

    as_of: date
    installments_updated: int
    credits_updated: int
    execution_time_ms: int
