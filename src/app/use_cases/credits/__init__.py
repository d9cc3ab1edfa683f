"""Credit lifecycle use cases"""
from .simulate_credit import SimulateCredit
from .create_credit import CreateCredit
from .register_payment import RegisterPayment
from .update_schedule import UpdateSchedule
from .get_credit import GetCredit
from .list_credits import ListCredits
from .list_payments import ListPayments
from .refresh_overdue import RefreshOverdueStatuses
from .dtos import (
    SimulateCreditCommandDTO,
    SimulationResponseDTO,
    PlannedInstallmentDTO,
    CreateCreditCommandDTO,
    InstallmentDTO,
    CreditResponseDTO,
    CreditDetailResponseDTO,
    RegisterPaymentCommandDTO,
    PaymentDTO,
    AllocationDTO,
    PaymentResponseDTO,
    ScheduleRowDTO,
    UpdateScheduleCommandDTO,
    ListCreditsResponseDTO,
    ListPaymentsResponseDTO,
    OverdueRefreshResultDTO,
)

__all__ = [
    "SimulateCredit",
    "CreateCredit",
    "RegisterPayment",
    "UpdateSchedule",
    "GetCredit",
    "ListCredits",
    "ListPayments",
    "RefreshOverdueStatuses",
    "SimulateCreditCommandDTO",
    "SimulationResponseDTO",
    "PlannedInstallmentDTO",
    "CreateCreditCommandDTO",
    "InstallmentDTO",
    "CreditResponseDTO",
    "CreditDetailResponseDTO",
    "RegisterPaymentCommandDTO",
    "PaymentDTO",
    "AllocationDTO",
    "PaymentResponseDTO",
    "ScheduleRowDTO",
    "UpdateScheduleCommandDTO",
    "ListCreditsResponseDTO",
    "ListPaymentsResponseDTO",
    "OverdueRefreshResultDTO",
]
