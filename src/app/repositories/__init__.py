from .business_repository import BusinessRepository
from .client_repository import ClientRepository
from .credit_repository import CreditRepository
from .installment_repository import InstallmentRepository
from .payment_repository import PaymentRepository
from .cash_movement_repository import CashMovementRepository

__all__ = [
    "BusinessRepository",
    "ClientRepository",
    "CreditRepository",
    "InstallmentRepository",
    "PaymentRepository",
    "CashMovementRepository",
]
