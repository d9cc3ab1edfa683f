from .base import BaseModel, generate_uuid
from .actor import Actor, Action, UserRole
from .business import Business
from .client import Client
from .user_business import UserBusiness
from .credit import Credit, CreditStatus, PaymentFrequency
from .installment import Installment, InstallmentStatus
from .payment import Payment
from .cash_movement import CashMovement, MovementType, EXPENSE_TYPES

__all__ = [
    "BaseModel",
    "generate_uuid",
    "Actor",
    "Action",
    "UserRole",
    "Business",
    "Client",
    "UserBusiness",
    "Credit",
    "CreditStatus",
    "PaymentFrequency",
    "Installment",
    "InstallmentStatus",
    "Payment",
    "CashMovement",
    "MovementType",
    "EXPENSE_TYPES",
]
