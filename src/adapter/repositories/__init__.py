from .business_repository import SqlAlchemyBusinessRepository
from .client_repository import SqlAlchemyClientRepository
from .credit_repository import SqlAlchemyCreditRepository
from .installment_repository import SqlAlchemyInstallmentRepository
from .payment_repository import SqlAlchemyPaymentRepository
from .cash_movement_repository import SqlAlchemyCashMovementRepository

__all__ = [
    "SqlAlchemyBusinessRepository",
    "SqlAlchemyClientRepository",
    "SqlAlchemyCreditRepository",
    "SqlAlchemyInstallmentRepository",
    "SqlAlchemyPaymentRepository",
    "SqlAlchemyCashMovementRepository",
]
