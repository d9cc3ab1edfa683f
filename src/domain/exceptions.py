"""Domain exceptions

Business-rule errors carry a stable code surfaced to callers through
Result errors. InvariantViolation subclasses signal internal faults: the
transaction is rolled back and the fault is logged, never corrected.
"""

from decimal import Decimal
from typing import Optional


class CreditEngineError(Exception):
    """Base class for user-facing business-rule rejections"""

    code = "CREDIT_ENGINE_ERROR"

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.reason = reason


class NotFoundError(CreditEngineError):
    code = "NOT_FOUND"


class BusinessNotFound(NotFoundError):
    code = "BUSINESS_NOT_FOUND"

    def __init__(self, business_id: str):
        super().__init__(f"Business {business_id} not found")


class ClientNotFound(NotFoundError):
    code = "CLIENT_NOT_FOUND"

    def __init__(self, client_id: str):
        super().__init__(f"Client {client_id} not found")


class CreditNotFound(NotFoundError):
    code = "CREDIT_NOT_FOUND"

    def __init__(self, credit_id: str):
        super().__init__(f"Credit {credit_id} not found")


class PermissionDenied(CreditEngineError):
    code = "PERMISSION_DENIED"


class BusinessRequired(CreditEngineError):
    code = "BUSINESS_REQUIRED"

    def __init__(self):
        super().__init__("business_id is required for actors operating on any business")


class InsufficientFunds(CreditEngineError):
    code = "INSUFFICIENT_FUNDS"

    def __init__(self, available: Decimal, required: Decimal):
        super().__init__(
            f"Insufficient funds. Required: {required}, Available: {available}",
            reason=f"balance={available}, required={required}",
        )
        self.available = available
        self.required = required


class CrossBusinessReference(CreditEngineError):
    code = "CROSS_BUSINESS_REFERENCE"

    def __init__(self, client_id: str, business_id: str):
        super().__init__(f"Client {client_id} does not belong to business {business_id}")


class FuturePaymentDate(CreditEngineError):
    code = "FUTURE_PAYMENT_DATE"

    def __init__(self):
        super().__init__("Payment date cannot be in the future")


class AlreadySettled(CreditEngineError):
    code = "ALREADY_SETTLED"

    def __init__(self, credit_id: str):
        super().__init__(f"Credit {credit_id} is already paid")


class CreditCancelled(CreditEngineError):
    code = "CREDIT_CANCELLED"

    def __init__(self, credit_id: str):
        super().__init__(f"Credit {credit_id} is cancelled")


class OverPayment(CreditEngineError):
    code = "OVER_PAYMENT"

    def __init__(self, amount: Decimal, remaining: Decimal):
        super().__init__(
            f"Payment of {amount} exceeds remaining balance {remaining}",
            reason=f"amount={amount}, remaining_balance={remaining}",
        )


class InvalidInstallment(CreditEngineError):
    code = "INVALID_INSTALLMENT"

    def __init__(self, installment_id: Optional[str], credit_id: str):
        super().__init__(f"Installment {installment_id} does not belong to credit {credit_id}")


class DuplicateInstallment(CreditEngineError):
    code = "DUPLICATE_INSTALLMENT"

    def __init__(self, field: str, value):
        super().__init__(f"Schedule names {field} {value} more than once")


class InstallmentAlreadyPaid(CreditEngineError):
    code = "INSTALLMENT_ALREADY_PAID"

    def __init__(self, installment_id: str):
        super().__init__(f"Installment {installment_id} is already paid")


class OverInstallmentPayment(CreditEngineError):
    code = "OVER_INSTALLMENT_PAYMENT"

    def __init__(self, amount: Decimal, outstanding: Decimal):
        super().__init__(
            f"Payment of {amount} exceeds installment outstanding {outstanding}",
            reason=f"amount={amount}, outstanding={outstanding}",
        )


class ScheduleLocked(CreditEngineError):
    code = "SCHEDULE_LOCKED"

    def __init__(self, existing: int, incoming: int):
        super().__init__(
            "Installment count cannot change once payments have been collected",
            reason=f"existing={existing}, incoming={incoming}",
        )


class AmountBelowPaid(CreditEngineError):
    code = "AMOUNT_BELOW_PAID"

    def __init__(self, installment_id: str, scheduled: Decimal, paid: Decimal):
        super().__init__(
            f"Scheduled amount {scheduled} for installment {installment_id} is below paid amount {paid}"
        )


class NegativeBalance(CreditEngineError):
    code = "NEGATIVE_BALANCE"

    def __init__(self, total_scheduled: Decimal, total_paid: Decimal):
        super().__init__(
            f"Collected payments {total_paid} exceed new schedule total {total_scheduled}"
        )


class InvariantViolation(Exception):
    """Internal fault: engine state would break a consistency invariant"""

    code = "INTERNAL_INVARIANT_VIOLATION"


class DistributionInvariantError(InvariantViolation):
    """Payment distribution left an unapplied remainder"""

    def __init__(self, unapplied: Decimal):
        super().__init__(f"Payment distribution left {unapplied} unapplied")
        self.unapplied = unapplied


class LedgerInvariantError(InvariantViolation):
    """Ledger balance does not match the business balance"""
