"""Schedule reconciliation rules

Pure functions shared by payment registration, schedule edits and the
overdue sweep. Installment and credit statuses are never set by hand:
they are always derived here.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Sequence
from src.domain.credit import CreditStatus
from src.domain.exceptions import DistributionInvariantError
from src.domain.installment import Installment, InstallmentStatus


@dataclass(frozen=True)
class Allocation:
    """Portion of a payment applied to one installment"""
    installment_id: str
    applied: Decimal
    new_paid_amount: Decimal
    new_status: InstallmentStatus


def derive_status(
    paid_amount: Decimal,
    scheduled_amount: Decimal,
    due_date: date,
    as_of: date,
) -> InstallmentStatus:
    """
    paid     iff paid_amount >= scheduled_amount
    overdue  iff unpaid and due_date < as_of
    partial  iff unpaid, not overdue and paid_amount > 0
    pending  otherwise
    """
    if paid_amount >= scheduled_amount:
        return InstallmentStatus.PAID
    if due_date < as_of:
        return InstallmentStatus.OVERDUE
    if paid_amount > 0:
        return InstallmentStatus.PARTIAL
    return InstallmentStatus.PENDING


def derive_credit_status(
    remaining_balance: Decimal,
    installment_statuses: Iterable[InstallmentStatus],
) -> CreditStatus:
    if remaining_balance <= 0:
        return CreditStatus.PAID
    if any(status == InstallmentStatus.OVERDUE for status in installment_statuses):
        return CreditStatus.OVERDUE
    return CreditStatus.ACTIVE


def distribute_payment(
    amount: Decimal,
    installments: Sequence[Installment],
    payment_date: date,
    as_of: date,
) -> list[Allocation]:
    """
    Distribute a payment across installments.

    Installments due before the payment date are served first, then the rest,
    each group by ascending due date. Each installment takes
    min(pool, outstanding) until the pool is exhausted.

    Raises:
        DistributionInvariantError: If part of the payment cannot be applied
    """
    ordered = sorted(
        installments,
        key=lambda s: (0 if s.due_date < payment_date else 1, s.due_date, s.installment_number),
    )

    pool = amount
    allocations: list[Allocation] = []

    for installment in ordered:
        if pool <= 0:
            break
        pending = installment.scheduled_amount - installment.paid_amount
        if pending <= 0:
            continue

        applied = min(pool, pending)
        new_paid = installment.paid_amount + applied
        allocations.append(
            Allocation(
                installment_id=installment.id,
                applied=applied,
                new_paid_amount=new_paid,
                new_status=derive_status(new_paid, installment.scheduled_amount, installment.due_date, as_of),
            )
        )
        pool -= applied

    if pool != 0:
        raise DistributionInvariantError(pool)

    return allocations


def apply_allocations(installments: Sequence[Installment], allocations: Sequence[Allocation]) -> list[Installment]:
    """Write allocations onto their installments and return the touched rows"""
    by_id = {installment.id: installment for installment in installments}
    touched = []
    for allocation in allocations:
        installment = by_id[allocation.installment_id]
        installment.paid_amount = allocation.new_paid_amount
        installment.status = allocation.new_status
        touched.append(installment)
    return touched


def refresh_statuses(installments: Iterable[Installment], as_of: date) -> list[Installment]:
    """Re-derive every status at as_of; return the rows whose status changed"""
    changed = []
    for installment in installments:
        status = derive_status(
            installment.paid_amount, installment.scheduled_amount, installment.due_date, as_of
        )
        if installment.status != status:
            installment.status = status
            changed.append(installment)
    return changed
