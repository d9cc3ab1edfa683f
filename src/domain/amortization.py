"""Amortization plan calculation

Prorated flat interest: the monthly rate is divided down to a per-installment
rate according to the payment frequency, and every installment accrues the
same slice of the original principal.

    10% monthly, weekly payments -> 2.5% per installment
    1,000,000 over 28 days       -> 4 installments, 100,000 interest,
                                    4 x 275,000
    1,000,000 over 30 days       -> 5 installments (the term is rounded up
                                    to whole periods), 125,000 interest

Rounding policy: installment amounts are truncated to cents and the last
installment absorbs the remainder, so the schedule always sums exactly to
total_with_interest.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP
from src.domain.credit import PaymentFrequency

CENT = Decimal("0.01")

DAYS_BETWEEN_PAYMENTS: dict[PaymentFrequency, int] = {
    PaymentFrequency.DAILY: 1,
    PaymentFrequency.WEEKLY: 7,
    PaymentFrequency.BIWEEKLY: 15,
    PaymentFrequency.MONTHLY: 30,
}

# 1 month = 30 days, 4 weeks, 2 fortnights or 1 month
PAYMENTS_PER_MONTH: dict[PaymentFrequency, int] = {
    PaymentFrequency.DAILY: 30,
    PaymentFrequency.WEEKLY: 4,
    PaymentFrequency.BIWEEKLY: 2,
    PaymentFrequency.MONTHLY: 1,
}


@dataclass(frozen=True)
class PlannedInstallment:
    installment_number: int
    due_date: date
    scheduled_amount: Decimal


@dataclass(frozen=True)
class CreditPlan:
    number_of_installments: int
    installment_amount: Decimal
    total_interest: Decimal
    total_with_interest: Decimal
    installments: tuple[PlannedInstallment, ...]


def to_money(value: Decimal) -> Decimal:
    """Round a monetary value to cents (half up)"""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def number_of_installments(term_days: int, frequency: PaymentFrequency) -> int:
    if frequency == PaymentFrequency.DAILY:
        return term_days
    gap = DAYS_BETWEEN_PAYMENTS[frequency]
    return -(-term_days // gap)


def compute_plan(
    principal: Decimal,
    rate_percent: Decimal,
    start_date: date,
    term_days: int,
    frequency: PaymentFrequency,
) -> CreditPlan:
    """
    Compute the installment plan of a credit.

    Pure and deterministic: identical inputs always produce the identical plan.

    Args:
        principal: Amount disbursed
        rate_percent: Monthly interest rate in percent (10 means 10%)
        start_date: Disbursement date; installment i is due start_date + gap * i
        term_days: Term in days
        frequency: Payment frequency

    Returns:
        CreditPlan whose installment amounts sum exactly to total_with_interest

    Raises:
        ValueError: On non-positive principal/term or negative rate
    """
    principal = Decimal(principal)
    rate_percent = Decimal(rate_percent)
    frequency = PaymentFrequency(frequency)

    if principal <= 0:
        raise ValueError("principal must be greater than 0")
    if rate_percent < 0:
        raise ValueError("rate_percent must not be negative")
    if term_days <= 0:
        raise ValueError("term_days must be greater than 0")

    count = number_of_installments(term_days, frequency)
    gap = DAYS_BETWEEN_PAYMENTS[frequency]

    # principal * (rate / 100 / payments_per_month) * count, divided once
    total_interest = to_money(
        principal * rate_percent * count / (100 * PAYMENTS_PER_MONTH[frequency])
    )
    total_with_interest = principal + total_interest

    installment_amount = (total_with_interest / count).quantize(CENT, rounding=ROUND_DOWN)
    last_amount = total_with_interest - installment_amount * (count - 1)

    installments = tuple(
        PlannedInstallment(
            installment_number=i,
            due_date=start_date + timedelta(days=gap * i),
            scheduled_amount=last_amount if i == count else installment_amount,
        )
        for i in range(1, count + 1)
    )

    return CreditPlan(
        number_of_installments=count,
        installment_amount=installment_amount,
        total_interest=total_interest,
        total_with_interest=total_with_interest,
        installments=installments,
    )


def calculate_end_date(start_date: date, term_days: int) -> date:
    return start_date + timedelta(days=term_days)


def split_payment(
    amount: Decimal,
    remaining_balance: Decimal,
    principal: Decimal,
    total_interest: Decimal,
) -> tuple[Decimal, Decimal]:
    """
    Split a payment into (principal, interest) shares.

    Interest is taken in proportion to its weight in the total obligation,
    capped at the interest that is still outstanding.
    """
    total = principal + total_interest
    if total <= 0 or total_interest <= 0:
        return amount, Decimal("0.00")

    interest_proportion = total_interest / total
    paid_so_far = total - remaining_balance
    remaining_interest = max(total_interest - paid_so_far * interest_proportion, Decimal("0"))

    to_interest = to_money(min(amount * interest_proportion, remaining_interest))
    return amount - to_interest, to_interest
