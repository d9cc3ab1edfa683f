"""Unit tests for the amortization calculator

Tests cover:
- Prorated flat interest per frequency
- Installment count rounding up to whole periods
- Remainder-to-last rounding policy (plan sums exactly)
- Payment split between principal and interest
"""

import pytest
from datetime import date
from decimal import Decimal

from src.domain.amortization import (
    calculate_end_date,
    compute_plan,
    number_of_installments,
    split_payment,
)
from src.domain.credit import PaymentFrequency


START = date(2024, 1, 1)


class TestComputePlan:
    """Test plan generation"""

    def test_weekly_four_installments(self):
        """
        Given: 1,000,000 at 10% monthly, weekly, 28 days
        When: compute_plan is called
        Then: 4 installments of 275,000 (25,000 interest each, 2.5% per week)
        """
        # Four weeks, not "30 days": 30 days weekly rounds up to 5 installments
        # (test_term_rounds_up_to_whole_periods)
        plan = compute_plan(Decimal("1000000"), Decimal("10"), START, 28, PaymentFrequency.WEEKLY)

        assert plan.number_of_installments == 4
        assert plan.total_interest == Decimal("100000.00")
        assert plan.total_with_interest == Decimal("1100000.00")
        assert plan.installment_amount == Decimal("275000.00")
        assert [i.scheduled_amount for i in plan.installments] == [Decimal("275000.00")] * 4

    def test_term_rounds_up_to_whole_periods(self):
        """30 days weekly needs a fifth installment"""
        plan = compute_plan(Decimal("1000000"), Decimal("10"), START, 30, PaymentFrequency.WEEKLY)

        assert plan.number_of_installments == 5
        assert plan.total_interest == Decimal("125000.00")
        assert plan.total_with_interest == Decimal("1125000.00")
        assert plan.installment_amount == Decimal("225000.00")

    def test_due_dates_start_one_gap_after_start(self):
        plan = compute_plan(Decimal("1000000"), Decimal("10"), START, 28, PaymentFrequency.WEEKLY)

        assert [i.due_date for i in plan.installments] == [
            date(2024, 1, 8),
            date(2024, 1, 15),
            date(2024, 1, 22),
            date(2024, 1, 29),
        ]
        assert [i.installment_number for i in plan.installments] == [1, 2, 3, 4]

    def test_biweekly_gap_is_fifteen_days(self):
        plan = compute_plan(Decimal("100000"), Decimal("5"), START, 45, PaymentFrequency.BIWEEKLY)

        assert plan.number_of_installments == 3
        assert plan.total_interest == Decimal("7500.00")
        assert [i.due_date for i in plan.installments] == [
            date(2024, 1, 16),
            date(2024, 1, 31),
            date(2024, 2, 15),
        ]

    def test_last_installment_absorbs_remainder(self):
        """
        Given: A total that does not divide evenly into cents
        When: compute_plan is called
        Then: Regular installments are truncated and the last one takes the rest
        """
        plan = compute_plan(Decimal("100000"), Decimal("5"), START, 45, PaymentFrequency.BIWEEKLY)

        amounts = [i.scheduled_amount for i in plan.installments]
        assert amounts == [Decimal("35833.33"), Decimal("35833.33"), Decimal("35833.34")]
        assert sum(amounts) == plan.total_with_interest

    def test_daily_uses_term_days_as_count(self):
        plan = compute_plan(Decimal("1000"), Decimal("7"), START, 10, PaymentFrequency.DAILY)

        assert plan.number_of_installments == 10
        assert plan.total_interest == Decimal("23.33")
        assert plan.installments[0].scheduled_amount == Decimal("102.33")
        assert plan.installments[-1].scheduled_amount == Decimal("102.36")
        assert plan.installments[-1].due_date == date(2024, 1, 11)

    @pytest.mark.parametrize(
        "principal,rate,term_days,frequency",
        [
            ("1000000", "10", 30, PaymentFrequency.WEEKLY),
            ("1000", "7", 10, PaymentFrequency.DAILY),
            ("333333.33", "3.5", 100, PaymentFrequency.BIWEEKLY),
            ("999.99", "12.75", 95, PaymentFrequency.MONTHLY),
            ("50000", "0", 21, PaymentFrequency.WEEKLY),
        ],
    )
    def test_plan_sums_to_total_with_interest(self, principal, rate, term_days, frequency):
        plan = compute_plan(Decimal(principal), Decimal(rate), START, term_days, frequency)

        assert sum(i.scheduled_amount for i in plan.installments) == plan.total_with_interest
        assert len(plan.installments) == plan.number_of_installments
        assert all(i.scheduled_amount > 0 for i in plan.installments)

    def test_zero_rate_has_no_interest(self):
        plan = compute_plan(Decimal("50000"), Decimal("0"), START, 21, PaymentFrequency.WEEKLY)

        assert plan.total_interest == Decimal("0.00")
        assert plan.total_with_interest == Decimal("50000")

    def test_is_deterministic(self):
        args = (Decimal("123456.78"), Decimal("9.5"), START, 60, PaymentFrequency.MONTHLY)

        assert compute_plan(*args) == compute_plan(*args)

    @pytest.mark.parametrize(
        "principal,rate,term_days",
        [
            ("0", "10", 30),
            ("-5", "10", 30),
            ("1000", "-1", 30),
            ("1000", "10", 0),
        ],
    )
    def test_rejects_invalid_terms(self, principal, rate, term_days):
        with pytest.raises(ValueError):
            compute_plan(Decimal(principal), Decimal(rate), START, term_days, PaymentFrequency.WEEKLY)


class TestHelpers:
    """Test end date and installment count helpers"""

    def test_calculate_end_date(self):
        assert calculate_end_date(START, 30) == date(2024, 1, 31)

    @pytest.mark.parametrize(
        "term_days,frequency,expected",
        [
            (30, PaymentFrequency.DAILY, 30),
            (28, PaymentFrequency.WEEKLY, 4),
            (29, PaymentFrequency.WEEKLY, 5),
            (30, PaymentFrequency.BIWEEKLY, 2),
            (31, PaymentFrequency.MONTHLY, 2),
        ],
    )
    def test_number_of_installments(self, term_days, frequency, expected):
        assert number_of_installments(term_days, frequency) == expected


class TestSplitPayment:
    """Test principal/interest split of a payment"""

    def test_split_is_proportional(self):
        to_principal, to_interest = split_payment(
            Decimal("275000"),
            remaining_balance=Decimal("1100000"),
            principal=Decimal("1000000"),
            total_interest=Decimal("100000"),
        )

        assert to_interest == Decimal("25000.00")
        assert to_principal == Decimal("250000.00")

    def test_split_without_interest_goes_to_principal(self):
        to_principal, to_interest = split_payment(
            Decimal("100"),
            remaining_balance=Decimal("500"),
            principal=Decimal("500"),
            total_interest=Decimal("0"),
        )

        assert to_principal == Decimal("100")
        assert to_interest == Decimal("0.00")

    def test_split_shares_add_up_to_amount(self):
        amount = Decimal("1234.57")
        to_principal, to_interest = split_payment(
            amount,
            remaining_balance=Decimal("9000"),
            principal=Decimal("10000"),
            total_interest=Decimal("777.77"),
        )

        assert to_principal + to_interest == amount
