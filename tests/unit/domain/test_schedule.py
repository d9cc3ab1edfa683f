"""Unit tests for schedule rules

Tests cover:
- Installment status derivation
- Credit status derivation
- Payment distribution (ordering, conservation, leftover detection)
- Status refresh
"""

import pytest
from datetime import date
from decimal import Decimal

from src.domain.credit import CreditStatus
from src.domain.exceptions import DistributionInvariantError
from src.domain.installment import InstallmentStatus
from src.domain.schedule import (
    apply_allocations,
    derive_credit_status,
    derive_status,
    distribute_payment,
    refresh_statuses,
)


class TestDeriveStatus:
    """Test the installment status rule"""

    @pytest.mark.parametrize(
        "paid,scheduled,due,as_of,expected",
        [
            ("100", "100", date(2024, 1, 1), date(2024, 2, 1), InstallmentStatus.PAID),
            ("120", "100", date(2024, 3, 1), date(2024, 2, 1), InstallmentStatus.PAID),
            ("50", "100", date(2024, 1, 1), date(2024, 2, 1), InstallmentStatus.OVERDUE),
            ("0", "100", date(2024, 1, 31), date(2024, 2, 1), InstallmentStatus.OVERDUE),
            ("50", "100", date(2024, 2, 1), date(2024, 2, 1), InstallmentStatus.PARTIAL),
            ("0", "100", date(2024, 2, 1), date(2024, 2, 1), InstallmentStatus.PENDING),
            ("0", "0", date(2024, 1, 1), date(2024, 2, 1), InstallmentStatus.PAID),
        ],
    )
    def test_status_rule(self, paid, scheduled, due, as_of, expected):
        assert derive_status(Decimal(paid), Decimal(scheduled), due, as_of) == expected


class TestDeriveCreditStatus:
    def test_paid_when_nothing_remains(self):
        assert derive_credit_status(Decimal("0"), [InstallmentStatus.OVERDUE]) == CreditStatus.PAID

    def test_overdue_when_any_installment_overdue(self):
        statuses = [InstallmentStatus.PAID, InstallmentStatus.OVERDUE, InstallmentStatus.PENDING]
        assert derive_credit_status(Decimal("10"), statuses) == CreditStatus.OVERDUE

    def test_active_otherwise(self):
        statuses = [InstallmentStatus.PAID, InstallmentStatus.PARTIAL]
        assert derive_credit_status(Decimal("10"), statuses) == CreditStatus.ACTIVE


class TestDistributePayment:
    """Test payment distribution across installments"""

    def test_one_full_installment_pays_only_the_first(self, make_schedule):
        """
        Given: 4 pending installments of 275,000
        When: Exactly one installment amount is distributed before any due date
        Then: Only the first installment becomes paid
        """
        installments = make_schedule()

        allocations = distribute_payment(
            Decimal("275000.00"), installments, date(2024, 1, 5), as_of=date(2024, 1, 5)
        )

        assert len(allocations) == 1
        assert allocations[0].installment_id == "inst_1"
        assert allocations[0].applied == Decimal("275000.00")
        assert allocations[0].new_status == InstallmentStatus.PAID

    def test_overdue_installments_are_served_first(self, make_schedule):
        installments = list(reversed(make_schedule()))

        allocations = distribute_payment(
            Decimal("400000.00"), installments, date(2024, 1, 20), as_of=date(2024, 1, 20)
        )

        assert [a.installment_id for a in allocations] == ["inst_1", "inst_2"]
        assert allocations[0].new_status == InstallmentStatus.PAID
        assert allocations[1].applied == Decimal("125000.00")
        # partially paid but past due
        assert allocations[1].new_status == InstallmentStatus.OVERDUE

    def test_skips_installments_already_paid(self, make_schedule):
        installments = make_schedule()
        installments[0].paid_amount = Decimal("275000.00")
        installments[0].status = InstallmentStatus.PAID

        allocations = distribute_payment(
            Decimal("100.00"), installments, date(2024, 1, 5), as_of=date(2024, 1, 5)
        )

        assert [a.installment_id for a in allocations] == ["inst_2"]
        assert allocations[0].new_status == InstallmentStatus.PARTIAL

    def test_applied_amounts_sum_to_payment(self, make_schedule):
        installments = make_schedule()
        installments[1].paid_amount = Decimal("1000.50")
        amount = Decimal("612345.67")

        allocations = distribute_payment(amount, installments, date(2024, 1, 5), as_of=date(2024, 1, 5))

        assert sum(a.applied for a in allocations) == amount
        for allocation in allocations:
            installment = next(i for i in installments if i.id == allocation.installment_id)
            assert allocation.new_paid_amount <= installment.scheduled_amount

    def test_leftover_raises_invariant_error(self, make_schedule):
        installments = make_schedule()

        with pytest.raises(DistributionInvariantError) as exc_info:
            distribute_payment(
                Decimal("1100000.01"), installments, date(2024, 1, 5), as_of=date(2024, 1, 5)
            )

        assert exc_info.value.unapplied == Decimal("0.01")
        assert exc_info.value.code == "INTERNAL_INVARIANT_VIOLATION"

    def test_does_not_mutate_installments(self, make_schedule):
        installments = make_schedule()

        distribute_payment(Decimal("275000.00"), installments, date(2024, 1, 5), as_of=date(2024, 1, 5))

        assert all(i.paid_amount == Decimal("0") for i in installments)


class TestApplyAndRefresh:
    def test_apply_allocations_writes_amounts_and_statuses(self, make_schedule):
        installments = make_schedule()
        allocations = distribute_payment(
            Decimal("300000.00"), installments, date(2024, 1, 5), as_of=date(2024, 1, 5)
        )

        touched = apply_allocations(installments, allocations)

        assert [i.id for i in touched] == ["inst_1", "inst_2"]
        assert installments[0].paid_amount == Decimal("275000.00")
        assert installments[0].status == InstallmentStatus.PAID
        assert installments[1].paid_amount == Decimal("25000.00")
        assert installments[1].status == InstallmentStatus.PARTIAL

    def test_refresh_returns_only_changed_rows(self, make_schedule):
        installments = make_schedule()

        changed = refresh_statuses(installments, as_of=date(2024, 1, 16))

        assert [i.id for i in changed] == ["inst_1", "inst_2"]
        assert installments[0].status == InstallmentStatus.OVERDUE
        assert installments[2].status == InstallmentStatus.PENDING
        assert refresh_statuses(installments, as_of=date(2024, 1, 16)) == []
