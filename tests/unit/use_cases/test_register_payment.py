"""Unit tests for RegisterPayment use case

Tests cover:
- Distribution across the schedule (due first, then by due date)
- Targeted installment payments
- Guards: future date, settled/cancelled credits, over-payment
- Internal faults roll the whole transaction back
"""

import pytest
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.services.audit_sink import drain_audit_events
from src.app.use_cases.credits.dtos import RegisterPaymentCommandDTO
from src.app.use_cases.credits.register_payment import RegisterPayment
from src.domain.cash_movement import MovementType
from src.domain.credit import CreditStatus
from src.domain.installment import InstallmentStatus


@pytest.fixture
def upcoming_schedule(make_schedule):
    """Four weekly installments, all still in the future"""
    return make_schedule(start=date.today() + timedelta(days=1))


@pytest.fixture
def repos(sample_business, sample_credit, upcoming_schedule):
    business_repo = MagicMock()
    business_repo.get_by_id = AsyncMock(return_value=sample_business)
    business_repo.update_balance = AsyncMock()

    credit_repo = MagicMock()
    credit_repo.get_by_id = AsyncMock(return_value=sample_credit)
    credit_repo.update = AsyncMock(side_effect=lambda credit: credit)

    installment_repo = MagicMock()
    installment_repo.get_by_credit_id = AsyncMock(return_value=upcoming_schedule)
    installment_repo.update_many = AsyncMock(side_effect=lambda installments: installments)

    payment_repo = MagicMock()
    payment_repo.create = AsyncMock(side_effect=lambda payment: payment)

    movement_repo = MagicMock()
    movement_repo.get_latest = AsyncMock(return_value=None)
    movement_repo.create = AsyncMock(side_effect=lambda movement: movement)

    return MagicMock(
        business=business_repo,
        credit=credit_repo,
        installment=installment_repo,
        payment=payment_repo,
        movement=movement_repo,
    )


@pytest.fixture
def mock_audit_sink():
    sink = MagicMock()
    sink.record = AsyncMock()
    return sink


@pytest.fixture
def payment_use_case(mock_uow, repos, access_policy, memberships, mock_audit_sink):
    return RegisterPayment(
        uow=mock_uow,
        business_repo=repos.business,
        credit_repo=repos.credit,
        installment_repo=repos.installment,
        payment_repo=repos.payment,
        movement_repo=repos.movement,
        access_policy=access_policy,
        memberships=memberships,
        audit_sink=mock_audit_sink,
    )


def _command(amount="275000.00", **kwargs):
    return RegisterPaymentCommandDTO(credit_id="credit_1", amount=Decimal(amount), **kwargs)


@pytest.mark.asyncio
class TestRegisterPaymentDistribution:
    async def test_one_full_installment(
        self, payment_use_case, repos, mock_uow, upcoming_schedule, user_actor
    ):
        """
        Given: Active credit with four 275,000 installments, nothing paid
        When: Exactly one installment amount is paid without schedule_id
        Then: Only the first installment becomes paid and the balance drops by 275,000
        """
        result = await payment_use_case.execute(_command(), user_actor)

        assert result.is_ok()
        response = result.value
        assert response.credit_remaining_balance == Decimal("825000.00")
        assert response.credit_status == CreditStatus.ACTIVE
        assert len(response.allocations) == 1
        assert response.allocations[0].installment_id == "inst_1"

        assert upcoming_schedule[0].status == InstallmentStatus.PAID
        assert upcoming_schedule[0].paid_amount == Decimal("275000.00")
        for installment in upcoming_schedule[1:]:
            assert installment.status == InstallmentStatus.PENDING
            assert installment.paid_amount == Decimal("0")

        updated = repos.installment.update_many.call_args[0][0]
        assert [i.id for i in updated] == ["inst_1"]
        mock_uow.commit.assert_called_once()

    async def test_receipt_splits_principal_and_interest(self, payment_use_case, repos, user_actor):
        result = await payment_use_case.execute(_command(), user_actor)

        payment = result.value.payment
        assert payment.amount_to_interest == Decimal("25000.00")
        assert payment.amount_to_principal == Decimal("250000.00")
        assert payment.remaining_balance_after == Decimal("825000.00")
        assert payment.installment_id is None

    async def test_income_is_recorded_in_the_ledger(self, payment_use_case, repos, user_actor):
        result = await payment_use_case.execute(_command(), user_actor)

        movement = repos.movement.create.call_args[0][0]
        assert movement.type == MovementType.PAYMENT_RECEIVED
        assert movement.amount == Decimal("275000.00")
        assert movement.balance_after == Decimal("1275000.00")
        assert movement.related_credit_id == "credit_1"
        assert movement.related_payment_id == result.value.payment.id
        repos.business.update_balance.assert_called_once_with("business_1", Decimal("1275000.00"))

    async def test_overdue_installment_is_served_first(
        self, payment_use_case, repos, make_schedule, user_actor
    ):
        """
        Given: First installment is three days past due, the rest upcoming
        When: 300,000 is paid
        Then: The overdue one is settled and the remainder lands on the next
        """
        schedule = make_schedule(start=date.today() - timedelta(days=10))
        schedule[0].status = InstallmentStatus.OVERDUE
        repos.installment.get_by_credit_id = AsyncMock(return_value=schedule)

        result = await payment_use_case.execute(_command(amount="300000.00"), user_actor)

        assert result.is_ok()
        assert schedule[0].status == InstallmentStatus.PAID
        assert schedule[1].paid_amount == Decimal("25000.00")
        assert schedule[1].status == InstallmentStatus.PARTIAL
        assert [a.applied for a in result.value.allocations] == [Decimal("275000.00"), Decimal("25000.00")]

    async def test_paying_everything_settles_the_credit(self, payment_use_case, upcoming_schedule, user_actor):
        result = await payment_use_case.execute(_command(amount="1100000.00"), user_actor)

        assert result.is_ok()
        assert result.value.credit_remaining_balance == Decimal("0.00")
        assert result.value.credit_status == CreditStatus.PAID
        assert all(i.status == InstallmentStatus.PAID for i in upcoming_schedule)
        assert result.value.payment.amount_to_interest == Decimal("100000.00")

    async def test_overdue_rows_elsewhere_mark_the_credit_overdue(
        self, payment_use_case, repos, make_schedule, user_actor
    ):
        schedule = make_schedule(start=date.today() - timedelta(days=15))
        repos.installment.get_by_credit_id = AsyncMock(return_value=schedule)

        result = await payment_use_case.execute(_command(amount="275000.00"), user_actor)

        assert result.is_ok()
        assert schedule[0].status == InstallmentStatus.PAID
        assert schedule[1].status == InstallmentStatus.OVERDUE
        assert result.value.credit_status == CreditStatus.OVERDUE

    async def test_timezone_aware_payment_date(self, payment_use_case, user_actor):
        paid_at = datetime.now(timezone.utc) - timedelta(hours=2)

        result = await payment_use_case.execute(_command(payment_date=paid_at), user_actor)

        assert result.is_ok()
        assert result.value.payment.payment_date.tzinfo is None

    async def test_audit_failure_does_not_fail_the_payment(
        self, payment_use_case, mock_audit_sink, mock_uow, user_actor
    ):
        mock_audit_sink.record = AsyncMock(side_effect=Exception("webhook down"))

        result = await payment_use_case.execute(_command(), user_actor)

        assert result.is_ok()
        mock_uow.commit.assert_called_once()
        await drain_audit_events()
        mock_audit_sink.record.assert_called_once()


@pytest.mark.asyncio
class TestRegisterPaymentTargeted:
    async def test_whole_amount_goes_to_the_named_installment(
        self, payment_use_case, upcoming_schedule, user_actor
    ):
        result = await payment_use_case.execute(
            _command(amount="100000.00", schedule_id="inst_3"), user_actor
        )

        assert result.is_ok()
        assert upcoming_schedule[2].paid_amount == Decimal("100000.00")
        assert upcoming_schedule[2].status == InstallmentStatus.PARTIAL
        assert upcoming_schedule[0].paid_amount == Decimal("0")
        assert result.value.payment.installment_id == "inst_3"

    async def test_unknown_installment(self, payment_use_case, mock_uow, user_actor):
        result = await payment_use_case.execute(_command(schedule_id="inst_99"), user_actor)

        assert result.is_err()
        assert result.error.code == "INVALID_INSTALLMENT"
        mock_uow.rollback.assert_called_once()

    async def test_installment_already_paid(self, payment_use_case, upcoming_schedule, user_actor):
        upcoming_schedule[0].paid_amount = Decimal("275000.00")
        upcoming_schedule[0].status = InstallmentStatus.PAID

        result = await payment_use_case.execute(_command(schedule_id="inst_1"), user_actor)

        assert result.is_err()
        assert result.error.code == "INSTALLMENT_ALREADY_PAID"

    async def test_amount_above_installment_outstanding(self, payment_use_case, repos, user_actor):
        result = await payment_use_case.execute(
            _command(amount="300000.00", schedule_id="inst_2"), user_actor
        )

        assert result.is_err()
        assert result.error.code == "OVER_INSTALLMENT_PAYMENT"
        repos.payment.create.assert_not_called()


@pytest.mark.asyncio
class TestRegisterPaymentGuards:
    async def test_future_payment_date_reads_nothing(self, payment_use_case, repos, user_actor):
        tomorrow = datetime.utcnow() + timedelta(days=1)

        result = await payment_use_case.execute(_command(payment_date=tomorrow), user_actor)

        assert result.is_err()
        assert result.error.code == "FUTURE_PAYMENT_DATE"
        repos.credit.get_by_id.assert_not_called()

    async def test_credit_not_found(self, payment_use_case, repos, user_actor):
        repos.credit.get_by_id = AsyncMock(return_value=None)

        result = await payment_use_case.execute(_command(), user_actor)

        assert result.is_err()
        assert result.error.code == "CREDIT_NOT_FOUND"

    async def test_already_settled(self, payment_use_case, sample_credit, user_actor):
        sample_credit.status = CreditStatus.PAID
        sample_credit.remaining_balance = Decimal("0.00")

        result = await payment_use_case.execute(_command(), user_actor)

        assert result.is_err()
        assert result.error.code == "ALREADY_SETTLED"

    async def test_cancelled_credit(self, payment_use_case, sample_credit, user_actor):
        sample_credit.status = CreditStatus.CANCELLED

        result = await payment_use_case.execute(_command(), user_actor)

        assert result.is_err()
        assert result.error.code == "CREDIT_CANCELLED"

    async def test_over_payment(self, payment_use_case, repos, mock_uow, user_actor):
        result = await payment_use_case.execute(_command(amount="1100000.01"), user_actor)

        assert result.is_err()
        assert result.error.code == "OVER_PAYMENT"
        repos.installment.update_many.assert_not_called()
        mock_uow.commit.assert_not_called()

    async def test_credit_of_another_business(self, payment_use_case, sample_credit, user_actor):
        sample_credit.business_id = "business_2"

        result = await payment_use_case.execute(_command(), user_actor)

        assert result.is_err()
        assert result.error.code == "PERMISSION_DENIED"


@pytest.mark.asyncio
class TestRegisterPaymentInvariants:
    async def test_unapplied_remainder_rolls_back(
        self, payment_use_case, repos, make_schedule, mock_uow, user_actor
    ):
        """
        Given: Credit balance says 1,100,000 but the schedule only owes 825,000
        When: 900,000 is paid
        Then: Distribution leaves 75,000 unapplied and the whole payment is rolled back
        """
        schedule = make_schedule(start=date.today() + timedelta(days=1), count=3)
        repos.installment.get_by_credit_id = AsyncMock(return_value=schedule)

        result = await payment_use_case.execute(_command(amount="900000.00"), user_actor)

        assert result.is_err()
        assert result.error.code == "INTERNAL_INVARIANT_VIOLATION"
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()
        repos.payment.create.assert_not_called()
        repos.movement.create.assert_not_called()

    async def test_ledger_head_mismatch_rolls_back(self, payment_use_case, repos, mock_uow, user_actor):
        repos.movement.get_latest = AsyncMock(return_value=MagicMock(balance_after=Decimal("5.00")))

        result = await payment_use_case.execute(_command(), user_actor)

        assert result.is_err()
        assert result.error.code == "INTERNAL_INVARIANT_VIOLATION"
        mock_uow.rollback.assert_called_once()
        repos.movement.create.assert_not_called()

    async def test_unexpected_failure(self, payment_use_case, repos, mock_uow, user_actor):
        repos.payment.create = AsyncMock(side_effect=Exception("Database error"))

        result = await payment_use_case.execute(_command(), user_actor)

        assert result.is_err()
        assert result.error.code == "REGISTER_PAYMENT_FAILED"
        mock_uow.rollback.assert_called_once()
