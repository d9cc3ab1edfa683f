"""Unit tests for cash read-side use cases

Tests cover:
- GetCashFlow totals
- ReconcileCash / ReconcileAllBusinesses replay
- ForecastCash projection
"""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.cash.forecast_cash import ForecastCash
from src.app.use_cases.cash.get_cash_flow import GetCashFlow
from src.app.use_cases.cash.reconcile_cash import ReconcileAllBusinesses, ReconcileCash, reconcile_business
from src.domain.business import Business
from src.domain.cash_movement import CashMovement, MovementType
from src.domain.installment import Installment, InstallmentStatus


def _movement(movement_id, movement_type, amount, balance_after, business_id="business_1"):
    return CashMovement(
        id=movement_id,
        business_id=business_id,
        type=movement_type,
        amount=Decimal(amount),
        balance_after=Decimal(balance_after),
    )


@pytest.fixture
def ledger_movements():
    """1,000,000 opening; disburse 400,000; collect 110,000; inject 50,000"""
    return [
        _movement(1, MovementType.LOAN_DISBURSEMENT, "400000.00", "600000.00"),
        _movement(2, MovementType.PAYMENT_RECEIVED, "110000.00", "710000.00"),
        _movement(3, MovementType.CAPITAL_INJECTION, "50000.00", "760000.00"),
    ]


@pytest.fixture
def balanced_business():
    return Business(
        id="business_1",
        name="Main street lending",
        initial_capital=Decimal("1000000.00"),
        current_balance=Decimal("760000.00"),
    )


@pytest.fixture
def mock_business_repo(balanced_business):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=balanced_business)
    repo.get_all = AsyncMock(return_value=[balanced_business])
    return repo


@pytest.fixture
def mock_movement_repo(ledger_movements):
    repo = MagicMock()
    repo.get_by_business_id = AsyncMock(return_value=ledger_movements)
    return repo


@pytest.mark.asyncio
class TestGetCashFlow:
    async def test_summarizes_income_and_expenses(
        self, mock_business_repo, mock_movement_repo, ledger_movements, access_policy, memberships, user_actor
    ):
        mock_movement_repo.get_by_business_id = AsyncMock(return_value=list(reversed(ledger_movements)))
        use_case = GetCashFlow(mock_business_repo, mock_movement_repo, access_policy, memberships)

        result = await use_case.execute("business_1", user_actor)

        assert result.is_ok()
        summary = result.value.summary
        assert summary.total_income == Decimal("160000.00")
        assert summary.total_expenses == Decimal("400000.00")
        assert summary.net == Decimal("-240000.00")
        assert [m.id for m in result.value.movements] == [3, 2, 1]
        mock_movement_repo.get_by_business_id.assert_called_once_with(
            "business_1", start=None, end=None, newest_first=True
        )

    async def test_other_business_is_denied(
        self, mock_business_repo, mock_movement_repo, access_policy, memberships, user_actor
    ):
        use_case = GetCashFlow(mock_business_repo, mock_movement_repo, access_policy, memberships)

        result = await use_case.execute("business_2", user_actor)

        assert result.is_err()
        assert result.error.code == "PERMISSION_DENIED"
        mock_movement_repo.get_by_business_id.assert_not_called()

    async def test_admin_reads_any_business(
        self, mock_business_repo, mock_movement_repo, access_policy, memberships, admin_actor
    ):
        use_case = GetCashFlow(mock_business_repo, mock_movement_repo, access_policy, memberships)

        result = await use_case.execute("business_1", admin_actor)

        assert result.is_ok()
        memberships.business_of.assert_not_called()


class TestReconcileBusiness:
    def test_balanced_ledger(self, balanced_business, ledger_movements):
        result = reconcile_business(balanced_business, ledger_movements)

        assert result.is_reconciled is True
        assert result.replay_matches is True
        assert result.discrepancy == Decimal("0.00")
        assert result.replayed_balance == Decimal("760000.00")
        assert result.broken_movement_ids == []

    def test_empty_ledger_falls_back_to_initial_capital(self):
        business = Business(
            id="business_1",
            name="New",
            initial_capital=Decimal("500.00"),
            current_balance=Decimal("500.00"),
        )

        result = reconcile_business(business, [])

        assert result.is_reconciled is True
        assert result.last_recorded_balance == Decimal("500.00")

    def test_tampered_balance_is_reported(self, balanced_business, ledger_movements):
        balanced_business.current_balance = Decimal("800000.00")

        result = reconcile_business(balanced_business, ledger_movements)

        assert result.is_reconciled is False
        assert result.replay_matches is False
        assert result.discrepancy == Decimal("40000.00")

    def test_broken_link_is_located(self, balanced_business, ledger_movements):
        ledger_movements[1].balance_after = Decimal("720000.00")
        ledger_movements[2].balance_after = Decimal("770000.00")
        balanced_business.current_balance = Decimal("770000.00")

        result = reconcile_business(balanced_business, ledger_movements)

        assert result.is_reconciled is True
        assert result.broken_movement_ids == [2]
        assert result.replay_matches is False


@pytest.mark.asyncio
class TestReconcileCash:
    async def test_reads_ledger_oldest_first(
        self, mock_business_repo, mock_movement_repo, access_policy, memberships, user_actor
    ):
        use_case = ReconcileCash(mock_business_repo, mock_movement_repo, access_policy, memberships)

        result = await use_case.execute("business_1", user_actor)

        assert result.is_ok()
        assert result.value.is_reconciled is True
        mock_movement_repo.get_by_business_id.assert_called_once_with("business_1", newest_first=False)

    async def test_unknown_business(
        self, mock_business_repo, mock_movement_repo, access_policy, memberships, admin_actor
    ):
        mock_business_repo.get_by_id = AsyncMock(return_value=None)
        use_case = ReconcileCash(mock_business_repo, mock_movement_repo, access_policy, memberships)

        result = await use_case.execute("missing", admin_actor)

        assert result.is_err()
        assert result.error.code == "BUSINESS_NOT_FOUND"


@pytest.mark.asyncio
class TestReconcileAllBusinesses:
    async def test_collects_discrepancies(self, mock_business_repo, mock_movement_repo, balanced_business, ledger_movements):
        broken = Business(
            id="business_2",
            name="Broken",
            initial_capital=Decimal("100.00"),
            current_balance=Decimal("90.00"),
        )
        mock_business_repo.get_all = AsyncMock(return_value=[balanced_business, broken])
        mock_movement_repo.get_by_business_id = AsyncMock(side_effect=[ledger_movements, []])
        use_case = ReconcileAllBusinesses(mock_business_repo, mock_movement_repo)

        result = await use_case.execute()

        assert result.is_ok()
        assert result.value.total_businesses_checked == 2
        assert result.value.discrepancies_found == 1
        assert result.value.discrepancies[0].business_id == "business_2"
        assert result.value.discrepancies[0].discrepancy == Decimal("-10.00")

    async def test_failure_is_returned_as_error(self, mock_business_repo, mock_movement_repo):
        mock_business_repo.get_all = AsyncMock(side_effect=Exception("Database error"))
        use_case = ReconcileAllBusinesses(mock_business_repo, mock_movement_repo)

        result = await use_case.execute()

        assert result.is_err()
        assert result.error.code == "RECONCILIATION_FAILED"


@pytest.mark.asyncio
class TestForecastCash:
    async def test_projects_open_installments(
        self, mock_business_repo, access_policy, memberships, user_actor
    ):
        """
        Given: Balance 760,000 and two open installments (one partially paid)
        When: Forecasting to a date covering both
        Then: expected_income sums what is still owed on them
        """
        installment_repo = MagicMock()
        installment_repo.get_open_for_business = AsyncMock(
            return_value=[
                Installment(
                    id="inst_1", credit_id="credit_1", installment_number=1,
                    due_date=date(2024, 1, 8), scheduled_amount=Decimal("275000.00"),
                    paid_amount=Decimal("75000.00"), status=InstallmentStatus.PARTIAL,
                ),
                Installment(
                    id="inst_2", credit_id="credit_1", installment_number=2,
                    due_date=date(2024, 1, 15), scheduled_amount=Decimal("275000.00"),
                    paid_amount=Decimal("0"), status=InstallmentStatus.PENDING,
                ),
            ]
        )
        use_case = ForecastCash(mock_business_repo, installment_repo, access_policy, memberships)

        result = await use_case.execute("business_1", date(2024, 1, 15), user_actor)

        assert result.is_ok()
        assert result.value.expected_income == Decimal("475000.00")
        assert result.value.projected_balance == Decimal("1235000.00")
        assert result.value.installments_counted == 2
        installment_repo.get_open_for_business.assert_called_once_with("business_1", date(2024, 1, 15))
