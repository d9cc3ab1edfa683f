"""Unit tests for CashMovement domain entity"""

import pytest
from decimal import Decimal

from src.domain.cash_movement import CashMovement, MovementType


class TestMovementType:
    @pytest.mark.parametrize(
        "movement_type,is_income",
        [
            (MovementType.INITIAL_CAPITAL, True),
            (MovementType.CAPITAL_INJECTION, True),
            (MovementType.PAYMENT_RECEIVED, True),
            (MovementType.INTEREST_EARNED, True),
            (MovementType.WITHDRAWAL, False),
            (MovementType.LOAN_DISBURSEMENT, False),
        ],
    )
    def test_income_classification(self, movement_type, is_income):
        assert movement_type.is_income is is_income


class TestSignedAmount:
    def test_income_is_positive(self):
        movement = CashMovement(
            business_id="business_1",
            type=MovementType.PAYMENT_RECEIVED,
            amount=Decimal("100.00"),
            balance_after=Decimal("1100.00"),
        )

        assert movement.signed_amount == Decimal("100.00")

    def test_expense_is_negative(self):
        movement = CashMovement(
            business_id="business_1",
            type=MovementType.LOAN_DISBURSEMENT,
            amount=Decimal("100.00"),
            balance_after=Decimal("900.00"),
        )

        assert movement.signed_amount == Decimal("-100.00")
