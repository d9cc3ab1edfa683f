import pytest
from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.adapter.services.access_policy import RoleAccessPolicy
from src.domain.actor import Actor, UserRole
from src.domain.business import Business
from src.domain.client import Client
from src.domain.credit import Credit, CreditStatus, PaymentFrequency
from src.domain.installment import Installment, InstallmentStatus


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def access_policy():
    return RoleAccessPolicy()


@pytest.fixture
def memberships():
    """Membership resolver assigning every user to business_1"""
    resolver = MagicMock()
    resolver.business_of = AsyncMock(return_value="business_1")
    return resolver


@pytest.fixture
def user_actor():
    return Actor(user_id="user_1", role=UserRole.USER)


@pytest.fixture
def admin_actor():
    return Actor(user_id="admin_1", role=UserRole.ADMIN)


@pytest.fixture
def super_admin_actor():
    return Actor(user_id="root_1", role=UserRole.SUPER_ADMIN)


@pytest.fixture
def sample_business():
    return Business(
        id="business_1",
        name="Main street lending",
        initial_capital=Decimal("1000000.00"),
        current_balance=Decimal("1000000.00"),
    )


@pytest.fixture
def sample_client():
    return Client(id="client_1", business_id="business_1", full_name="Ana Torres")


@pytest.fixture
def sample_credit():
    """1,000,000 at 10% monthly, weekly over 28 days (4 x 275,000)"""
    return Credit(
        id="credit_1",
        business_id="business_1",
        client_id="client_1",
        amount=Decimal("1000000.00"),
        interest_rate=Decimal("10"),
        payment_frequency=PaymentFrequency.WEEKLY,
        start_date=date(2024, 1, 1),
        end_date=date(2024, 1, 29),
        term_days=28,
        total_interest=Decimal("100000.00"),
        total_with_interest=Decimal("1100000.00"),
        remaining_balance=Decimal("1100000.00"),
        status=CreditStatus.ACTIVE,
    )


@pytest.fixture
def make_schedule():
    """Factory of weekly schedule rows, nothing paid"""

    def _make(credit_id="credit_1", start=date(2024, 1, 1), count=4, amount=Decimal("275000.00")):
        return [
            Installment(
                id=f"inst_{n}",
                credit_id=credit_id,
                installment_number=n,
                due_date=start + timedelta(days=7 * n),
                scheduled_amount=amount,
                paid_amount=Decimal("0"),
                status=InstallmentStatus.PENDING,
            )
            for n in range(1, count + 1)
        ]

    return _make
