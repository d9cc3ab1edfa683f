"""SQLAlchemy Credit Repository Implementation

Implements credit persistence using SQLAlchemy async session.
"""

from typing import Optional, List
from datetime import date, datetime
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.credit_repository import CreditRepository
from src.domain.credit import Credit, CreditStatus
from src.domain.installment import Installment, InstallmentStatus

OPEN_STATUSES = (InstallmentStatus.PENDING, InstallmentStatus.PARTIAL)


class SqlAlchemyCreditRepository(CreditRepository):
    """
    SQLAlchemy implementation of CreditRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, credit: Credit) -> Credit:
        """
        Create a new credit

        Args:
            credit: Credit entity to persist

        Returns:
            Created Credit
        """
        self.session.add(credit)
        await self.session.flush()
        await self.session.refresh(credit)
        return credit

    async def get_by_id(self, credit_id: str, for_update: bool = False) -> Optional[Credit]:
        """
        Retrieve credit by ID with optional row-level locking

        Args:
            credit_id: Credit identifier
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            Credit if found, None otherwise
        """
        statement = select(Credit).where(Credit.id == credit_id)

        if for_update:
            statement = statement.with_for_update()

        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_ids(self, credit_ids: List[str]) -> List[Credit]:
        if not credit_ids:
            return []
        statement = select(Credit).where(Credit.id.in_(credit_ids))
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def update(self, credit: Credit) -> Credit:
        """
        Update an existing credit

        Args:
            credit: Credit entity with updated values

        Returns:
            Updated Credit
        """
        credit.updated_at = datetime.utcnow()
        self.session.add(credit)
        await self.session.flush()
        await self.session.refresh(credit)
        return credit

    async def list(
        self,
        business_id: Optional[str] = None,
        status: Optional[CreditStatus] = None,
        due_on: Optional[date] = None,
        overdue_only: bool = False,
    ) -> List[Credit]:
        statement = select(Credit)

        if business_id:
            statement = statement.where(Credit.business_id == business_id)

        if status:
            statement = statement.where(Credit.status == status)

        if due_on:
            due_credit_ids = (
                select(Installment.credit_id)
                .where(Installment.due_date == due_on)
                .where(Installment.status.in_(OPEN_STATUSES))
            )
            statement = statement.where(Credit.id.in_(due_credit_ids))

        if overdue_only:
            overdue_credit_ids = (
                select(Installment.credit_id)
                .where(Installment.status == InstallmentStatus.OVERDUE)
            )
            statement = statement.where(Credit.id.in_(overdue_credit_ids))

        statement = statement.order_by(Credit.created_at.desc())

        result = await self.session.execute(statement)
        return list(result.scalars().all())
