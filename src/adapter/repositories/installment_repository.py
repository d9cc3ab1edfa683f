"""SQLAlchemy Installment Repository Implementation

Implements payment schedule persistence using SQLAlchemy async session.
"""

from typing import List
from datetime import date
from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.installment_repository import InstallmentRepository
from src.domain.credit import Credit
from src.domain.installment import Installment, InstallmentStatus

OPEN_STATUSES = (InstallmentStatus.PENDING, InstallmentStatus.PARTIAL)


class SqlAlchemyInstallmentRepository(InstallmentRepository):
    """
    SQLAlchemy implementation of InstallmentRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_many(self, installments: List[Installment]) -> List[Installment]:
        """
        Bulk insert a schedule

        Args:
            installments: Installment entities to persist

        Returns:
            Created installments
        """
        self.session.add_all(installments)
        await self.session.flush()
        for installment in installments:
            await self.session.refresh(installment)
        return installments

    async def get_by_credit_id(self, credit_id: str) -> List[Installment]:
        statement = (
            select(Installment)
            .where(Installment.credit_id == credit_id)
            .order_by(Installment.due_date, Installment.installment_number)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def update_many(self, installments: List[Installment]) -> None:
        """
        Persist changes to a set of installments

        Note:
            Should be called within a transaction with the owning credit locked
        """
        self.session.add_all(installments)
        await self.session.flush()

    async def delete_by_credit_id(self, credit_id: str) -> int:
        statement = delete(Installment).where(Installment.credit_id == credit_id)
        result = await self.session.execute(statement)
        await self.session.flush()
        return result.rowcount

    async def get_open_for_business(self, business_id: str, due_on_or_before: date) -> List[Installment]:
        """
        Retrieve pending/partial installments of a business's credits due on or before a date

        Args:
            business_id: Business identifier
            due_on_or_before: Inclusive due date bound

        Returns:
            List of installments ordered by due date
        """
        statement = (
            select(Installment)
            .join(Credit, Credit.id == Installment.credit_id)
            .where(Credit.business_id == business_id)
            .where(Installment.status.in_(OPEN_STATUSES))
            .where(Installment.due_date <= due_on_or_before)
            .order_by(Installment.due_date)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_stale_open(self, as_of: date) -> List[Installment]:
        statement = (
            select(Installment)
            .where(Installment.status.in_(OPEN_STATUSES))
            .where(Installment.due_date < as_of)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())
