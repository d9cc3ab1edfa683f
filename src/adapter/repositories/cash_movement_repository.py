"""SQLAlchemy Cash Movement Repository Implementation

Append-only: movements are inserted and read, never updated or deleted.
The autoincrement id is the creation order of the ledger.
"""

from typing import Optional, List
from datetime import datetime
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.cash_movement_repository import CashMovementRepository
from src.domain.cash_movement import CashMovement


class SqlAlchemyCashMovementRepository(CashMovementRepository):
    """SQLAlchemy implementation of CashMovementRepository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, movement: CashMovement) -> CashMovement:
        """
        Append a movement

        Args:
            movement: CashMovement entity to persist

        Returns:
            Created CashMovement with generated ID
        """
        self.session.add(movement)
        await self.session.flush()
        await self.session.refresh(movement)
        return movement

    async def get_latest(self, business_id: str) -> Optional[CashMovement]:
        statement = (
            select(CashMovement)
            .where(CashMovement.business_id == business_id)
            .order_by(CashMovement.id.desc())
            .limit(1)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_business_id(
        self,
        business_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        newest_first: bool = True,
    ) -> List[CashMovement]:
        statement = select(CashMovement).where(CashMovement.business_id == business_id)

        if start:
            statement = statement.where(CashMovement.created_at >= start)

        if end:
            statement = statement.where(CashMovement.created_at <= end)

        if newest_first:
            statement = statement.order_by(CashMovement.id.desc())
        else:
            statement = statement.order_by(CashMovement.id)

        result = await self.session.execute(statement)
        return list(result.scalars().all())
