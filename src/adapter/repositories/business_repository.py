"""SQLAlchemy implementation of BusinessRepository

Provides persistence for Business entities with pessimistic locking support
so concurrent ledger movements on one business serialize.
"""

from typing import Optional, List
from decimal import Decimal
from datetime import datetime
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.business_repository import BusinessRepository
from src.domain.business import Business


class SqlAlchemyBusinessRepository(BusinessRepository):
    """
    SQLAlchemy implementation of BusinessRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE
    - Balance updates flushed inside the caller's transaction
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, business_id: str, for_update: bool = False) -> Optional[Business]:
        """
        Retrieve business by ID with optional row-level locking

        Args:
            business_id: Business identifier
            for_update: If True, locks the row with SELECT FOR UPDATE (prevents concurrent modifications)

        Returns:
            Business if found, None otherwise
        """
        stmt = select(Business).where(Business.id == business_id)

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, business: Business) -> Business:
        self.session.add(business)
        await self.session.flush()
        await self.session.refresh(business)
        return business

    async def update_balance(self, business_id: str, new_balance: Decimal) -> None:
        """
        Update current_balance and updated_at timestamp

        Note:
            Should be called within a transaction with the business already locked
        """
        business = await self.get_by_id(business_id)
        if business:
            business.current_balance = new_balance
            business.updated_at = datetime.utcnow()
            self.session.add(business)
            await self.session.flush()

    async def get_all(self) -> List[Business]:
        stmt = select(Business).order_by(Business.created_at)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
