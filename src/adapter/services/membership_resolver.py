"""SQLAlchemy implementation of MembershipResolver"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.authorization import MembershipResolver
from src.domain.user_business import UserBusiness


class SqlAlchemyMembershipResolver(MembershipResolver):
    """Reads the user_businesses assignment table"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def business_of(self, user_id: str) -> Optional[str]:
        statement = (
            select(UserBusiness.business_id)
            .where(UserBusiness.user_id == user_id)
            .limit(1)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()
