"""SQLAlchemy Payment Repository Implementation

Payments are receipts: the repository only inserts and reads them.
"""

from typing import Optional, List
from datetime import datetime
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.credit import Credit
from src.domain.payment import Payment


class SqlAlchemyPaymentRepository(PaymentRepository):
    """SQLAlchemy implementation of PaymentRepository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, payment: Payment) -> Payment:
        self.session.add(payment)
        await self.session.flush()
        await self.session.refresh(payment)
        return payment

    async def get_by_credit_id(self, credit_id: str) -> List[Payment]:
        statement = (
            select(Payment)
            .where(Payment.credit_id == credit_id)
            .order_by(Payment.payment_date.desc(), Payment.created_at.desc())
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def list(
        self,
        business_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        payment_method: Optional[str] = None,
    ) -> List[Payment]:
        """
        List payments, most recent payment_date first

        Args:
            business_id: Restrict to credits of one business
            start: Inclusive lower payment_date bound
            end: Inclusive upper payment_date bound
            payment_method: Exact payment method filter

        Returns:
            List of payments
        """
        statement = select(Payment)

        if business_id:
            statement = statement.join(Credit, Credit.id == Payment.credit_id).where(
                Credit.business_id == business_id
            )

        if start:
            statement = statement.where(Payment.payment_date >= start)

        if end:
            statement = statement.where(Payment.payment_date <= end)

        if payment_method:
            statement = statement.where(Payment.payment_method == payment_method)

        statement = statement.order_by(Payment.payment_date.desc())

        result = await self.session.execute(statement)
        return list(result.scalars().all())
