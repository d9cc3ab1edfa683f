"""Payment Repository Interface

Payments are immutable receipts: create and read only.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, List
from src.domain.payment import Payment


class PaymentRepository(ABC):
    """Repository interface for Payment persistence"""

    @abstractmethod
    async def create(self, payment: Payment) -> Payment:
        """
        Create a new payment receipt

        Args:
            payment: Payment entity to persist

        Returns:
            Created Payment
        """
        pass

    @abstractmethod
    async def get_by_credit_id(self, credit_id: str) -> List[Payment]:
        """Retrieve a credit's payments, most recent first"""
        pass

    @abstractmethod
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
        pass
