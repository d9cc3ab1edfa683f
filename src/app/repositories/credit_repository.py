"""Credit Repository Interface

Defines the contract for credit persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional, List
from src.domain.credit import Credit, CreditStatus


class CreditRepository(ABC):
    """Repository interface for Credit persistence"""

    @abstractmethod
    async def create(self, credit: Credit) -> Credit:
        """
        Create a new credit

        Args:
            credit: Credit entity to persist

        Returns:
            Created Credit
        """
        pass

    @abstractmethod
    async def get_by_id(self, credit_id: str, for_update: bool = False) -> Optional[Credit]:
        """
        Retrieve credit by ID

        Args:
            credit_id: Credit identifier
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Credit if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_ids(self, credit_ids: List[str]) -> List[Credit]:
        pass

    @abstractmethod
    async def update(self, credit: Credit) -> Credit:
        """Persist changes to remaining_balance/status"""
        pass

    @abstractmethod
    async def list(
        self,
        business_id: Optional[str] = None,
        status: Optional[CreditStatus] = None,
        due_on: Optional[date] = None,
        overdue_only: bool = False,
    ) -> List[Credit]:
        """
        List credits, newest first

        Args:
            business_id: Restrict to one business
            status: Restrict to one credit status
            due_on: Only credits with an open (pending/partial) installment due that day
            overdue_only: Only credits with at least one overdue installment

        Returns:
            List of credits
        """
        pass
