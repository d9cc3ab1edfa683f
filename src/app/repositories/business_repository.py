"""Business Repository Interface

Defines the contract for business persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Optional, List
from decimal import Decimal
from src.domain.business import Business


class BusinessRepository(ABC):
    """
    Repository interface for Business persistence

    Balance reads that precede a balance write must use for_update=True
    (SELECT FOR UPDATE) so concurrent movements on the same business
    serialize on the business row.
    """

    @abstractmethod
    async def get_by_id(self, business_id: str, for_update: bool = False) -> Optional[Business]:
        """
        Retrieve business by ID

        Args:
            business_id: Business identifier
            for_update: If True, lock the row with SELECT FOR UPDATE (pessimistic lock)

        Returns:
            Business if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, business: Business) -> Business:
        """Persist a new business"""
        pass

    @abstractmethod
    async def update_balance(self, business_id: str, new_balance: Decimal) -> None:
        """
        Update business current_balance

        Args:
            business_id: Business identifier
            new_balance: New balance value

        Note:
            Must be called inside a transaction with the business row locked
        """
        pass

    @abstractmethod
    async def get_all(self) -> List[Business]:
        """Retrieve every business (reconciliation)"""
        pass
