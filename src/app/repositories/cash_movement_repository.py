"""Cash Movement Repository Interface

Defines the contract for ledger persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, List
from src.domain.cash_movement import CashMovement


class CashMovementRepository(ABC):
    """
    Repository interface for CashMovement persistence

    Movements are immutable and append-only. Creation order is the id order.
    """

    @abstractmethod
    async def create(self, movement: CashMovement) -> CashMovement:
        """
        Append a movement

        Args:
            movement: CashMovement entity to persist

        Returns:
            Created CashMovement with generated ID
        """
        pass

    @abstractmethod
    async def get_latest(self, business_id: str) -> Optional[CashMovement]:
        """Retrieve the most recent movement of a business"""
        pass

    @abstractmethod
    async def get_by_business_id(
        self,
        business_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        newest_first: bool = True,
    ) -> List[CashMovement]:
        """
        Retrieve movements of a business

        Args:
            business_id: Business identifier
            start: Inclusive lower created_at bound
            end: Inclusive upper created_at bound
            newest_first: Order by creation descending if True, ascending otherwise

        Returns:
            List of movements
        """
        pass
