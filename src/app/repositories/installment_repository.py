"""Installment Repository Interface

Defines the contract for payment schedule persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import List
from src.domain.installment import Installment


class InstallmentRepository(ABC):
    """Repository interface for Installment persistence"""

    @abstractmethod
    async def create_many(self, installments: List[Installment]) -> List[Installment]:
        """Bulk insert a schedule"""
        pass

    @abstractmethod
    async def get_by_credit_id(self, credit_id: str) -> List[Installment]:
        """
        Retrieve a credit's schedule

        Returns:
            Installments ordered by due_date, then installment_number
        """
        pass

    @abstractmethod
    async def update_many(self, installments: List[Installment]) -> None:
        pass

    @abstractmethod
    async def delete_by_credit_id(self, credit_id: str) -> int:
        """
        Delete a credit's whole schedule

        Returns:
            Number of deleted rows
        """
        pass

    @abstractmethod
    async def get_open_for_business(self, business_id: str, due_on_or_before: date) -> List[Installment]:
        """
        Retrieve pending/partial installments of a business's credits due on or before a date

        Args:
            business_id: Business identifier
            due_on_or_before: Inclusive due date bound

        Returns:
            List of installments
        """
        pass

    @abstractmethod
    async def get_stale_open(self, as_of: date) -> List[Installment]:
        """Retrieve pending/partial installments already due before as_of"""
        pass
