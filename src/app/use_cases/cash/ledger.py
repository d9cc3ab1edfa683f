"""Cash Ledger

Appends movements to a business's cash ledger. Never commits: it always
runs inside the unit of work of the calling use case, so the movement and
whatever caused it land together or not at all.
"""

import logging
from decimal import Decimal
from typing import Optional
from src.app.repositories.business_repository import BusinessRepository
from src.app.repositories.cash_movement_repository import CashMovementRepository
from src.domain.cash_movement import CashMovement, MovementType
from src.domain.exceptions import BusinessNotFound, InsufficientFunds, LedgerInvariantError

logger = logging.getLogger(__name__)


class CashLedger:
    """
    Ledger writer

    Business Rules:
    1. Pessimistic locking: the business row is read with SELECT FOR UPDATE
       before the balance check, so concurrent movements serialize
    2. Expense movements may never drive the balance below zero
    3. Every movement snapshots the resulting balance in balance_after
    4. The business balance is updated in the same transaction
    5. A movement is never appended to a ledger whose head disagrees with
       the business balance
    """

    def __init__(
        self,
        business_repo: BusinessRepository,
        movement_repo: CashMovementRepository,
    ):
        self.business_repo = business_repo
        self.movement_repo = movement_repo

    async def record_movement(
        self,
        business_id: str,
        movement_type: MovementType,
        amount: Decimal,
        description: Optional[str] = None,
        actor_id: Optional[str] = None,
        related_credit_id: Optional[str] = None,
        related_payment_id: Optional[str] = None,
    ) -> CashMovement:
        """
        Record a movement and update the business balance

        Args:
            business_id: Owning business
            movement_type: Movement type (decides income/expense)
            amount: Positive amount
            description: Free text
            actor_id: User recording the movement
            related_credit_id: Linked credit, if any
            related_payment_id: Linked payment, if any

        Returns:
            Created CashMovement

        Raises:
            BusinessNotFound: Unknown business
            InsufficientFunds: Expense larger than the current balance
            LedgerInvariantError: Business balance already diverged from the ledger
        """
        movement_type = MovementType(movement_type)
        if amount <= 0:
            raise ValueError("Movement amount must be greater than 0")

        business = await self.business_repo.get_by_id(business_id, for_update=True)
        if not business:
            raise BusinessNotFound(business_id)

        latest = await self.movement_repo.get_latest(business_id)
        chain_head = latest.balance_after if latest else business.initial_capital
        if chain_head != business.current_balance:
            raise LedgerInvariantError(
                f"Business {business_id} balance {business.current_balance} "
                f"does not match ledger head {chain_head}"
            )

        balance_before = business.current_balance
        if movement_type.is_income:
            balance_after = balance_before + amount
        else:
            balance_after = balance_before - amount

        if balance_after < 0:
            raise InsufficientFunds(available=balance_before, required=amount)

        movement = CashMovement(
            business_id=business_id,
            type=movement_type,
            amount=amount,
            balance_after=balance_after,
            description=description,
            related_credit_id=related_credit_id,
            related_payment_id=related_payment_id,
            created_by_id=actor_id,
        )
        created = await self.movement_repo.create(movement)

        await self.business_repo.update_balance(business_id, balance_after)

        logger.info(
            f"Ledger movement {movement_type.value} of {amount} on business {business_id}: "
            f"{balance_before} -> {balance_after}"
        )
        return created
