"""Cash reconciliation use cases

Consistency self-checks of the ledger. Nothing here corrects data: a
discrepancy is reported and logged for investigation.
"""

import logging
import time
from datetime import datetime
from decimal import Decimal
from typing import Sequence
from libs.result import Result, Return, Error
from src.app.repositories.business_repository import BusinessRepository
from src.app.repositories.cash_movement_repository import CashMovementRepository
from src.app.services.authorization import AccessPolicy, MembershipResolver, ensure_business_access, require
from src.app.use_cases.errors import rule_error
from src.domain.actor import Action, Actor
from src.domain.business import Business
from src.domain.cash_movement import CashMovement
from src.domain.exceptions import BusinessNotFound, CreditEngineError
from .dtos import ReconciliationResponseDTO, ReconciliationSummaryDTO

logger = logging.getLogger(__name__)


def reconcile_business(business: Business, movements: Sequence[CashMovement]) -> ReconciliationResponseDTO:
    """
    Compare a business balance against its ledger

    Args:
        business: Business to check
        movements: All its movements in creation order (oldest first)
    """
    last_recorded = movements[-1].balance_after if movements else business.initial_capital

    replayed = business.initial_capital
    previous_balance = business.initial_capital
    broken: list[int] = []
    for movement in movements:
        replayed += movement.signed_amount
        # each link is checked against its predecessor, so one bad row is reported once
        if movement.balance_after != previous_balance + movement.signed_amount:
            broken.append(movement.id)
        previous_balance = movement.balance_after

    return ReconciliationResponseDTO(
        business_id=business.id,
        is_reconciled=business.current_balance == last_recorded,
        current_balance=business.current_balance,
        last_recorded_balance=last_recorded,
        discrepancy=business.current_balance - last_recorded,
        replayed_balance=replayed,
        replay_matches=replayed == business.current_balance and not broken,
        broken_movement_ids=broken,
    )


class ReconcileCash:
    """Use case: reconcile one business (read-only)"""

    def __init__(
        self,
        business_repo: BusinessRepository,
        movement_repo: CashMovementRepository,
        access_policy: AccessPolicy,
        memberships: MembershipResolver,
    ):
        self.business_repo = business_repo
        self.movement_repo = movement_repo
        self.access_policy = access_policy
        self.memberships = memberships

    async def execute(self, business_id: str, actor: Actor) -> Result[ReconciliationResponseDTO]:
        try:
            require(self.access_policy, actor, Action.VIEW_CASH)
            await ensure_business_access(self.access_policy, self.memberships, actor, business_id)

            business = await self.business_repo.get_by_id(business_id)
            if not business:
                raise BusinessNotFound(business_id)
        except CreditEngineError as e:
            return Return.err(rule_error(e))

        movements = await self.movement_repo.get_by_business_id(business_id, newest_first=False)
        result = reconcile_business(business, movements)

        if not result.is_reconciled or not result.replay_matches:
            logger.warning(
                f"Ledger discrepancy for business {business_id}: "
                f"current_balance={result.current_balance}, "
                f"last_recorded={result.last_recorded_balance}, "
                f"replayed={result.replayed_balance}, "
                f"broken_movements={result.broken_movement_ids}"
            )

        return Return.ok(result)


class ReconcileAllBusinesses:
    """
    Use Case: Reconcile every business ledger

    Business Rules:
    1. Retrieves all businesses
    2. Replays each ledger from initial_capital
    3. Records and logs any discrepancies found
    4. Does NOT modify any data (read-only reconciliation)
    """

    def __init__(
        self,
        business_repo: BusinessRepository,
        movement_repo: CashMovementRepository,
    ):
        self.business_repo = business_repo
        self.movement_repo = movement_repo

    async def execute(self) -> Result[ReconciliationSummaryDTO]:
        start_time = time.time()
        reconciliation_time = datetime.utcnow()

        try:
            logger.info("Starting cash ledger reconciliation")

            businesses = await self.business_repo.get_all()
            discrepancies: list[ReconciliationResponseDTO] = []

            for business in businesses:
                movements = await self.movement_repo.get_by_business_id(business.id, newest_first=False)
                result = reconcile_business(business, movements)

                if not result.is_reconciled or not result.replay_matches:
                    discrepancies.append(result)
                    logger.warning(
                        f"Discrepancy found for business {business.id}: "
                        f"current_balance={result.current_balance}, "
                        f"last_recorded={result.last_recorded_balance}, "
                        f"replayed={result.replayed_balance}, "
                        f"discrepancy={result.discrepancy}"
                    )

            execution_time_ms = int((time.time() - start_time) * 1000)

            if discrepancies:
                logger.warning(
                    f"Reconciliation complete. Found {len(discrepancies)} discrepancies "
                    f"out of {len(businesses)} businesses in {execution_time_ms}ms"
                )
            else:
                logger.info(
                    f"Reconciliation complete. All {len(businesses)} businesses balanced "
                    f"in {execution_time_ms}ms"
                )

            return Return.ok(
                ReconciliationSummaryDTO(
                    total_businesses_checked=len(businesses),
                    discrepancies_found=len(discrepancies),
                    discrepancies=discrepancies,
                    reconciliation_time=reconciliation_time,
                    execution_time_ms=execution_time_ms,
                )
            )

        except Exception as e:
            logger.error(f"Cash ledger reconciliation failed: {e}")
            return Return.err(
                Error(
                    code="RECONCILIATION_FAILED",
                    message="Failed to reconcile cash ledger",
                    reason=str(e),
                )
            )
