"""RefreshOverdueStatuses Use Case

Stored installment statuses are snapshots taken when they were last
written. This sweep brings the ones that went past due back in line with
the status rule and propagates the change to their credits.
"""

import logging
import time
from collections import defaultdict
from datetime import date, datetime
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.credit_repository import CreditRepository
from src.app.repositories.installment_repository import InstallmentRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.credit import CreditStatus
from src.domain.schedule import derive_credit_status, refresh_statuses
from .dtos import OverdueRefreshResultDTO

logger = logging.getLogger(__name__)


class RefreshOverdueStatuses:
    """
    Use Case: Refresh overdue statuses

    Business Rules:
    1. Only pending/partial installments due before as_of are examined
    2. Statuses are re-derived, never set by hand
    3. Cancelled and paid credits keep their status
    4. Balances are never modified
    """

    def __init__(
        self,
        uow: UnitOfWork,
        credit_repo: CreditRepository,
        installment_repo: InstallmentRepository,
    ):
        self.uow = uow
        self.credit_repo = credit_repo
        self.installment_repo = installment_repo

    async def execute(self, as_of: Optional[date] = None) -> Result[OverdueRefreshResultDTO]:
        start_time = time.time()
        as_of = as_of or datetime.utcnow().date()

        try:
            stale = await self.installment_repo.get_stale_open(as_of)
            changed = refresh_statuses(stale, as_of)
            if changed:
                await self.installment_repo.update_many(changed)

            statuses_by_credit = defaultdict(list)
            for installment in changed:
                statuses_by_credit[installment.credit_id].append(installment.status)

            credits = await self.credit_repo.get_by_ids(list(statuses_by_credit.keys()))
            credits_updated = 0
            for credit in credits:
                if credit.status in (CreditStatus.CANCELLED, CreditStatus.PAID):
                    continue
                status = derive_credit_status(credit.remaining_balance, statuses_by_credit[credit.id])
                if status != credit.status:
                    credit.status = status
                    credit.updated_at = datetime.utcnow()
                    await self.credit_repo.update(credit)
                    credits_updated += 1

            await self.uow.commit()

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Overdue status refresh failed: {e}")
            return Return.err(
                Error(
                    code="OVERDUE_REFRESH_FAILED",
                    message="Failed to refresh overdue statuses",
                    reason=str(e),
                )
            )

        execution_time_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"Overdue refresh as of {as_of}: {len(changed)} installments and "
            f"{credits_updated} credits updated in {execution_time_ms}ms"
        )
        return Return.ok(
            OverdueRefreshResultDTO(
                as_of=as_of,
                installments_updated=len(changed),
                credits_updated=credits_updated,
                execution_time_ms=execution_time_ms,
            )
        )
