"""Overdue Status Sweeper Background Worker

Installments only change status when something writes them. This worker
re-derives the statuses of installments that went past due since, and
flags their credits overdue.
"""

import asyncio
import logging
from datetime import date, datetime
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories import SqlAlchemyCreditRepository, SqlAlchemyInstallmentRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.credits import OverdueRefreshResultDTO, RefreshOverdueStatuses

logger = logging.getLogger(__name__)


class OverdueSweeperWorker:
    """
    Background worker for overdue status refresh

    Usage:
        worker = OverdueSweeperWorker()
        result = await worker.run_once()

        await worker.run_forever(interval_seconds=86400)
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        enabled: Optional[bool] = None,
    ):
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.enabled = ApplicationConfig.OVERDUE_SWEEP_ENABLED if enabled is None else enabled

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("OverdueSweeperWorker initialized")

    async def run_once(self, as_of: Optional[date] = None) -> OverdueRefreshResultDTO:
        """
        Run the sweep once

        Args:
            as_of: Evaluation date (defaults to today, UTC)

        Returns:
            OverdueRefreshResultDTO with update counts
        """
        as_of = as_of or datetime.utcnow().date()

        if not self.enabled:
            logger.info("Overdue sweep is disabled, skipping")
            return OverdueRefreshResultDTO(
                as_of=as_of,
                installments_updated=0,
                credits_updated=0,
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            use_case = RefreshOverdueStatuses(
                uow=SqlAlchemyUnitOfWork(session),
                credit_repo=SqlAlchemyCreditRepository(session),
                installment_repo=SqlAlchemyInstallmentRepository(session),
            )

            result = await use_case.execute(as_of=as_of)

            if result.is_err():
                logger.error(f"Overdue sweep failed: {result.error.message}")
                raise RuntimeError(f"Overdue sweep failed: {result.error.message}")

            return result.value

    async def run_forever(self, interval_seconds: int = 86400):
        logger.info(f"Starting continuous overdue sweep with {interval_seconds}s interval")

        while True:
            try:
                result = await self.run_once()
                logger.info(
                    f"Overdue sweep cycle complete. "
                    f"{result.installments_updated} installments, "
                    f"{result.credits_updated} credits updated"
                )
            except Exception as e:
                logger.error(f"Overdue sweep cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("OverdueSweeperWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        python -m src.worker.overdue_sweeper --once
        python -m src.worker.overdue_sweeper --interval 3600
    """
    import argparse

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Overdue Status Sweeper Worker")
    parser.add_argument("--once", action="store_true", help="Run once and exit")
    parser.add_argument(
        "--interval", type=int, default=ApplicationConfig.OVERDUE_SWEEP_INTERVAL_SECONDS,
        help="Interval between runs in seconds (default: 86400 = 24 hours)"
    )
    args = parser.parse_args()

    worker = OverdueSweeperWorker()

    try:
        if args.once:
            result = await worker.run_once()
            print(
                f"Overdue sweep as of {result.as_of}: "
                f"{result.installments_updated} installments, "
                f"{result.credits_updated} credits updated"
            )
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
