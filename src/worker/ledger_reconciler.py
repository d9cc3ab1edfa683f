"""Cash Ledger Reconciliation Background Worker

Periodically replays every business's cash ledger and compares it against
the stored business balance. Can be run as a standalone script or
integrated with a scheduler.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories import SqlAlchemyBusinessRepository, SqlAlchemyCashMovementRepository
from src.app.use_cases.cash import ReconcileAllBusinesses, ReconciliationSummaryDTO

logger = logging.getLogger(__name__)


class LedgerReconcilerWorker:
    """
    Background worker for cash ledger reconciliation

    Features:
    - Replays each ledger from the business's initial capital
    - Detects broken balance_after links
    - Logs discrepancies for investigation, never corrects them
    - Can run once or continuously

    Usage:
        worker = LedgerReconcilerWorker()
        summary = await worker.run_once()

        await worker.run_forever(interval_seconds=86400)
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        enabled: Optional[bool] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            enabled: Overrides ApplicationConfig.RECONCILIATION_ENABLED
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.enabled = ApplicationConfig.RECONCILIATION_ENABLED if enabled is None else enabled

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("LedgerReconcilerWorker initialized")

    async def run_once(self) -> ReconciliationSummaryDTO:
        """
        Run reconciliation once

        Returns:
            ReconciliationSummaryDTO with the discrepancies found

        Raises:
            RuntimeError: If the reconciliation itself failed
        """
        if not self.enabled:
            logger.info("Cash ledger reconciliation is disabled, skipping")
            return ReconciliationSummaryDTO(
                total_businesses_checked=0,
                discrepancies_found=0,
                discrepancies=[],
                reconciliation_time=datetime.utcnow(),
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            use_case = ReconcileAllBusinesses(
                business_repo=SqlAlchemyBusinessRepository(session),
                movement_repo=SqlAlchemyCashMovementRepository(session),
            )

            result = await use_case.execute()

            if result.is_err():
                logger.error(f"Reconciliation failed: {result.error.message}")
                raise RuntimeError(f"Reconciliation failed: {result.error.message}")

            summary = result.value

            if summary.discrepancies_found > 0:
                logger.error(
                    f"ALERT: {summary.discrepancies_found} cash ledger discrepancies found!"
                )
                for d in summary.discrepancies:
                    logger.error(
                        f"  - Business {d.business_id}: "
                        f"balance={d.current_balance}, ledger={d.last_recorded_balance}, "
                        f"replayed={d.replayed_balance}, diff={d.discrepancy}, "
                        f"broken_movements={d.broken_movement_ids}"
                    )

            return summary

    async def run_forever(self, interval_seconds: int = 86400):
        """
        Run reconciliation continuously at specified interval

        Args:
            interval_seconds: Seconds between reconciliation runs (default: 24 hours)
        """
        logger.info(
            f"Starting continuous cash ledger reconciliation with {interval_seconds}s interval"
        )

        while True:
            try:
                summary = await self.run_once()
                logger.info(
                    f"Reconciliation cycle complete. "
                    f"Checked {summary.total_businesses_checked} businesses, "
                    f"found {summary.discrepancies_found} discrepancies "
                    f"in {summary.execution_time_ms}ms"
                )
            except Exception as e:
                logger.error(f"Reconciliation cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("LedgerReconcilerWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Run once
        python -m src.worker.ledger_reconciler --once

        # Run continuously with custom interval (in seconds)
        python -m src.worker.ledger_reconciler --interval 3600
    """
    import argparse

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Cash Ledger Reconciliation Worker")
    parser.add_argument(
        "--once", action="store_true", help="Run once and exit"
    )
    parser.add_argument(
        "--interval", type=int, default=ApplicationConfig.RECONCILIATION_INTERVAL_SECONDS,
        help="Interval between runs in seconds (default: 86400 = 24 hours)"
    )
    args = parser.parse_args()

    worker = LedgerReconcilerWorker()

    try:
        if args.once:
            summary = await worker.run_once()
            print("Reconciliation complete:")
            print(f"  Businesses checked: {summary.total_businesses_checked}")
            print(f"  Discrepancies found: {summary.discrepancies_found}")
            print(f"  Execution time: {summary.execution_time_ms}ms")
            for d in summary.discrepancies:
                print(
                    f"  - Business {d.business_id}: "
                    f"balance={d.current_balance}, "
                    f"ledger={d.last_recorded_balance}, "
                    f"diff={d.discrepancy}"
                )
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
