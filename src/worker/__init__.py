"""Background workers for the credit engine"""
from .ledger_reconciler import LedgerReconcilerWorker
from .overdue_sweeper import OverdueSweeperWorker

__all__ = ["LedgerReconcilerWorker", "OverdueSweeperWorker"]
