"""Cash ledger use cases"""
from .ledger import CashLedger
from .create_business import CreateBusiness
from .record_movement import RecordMovement, InjectCapital, WithdrawFunds
from .get_cash_flow import GetCashFlow
from .reconcile_cash import ReconcileCash, ReconcileAllBusinesses, reconcile_business
from .forecast_cash import ForecastCash
from .dtos import (
    CreateBusinessCommandDTO,
    BusinessResponseDTO,
    RecordMovementCommandDTO,
    CapitalCommandDTO,
    CashMovementDTO,
    CashFlowSummaryDTO,
    CashFlowResponseDTO,
    ReconciliationResponseDTO,
    ReconciliationSummaryDTO,
    ForecastResponseDTO,
)

__all__ = [
    "CashLedger",
    "CreateBusiness",
    "RecordMovement",
    "InjectCapital",
    "WithdrawFunds",
    "GetCashFlow",
    "ReconcileCash",
    "ReconcileAllBusinesses",
    "reconcile_business",
    "ForecastCash",
    "CreateBusinessCommandDTO",
    "BusinessResponseDTO",
    "RecordMovementCommandDTO",
    "CapitalCommandDTO",
    "CashMovementDTO",
    "CashFlowSummaryDTO",
    "CashFlowResponseDTO",
    "ReconciliationResponseDTO",
    "ReconciliationSummaryDTO",
    "ForecastResponseDTO",
]
