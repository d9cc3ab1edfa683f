"""Cash API Routes

FastAPI routes for businesses and their cash ledger.
"""

from datetime import date, datetime
from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.dependencies import get_actor
from src.api.error import ClientError
from src.api.schemas.cash_request import (
    CapitalRequestSchema,
    CreateBusinessRequestSchema,
    RecordMovementRequestSchema,
)
from src.app.services.audit_sink import AuditSink
from src.app.services.authorization import AccessPolicy, MembershipResolver
from src.app.use_cases.cash.dtos import (
    BusinessResponseDTO,
    CapitalCommandDTO,
    CashFlowResponseDTO,
    CashMovementDTO,
    CreateBusinessCommandDTO,
    ForecastResponseDTO,
    ReconciliationResponseDTO,
    RecordMovementCommandDTO,
)
from src.app.use_cases.cash.create_business import CreateBusiness
from src.app.use_cases.cash.forecast_cash import ForecastCash
from src.app.use_cases.cash.get_cash_flow import GetCashFlow
from src.app.use_cases.cash.reconcile_cash import ReconcileCash
from src.app.use_cases.cash.record_movement import InjectCapital, RecordMovement, WithdrawFunds
from src.adapter.repositories import (
    SqlAlchemyBusinessRepository,
    SqlAlchemyCashMovementRepository,
    SqlAlchemyInstallmentRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_access_policy, get_audit_sink, get_membership_resolver, get_session
from src.domain.actor import Actor

router = APIRouter(tags=["Cash"])


@router.post(
    "/businesses",
    response_model=BusinessResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
async def create_business(
    request: CreateBusinessRequestSchema,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_session),
    access_policy: AccessPolicy = Depends(get_access_policy),
    audit_sink: AuditSink = Depends(get_audit_sink),
):
    """Open a business with its initial capital (admins only)"""
    use_case = CreateBusiness(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyBusinessRepository(session),
        access_policy,
        audit_sink,
    )
    result = await use_case.execute(CreateBusinessCommandDTO(**request.model_dump()), actor)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


def _movement_use_case(use_case_class, session, access_policy, memberships, audit_sink):
    return use_case_class(
        uow=SqlAlchemyUnitOfWork(session),
        business_repo=SqlAlchemyBusinessRepository(session),
        movement_repo=SqlAlchemyCashMovementRepository(session),
        access_policy=access_policy,
        memberships=memberships,
        audit_sink=audit_sink,
    )


@router.post(
    "/cash/movements",
    response_model=CashMovementDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        402: {
            "description": "Expense would overdraw the business",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INSUFFICIENT_FUNDS",
                            "message": "Insufficient funds. Required: 500.00, Available: 100.00"
                        }
                    }
                }
            }
        }
    }
)
async def record_movement(
    request: RecordMovementRequestSchema,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_session),
    access_policy: AccessPolicy = Depends(get_access_policy),
    memberships: MembershipResolver = Depends(get_membership_resolver),
    audit_sink: AuditSink = Depends(get_audit_sink),
):
    """Append an arbitrary movement to a business ledger (admins only)"""
    use_case = _movement_use_case(RecordMovement, session, access_policy, memberships, audit_sink)
    result = await use_case.execute(RecordMovementCommandDTO(**request.model_dump()), actor)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/cash/inject",
    response_model=CashMovementDTO,
    status_code=status.HTTP_201_CREATED,
)
async def inject_capital(
    request: CapitalRequestSchema,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_session),
    access_policy: AccessPolicy = Depends(get_access_policy),
    memberships: MembershipResolver = Depends(get_membership_resolver),
    audit_sink: AuditSink = Depends(get_audit_sink),
):
    """Add owner capital to a business"""
    use_case = _movement_use_case(InjectCapital, session, access_policy, memberships, audit_sink)
    result = await use_case.execute(CapitalCommandDTO(**request.model_dump()), actor)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/cash/withdraw",
    response_model=CashMovementDTO,
    status_code=status.HTTP_201_CREATED,
)
async def withdraw_funds(
    request: CapitalRequestSchema,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_session),
    access_policy: AccessPolicy = Depends(get_access_policy),
    memberships: MembershipResolver = Depends(get_membership_resolver),
    audit_sink: AuditSink = Depends(get_audit_sink),
):
    """Take owner capital out of a business"""
    use_case = _movement_use_case(WithdrawFunds, session, access_policy, memberships, audit_sink)
    result = await use_case.execute(CapitalCommandDTO(**request.model_dump()), actor)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/cash/{business_id}/flow",
    response_model=CashFlowResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def get_cash_flow(
    business_id: str,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_session),
    access_policy: AccessPolicy = Depends(get_access_policy),
    memberships: MembershipResolver = Depends(get_membership_resolver),
):
    """Movements (most recent first) with income, expense and net totals"""
    use_case = GetCashFlow(
        SqlAlchemyBusinessRepository(session),
        SqlAlchemyCashMovementRepository(session),
        access_policy,
        memberships,
    )
    result = await use_case.execute(business_id, actor, start=start, end=end)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/cash/{business_id}/reconcile",
    response_model=ReconciliationResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def reconcile_cash(
    business_id: str,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_session),
    access_policy: AccessPolicy = Depends(get_access_policy),
    memberships: MembershipResolver = Depends(get_membership_resolver),
):
    """Compare the business balance against its ledger (read-only)"""
    use_case = ReconcileCash(
        SqlAlchemyBusinessRepository(session),
        SqlAlchemyCashMovementRepository(session),
        access_policy,
        memberships,
    )
    result = await use_case.execute(business_id, actor)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/cash/{business_id}/forecast",
    response_model=ForecastResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def forecast_cash(
    business_id: str,
    target_date: date,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_session),
    access_policy: AccessPolicy = Depends(get_access_policy),
    memberships: MembershipResolver = Depends(get_membership_resolver),
):
    """Projected balance once installments due by target_date are collected"""
    use_case = ForecastCash(
        SqlAlchemyBusinessRepository(session),
        SqlAlchemyInstallmentRepository(session),
        access_policy,
        memberships,
    )
    result = await use_case.execute(business_id, target_date, actor)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
