"""Credit API Routes

FastAPI routes for the credit lifecycle.
"""

from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.dependencies import get_actor
from src.api.error import ClientError
from src.api.schemas.credit_request import (
    CreateCreditRequestSchema,
    SimulateCreditRequestSchema,
    UpdateScheduleRequestSchema,
)
from src.app.services.audit_sink import AuditSink
from src.app.services.authorization import AccessPolicy, MembershipResolver
from src.app.use_cases.credits.dtos import (
    CreateCreditCommandDTO,
    CreditDetailResponseDTO,
    CreditResponseDTO,
    ListCreditsResponseDTO,
    ScheduleRowDTO,
    SimulateCreditCommandDTO,
    SimulationResponseDTO,
    UpdateScheduleCommandDTO,
)
from src.app.use_cases.credits.create_credit import CreateCredit
from src.app.use_cases.credits.get_credit import GetCredit
from src.app.use_cases.credits.list_credits import ListCredits
from src.app.use_cases.credits.simulate_credit import SimulateCredit
from src.app.use_cases.credits.update_schedule import UpdateSchedule
from src.adapter.repositories import (
    SqlAlchemyBusinessRepository,
    SqlAlchemyCashMovementRepository,
    SqlAlchemyClientRepository,
    SqlAlchemyCreditRepository,
    SqlAlchemyInstallmentRepository,
    SqlAlchemyPaymentRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_access_policy, get_audit_sink, get_membership_resolver, get_session
from src.domain.actor import Actor
from src.domain.credit import CreditStatus

router = APIRouter(prefix="/credits", tags=["Credits"])


@router.post(
    "/simulate",
    response_model=SimulationResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def simulate_credit(
    request: SimulateCreditRequestSchema,
    actor: Actor = Depends(get_actor),
    access_policy: AccessPolicy = Depends(get_access_policy),
):
    """
    Preview the installment plan of a credit without disbursing it.

    **Returns:**
    - 200: Plan with installments, totals and end date
    - 400: Invalid terms
    """
    command = SimulateCreditCommandDTO(**request.model_dump())
    result = await SimulateCredit(access_policy).execute(command, actor)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "",
    response_model=CreditResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        402: {
            "description": "Business cash cannot cover the principal",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INSUFFICIENT_FUNDS",
                            "message": "Insufficient funds. Required: 2000000.00, Available: 1000000.00"
                        }
                    }
                }
            }
        },
        403: {"description": "Actor may not lend from this business or to this client"},
        404: {"description": "Client or business not found"},
    }
)
async def create_credit(
    request: CreateCreditRequestSchema,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_session),
    access_policy: AccessPolicy = Depends(get_access_policy),
    memberships: MembershipResolver = Depends(get_membership_resolver),
    audit_sink: AuditSink = Depends(get_audit_sink),
):
    """
    Disburse a credit to a client.

    The credit, its installment schedule and the loan_disbursement cash
    movement are written in one transaction.

    **Returns:**
    - 201: Credit with its schedule
    - 402: Insufficient business funds
    - 403: Permission denied or client from another business
    - 404: Client or business not found
    """
    use_case = CreateCredit(
        uow=SqlAlchemyUnitOfWork(session),
        business_repo=SqlAlchemyBusinessRepository(session),
        client_repo=SqlAlchemyClientRepository(session),
        credit_repo=SqlAlchemyCreditRepository(session),
        installment_repo=SqlAlchemyInstallmentRepository(session),
        movement_repo=SqlAlchemyCashMovementRepository(session),
        access_policy=access_policy,
        memberships=memberships,
        audit_sink=audit_sink,
    )
    result = await use_case.execute(CreateCreditCommandDTO(**request.model_dump()), actor)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "",
    response_model=ListCreditsResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_credits(
    business_id: Optional[str] = None,
    status_filter: Optional[CreditStatus] = None,
    due_today: bool = False,
    overdue: bool = False,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_session),
    access_policy: AccessPolicy = Depends(get_access_policy),
    memberships: MembershipResolver = Depends(get_membership_resolver),
):
    """
    List credits, newest first.

    **Query parameters:**
    - `business_id`: Admins only; regular users always see their business
    - `status_filter`: active, paid, overdue or cancelled
    - `due_today`: Only credits with an open installment due today
    - `overdue`: Only credits with an overdue installment
    """
    use_case = ListCredits(SqlAlchemyCreditRepository(session), access_policy, memberships)
    result = await use_case.execute(
        actor,
        business_id=business_id,
        status=status_filter,
        due_today=due_today,
        overdue=overdue,
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{credit_id}",
    response_model=CreditDetailResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def get_credit(
    credit_id: str,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_session),
    access_policy: AccessPolicy = Depends(get_access_policy),
    memberships: MembershipResolver = Depends(get_membership_resolver),
):
    """Credit with its schedule and payments"""
    use_case = GetCredit(
        credit_repo=SqlAlchemyCreditRepository(session),
        installment_repo=SqlAlchemyInstallmentRepository(session),
        payment_repo=SqlAlchemyPaymentRepository(session),
        access_policy=access_policy,
        memberships=memberships,
    )
    result = await use_case.execute(credit_id, actor)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.put(
    "/{credit_id}/schedule",
    response_model=CreditResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        409: {
            "description": "Schedule edit conflicts with collected payments",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "SCHEDULE_LOCKED",
                            "message": "Installment count cannot change once payments have been collected",
                            "reason": "existing=4, incoming=3"
                        }
                    }
                }
            }
        }
    }
)
async def update_schedule(
    credit_id: str,
    request: UpdateScheduleRequestSchema,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_session),
    access_policy: AccessPolicy = Depends(get_access_policy),
    memberships: MembershipResolver = Depends(get_membership_resolver),
    audit_sink: AuditSink = Depends(get_audit_sink),
):
    """
    Re-amortize a credit.

    **Returns:**
    - 200: Credit with its new schedule
    - 403: Only super admins may edit schedules
    - 409: Count change after collections, or amount below what was paid
    """
    command = UpdateScheduleCommandDTO(
        credit_id=credit_id,
        installments=[ScheduleRowDTO(**row.model_dump()) for row in request.installments],
    )
    use_case = UpdateSchedule(
        uow=SqlAlchemyUnitOfWork(session),
        credit_repo=SqlAlchemyCreditRepository(session),
        installment_repo=SqlAlchemyInstallmentRepository(session),
        access_policy=access_policy,
        memberships=memberships,
        audit_sink=audit_sink,
    )
    result = await use_case.execute(command, actor)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
