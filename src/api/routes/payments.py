"""Payment API Routes"""

from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.dependencies import get_actor
from src.api.error import ClientError
from src.api.schemas.credit_request import RegisterPaymentRequestSchema
from src.app.services.audit_sink import AuditSink
from src.app.services.authorization import AccessPolicy, MembershipResolver
from src.app.use_cases.credits.dtos import (
    ListPaymentsResponseDTO,
    PaymentResponseDTO,
    RegisterPaymentCommandDTO,
)
from src.app.use_cases.credits.list_payments import ListPayments
from src.app.use_cases.credits.register_payment import RegisterPayment
from src.adapter.repositories import (
    SqlAlchemyBusinessRepository,
    SqlAlchemyCashMovementRepository,
    SqlAlchemyCreditRepository,
    SqlAlchemyInstallmentRepository,
    SqlAlchemyPaymentRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_access_policy, get_audit_sink, get_membership_resolver, get_session
from src.domain.actor import Actor

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post(
    "",
    response_model=PaymentResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {
            "description": "Payment conflicts with the credit state",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "OVER_PAYMENT",
                            "message": "Payment of 500000.00 exceeds remaining balance 275000.00"
                        }
                    }
                }
            }
        }
    }
)
async def register_payment(
    request: RegisterPaymentRequestSchema,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_session),
    access_policy: AccessPolicy = Depends(get_access_policy),
    memberships: MembershipResolver = Depends(get_membership_resolver),
    audit_sink: AuditSink = Depends(get_audit_sink),
):
    """
    Register a payment against a credit.

    Without `schedule_id` the amount is distributed across installments,
    overdue ones first. The receipt, schedule updates, credit balance and
    payment_received cash movement are written in one transaction.

    **Returns:**
    - 201: Receipt with per-installment allocations
    - 400: Payment date in the future or unknown installment
    - 404: Credit not found
    - 409: Credit settled or cancelled, or amount above what is owed
    """
    use_case = RegisterPayment(
        uow=SqlAlchemyUnitOfWork(session),
        business_repo=SqlAlchemyBusinessRepository(session),
        credit_repo=SqlAlchemyCreditRepository(session),
        installment_repo=SqlAlchemyInstallmentRepository(session),
        payment_repo=SqlAlchemyPaymentRepository(session),
        movement_repo=SqlAlchemyCashMovementRepository(session),
        access_policy=access_policy,
        memberships=memberships,
        audit_sink=audit_sink,
    )
    result = await use_case.execute(RegisterPaymentCommandDTO(**request.model_dump()), actor)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "",
    response_model=ListPaymentsResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_payments(
    business_id: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    payment_method: Optional[str] = None,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_session),
    access_policy: AccessPolicy = Depends(get_access_policy),
    memberships: MembershipResolver = Depends(get_membership_resolver),
):
    """List payments, most recent first"""
    use_case = ListPayments(SqlAlchemyPaymentRepository(session), access_policy, memberships)
    result = await use_case.execute(
        actor,
        business_id=business_id,
        start=start,
        end=end,
        payment_method=payment_method,
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value
