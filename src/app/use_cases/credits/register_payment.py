"""RegisterPayment Use Case

Collects a payment against a credit, allocates it across the schedule and
records the income in the business ledger, all in one transaction.
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.business_repository import BusinessRepository
from src.app.repositories.cash_movement_repository import CashMovementRepository
from src.app.repositories.credit_repository import CreditRepository
from src.app.repositories.installment_repository import InstallmentRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.app.services.audit_sink import AuditEvent, AuditSink, dispatch_audit
from src.app.services.authorization import AccessPolicy, MembershipResolver, ensure_business_access, require
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.cash.ledger import CashLedger
from src.app.use_cases.errors import invariant_error, rule_error
from src.domain.actor import Action, Actor
from src.domain.amortization import split_payment
from src.domain.cash_movement import MovementType
from src.domain.credit import CreditStatus
from src.domain.exceptions import (
    AlreadySettled,
    BusinessNotFound,
    CreditCancelled,
    CreditEngineError,
    CreditNotFound,
    FuturePaymentDate,
    InstallmentAlreadyPaid,
    InvalidInstallment,
    InvariantViolation,
    OverInstallmentPayment,
    OverPayment,
)
from src.domain.payment import Payment
from src.domain.schedule import (
    Allocation,
    apply_allocations,
    derive_credit_status,
    derive_status,
    distribute_payment,
    refresh_statuses,
)
from .dtos import AllocationDTO, PaymentDTO, PaymentResponseDTO, RegisterPaymentCommandDTO

logger = logging.getLogger(__name__)


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class RegisterPayment:
    """
    Use Case: Register payment

    Business Rules:
    1. payment_date can never be in the future
    2. Paid and cancelled credits accept no payments
    3. Amount cannot exceed the credit's remaining balance
    4. With schedule_id the whole amount goes to that installment and cannot
       exceed what it still owes; otherwise it is distributed overdue first
    5. Every applied cent lands on an installment; a leftover aborts the
       transaction as an internal fault
    6. Payment, schedule, credit balance and the payment_received movement
       are committed together

    Flow:
    1. Validate payment date
    2. Load credit (locked) and check access
    3. Lock business row
    4. Allocate amount over installments
    5. Re-derive installment and credit statuses
    6. Insert payment receipt
    7. Record income in the ledger
    8. Commit
    9. Audit (fire-and-forget)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        business_repo: BusinessRepository,
        credit_repo: CreditRepository,
        installment_repo: InstallmentRepository,
        payment_repo: PaymentRepository,
        movement_repo: CashMovementRepository,
        access_policy: AccessPolicy,
        memberships: MembershipResolver,
        audit_sink: Optional[AuditSink] = None,
    ):
        self.uow = uow
        self.business_repo = business_repo
        self.credit_repo = credit_repo
        self.installment_repo = installment_repo
        self.payment_repo = payment_repo
        self.ledger = CashLedger(business_repo, movement_repo)
        self.access_policy = access_policy
        self.memberships = memberships
        self.audit_sink = audit_sink

    async def execute(self, command: RegisterPaymentCommandDTO, actor: Actor) -> Result[PaymentResponseDTO]:
        now = datetime.utcnow()
        payment_date = _as_naive_utc(command.payment_date) if command.payment_date else now

        # Step 1: Validate payment date before touching anything
        if payment_date > now:
            return Return.err(rule_error(FuturePaymentDate()))

        today = now.date()

        try:
            # Step 2: Load credit and check access
            require(self.access_policy, actor, Action.REGISTER_PAYMENT)

            credit = await self.credit_repo.get_by_id(command.credit_id, for_update=True)
            if not credit:
                raise CreditNotFound(command.credit_id)

            await ensure_business_access(self.access_policy, self.memberships, actor, credit.business_id)

            if credit.status == CreditStatus.CANCELLED:
                raise CreditCancelled(credit.id)
            if credit.status == CreditStatus.PAID or credit.remaining_balance <= 0:
                raise AlreadySettled(credit.id)
            if command.amount > credit.remaining_balance:
                raise OverPayment(amount=command.amount, remaining=credit.remaining_balance)

            # Step 3: Lock business
            business = await self.business_repo.get_by_id(credit.business_id, for_update=True)
            if not business:
                raise BusinessNotFound(credit.business_id)

            # Step 4: Allocate
            installments = await self.installment_repo.get_by_credit_id(credit.id)

            if command.schedule_id:
                target = next((i for i in installments if i.id == command.schedule_id), None)
                if target is None:
                    raise InvalidInstallment(command.schedule_id, credit.id)
                if target.outstanding <= 0:
                    raise InstallmentAlreadyPaid(target.id)
                if command.amount > target.outstanding:
                    raise OverInstallmentPayment(amount=command.amount, outstanding=target.outstanding)

                new_paid = target.paid_amount + command.amount
                allocations = [
                    Allocation(
                        installment_id=target.id,
                        applied=command.amount,
                        new_paid_amount=new_paid,
                        new_status=derive_status(new_paid, target.scheduled_amount, target.due_date, today),
                    )
                ]
            else:
                allocations = distribute_payment(
                    command.amount, installments, payment_date.date(), today
                )

            # Step 5: Statuses
            touched = apply_allocations(installments, allocations)
            changed = refresh_statuses(installments, today)
            dirty = {i.id: i for i in touched + changed}
            await self.installment_repo.update_many(list(dirty.values()))

            to_principal, to_interest = split_payment(
                command.amount,
                credit.remaining_balance,
                credit.amount,
                credit.total_interest,
            )

            credit.remaining_balance = credit.remaining_balance - command.amount
            credit.status = derive_credit_status(
                credit.remaining_balance, [i.status for i in installments]
            )
            credit.updated_at = now
            credit = await self.credit_repo.update(credit)

            # Step 6: Receipt
            payment = await self.payment_repo.create(
                Payment(
                    credit_id=credit.id,
                    installment_id=command.schedule_id,
                    amount=command.amount,
                    payment_date=payment_date,
                    amount_to_principal=to_principal,
                    amount_to_interest=to_interest,
                    remaining_balance_after=credit.remaining_balance,
                    payment_method=command.payment_method,
                    notes=command.notes,
                    created_by_id=actor.user_id,
                )
            )

            # Step 7: Income
            await self.ledger.record_movement(
                business_id=credit.business_id,
                movement_type=MovementType.PAYMENT_RECEIVED,
                amount=command.amount,
                description=f"Payment received for credit {credit.id}",
                actor_id=actor.user_id,
                related_credit_id=credit.id,
                related_payment_id=payment.id,
            )

            # Step 8: Commit
            await self.uow.commit()

        except InvariantViolation as e:
            await self.uow.rollback()
            logger.critical(
                f"Invariant violated while registering payment of {command.amount} "
                f"on credit {command.credit_id}, transaction rolled back: {e}"
            )
            return Return.err(invariant_error(e))
        except CreditEngineError as e:
            await self.uow.rollback()
            logger.info(f"Payment on credit {command.credit_id} rejected: {e.code}")
            return Return.err(rule_error(e))
        except Exception as e:
            await self.uow.rollback()
            logger.exception(f"Failed to register payment on credit {command.credit_id}: {e}")
            return Return.err(
                Error(
                    code="REGISTER_PAYMENT_FAILED",
                    message="Failed to register payment",
                    reason=str(e),
                )
            )

        logger.info(
            f"Payment {payment.id} of {payment.amount} applied to credit {credit.id} "
            f"across {len(allocations)} installments, remaining {credit.remaining_balance}"
        )
        dispatch_audit(
            self.audit_sink,
            AuditEvent(
                action="REGISTER_PAYMENT",
                user_id=actor.user_id,
                business_id=credit.business_id,
                entity_type="Payment",
                entity_id=payment.id,
                new_values={
                    "credit_id": credit.id,
                    "amount": str(payment.amount),
                    "remaining_balance_after": str(payment.remaining_balance_after),
                    "credit_status": CreditStatus(credit.status).value,
                },
            ),
        )
        return Return.ok(
            PaymentResponseDTO(
                payment=PaymentDTO.from_entity(payment),
                allocations=[AllocationDTO.from_allocation(a) for a in allocations],
                credit_remaining_balance=credit.remaining_balance,
                credit_status=credit.status,
            )
        )
