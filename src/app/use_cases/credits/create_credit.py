"""CreateCredit Use Case

Disburses a credit: plan, schedule and ledger movement in one transaction.
"""

import logging
from datetime import datetime
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.business_repository import BusinessRepository
from src.app.repositories.cash_movement_repository import CashMovementRepository
from src.app.repositories.client_repository import ClientRepository
from src.app.repositories.credit_repository import CreditRepository
from src.app.repositories.installment_repository import InstallmentRepository
from src.app.services.audit_sink import AuditEvent, AuditSink, dispatch_audit
from src.app.services.authorization import AccessPolicy, MembershipResolver, require, resolve_target_business
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.cash.ledger import CashLedger
from src.app.use_cases.errors import invariant_error, rule_error
from src.domain.actor import Action, Actor
from src.domain.amortization import calculate_end_date, compute_plan
from src.domain.cash_movement import MovementType
from src.domain.credit import Credit, CreditStatus, PaymentFrequency
from src.domain.exceptions import (
    BusinessNotFound,
    BusinessRequired,
    ClientNotFound,
    CreditEngineError,
    CrossBusinessReference,
    InsufficientFunds,
    InvariantViolation,
)
from src.domain.installment import Installment, InstallmentStatus
from .dtos import CreateCreditCommandDTO, CreditResponseDTO

logger = logging.getLogger(__name__)


class CreateCredit:
    """
    Use Case: Create credit

    Business Rules:
    1. Actors that may access any business must name the target business;
       everyone else operates on their assigned business
    2. Client must belong to the target business
    3. Amount cannot exceed the business's current balance
    4. Credit, installments and the loan_disbursement movement are committed
       together or not at all

    Flow:
    1. Authorize and resolve the target business
    2. Validate client
    3. Lock business row and check funds
    4. Compute plan
    5. Insert credit and schedule
    6. Record disbursement in the ledger
    7. Commit
    8. Audit (fire-and-forget)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        business_repo: BusinessRepository,
        client_repo: ClientRepository,
        credit_repo: CreditRepository,
        installment_repo: InstallmentRepository,
        movement_repo: CashMovementRepository,
        access_policy: AccessPolicy,
        memberships: MembershipResolver,
        audit_sink: Optional[AuditSink] = None,
    ):
        self.uow = uow
        self.business_repo = business_repo
        self.client_repo = client_repo
        self.credit_repo = credit_repo
        self.installment_repo = installment_repo
        self.ledger = CashLedger(business_repo, movement_repo)
        self.access_policy = access_policy
        self.memberships = memberships
        self.audit_sink = audit_sink

    async def execute(self, command: CreateCreditCommandDTO, actor: Actor) -> Result[CreditResponseDTO]:
        try:
            # Step 1: Authorize and resolve target business
            require(self.access_policy, actor, Action.CREATE_CREDIT)
            business_id = await resolve_target_business(
                self.access_policy, self.memberships, actor, command.business_id
            )
            if not business_id:
                raise BusinessRequired()

            # Step 2: Validate client
            client = await self.client_repo.get_by_id(command.client_id)
            if not client:
                raise ClientNotFound(command.client_id)
            if client.business_id != business_id:
                raise CrossBusinessReference(client_id=client.id, business_id=business_id)

            # Step 3: Lock business and check funds
            business = await self.business_repo.get_by_id(business_id, for_update=True)
            if not business:
                raise BusinessNotFound(business_id)
            if command.amount > business.current_balance:
                raise InsufficientFunds(available=business.current_balance, required=command.amount)

            # Step 4: Compute plan
            start_date = command.start_date or datetime.utcnow().date()
            plan = compute_plan(
                principal=command.amount,
                rate_percent=command.interest_rate,
                start_date=start_date,
                term_days=command.term_days,
                frequency=command.payment_frequency,
            )

            # Step 5: Insert credit and schedule
            credit = Credit(
                business_id=business_id,
                client_id=client.id,
                amount=command.amount,
                interest_rate=command.interest_rate,
                payment_frequency=command.payment_frequency,
                start_date=start_date,
                end_date=calculate_end_date(start_date, command.term_days),
                term_days=command.term_days,
                total_interest=plan.total_interest,
                total_with_interest=plan.total_with_interest,
                remaining_balance=plan.total_with_interest,
                status=CreditStatus.ACTIVE,
                created_by_id=actor.user_id,
            )
            credit = await self.credit_repo.create(credit)

            installments = await self.installment_repo.create_many([
                Installment(
                    credit_id=credit.id,
                    installment_number=planned.installment_number,
                    due_date=planned.due_date,
                    scheduled_amount=planned.scheduled_amount,
                    status=InstallmentStatus.PENDING,
                )
                for planned in plan.installments
            ])

            # Step 6: Disbursement
            await self.ledger.record_movement(
                business_id=business_id,
                movement_type=MovementType.LOAN_DISBURSEMENT,
                amount=command.amount,
                description=f"Credit disbursement to {client.full_name}",
                actor_id=actor.user_id,
                related_credit_id=credit.id,
            )

            # Step 7: Commit
            await self.uow.commit()

        except CreditEngineError as e:
            await self.uow.rollback()
            logger.info(f"Credit for client {command.client_id} rejected: {e.code}")
            return Return.err(rule_error(e))
        except ValueError as e:
            await self.uow.rollback()
            return Return.err(
                Error(code="INVALID_CREDIT_TERMS", message="Invalid credit terms", reason=str(e))
            )
        except InvariantViolation as e:
            await self.uow.rollback()
            logger.critical(f"Ledger invariant violated, transaction rolled back: {e}")
            return Return.err(invariant_error(e))
        except Exception as e:
            await self.uow.rollback()
            logger.exception(f"Failed to create credit for client {command.client_id}: {e}")
            return Return.err(
                Error(
                    code="CREATE_CREDIT_FAILED",
                    message="Failed to create credit",
                    reason=str(e),
                )
            )

        logger.info(
            f"Credit {credit.id} disbursed: {credit.amount} to client {credit.client_id}, "
            f"{plan.number_of_installments} installments, total {credit.total_with_interest}"
        )
        dispatch_audit(
            self.audit_sink,
            AuditEvent(
                action="CREATE_CREDIT",
                user_id=actor.user_id,
                business_id=business_id,
                entity_type="Credit",
                entity_id=credit.id,
                new_values={
                    "amount": str(credit.amount),
                    "interest_rate": str(credit.interest_rate),
                    "term_days": credit.term_days,
                    "payment_frequency": PaymentFrequency(credit.payment_frequency).value,
                    "total_with_interest": str(credit.total_with_interest),
                },
            ),
        )
        return Return.ok(CreditResponseDTO.from_entity(credit, installments))
