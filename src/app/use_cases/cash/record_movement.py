"""Ledger write use cases

RecordMovement appends any movement type; InjectCapital and WithdrawFunds
are the owner-facing shortcuts for capital_injection and withdrawal.
"""

import logging
from decimal import Decimal
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.business_repository import BusinessRepository
from src.app.repositories.cash_movement_repository import CashMovementRepository
from src.app.services.audit_sink import AuditEvent, AuditSink, dispatch_audit
from src.app.services.authorization import AccessPolicy, MembershipResolver, ensure_business_access, require
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.errors import invariant_error, rule_error
from src.domain.actor import Action, Actor
from src.domain.cash_movement import MovementType
from src.domain.exceptions import CreditEngineError, InvariantViolation
from .dtos import CapitalCommandDTO, CashMovementDTO, RecordMovementCommandDTO
from .ledger import CashLedger

logger = logging.getLogger(__name__)


class RecordMovement:
    """
    Use Case: Record a cash movement

    Business Rules:
    1. Actor must be allowed to perform the use case action
    2. Actor must have access to the business
    3. Expenses cannot overdraw the business (InsufficientFunds)
    4. Movement and balance update are committed together

    Flow:
    1. Authorize
    2. CashLedger.record_movement (locks business row)
    3. Commit
    4. Audit (fire-and-forget)
    """

    action = Action.RECORD_MOVEMENT
    failure_code = "RECORD_MOVEMENT_FAILED"

    def __init__(
        self,
        uow: UnitOfWork,
        business_repo: BusinessRepository,
        movement_repo: CashMovementRepository,
        access_policy: AccessPolicy,
        memberships: MembershipResolver,
        audit_sink: Optional[AuditSink] = None,
    ):
        self.uow = uow
        self.ledger = CashLedger(business_repo, movement_repo)
        self.access_policy = access_policy
        self.memberships = memberships
        self.audit_sink = audit_sink

    async def execute(self, command: RecordMovementCommandDTO, actor: Actor) -> Result[CashMovementDTO]:
        return await self._record(
            business_id=command.business_id,
            movement_type=command.type,
            amount=command.amount,
            description=command.description,
            actor=actor,
            related_credit_id=command.related_credit_id,
            related_payment_id=command.related_payment_id,
        )

    async def _record(
        self,
        business_id: str,
        movement_type: MovementType,
        amount: Decimal,
        description: Optional[str],
        actor: Actor,
        related_credit_id: Optional[str] = None,
        related_payment_id: Optional[str] = None,
    ) -> Result[CashMovementDTO]:
        try:
            require(self.access_policy, actor, self.action)
            await ensure_business_access(self.access_policy, self.memberships, actor, business_id)

            movement = await self.ledger.record_movement(
                business_id=business_id,
                movement_type=movement_type,
                amount=amount,
                description=description,
                actor_id=actor.user_id,
                related_credit_id=related_credit_id,
                related_payment_id=related_payment_id,
            )
            await self.uow.commit()

        except CreditEngineError as e:
            await self.uow.rollback()
            logger.info(f"Movement {MovementType(movement_type).value} on business {business_id} rejected: {e.code}")
            return Return.err(rule_error(e))
        except InvariantViolation as e:
            await self.uow.rollback()
            logger.critical(f"Ledger invariant violated, transaction rolled back: {e}")
            return Return.err(invariant_error(e))
        except Exception as e:
            await self.uow.rollback()
            logger.exception(f"Failed to record movement on business {business_id}: {e}")
            return Return.err(
                Error(
                    code=self.failure_code,
                    message="Failed to record cash movement",
                    reason=str(e),
                )
            )

        dispatch_audit(
            self.audit_sink,
            AuditEvent(
                action="CASH_MOVEMENT_RECORDED",
                user_id=actor.user_id,
                business_id=business_id,
                entity_type="CashMovement",
                entity_id=str(movement.id),
                new_values={
                    "type": MovementType(movement.type).value,
                    "amount": str(movement.amount),
                    "balance_after": str(movement.balance_after),
                },
            ),
        )
        return Return.ok(CashMovementDTO.from_entity(movement))


class InjectCapital(RecordMovement):
    """Use Case: Owner adds cash to a business"""

    action = Action.INJECT_CAPITAL
    failure_code = "INJECT_CAPITAL_FAILED"

    async def execute(self, command: CapitalCommandDTO, actor: Actor) -> Result[CashMovementDTO]:
        return await self._record(
            business_id=command.business_id,
            movement_type=MovementType.CAPITAL_INJECTION,
            amount=command.amount,
            description=command.description or "Capital injection",
            actor=actor,
        )


class WithdrawFunds(RecordMovement):
    """Use Case: Owner takes cash out of a business"""

    action = Action.WITHDRAW_FUNDS
    failure_code = "WITHDRAW_FUNDS_FAILED"

    async def execute(self, command: CapitalCommandDTO, actor: Actor) -> Result[CashMovementDTO]:
        return await self._record(
            business_id=command.business_id,
            movement_type=MovementType.WITHDRAWAL,
            amount=command.amount,
            description=command.description or "Funds withdrawal",
            actor=actor,
        )
