"""UpdateSchedule Use Case

Re-amortizes a credit mid-life. The ledger is never touched: a schedule
edit changes what is owed, not the cash that moved.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.credit_repository import CreditRepository
from src.app.repositories.installment_repository import InstallmentRepository
from src.app.services.audit_sink import AuditEvent, AuditSink, dispatch_audit
from src.app.services.authorization import AccessPolicy, MembershipResolver, ensure_business_access, require
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.errors import rule_error
from src.domain.actor import Action, Actor
from src.domain.credit import CreditStatus
from src.domain.exceptions import (
    AmountBelowPaid,
    CreditEngineError,
    CreditNotFound,
    DuplicateInstallment,
    InvalidInstallment,
    NegativeBalance,
    ScheduleLocked,
)
from src.domain.installment import Installment
from src.domain.schedule import derive_credit_status, derive_status
from .dtos import CreditResponseDTO, UpdateScheduleCommandDTO

logger = logging.getLogger(__name__)


def _ensure_unique(field: str, values: list) -> None:
    seen = set()
    for value in values:
        if value in seen:
            raise DuplicateInstallment(field, value)
        seen.add(value)


class UpdateSchedule:
    """
    Use Case: Update payment schedule

    Business Rules:
    1. Only actors with the UPDATE_SCHEDULE capability
    2. Once any installment has collected money the installment count is
       frozen (ScheduleLocked), rows are matched by id and no row may drop
       below what it already collected (AmountBelowPaid)
    3. Edited rows map one-to-one onto the schedule and installment numbers
       stay unique (DuplicateInstallment)
    4. Without collections and with a different count, the schedule is
       replaced wholesale
    5. Without collections and with the same count, rows are edited in place
    6. remaining_balance = sum(scheduled) - sum(paid), never negative
    7. Statuses are re-derived as of today
    """

    def __init__(
        self,
        uow: UnitOfWork,
        credit_repo: CreditRepository,
        installment_repo: InstallmentRepository,
        access_policy: AccessPolicy,
        memberships: MembershipResolver,
        audit_sink: Optional[AuditSink] = None,
    ):
        self.uow = uow
        self.credit_repo = credit_repo
        self.installment_repo = installment_repo
        self.access_policy = access_policy
        self.memberships = memberships
        self.audit_sink = audit_sink

    async def execute(self, command: UpdateScheduleCommandDTO, actor: Actor) -> Result[CreditResponseDTO]:
        now = datetime.utcnow()
        today = now.date()

        try:
            require(self.access_policy, actor, Action.UPDATE_SCHEDULE)

            credit = await self.credit_repo.get_by_id(command.credit_id, for_update=True)
            if not credit:
                raise CreditNotFound(command.credit_id)

            await ensure_business_access(self.access_policy, self.memberships, actor, credit.business_id)

            existing = await self.installment_repo.get_by_credit_id(credit.id)
            old_remaining = credit.remaining_balance
            has_collections = any(i.paid_amount > 0 for i in existing)
            rows = command.installments

            if has_collections and len(rows) != len(existing):
                raise ScheduleLocked(existing=len(existing), incoming=len(rows))

            numbers = [row.installment_number or position for position, row in enumerate(rows, start=1)]
            _ensure_unique("installment_number", numbers)

            if len(rows) != len(existing):
                # Replace: nothing collected yet
                deleted = await self.installment_repo.delete_by_credit_id(credit.id)
                schedule = await self.installment_repo.create_many([
                    Installment(
                        credit_id=credit.id,
                        installment_number=number,
                        due_date=row.due_date,
                        scheduled_amount=row.scheduled_amount,
                        status=derive_status(Decimal("0"), row.scheduled_amount, row.due_date, today),
                    )
                    for number, row in zip(numbers, rows)
                ])
                logger.info(f"Credit {credit.id} schedule replaced: {deleted} -> {len(schedule)} installments")
            else:
                # In place: rows map one-to-one onto the credit's installments
                by_id = {i.id: i for i in existing}
                _ensure_unique("installment", [row.id for row in rows if row.id])
                for number, row in zip(numbers, rows):
                    installment = by_id.get(row.id) if row.id else None
                    if installment is None:
                        raise InvalidInstallment(row.id, credit.id)
                    if row.scheduled_amount < installment.paid_amount:
                        raise AmountBelowPaid(
                            installment_id=installment.id,
                            scheduled=row.scheduled_amount,
                            paid=installment.paid_amount,
                        )
                    installment.installment_number = number
                    installment.due_date = row.due_date
                    installment.scheduled_amount = row.scheduled_amount
                    installment.status = derive_status(
                        installment.paid_amount, installment.scheduled_amount, installment.due_date, today
                    )

                await self.installment_repo.update_many(existing)
                schedule = sorted(existing, key=lambda i: (i.due_date, i.installment_number))

            total_scheduled = sum((i.scheduled_amount for i in schedule), Decimal("0"))
            total_paid = sum((i.paid_amount for i in schedule), Decimal("0"))
            remaining = total_scheduled - total_paid
            if remaining < 0:
                raise NegativeBalance(total_scheduled=total_scheduled, total_paid=total_paid)

            credit.remaining_balance = remaining
            if credit.status != CreditStatus.CANCELLED:
                credit.status = derive_credit_status(remaining, [i.status for i in schedule])
            credit.updated_at = now
            credit = await self.credit_repo.update(credit)

            await self.uow.commit()

        except CreditEngineError as e:
            await self.uow.rollback()
            logger.info(f"Schedule update on credit {command.credit_id} rejected: {e.code}")
            return Return.err(rule_error(e))
        except Exception as e:
            await self.uow.rollback()
            logger.exception(f"Failed to update schedule of credit {command.credit_id}: {e}")
            return Return.err(
                Error(
                    code="UPDATE_SCHEDULE_FAILED",
                    message="Failed to update payment schedule",
                    reason=str(e),
                )
            )

        logger.info(
            f"Credit {credit.id} re-amortized: remaining {old_remaining} -> {credit.remaining_balance}"
        )
        dispatch_audit(
            self.audit_sink,
            AuditEvent(
                action="UPDATE_SCHEDULE",
                user_id=actor.user_id,
                business_id=credit.business_id,
                entity_type="Credit",
                entity_id=credit.id,
                old_values={"remaining_balance": str(old_remaining), "installments": len(existing)},
                new_values={"remaining_balance": str(credit.remaining_balance), "installments": len(schedule)},
            ),
        )
        return Return.ok(CreditResponseDTO.from_entity(credit, schedule))
