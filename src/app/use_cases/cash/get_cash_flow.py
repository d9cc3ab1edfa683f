"""GetCashFlow Use Case

Read-only projection of a business's ledger over an optional date range.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from libs.result import Result, Return
from src.app.repositories.business_repository import BusinessRepository
from src.app.repositories.cash_movement_repository import CashMovementRepository
from src.app.services.authorization import AccessPolicy, MembershipResolver, ensure_business_access, require
from src.app.use_cases.errors import rule_error
from src.domain.actor import Action, Actor
from src.domain.cash_movement import MovementType
from src.domain.exceptions import BusinessNotFound, CreditEngineError
from .dtos import CashFlowResponseDTO, CashFlowSummaryDTO, CashMovementDTO


class GetCashFlow:
    """
    Use case: Cash flow summary

    Replays the movements in the range and sums income against expenses.
    Movements are returned most recent first.
    """

    def __init__(
        self,
        business_repo: BusinessRepository,
        movement_repo: CashMovementRepository,
        access_policy: AccessPolicy,
        memberships: MembershipResolver,
    ):
        self.business_repo = business_repo
        self.movement_repo = movement_repo
        self.access_policy = access_policy
        self.memberships = memberships

    async def execute(
        self,
        business_id: str,
        actor: Actor,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Result[CashFlowResponseDTO]:
        try:
            require(self.access_policy, actor, Action.VIEW_CASH)
            await ensure_business_access(self.access_policy, self.memberships, actor, business_id)

            business = await self.business_repo.get_by_id(business_id)
            if not business:
                raise BusinessNotFound(business_id)
        except CreditEngineError as e:
            return Return.err(rule_error(e))

        movements = await self.movement_repo.get_by_business_id(
            business_id, start=start, end=end, newest_first=True
        )

        total_income = Decimal("0")
        total_expenses = Decimal("0")
        for movement in movements:
            if MovementType(movement.type).is_income:
                total_income += movement.amount
            else:
                total_expenses += movement.amount

        return Return.ok(
            CashFlowResponseDTO(
                business_id=business_id,
                start=start,
                end=end,
                movements=[CashMovementDTO.from_entity(m) for m in movements],
                summary=CashFlowSummaryDTO(
                    total_income=total_income,
                    total_expenses=total_expenses,
                    net=total_income - total_expenses,
                ),
            )
        )
