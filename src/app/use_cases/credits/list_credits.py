"""ListCredits Use Case"""

from datetime import datetime
from typing import Optional
from libs.result import Result, Return
from src.app.repositories.credit_repository import CreditRepository
from src.app.services.authorization import AccessPolicy, MembershipResolver, require, resolve_target_business
from src.app.use_cases.errors import rule_error
from src.domain.actor import Action, Actor
from src.domain.credit import CreditStatus
from src.domain.exceptions import CreditEngineError
from .dtos import CreditResponseDTO, ListCreditsResponseDTO


class ListCredits:
    """
    Use case: List credits

    Scoped to the actor's business unless the actor may access any business,
    in which case business_id is an optional filter.

    Filters:
        status: credit status
        due_today: credits with an open installment due today
        overdue: credits with at least one overdue installment
    """

    def __init__(
        self,
        credit_repo: CreditRepository,
        access_policy: AccessPolicy,
        memberships: MembershipResolver,
    ):
        self.credit_repo = credit_repo
        self.access_policy = access_policy
        self.memberships = memberships

    async def execute(
        self,
        actor: Actor,
        business_id: Optional[str] = None,
        status: Optional[CreditStatus] = None,
        due_today: bool = False,
        overdue: bool = False,
    ) -> Result[ListCreditsResponseDTO]:
        try:
            require(self.access_policy, actor, Action.VIEW_CREDITS)
            business_id = await resolve_target_business(
                self.access_policy, self.memberships, actor, business_id
            )
        except CreditEngineError as e:
            return Return.err(rule_error(e))

        credits = await self.credit_repo.list(
            business_id=business_id,
            status=status,
            due_on=datetime.utcnow().date() if due_today else None,
            overdue_only=overdue,
        )

        return Return.ok(
            ListCreditsResponseDTO(
                credits=[CreditResponseDTO.from_entity(c) for c in credits],
                total=len(credits),
            )
        )
