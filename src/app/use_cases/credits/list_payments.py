"""ListPayments Use Case"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from libs.result import Result, Return
from src.app.repositories.payment_repository import PaymentRepository
from src.app.services.authorization import AccessPolicy, MembershipResolver, require, resolve_target_business
from src.app.use_cases.errors import rule_error
from src.domain.actor import Action, Actor
from src.domain.exceptions import CreditEngineError
from .dtos import ListPaymentsResponseDTO, PaymentDTO


class ListPayments:
    """Use case: List payments, most recent first, scoped like ListCredits"""

    def __init__(
        self,
        payment_repo: PaymentRepository,
        access_policy: AccessPolicy,
        memberships: MembershipResolver,
    ):
        self.payment_repo = payment_repo
        self.access_policy = access_policy
        self.memberships = memberships

    async def execute(
        self,
        actor: Actor,
        business_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        payment_method: Optional[str] = None,
    ) -> Result[ListPaymentsResponseDTO]:
        try:
            require(self.access_policy, actor, Action.VIEW_CREDITS)
            business_id = await resolve_target_business(
                self.access_policy, self.memberships, actor, business_id
            )
        except CreditEngineError as e:
            return Return.err(rule_error(e))

        payments = await self.payment_repo.list(
            business_id=business_id,
            start=start,
            end=end,
            payment_method=payment_method,
        )

        return Return.ok(
            ListPaymentsResponseDTO(
                payments=[PaymentDTO.from_entity(p) for p in payments],
                total=len(payments),
                total_amount=sum((p.amount for p in payments), Decimal("0")),
            )
        )
