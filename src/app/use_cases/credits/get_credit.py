"""GetCredit Use Case"""

from libs.result import Result, Return
from src.app.repositories.credit_repository import CreditRepository
from src.app.repositories.installment_repository import InstallmentRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.app.services.authorization import AccessPolicy, MembershipResolver, ensure_business_access, require
from src.app.use_cases.errors import rule_error
from src.domain.actor import Action, Actor
from src.domain.exceptions import CreditEngineError, CreditNotFound
from .dtos import CreditDetailResponseDTO, PaymentDTO


class GetCredit:
    """
    Use case: Credit detail

    Returns the credit with its schedule ordered by due date and its
    payments most recent first.
    """

    def __init__(
        self,
        credit_repo: CreditRepository,
        installment_repo: InstallmentRepository,
        payment_repo: PaymentRepository,
        access_policy: AccessPolicy,
        memberships: MembershipResolver,
    ):
        self.credit_repo = credit_repo
        self.installment_repo = installment_repo
        self.payment_repo = payment_repo
        self.access_policy = access_policy
        self.memberships = memberships

    async def execute(self, credit_id: str, actor: Actor) -> Result[CreditDetailResponseDTO]:
        try:
            require(self.access_policy, actor, Action.VIEW_CREDITS)

            credit = await self.credit_repo.get_by_id(credit_id)
            if not credit:
                raise CreditNotFound(credit_id)

            await ensure_business_access(self.access_policy, self.memberships, actor, credit.business_id)
        except CreditEngineError as e:
            return Return.err(rule_error(e))

        installments = await self.installment_repo.get_by_credit_id(credit.id)
        payments = await self.payment_repo.get_by_credit_id(credit.id)

        detail = CreditDetailResponseDTO.from_entity(credit, installments)
        detail.payments = [PaymentDTO.from_entity(p) for p in payments]
        return Return.ok(detail)
