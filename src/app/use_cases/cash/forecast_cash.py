"""ForecastCash Use Case

Projects a business balance forward with the installments expected by a date.
"""

from datetime import date
from decimal import Decimal
from libs.result import Result, Return
from src.app.repositories.business_repository import BusinessRepository
from src.app.repositories.installment_repository import InstallmentRepository
from src.app.services.authorization import AccessPolicy, MembershipResolver, ensure_business_access, require
from src.app.use_cases.errors import rule_error
from src.domain.actor import Action, Actor
from src.domain.exceptions import BusinessNotFound, CreditEngineError
from .dtos import ForecastResponseDTO


class ForecastCash:
    """
    Use case: Cash forecast

    expected_income sums scheduled - paid over pending/partial installments
    of the business's credits due on or before target_date.
    projected_balance = current_balance + expected_income.
    """

    def __init__(
        self,
        business_repo: BusinessRepository,
        installment_repo: InstallmentRepository,
        access_policy: AccessPolicy,
        memberships: MembershipResolver,
    ):
        self.business_repo = business_repo
        self.installment_repo = installment_repo
        self.access_policy = access_policy
        self.memberships = memberships

    async def execute(self, business_id: str, target_date: date, actor: Actor) -> Result[ForecastResponseDTO]:
        try:
            require(self.access_policy, actor, Action.VIEW_CASH)
            await ensure_business_access(self.access_policy, self.memberships, actor, business_id)

            business = await self.business_repo.get_by_id(business_id)
            if not business:
                raise BusinessNotFound(business_id)
        except CreditEngineError as e:
            return Return.err(rule_error(e))

        installments = await self.installment_repo.get_open_for_business(business_id, target_date)
        expected_income = sum(
            (i.scheduled_amount - i.paid_amount for i in installments),
            Decimal("0"),
        )

        return Return.ok(
            ForecastResponseDTO(
                business_id=business_id,
                target_date=target_date,
                current_balance=business.current_balance,
                expected_income=expected_income,
                projected_balance=business.current_balance + expected_income,
                installments_counted=len(installments),
            )
        )
