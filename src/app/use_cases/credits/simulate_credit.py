"""SimulateCredit Use Case

Previews the amortization plan of a credit; nothing is persisted.
"""

from datetime import datetime
from libs.result import Result, Return, Error
from src.app.services.authorization import AccessPolicy, require
from src.app.use_cases.errors import rule_error
from src.domain.actor import Action, Actor
from src.domain.amortization import calculate_end_date, compute_plan
from src.domain.exceptions import CreditEngineError
from .dtos import SimulateCreditCommandDTO, SimulationResponseDTO


class SimulateCredit:
    """Use case: credit simulation"""

    def __init__(self, access_policy: AccessPolicy):
        self.access_policy = access_policy

    async def execute(self, command: SimulateCreditCommandDTO, actor: Actor) -> Result[SimulationResponseDTO]:
        try:
            require(self.access_policy, actor, Action.SIMULATE_CREDIT)
        except CreditEngineError as e:
            return Return.err(rule_error(e))

        start_date = command.start_date or datetime.utcnow().date()
        try:
            plan = compute_plan(
                principal=command.amount,
                rate_percent=command.interest_rate,
                start_date=start_date,
                term_days=command.term_days,
                frequency=command.payment_frequency,
            )
        except ValueError as e:
            return Return.err(
                Error(code="INVALID_CREDIT_TERMS", message="Invalid credit terms", reason=str(e))
            )

        return Return.ok(
            SimulationResponseDTO.from_plan(
                plan,
                command,
                start_date=start_date,
                end_date=calculate_end_date(start_date, command.term_days),
            )
        )
