"""CreateBusiness Use Case

Opens a new accounting unit with its initial capital.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.business_repository import BusinessRepository
from src.app.services.audit_sink import AuditEvent, AuditSink, dispatch_audit
from src.app.services.authorization import AccessPolicy, require
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.errors import rule_error
from src.domain.actor import Action, Actor
from src.domain.business import Business
from src.domain.exceptions import CreditEngineError
from .dtos import CreateBusinessCommandDTO, BusinessResponseDTO

logger = logging.getLogger(__name__)


class CreateBusiness:
    """
    Use Case: Create business

    Business Rules:
    1. Only actors allowed to CREATE_BUSINESS
    2. current_balance starts equal to initial_capital
    3. No opening movement is written: reconciliation falls back to
       initial_capital while the ledger is empty
    """

    def __init__(
        self,
        uow: UnitOfWork,
        business_repo: BusinessRepository,
        access_policy: AccessPolicy,
        audit_sink: Optional[AuditSink] = None,
    ):
        self.uow = uow
        self.business_repo = business_repo
        self.access_policy = access_policy
        self.audit_sink = audit_sink

    async def execute(self, command: CreateBusinessCommandDTO, actor: Actor) -> Result[BusinessResponseDTO]:
        try:
            require(self.access_policy, actor, Action.CREATE_BUSINESS)

            business = Business(
                name=command.name,
                description=command.description,
                initial_capital=command.initial_capital,
                current_balance=command.initial_capital,
                created_by_id=actor.user_id,
            )
            created = await self.business_repo.create(business)
            await self.uow.commit()

        except CreditEngineError as e:
            await self.uow.rollback()
            return Return.err(rule_error(e))
        except Exception as e:
            await self.uow.rollback()
            logger.exception(f"Failed to create business {command.name}: {e}")
            return Return.err(
                Error(
                    code="CREATE_BUSINESS_FAILED",
                    message="Failed to create business",
                    reason=str(e),
                )
            )

        logger.info(f"Business {created.id} created with initial capital {created.initial_capital}")
        dispatch_audit(
            self.audit_sink,
            AuditEvent(
                action="CREATE_BUSINESS",
                user_id=actor.user_id,
                business_id=created.id,
                entity_type="Business",
                entity_id=created.id,
                new_values={"name": created.name, "initial_capital": str(created.initial_capital)},
            ),
        )
        return Return.ok(BusinessResponseDTO.from_entity(created))
