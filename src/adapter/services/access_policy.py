"""Role based AccessPolicy

    user         day-to-day lending on the assigned business
    admin        + cash management and access to every business
    super_admin  + schedule re-amortization
"""

from typing import Dict, FrozenSet
from src.app.services.authorization import AccessPolicy
from src.domain.actor import Action, Actor, UserRole

_LENDING = frozenset({
    Action.SIMULATE_CREDIT,
    Action.CREATE_CREDIT,
    Action.VIEW_CREDITS,
    Action.REGISTER_PAYMENT,
    Action.VIEW_CASH,
})

_ADMINISTRATION = frozenset({
    Action.ACCESS_ANY_BUSINESS,
    Action.CREATE_BUSINESS,
    Action.RECORD_MOVEMENT,
    Action.INJECT_CAPITAL,
    Action.WITHDRAW_FUNDS,
})

ROLE_CAPABILITIES: Dict[UserRole, FrozenSet[Action]] = {
    UserRole.USER: _LENDING,
    UserRole.ADMIN: _LENDING | _ADMINISTRATION,
    UserRole.SUPER_ADMIN: _LENDING | _ADMINISTRATION | {Action.UPDATE_SCHEDULE},
}


class RoleAccessPolicy(AccessPolicy):
    """Static role -> capability table"""

    def __init__(self, capabilities: Dict[UserRole, FrozenSet[Action]] = None):
        self.capabilities = capabilities or ROLE_CAPABILITIES

    def can_perform(self, actor: Actor, action: Action) -> bool:
        return action in self.capabilities.get(actor.role, frozenset())
