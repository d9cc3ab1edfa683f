"""Authorization collaborators

The engine is policy-agnostic: role rules live behind AccessPolicy and
business membership behind MembershipResolver.
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.actor import Actor, Action
from src.domain.exceptions import PermissionDenied


class AccessPolicy(ABC):
    """Capability check for a resolved actor"""

    @abstractmethod
    def can_perform(self, actor: Actor, action: Action) -> bool:
        pass


class MembershipResolver(ABC):
    """Resolves which business a user operates on"""

    @abstractmethod
    async def business_of(self, user_id: str) -> Optional[str]:
        """
        Retrieve the business assigned to a user

        Args:
            user_id: User identifier

        Returns:
            Business ID, or None if the user has no assignment
        """
        pass


def require(policy: AccessPolicy, actor: Actor, action: Action) -> None:
    """Raise PermissionDenied unless the actor may perform the action"""
    if not policy.can_perform(actor, action):
        raise PermissionDenied(
            f"Role {actor.role.value} is not allowed to {action.value}",
            reason=f"user_id={actor.user_id}",
        )


async def ensure_business_access(
    policy: AccessPolicy,
    memberships: MembershipResolver,
    actor: Actor,
    business_id: str,
) -> None:
    """Raise PermissionDenied unless the actor may operate on business_id"""
    if policy.can_perform(actor, Action.ACCESS_ANY_BUSINESS):
        return
    assigned = await memberships.business_of(actor.user_id)
    if assigned is None or assigned != business_id:
        raise PermissionDenied(
            f"No access to business {business_id}",
            reason=f"user_id={actor.user_id}, assigned_business={assigned}",
        )


async def resolve_target_business(
    policy: AccessPolicy,
    memberships: MembershipResolver,
    actor: Actor,
    requested_business_id: Optional[str],
) -> Optional[str]:
    """
    Business an actor operates on

    Actors with ACCESS_ANY_BUSINESS get the requested business (None if they
    did not name one); everyone else gets their assignment, and naming a
    different business is denied.
    """
    if policy.can_perform(actor, Action.ACCESS_ANY_BUSINESS):
        return requested_business_id
    assigned = await memberships.business_of(actor.user_id)
    if assigned is None:
        raise PermissionDenied(
            "User has no business assigned",
            reason=f"user_id={actor.user_id}",
        )
    if requested_business_id and requested_business_id != assigned:
        raise PermissionDenied(
            f"No access to business {requested_business_id}",
            reason=f"user_id={actor.user_id}, assigned_business={assigned}",
        )
    return assigned
