"""Request-scoped collaborators for the routes

The caller is authenticated upstream; the gateway forwards the resolved
identity in the X-Actor-Id and X-Actor-Role headers.
"""

from typing import Optional
from fastapi import Header
from libs.result import Error
from src.api.error import ClientError
from src.domain.actor import Actor, UserRole


async def get_actor(
    x_actor_id: Optional[str] = Header(default=None),
    x_actor_role: Optional[str] = Header(default=None),
) -> Actor:
    if not x_actor_id or not x_actor_role:
        raise ClientError(
            Error(code="UNAUTHENTICATED", message="Missing actor headers")
        )
    try:
        role = UserRole(x_actor_role)
    except ValueError:
        raise ClientError(
            Error(code="UNAUTHENTICATED", message="Unknown actor role", reason=x_actor_role)
        )
    return Actor(user_id=x_actor_id, role=role)
