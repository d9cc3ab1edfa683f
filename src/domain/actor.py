"""Actor value object

The already-authenticated caller of an engine operation. Authentication
happens upstream; the engine only receives the resolved id and role.
"""

from enum import Enum
from pydantic import BaseModel, ConfigDict


class UserRole(str, Enum):
    """Role hierarchy of the lending back office"""
    USER = "user"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class Action(str, Enum):
    """Capabilities checked through AccessPolicy"""
    SIMULATE_CREDIT = "simulate_credit"
    CREATE_CREDIT = "create_credit"
    VIEW_CREDITS = "view_credits"
    REGISTER_PAYMENT = "register_payment"
    UPDATE_SCHEDULE = "update_schedule"
    CREATE_BUSINESS = "create_business"
    RECORD_MOVEMENT = "record_movement"
    INJECT_CAPITAL = "inject_capital"
    WITHDRAW_FUNDS = "withdraw_funds"
    VIEW_CASH = "view_cash"
    ACCESS_ANY_BUSINESS = "access_any_business"


class Actor(BaseModel):
    """Resolved caller identity"""

    model_config = ConfigDict(frozen=True)

    user_id: str
    role: UserRole
