from .unit_of_work import SqlAlchemyUnitOfWork
from .access_policy import RoleAccessPolicy, ROLE_CAPABILITIES
from .membership_resolver import SqlAlchemyMembershipResolver
from .audit_sink import (
    LoggingAuditSink,
    WebhookAuditSink,
    CompositeAuditSink,
    create_audit_sink,
)

__all__ = [
    "SqlAlchemyUnitOfWork",
    "RoleAccessPolicy",
    "ROLE_CAPABILITIES",
    "SqlAlchemyMembershipResolver",
    "LoggingAuditSink",
    "WebhookAuditSink",
    "CompositeAuditSink",
    "create_audit_sink",
]
