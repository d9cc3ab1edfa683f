from .unit_of_work import UnitOfWork
from .audit_sink import AuditSink, AuditEvent, record_safely, dispatch_audit, drain_audit_events
from .authorization import (
    AccessPolicy,
    MembershipResolver,
    require,
    ensure_business_access,
    resolve_target_business,
)

__all__ = [
    "UnitOfWork",
    "AuditSink",
    "AuditEvent",
    "record_safely",
    "dispatch_audit",
    "drain_audit_events",
    "AccessPolicy",
    "MembershipResolver",
    "require",
    "ensure_business_access",
    "resolve_target_business",
]
