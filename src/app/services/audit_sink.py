"""Audit Sink Interface

Fire-and-forget side channel for audit events. Implementations must never
raise into the calling operation, and the calling operation never waits
on delivery: events are handed to dispatch_audit, which schedules them on
the running event loop.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Optional, Set
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Strong references to in-flight deliveries; the loop only keeps weak ones
_pending_deliveries: Set[asyncio.Task] = set()


class AuditEvent(BaseModel):
    """One audited action"""

    action: str = Field(..., description="Action name, e.g. CREATE_CREDIT")
    user_id: Optional[str] = Field(default=None)
    business_id: Optional[str] = Field(default=None)
    entity_type: Optional[str] = Field(default=None)
    entity_id: Optional[str] = Field(default=None)
    description: Optional[str] = Field(default=None)
    old_values: Optional[Dict[str, Any]] = Field(default=None)
    new_values: Optional[Dict[str, Any]] = Field(default=None)
    occurred_at: datetime = Field(default_factory=datetime.utcnow)


class AuditSink(ABC):
    """
    Abstract audit sink

    Implementations can forward events to:
    - Application logs
    - Webhook (HTTP POST)
    - A dedicated audit store
    """

    @abstractmethod
    async def record(self, event: AuditEvent) -> None:
        """
        Record an audit event

        Args:
            event: AuditEvent to record
        """
        pass


async def record_safely(sink: Optional[AuditSink], event: AuditEvent) -> None:
    """Forward an event to the sink; failures are logged, never raised"""
    if sink is None:
        return
    try:
        await sink.record(event)
    except Exception as e:
        logger.error(f"Audit sink {type(sink).__name__} failed for {event.action}: {e}")


def dispatch_audit(sink: Optional[AuditSink], event: AuditEvent) -> Optional[asyncio.Task]:
    """
    Schedule delivery of an event without waiting for it

    Args:
        sink: Destination sink; None disables auditing
        event: AuditEvent to deliver

    Returns:
        The background task, or None when there is no sink
    """
    if sink is None:
        return None
    task = asyncio.create_task(record_safely(sink, event))
    _pending_deliveries.add(task)
    task.add_done_callback(_pending_deliveries.discard)
    return task


async def drain_audit_events() -> None:
    """Wait for every delivery scheduled on the current event loop"""
    loop = asyncio.get_running_loop()
    tasks = [task for task in _pending_deliveries if task.get_loop() is loop]
    if tasks:
        logger.info(f"Waiting for {len(tasks)} pending audit deliveries")
        await asyncio.gather(*tasks, return_exceptions=True)
