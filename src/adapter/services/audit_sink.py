"""Audit Sink Implementations

Provides concrete implementations for forwarding audit events.
"""

import logging
from typing import Optional
import httpx
from src.app.services.audit_sink import AuditEvent, AuditSink

logger = logging.getLogger(__name__)


class LoggingAuditSink(AuditSink):
    """
    Audit sink that writes events to the application log

    Useful for development and testing, or as a fallback.
    """

    async def record(self, event: AuditEvent) -> None:
        logger.info(
            f"[AUDIT] Action: {event.action}, "
            f"User: {event.user_id}, "
            f"Business: {event.business_id}, "
            f"Entity: {event.entity_type}:{event.entity_id}"
        )


class WebhookAuditSink(AuditSink):
    """
    Audit sink that posts events to an HTTP webhook

    Sends the JSON-serialized event to the configured URL. Delivery failures
    are logged and dropped.
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        """
        Initialize webhook audit sink

        Args:
            webhook_url: URL to POST events to
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def record(self, event: AuditEvent) -> None:
        payload = {"type": "audit_event", **event.model_dump(mode="json")}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                logger.info(f"Audit event {event.action} sent to {self.webhook_url}")
        except httpx.HTTPError as e:
            logger.error(f"Failed to send audit event {event.action} to {self.webhook_url}: {e}")


class CompositeAuditSink(AuditSink):
    """
    Audit sink that delegates to multiple sinks

    One failing sink does not prevent the others from receiving the event.
    """

    def __init__(self, sinks: list[AuditSink]):
        self.sinks = sinks

    async def record(self, event: AuditEvent) -> None:
        for sink in self.sinks:
            try:
                await sink.record(event)
            except Exception as e:
                logger.error(f"Audit sink {type(sink).__name__} failed: {e}")


def create_audit_sink(webhook_url: Optional[str] = None) -> AuditSink:
    """
    Factory function to create the audit sink

    Args:
        webhook_url: Optional webhook URL. If provided, creates composite
                     sink with both logging and webhook.

    Returns:
        AuditSink instance
    """
    logging_sink = LoggingAuditSink()

    if webhook_url:
        logger.info(f"Audit sink configured with webhook: {webhook_url}")
        return CompositeAuditSink([
            logging_sink,
            WebhookAuditSink(webhook_url),
        ])

    logger.info("Audit sink configured with logging only")
    return logging_sink
