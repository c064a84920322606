"""
Customer observer service
Prints a human-readable summary for every customer event it receives
"""

import sys
from datetime import datetime
from typing import Any, Optional, TextIO

from app.core.logger import logger
from app.models.customer_event import CustomerEvent
from app.observer.decoding import EventDeserializationError, decode_event, parse_envelope

BANNER = "=" * 37
DIVIDER = "-" * 37


def format_summary(
    event: CustomerEvent,
    event_id: str,
    event_type: str,
    event_source: str,
    received_at: Optional[datetime] = None,
) -> str:
    """Fixed-format multi-line summary of one event"""
    received_at = received_at or datetime.now()
    email = event.customer_email if event.customer_email is not None else "null"
    lines = [
        BANNER,
        "CUSTOMER DAPR EVENT RECEIVED",
        BANNER,
        f"Timestamp: {received_at.strftime('%Y-%m-%d %H:%M:%S')}",
        f"Event ID: {event_id}",
        f"Event Type: {event_type}",
        f"Event Source: {event_source}",
        DIVIDER,
        f"Customer ID: {event.customer_id}",
        f"Customer Name: {event.customer_name}",
        f"Customer Email: {email}",
        f"Action: {event.action.value}",
        BANNER,
    ]
    return "\n".join(lines) + "\n"


class CustomerObserverService:
    """
    Stateless consumer of customer events.

    Malformed messages are logged and dropped. Nothing is retried and
    duplicates are reported again.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stdout

    def receive(self, raw: Any) -> Optional[CustomerEvent]:
        """
        Decode and report one inbound envelope.

        Returns:
            The decoded CustomerEvent, or None when the message was dropped
        """
        try:
            envelope = parse_envelope(raw)
        except EventDeserializationError as e:
            logger.error(
                "Error processing customer event message",
                metadata={"event": "observer_envelope_invalid", "error": str(e)},
            )
            return None

        event_id = envelope.id or "unknown"
        event_type = envelope.type or "unknown"
        event_source = envelope.source or "unknown"

        logger.info(
            "Processing customer event envelope",
            metadata={
                "event": "observer_envelope_received",
                "eventId": event_id,
                "eventType": event_type,
                "source": event_source,
                "subject": envelope.subject,
            },
        )

        if envelope.data is None:
            logger.warning(
                "No data found in event envelope",
                metadata={"event": "observer_envelope_empty", "eventId": event_id},
            )
            return None

        try:
            event = decode_event(envelope)
        except EventDeserializationError as e:
            logger.error(
                "Failed to parse customer event payload",
                metadata={
                    "event": "observer_payload_invalid",
                    "eventId": event_id,
                    "payload": envelope.data_as_json(),
                    "error": str(e),
                },
            )
            return None

        self.stream.write(format_summary(event, event_id, event_type, event_source) + "\n")
        self.stream.flush()

        logger.info(
            f"Processed customer event: {event.action.value} for customer "
            f"{event.customer_name} ({event.customer_id})",
            metadata={
                "event": "observer_event_processed",
                "eventId": event_id,
                "action": event.action.value,
                "customerId": event.customer_id,
            },
        )
        return event
