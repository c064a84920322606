"""
Customer Event Publisher
Serializes customer events and publishes them to the customer topic through
the configured transport, retrying transient failures with bounded
exponential backoff.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Optional

from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

from app.core.config import Config
from app.core.logger import logger
from app.events.transports.base import EventTransport, TransportError
from app.middleware.correlation_id import get_correlation_id
from app.models.customer_event import CustomerAction, CustomerEvent


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff: 5s, 10s, 20s ... capped at max_delay"""

    max_attempts: int = 3
    initial_delay: float = 5.0
    multiplier: float = 2.0
    max_delay: float = 30.0

    def wait_strategy(self) -> wait_exponential:
        return wait_exponential(
            multiplier=self.initial_delay,
            exp_base=self.multiplier,
            max=self.max_delay,
        )

    @classmethod
    def from_config(cls, settings: Config) -> "RetryPolicy":
        return cls(
            max_attempts=max(1, settings.publish_max_attempts),
            initial_delay=settings.publish_initial_delay_seconds,
            multiplier=settings.publish_backoff_multiplier,
            max_delay=settings.publish_max_delay_seconds,
        )


@dataclass
class PublishResult:
    """Outcome of one publish call"""

    success: bool
    attempts: int
    message_id: str
    error: Optional[str] = None


def build_message_id(event: CustomerEvent) -> str:
    millis = int(time.time() * 1000)
    return f"customer-{event.action.value.lower()}-{event.customer_id}-{millis}"


def is_transient(error: BaseException) -> bool:
    return isinstance(error, TransportError) and error.transient


class CustomerEventPublisher:
    """Publisher for customer events over a pluggable transport"""

    def __init__(
        self,
        transport: EventTransport,
        topic: str,
        source: str,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.transport = transport
        self.topic = topic
        self.source = source
        self.retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep

    def build_metadata(self, event: CustomerEvent, message_id: str) -> Dict[str, str]:
        """Routing metadata attached to every published event"""
        metadata = {
            "eventType": event.event_type,
            "customerId": str(event.customer_id),
            "action": event.action.value,
            "timestamp": event.timestamp,
            "source": self.source,
            # RabbitMQ topic exchanges bind on the routing key
            "routingKey": event.event_type,
            "messageId": message_id,
        }
        correlation_id = get_correlation_id()
        if correlation_id:
            metadata["correlationId"] = correlation_id
        return metadata

    def _retrying(self) -> AsyncRetrying:
        policy = self.retry_policy
        return AsyncRetrying(
            stop=stop_after_attempt(policy.max_attempts),
            wait=policy.wait_strategy(),
            retry=retry_if_exception(is_transient),
            sleep=self._sleep,
            reraise=True,
        )

    async def _send(self, event: CustomerEvent, payload: str, metadata: Dict[str, str], attempt: int) -> None:
        try:
            await self.transport.send(self.topic, payload, metadata)
        except TransportError as e:
            logger.warning(
                f"Publish attempt {attempt}/{self.retry_policy.max_attempts} failed",
                metadata={
                    "event": "customer_event_publish_retry",
                    "action": event.action.value,
                    "customerId": event.customer_id,
                    "transport": self.transport.name,
                    "transient": e.transient,
                    "error": str(e),
                },
            )
            raise

    async def publish(self, event: CustomerEvent) -> PublishResult:
        """
        Publish an event, retrying transient transport failures.

        Returns:
            PublishResult describing success or the last error after all
            attempts were exhausted. Transport errors never propagate.
        """
        payload = event.to_json()
        message_id = build_message_id(event)
        metadata = self.build_metadata(event, message_id)
        attempts = 0

        try:
            async for attempt in self._retrying():
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    await self._send(event, payload, metadata, attempts)
        except TransportError as e:
            logger.error(
                f"Failed to publish customer event: {event.event_type}",
                metadata={
                    "event": "customer_event_publish_failed",
                    "action": event.action.value,
                    "customerId": event.customer_id,
                    "topic": self.topic,
                    "transport": self.transport.name,
                    "attempts": attempts,
                    "payload": payload,
                    "error": str(e),
                },
            )
            return PublishResult(success=False, attempts=attempts, message_id=message_id, error=str(e))

        logger.info(
            f"Successfully published customer event: {event.event_type}",
            metadata={
                "event": "customer_event_published",
                "action": event.action.value,
                "customerId": event.customer_id,
                "customerName": event.customer_name,
                "messageId": message_id,
                "topic": self.topic,
                "transport": self.transport.name,
                "attempts": attempts,
            },
        )
        return PublishResult(success=True, attempts=attempts, message_id=message_id)

    async def publish_customer_created(self, customer_id: int, name: str, email: str) -> PublishResult:
        return await self.publish(CustomerEvent(
            action=CustomerAction.CREATE,
            customer_id=customer_id,
            customer_name=name,
            customer_email=email,
        ))

    async def publish_customer_updated(self, customer_id: int, name: str, email: str) -> PublishResult:
        return await self.publish(CustomerEvent(
            action=CustomerAction.UPDATE,
            customer_id=customer_id,
            customer_name=name,
            customer_email=email,
        ))

    async def publish_customer_deleted(self, customer_id: int, name: str) -> PublishResult:
        # No email on delete events
        return await self.publish(CustomerEvent(
            action=CustomerAction.DELETE,
            customer_id=customer_id,
            customer_name=name,
            customer_email=None,
        ))


def create_event_publisher(transport: EventTransport, settings: Config) -> CustomerEventPublisher:
    return CustomerEventPublisher(
        transport=transport,
        topic=settings.topic_name,
        source=settings.service_name,
        retry_policy=RetryPolicy.from_config(settings),
    )
