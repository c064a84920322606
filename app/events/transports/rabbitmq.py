"""
RabbitMQ transport using aio-pika
Publishes directly to a durable topic exchange named after the topic, without
a sidecar. Messages carry the same envelope the sidecar would produce, with
``data`` holding the payload as a JSON string.
"""

from typing import Dict, Optional

import aio_pika

from app.core.logger import logger
from app.events.transports.base import EventTransport, TransportError
from app.models.envelope import wrap_payload


class RabbitMQTransport(EventTransport):
    """RabbitMQ implementation of EventTransport"""

    name = "rabbitmq"

    def __init__(self, rabbitmq_url: str, source: str):
        self.rabbitmq_url = rabbitmq_url
        self.source = source
        self.connection: Optional[aio_pika.abc.AbstractRobustConnection] = None
        self.channel: Optional[aio_pika.abc.AbstractChannel] = None
        self._exchanges: Dict[str, aio_pika.abc.AbstractExchange] = {}

    async def connect(self) -> None:
        logger.info("Connecting to RabbitMQ...")
        self.connection = await aio_pika.connect_robust(self.rabbitmq_url, heartbeat=600)
        self.channel = await self.connection.channel(publisher_confirms=True)
        logger.info("RabbitMQ connected successfully")

    async def _open_channel(self) -> None:
        """Reopen the channel, reconnecting only when the connection itself is gone"""
        if self.connection is not None and not self.connection.is_closed:
            self.channel = await self.connection.channel(publisher_confirms=True)
        else:
            await self.connect()
        self._exchanges.clear()

    async def _exchange(self, topic: str) -> aio_pika.abc.AbstractExchange:
        if self.channel is None or self.channel.is_closed:
            await self._open_channel()
        if topic not in self._exchanges:
            self._exchanges[topic] = await self.channel.declare_exchange(
                topic, aio_pika.ExchangeType.TOPIC, durable=True
            )
        return self._exchanges[topic]

    def build_message(self, payload: str, metadata: Dict[str, str]) -> aio_pika.Message:
        event_type = metadata.get("eventType", "customer.event")
        envelope = wrap_payload(
            payload,
            event_id=metadata.get("messageId", ""),
            event_type=event_type,
            source=metadata.get("source", self.source),
            subject="customer.event",
        )
        return aio_pika.Message(
            body=envelope.model_dump_json(exclude_none=True).encode(),
            content_type="application/cloudevents+json",
            message_id=metadata.get("messageId"),
            correlation_id=metadata.get("correlationId"),
            type=event_type,
            headers=dict(metadata),
            delivery_mode=aio_pika.DeliveryMode.PERSISTENT,
        )

    async def send(self, topic: str, payload: str, metadata: Dict[str, str]) -> None:
        routing_key = metadata.get("routingKey") or metadata.get("eventType", "")
        message = self.build_message(payload, metadata)

        try:
            exchange = await self._exchange(topic)
            await exchange.publish(message, routing_key=routing_key)
        except aio_pika.exceptions.AMQPError as e:
            raise TransportError(f"RabbitMQ publish failed: {e}") from e
        except OSError as e:
            raise TransportError(f"Cannot connect to RabbitMQ: {e}") from e

        logger.debug(
            "Message published to RabbitMQ",
            metadata={"exchange": topic, "routingKey": routing_key},
        )

    async def is_healthy(self) -> bool:
        return self.connection is not None and not self.connection.is_closed

    async def close(self) -> None:
        if self.connection is not None:
            await self.connection.close()
            logger.info("RabbitMQ connection closed")
        self.connection = None
        self.channel = None
        self._exchanges.clear()
