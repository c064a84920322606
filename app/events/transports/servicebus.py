"""
Azure Service Bus transport using the async azure-servicebus client
Sends the payload as the raw message body to a Service Bus topic, with the
routing metadata as application properties for subscription filters.
"""

from typing import Dict, Optional

from azure.servicebus import ServiceBusMessage
from azure.servicebus.aio import ServiceBusClient, ServiceBusSender
from azure.servicebus.exceptions import ServiceBusError

from app.core.logger import logger
from app.events.transports.base import EventTransport, TransportError


class ServiceBusTransport(EventTransport):
    """Azure Service Bus implementation of EventTransport"""

    name = "servicebus"

    def __init__(self, connection_string: str):
        self.connection_string = connection_string
        self.client: Optional[ServiceBusClient] = None
        self._senders: Dict[str, ServiceBusSender] = {}

    def _sender(self, topic: str) -> ServiceBusSender:
        if self.client is None:
            logger.info("Creating Azure Service Bus client...")
            self.client = ServiceBusClient.from_connection_string(self.connection_string)
        if topic not in self._senders:
            self._senders[topic] = self.client.get_topic_sender(topic_name=topic)
        return self._senders[topic]

    def build_message(self, payload: str, metadata: Dict[str, str]) -> ServiceBusMessage:
        return ServiceBusMessage(
            payload,
            message_id=metadata.get("messageId"),
            correlation_id=metadata.get("correlationId"),
            subject="customer.event",
            content_type="application/json",
            application_properties=dict(metadata),
        )

    async def send(self, topic: str, payload: str, metadata: Dict[str, str]) -> None:
        message = self.build_message(payload, metadata)

        try:
            await self._sender(topic).send_messages(message)
        except ServiceBusError as e:
            raise TransportError(f"Service Bus publish failed: {e}") from e

        logger.debug(
            "Message published to Service Bus",
            metadata={"topic": topic, "messageId": metadata.get("messageId")},
        )

    async def is_healthy(self) -> bool:
        return self.client is not None

    async def close(self) -> None:
        for sender in self._senders.values():
            await sender.close()
        self._senders.clear()
        if self.client is not None:
            await self.client.close()
            logger.info("Service Bus client closed")
        self.client = None
