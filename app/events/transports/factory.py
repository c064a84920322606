"""
Event Transport Factory
Creates the transport instance selected by configuration
"""

from app.core.config import Config
from app.core.logger import logger
from app.events.transports.base import EventTransport
from app.events.transports.dapr import DaprTransport
from app.events.transports.rabbitmq import RabbitMQTransport
from app.events.transports.servicebus import ServiceBusTransport

SUPPORTED_TRANSPORTS = ("dapr", "rabbitmq", "servicebus")


def create_transport(settings: Config) -> EventTransport:
    """
    Create a transport based on the EVENT_TRANSPORT setting

    Returns:
        EventTransport implementation
    """
    transport_type = settings.event_transport.lower()
    logger.info(f"Creating event transport: {transport_type}")

    if transport_type == "dapr":
        return DaprTransport(
            dapr_url=settings.dapr_url,
            pubsub_name=settings.pubsub_name,
            timeout=settings.publish_timeout_seconds,
        )

    if transport_type == "rabbitmq":
        return RabbitMQTransport(settings.rabbitmq_url, source=settings.service_name)

    if transport_type == "servicebus":
        if not settings.servicebus_connection_string:
            raise ValueError("SERVICEBUS_CONNECTION_STRING is required for the servicebus transport")
        return ServiceBusTransport(settings.servicebus_connection_string)

    raise ValueError(
        f"Unsupported event transport: {transport_type}. "
        f"Supported types: {', '.join(SUPPORTED_TRANSPORTS)}"
    )
