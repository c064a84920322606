"""
Pluggable pub/sub transports
"""

from .base import EventTransport, TransportError
from .dapr import DaprTransport
from .rabbitmq import RabbitMQTransport
from .servicebus import ServiceBusTransport
from .factory import create_transport, SUPPORTED_TRANSPORTS

__all__ = [
    "EventTransport",
    "TransportError",
    "DaprTransport",
    "RabbitMQTransport",
    "ServiceBusTransport",
    "create_transport",
    "SUPPORTED_TRANSPORTS",
]
