"""
Event Transport Interface
Defines the contract for all pub/sub transports (Dapr sidecar, RabbitMQ, ...).
The publisher depends only on this abstraction, so the broker underneath can
be swapped without touching application code.
"""

from abc import ABC, abstractmethod
from typing import Dict


class TransportError(Exception):
    """Raised when a transport fails to hand a message to the broker"""

    def __init__(self, message: str, transient: bool = True):
        self.transient = transient
        super().__init__(message)


class EventTransport(ABC):
    """Abstract base class for pub/sub transport implementations"""

    name: str = "abstract"

    @abstractmethod
    async def send(self, topic: str, payload: str, metadata: Dict[str, str]) -> None:
        """
        Deliver a serialized payload to a topic

        Args:
            topic: Topic name
            payload: JSON payload text
            metadata: Routing metadata (eventType, customerId, messageId, ...)

        Raises:
            TransportError: when the message could not be handed off
        """

    @abstractmethod
    async def is_healthy(self) -> bool:
        """Check whether the transport can currently accept messages"""

    async def close(self) -> None:
        """Release connections held by the transport"""
        return None
