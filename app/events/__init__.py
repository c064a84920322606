"""
Event publishing utilities
"""

from .publishers import CustomerEventPublisher, PublishResult, RetryPolicy, create_event_publisher
from .transports import EventTransport, TransportError, create_transport

__all__ = [
    # Publishers
    "CustomerEventPublisher",
    "PublishResult",
    "RetryPolicy",
    "create_event_publisher",
    # Transports
    "EventTransport",
    "TransportError",
    "create_transport",
]
