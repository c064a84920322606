"""
Event publishers
"""

from .publisher import (
    CustomerEventPublisher,
    PublishResult,
    RetryPolicy,
    create_event_publisher,
)

__all__ = [
    "CustomerEventPublisher",
    "PublishResult",
    "RetryPolicy",
    "create_event_publisher",
]
