"""
Models module initialization
"""

from .customer import Base, Customer
from .customer_event import CustomerAction, CustomerEvent
from .envelope import EventEnvelope, wrap_payload

__all__ = [
    "Base",
    "Customer",
    "CustomerAction",
    "CustomerEvent",
    "EventEnvelope",
    "wrap_payload",
]
