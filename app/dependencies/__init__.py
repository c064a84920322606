"""
Dependencies module initialization
"""

from .customer import get_customer_repository, get_customer_service, get_event_publisher

__all__ = [
    "get_customer_repository",
    "get_customer_service",
    "get_event_publisher",
]
