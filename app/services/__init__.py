"""
Services module initialization
"""

from .customer import CustomerService, MAX_PAGE_SIZE

__all__ = [
    "CustomerService",
    "MAX_PAGE_SIZE",
]
