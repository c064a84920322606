"""
Repositories module initialization
"""

from .customer import CustomerRepository, SORTABLE_FIELDS

__all__ = [
    "CustomerRepository",
    "SORTABLE_FIELDS",
]
