"""
Schemas module initialization
"""

from .customer import CustomerCreate, CustomerUpdate, CustomerResponse, CustomerPage

__all__ = [
    "CustomerCreate",
    "CustomerUpdate",
    "CustomerResponse",
    "CustomerPage",
]
