"""
API schemas for Customer endpoints following FastAPI best practices
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

MAX_FIELD_LENGTH = 255


class CustomerWrite(BaseModel):
    """Shared body of create and update requests"""
    name: str = Field(..., max_length=MAX_FIELD_LENGTH)
    email: EmailStr

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value

    @field_validator("email", mode="before")
    @classmethod
    def email_length(cls, value):
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise ValueError("Email is required")
            if len(value) > MAX_FIELD_LENGTH:
                raise ValueError(f"Email must not exceed {MAX_FIELD_LENGTH} characters")
        return value


class CustomerCreate(CustomerWrite):
    """Schema for creating a new customer"""


class CustomerUpdate(CustomerWrite):
    """Schema for replacing a customer's name and email"""


class CustomerResponse(BaseModel):
    """Schema for customer responses"""
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: datetime


class CustomerPage(BaseModel):
    """One page of customers"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    content: List[CustomerResponse]
    page: int
    size: int
    total_elements: int
    total_pages: int
