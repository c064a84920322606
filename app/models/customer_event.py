"""
Customer event payload exchanged between the Customer API and the Observer
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CustomerAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


def event_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class CustomerEvent(BaseModel):
    """
    Inner event payload. Wire format uses camelCase keys:
    {"action", "customerId", "customerName", "customerEmail", "timestamp"}
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    action: CustomerAction
    customer_id: int = Field(..., alias="customerId")
    customer_name: str = Field(..., alias="customerName")
    customer_email: Optional[str] = Field(None, alias="customerEmail")
    timestamp: str = Field(default_factory=event_timestamp)

    @property
    def event_type(self) -> str:
        """Routing type, e.g. customer.create"""
        return f"customer.{self.action.value.lower()}"

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, payload: str) -> "CustomerEvent":
        return cls.model_validate_json(payload)
