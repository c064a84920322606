"""
CloudEvents-style envelope that wraps published payloads on the wire
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EventEnvelope(BaseModel):
    """
    Outer message wrapper. ``data`` is either the payload serialized as a JSON
    string or the payload embedded as an object, depending on the sender.
    """

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    type: Optional[str] = None
    source: Optional[str] = None
    subject: Optional[str] = None
    specversion: Optional[str] = "1.0"
    datacontenttype: Optional[str] = "application/json"
    time: Optional[str] = None
    data: Union[str, Dict[str, Any], list, None] = Field(default=None)

    @field_validator("id", "type", "source", "subject", "specversion", "datacontenttype", "time", mode="before")
    @classmethod
    def metadata_as_text(cls, value):
        """Metadata is informational; any JSON value is kept as text"""
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (dict, list)):
            return json.dumps(value)
        return str(value)

    def data_as_json(self) -> Optional[str]:
        """Normalize ``data`` to JSON text regardless of how it was encoded"""
        if self.data is None:
            return None
        if isinstance(self.data, str):
            return self.data
        return json.dumps(self.data)


def wrap_payload(
    payload: str,
    event_id: str,
    event_type: str,
    source: str,
    subject: Optional[str] = None,
) -> EventEnvelope:
    """Wrap a JSON payload string in an envelope, keeping ``data`` as a string"""
    return EventEnvelope(
        id=event_id,
        type=event_type,
        source=source,
        subject=subject,
        time=datetime.now(timezone.utc).isoformat(),
        data=payload,
    )
