"""
Envelope decoding for inbound customer events
"""

from typing import Any, Mapping, Union

from pydantic import ValidationError

from app.models.customer_event import CustomerEvent
from app.models.envelope import EventEnvelope


class EventDeserializationError(Exception):
    """Raised when an inbound message cannot be turned into a CustomerEvent"""


def parse_envelope(raw: Union[bytes, bytearray, str, Mapping[str, Any]]) -> EventEnvelope:
    """
    Parse the outer envelope from raw bytes, JSON text or an already-parsed mapping.

    Raises:
        EventDeserializationError: body is not a JSON object
    """
    try:
        if isinstance(raw, (bytes, bytearray)):
            raw = raw.decode("utf-8")
        if isinstance(raw, str):
            return EventEnvelope.model_validate_json(raw)
        if isinstance(raw, Mapping):
            return EventEnvelope.model_validate(dict(raw))
    except (UnicodeDecodeError, ValidationError) as e:
        raise EventDeserializationError(f"Invalid event envelope: {e}") from e

    raise EventDeserializationError(f"Unsupported envelope type: {type(raw).__name__}")


def decode_event(envelope: EventEnvelope) -> CustomerEvent:
    """
    Extract the CustomerEvent carried in ``data``, whether it arrived as a
    JSON string or as a nested object.
    """
    payload = envelope.data_as_json()
    if payload is None:
        raise EventDeserializationError("Envelope has no data")

    try:
        return CustomerEvent.from_json(payload)
    except ValidationError as e:
        raise EventDeserializationError(f"Invalid customer event payload: {e}") from e
