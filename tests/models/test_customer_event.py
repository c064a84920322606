"""Tests for the customer event payload and envelope"""
import json

import pytest
from pydantic import ValidationError

from app.models.customer_event import CustomerAction, CustomerEvent
from app.models.envelope import EventEnvelope, wrap_payload


@pytest.fixture
def event():
    return CustomerEvent(
        action=CustomerAction.CREATE,
        customer_id=1,
        customer_name="Alice",
        customer_email="alice@example.com",
        timestamp="2024-05-01T10:00:00+00:00",
    )


class TestCustomerEvent:
    """Test CustomerEvent serialization"""

    def test_wire_format_uses_camel_case(self, event):
        data = json.loads(event.to_json())
        assert data == {
            "action": "CREATE",
            "customerId": 1,
            "customerName": "Alice",
            "customerEmail": "alice@example.com",
            "timestamp": "2024-05-01T10:00:00+00:00",
        }

    def test_round_trip(self, event):
        assert CustomerEvent.from_json(event.to_json()) == event

    def test_event_type(self, event):
        assert event.event_type == "customer.create"
        deleted = event.model_copy(update={"action": CustomerAction.DELETE})
        assert deleted.event_type == "customer.delete"

    def test_delete_event_has_null_email(self):
        event = CustomerEvent(action=CustomerAction.DELETE, customer_id=7, customer_name="Bob")
        assert json.loads(event.to_json())["customerEmail"] is None

    def test_unknown_fields_ignored(self):
        payload = json.dumps({
            "action": "UPDATE",
            "customerId": 3,
            "customerName": "Carol",
            "customerEmail": "carol@example.com",
            "timestamp": "2024-05-01T10:00:00+00:00",
            "extra": "ignored",
        })
        event = CustomerEvent.from_json(payload)
        assert event.action == CustomerAction.UPDATE
        assert event.customer_id == 3

    def test_timestamp_defaults_to_now(self):
        event = CustomerEvent(action=CustomerAction.CREATE, customer_id=1, customer_name="A")
        assert event.timestamp

    def test_invalid_action_rejected(self):
        with pytest.raises(ValidationError):
            CustomerEvent.from_json('{"action": "ARCHIVE", "customerId": 1, "customerName": "A"}')


class TestEventEnvelope:
    """Test envelope data normalization"""

    def test_wrap_payload_keeps_data_as_string(self, event):
        envelope = wrap_payload(event.to_json(), "msg-1", "customer.create", "customer-service")
        assert isinstance(envelope.data, str)
        assert envelope.id == "msg-1"
        assert envelope.specversion == "1.0"
        assert envelope.time is not None

    def test_string_data_round_trip(self, event):
        envelope = wrap_payload(event.to_json(), "msg-1", "customer.create", "customer-service")
        decoded = EventEnvelope.model_validate_json(envelope.model_dump_json())
        assert CustomerEvent.from_json(decoded.data_as_json()) == event

    def test_object_data_round_trip(self, event):
        raw = json.dumps({
            "id": "msg-2",
            "type": "customer.create",
            "source": "customer-service",
            "data": json.loads(event.to_json()),
        })
        envelope = EventEnvelope.model_validate_json(raw)
        assert isinstance(envelope.data, dict)
        assert CustomerEvent.from_json(envelope.data_as_json()) == event

    def test_missing_data(self):
        envelope = EventEnvelope.model_validate({"id": "x"})
        assert envelope.data_as_json() is None

    def test_scalar_metadata_coerced_to_text(self):
        envelope = EventEnvelope.model_validate({"id": 7, "source": True, "subject": None})
        assert envelope.id == "7"
        assert envelope.source == "True"
        assert envelope.subject is None

    def test_extra_sidecar_fields_kept(self):
        envelope = EventEnvelope.model_validate({"id": "x", "topic": "customer-events", "pubsubname": "customer-pubsub"})
        assert envelope.model_extra["topic"] == "customer-events"
