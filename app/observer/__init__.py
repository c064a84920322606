"""
Customer Observer: decodes customer events and reports them
"""

from .decoding import EventDeserializationError, decode_event, parse_envelope
from .service import CustomerObserverService, format_summary
from .consumer import RabbitMQEventConsumer

__all__ = [
    "EventDeserializationError",
    "decode_event",
    "parse_envelope",
    "CustomerObserverService",
    "format_summary",
    "RabbitMQEventConsumer",
]
