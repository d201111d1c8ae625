"""Core module for kevents - emitter, registries, streams and errors."""

from kevents.core.config import EmitterConfig
from kevents.core.emitter import EventKeys, KEvents
from kevents.core.exceptions import (
    ConfigurationError,
    InvalidEventKeyError,
    InvalidListenerError,
    KEventsError,
    ValidationError,
)
from kevents.core.keys import EventKey, Symbol
from kevents.core.streams import WILDCARD, EventStream, StreamItem
from kevents.core.subscription import OnceSubscription, Subscription
from kevents.core.tracing import TraceEvent, Tracer

__all__ = [
    "WILDCARD",
    "ConfigurationError",
    "EmitterConfig",
    "EventKey",
    "EventKeys",
    "EventStream",
    "InvalidEventKeyError",
    "InvalidListenerError",
    "KEvents",
    "KEventsError",
    "OnceSubscription",
    "StreamItem",
    "Subscription",
    "Symbol",
    "TraceEvent",
    "Tracer",
    "ValidationError",
]
