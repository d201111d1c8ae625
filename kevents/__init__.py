"""
kevents - in-process async event emitter.

Main Features:
- Subscribe listeners to one or many event keys (str, int or Symbol)
- Concurrent (emit) and sequential (emit_serial) dispatch
- Wildcard listeners notified of every event
- Async streams of emitted events (async for / async with)
- One-shot awaitable subscriptions
- Optional per-emitter debug tracing

Quick Start:
    >>> from kevents import KEvents
    >>> emitter = KEvents()
    >>> off = emitter.subscribe("greet", print)
    >>> await emitter.emit("greet", "hello")
    >>> off()
"""

__version__ = "0.1.0"

from kevents.core.config import EmitterConfig
from kevents.core.emitter import KEvents
from kevents.core.exceptions import (
    ConfigurationError,
    InvalidEventKeyError,
    InvalidListenerError,
    KEventsError,
    ValidationError,
)
from kevents.core.keys import Symbol
from kevents.core.streams import EventStream, StreamItem
from kevents.core.subscription import OnceSubscription, Subscription

__all__ = [
    "ConfigurationError",
    "EmitterConfig",
    "EventStream",
    "InvalidEventKeyError",
    "InvalidListenerError",
    "KEvents",
    "KEventsError",
    "OnceSubscription",
    "StreamItem",
    "Subscription",
    "Symbol",
    "ValidationError",
    "__version__",
]
