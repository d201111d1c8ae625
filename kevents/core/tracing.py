"""
Debug tracing for emitters.

When debug is enabled on an emitter, every subscribe, unsubscribe, emit,
emit_serial and clear call is recorded as a TraceEvent and handed to a
logger callable. Disabled tracers record nothing.

Usage:
    >>> emitter = KEvents(name="orders", debug=True)
    >>> emitter.subscribe("created", on_created)
    >>> await emitter.emit("created", {"id": 1})
    >>>
    >>> assert emitter.tracer.has_trace("emit")
    >>> emitter.tracer.get_traces("emit*")
"""

from __future__ import annotations

from collections import defaultdict, deque
from collections.abc import Callable
from datetime import UTC, datetime
import logging
from typing import Any

logger = logging.getLogger(__name__)

DebugLogger = Callable[[str, str, Any, Any], None]


class TraceEvent:
    """
    Single recorded emitter operation.

    Attributes:
        kind: Operation name (e.g. "subscribe", "emit_serial")
        name: Debug name of the emitter
        event_key: Key the operation targeted (None for clear-all)
        payload: Emitted payload, if any
        timestamp: When the operation happened
    """

    def __init__(self, kind: str, name: str, event_key: Any = None, payload: Any = None):
        self.kind = kind
        self.name = name
        self.event_key = event_key
        self.payload = payload
        self.timestamp = datetime.now(UTC)

    def __repr__(self) -> str:
        return (
            f"TraceEvent(kind={self.kind!r}, name={self.name!r}, "
            f"event_key={self.event_key!r}, timestamp={self.timestamp.isoformat()})"
        )


def default_debug_logger(kind: str, name: str, event_key: Any, payload: Any) -> None:
    logger.debug(f"[{name}] {kind}: event_key={event_key!r} payload={payload!r}")


class Tracer:
    """
    Per-emitter recorder of debug trace events.

    Args:
        name: Debug name included in every record
        enabled: Whether to record anything
        max_events: Max events kept in memory (0 = unlimited)
        debug_logger: Callable receiving (kind, name, event_key, payload)
    """

    def __init__(
        self,
        name: str = "kevents",
        enabled: bool = False,
        max_events: int = 1000,
        debug_logger: DebugLogger | None = None,
    ):
        if max_events < 0:
            raise ValueError(f"max_events must be >= 0, got {max_events}")

        self.name = name
        self.enabled = enabled
        self._debug_logger = debug_logger or default_debug_logger
        self._events: deque[TraceEvent] = deque(maxlen=max_events or None)
        self._counts: dict[str, int] = defaultdict(int)

    def enable(self) -> None:
        self.enabled = True
        logger.debug(f"Tracer {self.name!r}: enabled")

    def disable(self) -> None:
        self.enabled = False
        logger.debug(f"Tracer {self.name!r}: disabled")

    def trace(self, kind: str, event_key: Any = None, payload: Any = None) -> TraceEvent | None:
        """
        Record an operation.

        Returns:
            TraceEvent if enabled, None otherwise
        """
        if not self.enabled:
            return None

        event = TraceEvent(kind, self.name, event_key, payload)
        self._events.append(event)
        self._counts[kind] += 1
        self._debug_logger(kind, self.name, event_key, payload)
        return event

    def has_trace(self, kind: str) -> bool:
        return any(event.kind == kind for event in self._events)

    def get_traces(self, pattern: str | None = None) -> list[TraceEvent]:
        """
        Get recorded events, optionally filtered by kind.

        Args:
            pattern: Exact kind, or a prefix ending in "*" (e.g. "emit*")

        Returns:
            Matching events, oldest first
        """
        if pattern is None:
            return list(self._events)

        if pattern.endswith("*"):
            prefix = pattern[:-1]
            return [event for event in self._events if event.kind.startswith(prefix)]
        return [event for event in self._events if event.kind == pattern]

    def count_traces(self, pattern: str | None = None) -> int:
        return len(self.get_traces(pattern))

    def clear(self) -> None:
        self._events.clear()
        self._counts.clear()

    def get_report(self) -> dict[str, Any]:
        """
        Get trace statistics.

        `kind_counts` covers every recorded operation, including ones
        already dropped from the bounded history.
        """
        return {
            "name": self.name,
            "enabled": self.enabled,
            "kept_events": len(self._events),
            "kind_counts": dict(self._counts),
        }

    def __repr__(self) -> str:
        return f"Tracer(name={self.name!r}, enabled={self.enabled}, events={len(self._events)})"


__all__ = [
    "DebugLogger",
    "TraceEvent",
    "Tracer",
    "default_debug_logger",
]
