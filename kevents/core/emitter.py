"""
KEvents - in-process async event emitter.

Responsibilities:
- Register/unregister listeners per event key and for every event (wildcard)
- Dispatch emissions concurrently (emit) or one at a time (emit_serial)
- Feed emissions into pull-based event streams
- Optional debug tracing of every operation

Dispatch discipline:
- A snapshot of the listeners is taken when the emission starts
- Each listener is re-checked against the live registry right before it runs,
  so a listener removed during the emission (by itself or by another
  listener) is skipped
- Listener errors propagate to the caller of emit/emit_serial
"""

from __future__ import annotations

import asyncio
from functools import partial
import inspect
import logging
from typing import Any

from .config import EmitterConfig
from .keys import EventKey, assert_event_key, assert_listener, normalize_keys
from .registry import Listener, ListenerRegistry, WildcardListener
from .streams import WILDCARD, EventStream, StreamRegistry
from .subscription import OnceSubscription, Subscription
from .tracing import DebugLogger, Tracer

logger = logging.getLogger(__name__)

EventKeys = EventKey | list[EventKey] | tuple[EventKey, ...]


class KEvents:
    """
    Event emitter for decoupled producers and consumers in one event loop.

    Usage:
        emitter = KEvents()

        off = emitter.subscribe(["created", "updated"], on_change)
        await emitter.emit("created", {"id": 1})
        off()

        async with emitter.subscribe_stream("tick") as stream:
            async for payload in stream:
                ...
    """

    def __init__(
        self,
        name: str | None = None,
        debug: bool | None = None,
        debug_logger: DebugLogger | None = None,
        config: EmitterConfig | None = None,
    ):
        """
        Initialize emitter.

        Args:
            name: Debug name (overrides config.name)
            debug: Whether to trace operations (overrides config.debug)
            debug_logger: Custom debug logger receiving (kind, name, event_key, payload)
            config: Emitter configuration (defaults to EmitterConfig())
        """
        config = config or EmitterConfig()

        self._listeners = ListenerRegistry()
        self._streams = StreamRegistry()
        self.tracer = Tracer(
            name=name or config.name,
            enabled=config.debug if debug is None else debug,
            max_events=config.max_trace_events,
            debug_logger=debug_logger,
        )

    @property
    def name(self) -> str:
        return self.tracer.name

    def subscribe(self, event_keys: EventKeys, listener: Listener) -> Subscription:
        """
        Subscribe a listener to one or more event keys.

        Subscribing the same listener twice to a key has no extra effect:
        it is still invoked once per emission.

        Args:
            event_keys: Event key or list/tuple of event keys
            listener: Callable taking the payload; may return an awaitable

        Returns:
            Subscription handle that removes the listener from all given keys

        Raises:
            InvalidListenerError: If listener is not callable
            InvalidEventKeyError: If any key is invalid
        """
        assert_listener(listener)
        keys = normalize_keys(event_keys)

        self._listeners.add(keys, listener)
        for key in keys:
            self.tracer.trace("subscribe", key)

        return Subscription(partial(self.unsubscribe, keys, listener))

    def unsubscribe(self, event_keys: EventKeys, listener: Listener) -> None:
        """
        Remove a listener from one or more event keys.

        Removing a listener that was never subscribed is a no-op.
        """
        assert_listener(listener)
        keys = normalize_keys(event_keys)

        self._listeners.remove(keys, listener)
        for key in keys:
            self.tracer.trace("unsubscribe", key)

    def subscribe_once(self, event_keys: EventKeys) -> OnceSubscription:
        """
        Wait for the first emission of any of the given keys.

        Must be called while an event loop is running.

        Returns:
            Awaitable resolving with the payload; the internal listener is
            removed from every key after the first delivery
        """
        keys = normalize_keys(event_keys)

        once = OnceSubscription(asyncio.get_running_loop().create_future())
        once._bind(self.subscribe(keys, once._resolve))
        return once

    def subscribe_wildcard(self, listener: WildcardListener) -> Subscription:
        """
        Subscribe a listener to every event.

        The listener is called with (event_key, payload).
        """
        assert_listener(listener)

        self._listeners.add_wildcard(listener)
        self.tracer.trace("subscribe_wildcard")

        return Subscription(partial(self.unsubscribe_wildcard, listener))

    def unsubscribe_wildcard(self, listener: WildcardListener) -> None:
        assert_listener(listener)

        self._listeners.remove_wildcard(listener)
        self.tracer.trace("unsubscribe_wildcard")

    def subscribe_stream(self, event_keys: EventKeys) -> EventStream:
        """
        Open an async stream buffering every payload emitted for the keys.

        Buffering is unbounded; the stream stays subscribed until
        `terminate()` is called on it.
        """
        keys = normalize_keys(event_keys)

        stream = EventStream(self._streams, keys)
        for key in keys:
            self.tracer.trace("subscribe_stream", key)
        return stream

    def subscribe_wildcard_stream(self) -> EventStream:
        """Open an async stream of (event_key, payload) pairs for every event."""
        stream = EventStream(self._streams, [WILDCARD])
        self.tracer.trace("subscribe_wildcard_stream")
        return stream

    async def emit(self, event_key: EventKey, payload: Any = None) -> None:
        """
        Emit an event, running all listeners concurrently.

        Listeners are started in subscription order (keyed first, then
        wildcard). If one fails, the first error is raised once it occurs;
        the remaining listeners keep running in the background.

        Args:
            event_key: Key of the event
            payload: Value passed to listeners

        Raises:
            InvalidEventKeyError: If event_key is invalid
            Exception: The first error raised by a listener
        """
        assert_event_key(event_key)
        self.tracer.trace("emit", event_key, payload)

        listeners = self._listeners.snapshot(event_key)
        wildcard_listeners = self._listeners.snapshot_wildcard()

        self._streams.publish(event_key, payload)

        if not listeners and not wildcard_listeners:
            logger.debug(f"No listeners registered for {event_key!r}")
            return

        tasks = [
            asyncio.ensure_future(self._call_listener(event_key, listener, payload))
            for listener in listeners
        ]
        tasks.extend(
            asyncio.ensure_future(self._call_wildcard_listener(event_key, listener, payload))
            for listener in wildcard_listeners
        )

        await asyncio.gather(*tasks)

    async def emit_serial(self, event_key: EventKey, payload: Any = None) -> None:
        """
        Emit an event, awaiting each listener before starting the next.

        Listeners run in subscription order (keyed first, then wildcard).
        The first error aborts the remaining listeners and is raised.

        Raises:
            InvalidEventKeyError: If event_key is invalid
            Exception: The error raised by a listener
        """
        assert_event_key(event_key)
        self.tracer.trace("emit_serial", event_key, payload)

        listeners = self._listeners.snapshot(event_key)
        wildcard_listeners = self._listeners.snapshot_wildcard()

        self._streams.publish(event_key, payload)

        for listener in listeners:
            await self._call_listener(event_key, listener, payload)

        for listener in wildcard_listeners:
            await self._call_wildcard_listener(event_key, listener, payload)

    async def _call_listener(self, event_key: EventKey, listener: Listener, payload: Any) -> None:
        if not self._listeners.contains(event_key, listener):
            return

        result = listener(payload)
        if inspect.isawaitable(result):
            await result

    async def _call_wildcard_listener(
        self, event_key: EventKey, listener: WildcardListener, payload: Any
    ) -> None:
        if not self._listeners.contains_wildcard(listener):
            return

        result = listener(event_key, payload)
        if inspect.isawaitable(result):
            await result

    def count(self, event_keys: EventKeys | None = None) -> int:
        """
        Count listeners.

        Args:
            event_keys: Key(s) to count; None counts every key

        Returns:
            Number of listeners (wildcard listeners are not included)
        """
        if event_keys is None:
            return self._listeners.count()
        return self._listeners.count(normalize_keys(event_keys))

    def count_wildcard(self) -> int:
        return self._listeners.count_wildcard()

    def count_streams(self, event_keys: EventKeys | None = None) -> int:
        """Count open streams, optionally only those subscribed to the given keys."""
        if event_keys is None:
            return self._streams.count()
        return self._streams.count(normalize_keys(event_keys))

    def clear(self, event_keys: EventKeys | None = None) -> None:
        """
        Remove listeners.

        Args:
            event_keys: Key(s) to clear; None clears every key. Wildcard
                listeners and open streams are left untouched.
        """
        if event_keys is None:
            self._listeners.clear()
            self.tracer.trace("clear")
            return

        keys = normalize_keys(event_keys)
        self._listeners.clear(keys)
        for key in keys:
            self.tracer.trace("clear", key)

    def get_stats(self) -> dict[str, Any]:
        """Get emitter statistics for monitoring."""
        listeners_by_key = self._listeners.counts_by_key()
        return {
            "total_event_keys": len(listeners_by_key),
            "total_listeners": sum(listeners_by_key.values()),
            "wildcard_listeners": self._listeners.count_wildcard(),
            "listeners_by_key": listeners_by_key,
            "active_streams": self._streams.count(),
        }

    on = subscribe
    off = unsubscribe
    once = subscribe_once
    on_any = subscribe_wildcard
    off_any = unsubscribe_wildcard
    events = subscribe_stream
    any_event = subscribe_wildcard_stream
    clear_listeners = clear
    listener_count = count

    def __repr__(self) -> str:
        return (
            f"KEvents(name={self.name!r}, listeners={self._listeners.count()}, "
            f"streams={self._streams.count()})"
        )


__all__ = [
    "EventKeys",
    "KEvents",
]
