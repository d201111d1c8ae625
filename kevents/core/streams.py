"""
Stream Multiplexer - turns push-style emissions into pull-based async streams.

Each call to `KEvents.subscribe_stream()` creates one Producer: an unbounded
buffer with a finished flag and a wake signal. Emissions are pushed into every
matching producer; the consumer pulls them through an EventStream.

Usage:
    >>> stream = emitter.subscribe_stream("tick")
    >>> async for payload in stream:
    ...     if payload == 3:
    ...         break
    >>> await stream.terminate()
"""

from __future__ import annotations

import asyncio
from collections import deque
import inspect
import logging
from typing import Any, NamedTuple

from .keys import EventKey

logger = logging.getLogger(__name__)


class _Wildcard:
    def __repr__(self) -> str:
        return "WILDCARD"


WILDCARD = _Wildcard()
"""Stream registry channel that receives every emitted event."""


class StreamItem(NamedTuple):
    """Result of pulling from an EventStream."""

    done: bool
    value: Any = None


class Producer:
    """
    Buffer backing a single stream subscription.

    Single consumer: at most one `pull()` is expected to be waiting at a time.
    """

    def __init__(self) -> None:
        self._buffer: deque[Any] = deque()
        self._wakeup = asyncio.Event()
        self.finished = False

    def __len__(self) -> int:
        return len(self._buffer)

    def push(self, item: Any) -> None:
        if self.finished:
            return
        self._buffer.append(item)
        self._wakeup.set()

    def finish(self) -> None:
        """Mark the producer finished, drop unread items and wake the consumer."""
        self.finished = True
        self._buffer.clear()
        self._wakeup.set()

    async def pull(self) -> StreamItem:
        while True:
            if self._buffer:
                return StreamItem(done=False, value=self._buffer.popleft())
            if self.finished:
                return StreamItem(done=True)

            self._wakeup.clear()
            await self._wakeup.wait()


class StreamRegistry:
    """Mapping from event key (or WILDCARD) to the producers subscribed to it."""

    def __init__(self) -> None:
        self._producers: dict[EventKey | _Wildcard, dict[Producer, None]] = {}

    def add(self, event_keys: list[EventKey | _Wildcard], producer: Producer) -> None:
        for key in event_keys:
            self._producers.setdefault(key, {})[producer] = None

    def remove(self, event_keys: list[EventKey | _Wildcard], producer: Producer) -> None:
        for key in event_keys:
            producers = self._producers.get(key)
            if producers is None:
                continue

            producers.pop(producer, None)
            if not producers:
                del self._producers[key]

    def publish(self, event_key: EventKey, payload: Any) -> None:
        """
        Buffer an emitted value in every producer subscribed to it.

        Keyed producers receive the payload; wildcard producers receive
        the pair (event_key, payload).
        """
        for producer in list(self._producers.get(event_key, ())):
            producer.push(payload)

        for producer in list(self._producers.get(WILDCARD, ())):
            producer.push((event_key, payload))

    def count(self, event_keys: list[EventKey] | None = None) -> int:
        if event_keys is None:
            return len({p for producers in self._producers.values() for p in producers})
        return sum(len(self._producers.get(key, ())) for key in event_keys)


class EventStream:
    """
    Pull-based view over a Producer.

    Supports `async for`, `async with`, explicit `next()` and `terminate()`.
    Leaving an `async for` loop early does not unsubscribe; call
    `terminate()` or use the stream as an async context manager.
    """

    def __init__(
        self,
        registry: StreamRegistry,
        event_keys: list[EventKey | _Wildcard],
    ):
        self._registry = registry
        self._event_keys = event_keys
        self._producer = Producer()
        self._exhausted = False

        registry.add(event_keys, self._producer)
        logger.debug(f"Opened stream for {event_keys!r}")

    @property
    def event_keys(self) -> list[EventKey | _Wildcard]:
        return list(self._event_keys)

    @property
    def closed(self) -> bool:
        return self._exhausted or self._producer.finished

    @property
    def pending(self) -> int:
        """Number of buffered, not yet consumed items."""
        return len(self._producer)

    async def next(self) -> StreamItem:
        """
        Pull the oldest buffered item, waiting for one if the buffer is empty.

        Returns:
            StreamItem(done=False, value=...) for an item, or
            StreamItem(done=True) once the stream has been terminated
        """
        if self._exhausted:
            return StreamItem(done=True)

        item = await self._producer.pull()
        if item.done:
            self._exhausted = True
        return item

    async def terminate(self, value: Any = None) -> StreamItem:
        """
        Unsubscribe the stream and release any waiting `next()` call.

        Args:
            value: Optional value (or awaitable) echoed back in the result

        Returns:
            StreamItem(done=True, value=value)
        """
        if not self._producer.finished:
            self._registry.remove(self._event_keys, self._producer)
            self._producer.finish()
            logger.debug(f"Terminated stream for {self._event_keys!r}")

        if inspect.isawaitable(value):
            value = await value
        return StreamItem(done=True, value=value)

    async def aclose(self) -> None:
        await self.terminate()

    def __aiter__(self) -> EventStream:
        return self

    async def __anext__(self) -> Any:
        item = await self.next()
        if item.done:
            raise StopAsyncIteration
        return item.value

    async def __aenter__(self) -> EventStream:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.terminate()

    def __repr__(self) -> str:
        return f"EventStream(keys={self._event_keys!r}, pending={self.pending}, closed={self.closed})"


__all__ = [
    "WILDCARD",
    "EventStream",
    "Producer",
    "StreamItem",
    "StreamRegistry",
]
