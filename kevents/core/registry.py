"""
Listener Registry - per-key ordered sets of listeners plus wildcard listeners.

Listeners are identified by reference, not by equality: each set is a dict
keyed on the listener's identity with the listener itself as the value, so
unhashable callables are accepted and equal-but-distinct callables stay
separate. Dicts keep insertion order, so snapshots iterate in subscription
order and re-adding a listener keeps its position. Key entries are pruned as
soon as their set becomes empty.
"""

from __future__ import annotations

from collections.abc import Callable
import inspect
import logging
from typing import Any

from .keys import EventKey

logger = logging.getLogger(__name__)

Listener = Callable[[Any], Any]
WildcardListener = Callable[[EventKey, Any], Any]

ListenerId = int | tuple[int, int]


def listener_id(listener: Any) -> ListenerId:
    """
    Identity of a listener.

    Bound methods are rebuilt on every attribute access, so they are
    identified by their (instance, function) pair; everything else by id().
    Ids stay unique while registered because the registry holds the listener.
    """
    if inspect.ismethod(listener):
        return id(listener.__self__), id(listener.__func__)
    return id(listener)


class ListenerRegistry:
    """
    Mutable listener storage owned by a single emitter.

    All methods are synchronous and expect already validated arguments.
    """

    def __init__(self) -> None:
        self._listeners: dict[EventKey, dict[ListenerId, Listener]] = {}
        self._wildcard: dict[ListenerId, WildcardListener] = {}

    def add(self, event_keys: list[EventKey], listener: Listener) -> None:
        ident = listener_id(listener)
        for key in event_keys:
            listeners = self._listeners.setdefault(key, {})
            if ident not in listeners:
                listeners[ident] = listener
            logger.debug(f"Subscribed {_name(listener)} to {key!r}")

    def remove(self, event_keys: list[EventKey], listener: Listener) -> None:
        ident = listener_id(listener)
        for key in event_keys:
            listeners = self._listeners.get(key)
            if listeners is None or listeners.pop(ident, None) is None:
                continue

            if not listeners:
                del self._listeners[key]
            logger.debug(f"Unsubscribed {_name(listener)} from {key!r}")

    def add_wildcard(self, listener: WildcardListener) -> None:
        self._wildcard.setdefault(listener_id(listener), listener)
        logger.debug(f"Subscribed {_name(listener)} to all events")

    def remove_wildcard(self, listener: WildcardListener) -> None:
        if self._wildcard.pop(listener_id(listener), None) is not None:
            logger.debug(f"Unsubscribed {_name(listener)} from all events")

    def contains(self, key: EventKey, listener: Listener) -> bool:
        """Check whether listener is currently registered for key."""
        listeners = self._listeners.get(key)
        return listeners is not None and listener_id(listener) in listeners

    def contains_wildcard(self, listener: WildcardListener) -> bool:
        return listener_id(listener) in self._wildcard

    def snapshot(self, key: EventKey) -> list[Listener]:
        """Return a copy of the listeners for key, in subscription order."""
        return list(self._listeners.get(key, {}).values())

    def snapshot_wildcard(self) -> list[WildcardListener]:
        return list(self._wildcard.values())

    def count(self, event_keys: list[EventKey] | None = None) -> int:
        """
        Count registered listeners.

        Args:
            event_keys: Keys to count; None counts every key (wildcard excluded)

        Returns:
            Sum of per-key listener counts
        """
        if event_keys is None:
            return sum(len(listeners) for listeners in self._listeners.values())
        return sum(len(self._listeners.get(key, ())) for key in event_keys)

    def count_wildcard(self) -> int:
        return len(self._wildcard)

    def clear(self, event_keys: list[EventKey] | None = None) -> None:
        """
        Remove listeners.

        Args:
            event_keys: Keys to clear; None clears every key entry
        """
        if event_keys is None:
            self._listeners.clear()
            logger.debug("Cleared all listeners")
            return

        for key in event_keys:
            if self._listeners.pop(key, None) is not None:
                logger.debug(f"Cleared listeners for {key!r}")

    def counts_by_key(self) -> dict[EventKey, int]:
        return {key: len(listeners) for key, listeners in self._listeners.items()}


def _name(listener: Any) -> str:
    return getattr(listener, "__qualname__", None) or repr(listener)


__all__ = [
    "Listener",
    "ListenerRegistry",
    "WildcardListener",
    "listener_id",
]
