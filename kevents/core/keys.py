"""
Event keys - the identities events are addressed by.

Accepted keys:
- str (including StrEnum members)
- int (including IntEnum members, but not bool)
- Symbol: a unique token compared by identity, for collision-free internal events
"""

from __future__ import annotations

from typing import Any

from .exceptions import InvalidEventKeyError, InvalidListenerError


class Symbol:
    """
    Unique, identity-compared event key.

    Two symbols with the same description are still distinct keys.

    Example:
        >>> READY = Symbol("ready")
        >>> emitter.subscribe(READY, on_ready)
    """

    __slots__ = ("description",)

    def __init__(self, description: str | None = None):
        self.description = description

    def __repr__(self) -> str:
        if self.description is None:
            return "Symbol()"
        return f"Symbol({self.description!r})"


EventKey = str | int | Symbol


def is_event_key(value: Any) -> bool:
    """Check whether value can be used as an event key."""
    if isinstance(value, bool):
        return False
    return isinstance(value, str | int | Symbol)


def assert_event_key(value: Any) -> None:
    if not is_event_key(value):
        raise InvalidEventKeyError(value)


def assert_listener(listener: Any) -> None:
    if not callable(listener):
        raise InvalidListenerError(listener)


def normalize_keys(event_keys: EventKey | list[EventKey] | tuple[EventKey, ...]) -> list[EventKey]:
    """
    Turn a single key or an ordered collection of keys into a validated list.

    Every key is validated before the list is returned, so callers can mutate
    state afterwards without risking a partial update.

    Args:
        event_keys: One event key, or a list/tuple of event keys

    Returns:
        List of event keys in the given order

    Raises:
        InvalidEventKeyError: If any key is not a valid event key
    """
    keys = list(event_keys) if isinstance(event_keys, list | tuple) else [event_keys]
    for key in keys:
        assert_event_key(key)
    return keys


__all__ = [
    "EventKey",
    "Symbol",
    "assert_event_key",
    "assert_listener",
    "is_event_key",
    "normalize_keys",
]
