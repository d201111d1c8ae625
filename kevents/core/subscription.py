"""
Subscription handles returned by the emitter.

Subscription: callable that reverses a subscribe call, safe to call repeatedly.
OnceSubscription: awaitable resolving with the first matching payload.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Generator
from typing import Any


class Subscription:
    """
    Single-use unsubscribe handle.

    Usage:
        >>> off = emitter.subscribe(["x", "y"], listener)
        >>> off()
        >>> off()
    """

    def __init__(self, unsubscribe: Callable[[], None]):
        self._unsubscribe: Callable[[], None] | None = unsubscribe

    @property
    def active(self) -> bool:
        return self._unsubscribe is not None

    def __call__(self) -> None:
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()

    def __repr__(self) -> str:
        return f"Subscription(active={self.active})"


class OnceSubscription:
    """
    Awaitable that resolves with the payload of the first matching emission.

    Call `off()` to drop the subscription before anything is emitted; a
    pending `await` is then cancelled. Cancelling the awaiting task (e.g. an
    `asyncio.wait_for` timeout) drops the subscription as well.

    Usage:
        >>> payload = await emitter.subscribe_once(["x", "y"])
    """

    def __init__(self, future: asyncio.Future[Any]):
        self._future = future
        self._off: Subscription | None = None
        future.add_done_callback(self._on_done)

    def _bind(self, off: Subscription) -> None:
        self._off = off

    def _on_done(self, future: asyncio.Future[Any]) -> None:
        if future.cancelled() and self._off is not None:
            self._off()

    def _resolve(self, payload: Any) -> None:
        if self._off is not None:
            self._off()
        if not self._future.done():
            self._future.set_result(payload)

    @property
    def done(self) -> bool:
        return self._future.done()

    def off(self) -> None:
        """Unsubscribe without waiting for an event."""
        if self._off is not None:
            self._off()
        if not self._future.done():
            self._future.cancel()

    def __await__(self) -> Generator[Any, None, Any]:
        return self._future.__await__()
