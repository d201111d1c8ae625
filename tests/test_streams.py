"""Tests for event streams."""

import asyncio

import pytest

from kevents import KEvents, StreamItem
from kevents.core.streams import Producer


async def test_producer_buffers_in_order() -> None:
    producer = Producer()
    producer.push(1)
    producer.push(2)

    assert len(producer) == 2
    assert await producer.pull() == StreamItem(done=False, value=1)
    assert await producer.pull() == StreamItem(done=False, value=2)


async def test_producer_finish_drops_buffer() -> None:
    producer = Producer()
    producer.push(1)
    producer.finish()
    producer.push(2)

    assert len(producer) == 0
    assert await producer.pull() == StreamItem(done=True)


async def test_next_suspends_until_emit(emitter: KEvents) -> None:
    stream = emitter.subscribe_stream("k")
    pending = asyncio.create_task(stream.next())
    await asyncio.sleep(0)

    assert not pending.done()

    await emitter.emit("k", "p")

    assert await pending == StreamItem(done=False, value="p")

    await stream.terminate()
    assert await stream.next() == StreamItem(done=True)
    assert await stream.next() == StreamItem(done=True)


async def test_buffered_items_are_returned_immediately(emitter: KEvents) -> None:
    stream = emitter.subscribe_stream("k")

    await emitter.emit("k", 1)
    await emitter.emit_serial("k", 2)
    await emitter.emit("other", 3)

    assert stream.pending == 2
    assert (await stream.next()).value == 1
    assert (await stream.next()).value == 2
    assert stream.pending == 0


async def test_terminate_wakes_pending_next(emitter: KEvents) -> None:
    stream = emitter.subscribe_stream("k")
    pending = asyncio.create_task(stream.next())
    await asyncio.sleep(0)

    result = await stream.terminate()

    assert result == StreamItem(done=True, value=None)
    assert await asyncio.wait_for(pending, timeout=1) == StreamItem(done=True)
    assert stream.closed


async def test_terminate_discards_buffer_and_unsubscribes(emitter: KEvents) -> None:
    stream = emitter.subscribe_stream(["a", "b"])
    await emitter.emit("a", 1)

    assert emitter.count_streams(["a", "b"]) == 2

    await stream.terminate()
    await emitter.emit("a", 2)

    assert stream.pending == 0
    assert emitter.count_streams() == 0
    assert await stream.next() == StreamItem(done=True)


async def test_terminate_echoes_value(emitter: KEvents) -> None:
    async def compute():
        return "computed"

    first = emitter.subscribe_stream("k")
    second = emitter.subscribe_stream("k")

    assert await first.terminate("plain") == StreamItem(done=True, value="plain")
    assert await second.terminate(compute()) == StreamItem(done=True, value="computed")
    assert await first.terminate() == StreamItem(done=True, value=None)


async def test_multiple_streams_per_key(emitter: KEvents) -> None:
    first = emitter.subscribe_stream("k")
    second = emitter.subscribe_stream("k")

    await emitter.emit("k", "shared")

    assert (await first.next()).value == "shared"
    assert (await second.next()).value == "shared"

    await first.terminate()
    await emitter.emit("k", "only second")

    assert emitter.count_streams("k") == 1
    assert (await second.next()).value == "only second"
    await second.terminate()


async def test_stream_for_multiple_keys(emitter: KEvents) -> None:
    stream = emitter.subscribe_stream(["a", "b"])

    await emitter.emit("a", 1)
    await emitter.emit("b", 2)

    assert [(await stream.next()).value, (await stream.next()).value] == [1, 2]
    await stream.terminate()


async def test_async_for_iteration(emitter: KEvents) -> None:
    stream = emitter.subscribe_stream("k")
    for value in (1, 2, 3):
        await emitter.emit("k", value)

    received = []
    async for value in stream:
        received.append(value)
        if value == 3:
            break

    assert received == [1, 2, 3]
    await stream.terminate()


async def test_async_for_ends_on_terminate(emitter: KEvents) -> None:
    stream = emitter.subscribe_stream("k")

    async def consume():
        return [value async for value in stream]

    consumer = asyncio.create_task(consume())
    await emitter.emit("k", "a")
    await asyncio.sleep(0)
    await stream.terminate()

    assert await asyncio.wait_for(consumer, timeout=1) == ["a"]


async def test_context_manager_terminates(emitter: KEvents) -> None:
    async with emitter.subscribe_stream("k") as stream:
        await emitter.emit("k", 1)
        assert await stream.next() == StreamItem(done=False, value=1)

    assert stream.closed
    assert emitter.count_streams() == 0


async def test_aclose(emitter: KEvents) -> None:
    stream = emitter.events("k")
    await stream.aclose()

    assert emitter.count_streams("k") == 0


async def test_wildcard_stream_receives_pairs(emitter: KEvents) -> None:
    stream = emitter.subscribe_wildcard_stream()

    await emitter.emit("a", 1)
    await emitter.emit_serial(7, 2)

    assert (await stream.next()).value == ("a", 1)
    assert (await stream.next()).value == (7, 2)
    assert emitter.count_streams() == 1
    assert emitter.count_streams("a") == 0

    await stream.terminate()
    assert emitter.count_streams() == 0


async def test_stream_receives_payload_before_listeners_run(emitter: KEvents) -> None:
    stream = emitter.subscribe_stream("k")
    seen = []

    def listener(payload):
        seen.append(stream.pending)

    emitter.subscribe("k", listener)
    await emitter.emit("k", "p")

    assert seen == [1]
    await stream.terminate()


@pytest.mark.parametrize("method", ["emit", "emit_serial"])
async def test_stream_gets_payload_even_when_listener_fails(emitter: KEvents, method: str) -> None:
    stream = emitter.subscribe_stream("k")

    def failing(payload):
        raise RuntimeError("listener failed")

    emitter.subscribe("k", failing)

    with pytest.raises(RuntimeError):
        await getattr(emitter, method)("k", "p")

    assert (await stream.next()).value == "p"
    await stream.terminate()
