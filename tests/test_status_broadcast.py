"""
ethrpc Broadcast and Connection Status Tests
"""

import asyncio
import threading

import pytest

from ethrpc.rpc.broadcast import Broadcast, ResultStream
from ethrpc.rpc.correlator import RPCResult
from ethrpc.rpc.status import Connected, ConnectionStatusTracker, Disconnected, DisconnectReason


# ===================================================================
# Broadcast
# ===================================================================

class TestBroadcast:
    @pytest.mark.asyncio
    async def test_every_subscriber_gets_every_value(self):
        stream = Broadcast()
        first = stream.subscribe()
        second = stream.subscribe()
        stream.publish(1)
        stream.publish(2)
        stream.close()
        assert [v async for v in first] == [1, 2]
        assert [v async for v in second] == [1, 2]

    @pytest.mark.asyncio
    async def test_late_subscriber_misses_earlier_values(self):
        stream = Broadcast()
        stream.publish("early")
        late = stream.subscribe()
        stream.publish("late")
        stream.close()
        assert [v async for v in late] == ["late"]

    @pytest.mark.asyncio
    async def test_subscribe_after_close_ends_immediately(self):
        stream = Broadcast()
        stream.close()
        assert [v async for v in stream.subscribe()] == []

    def test_listener_inline(self):
        stream = Broadcast()
        seen = []
        remove = stream.add_listener(seen.append)
        stream.publish("a")
        remove()
        stream.publish("b")
        assert seen == ["a"]

    def test_listener_errors_do_not_stop_publish(self):
        stream = Broadcast()
        seen = []

        def broken(value):
            raise RuntimeError("listener bug")

        stream.add_listener(broken)
        stream.add_listener(seen.append)
        stream.publish("x")
        assert seen == ["x"]

    def test_listener_thread_mode(self):
        stream = Broadcast(callback_mode="thread")
        done = threading.Event()
        threads = []

        def listener(value):
            threads.append(threading.current_thread().name)
            done.set()

        stream.add_listener(listener)
        stream.publish("x")
        assert done.wait(timeout=5)
        assert threads[0].startswith("ethrpc-broadcast")
        stream.close()

    def test_bad_callback_mode(self):
        with pytest.raises(ValueError):
            Broadcast(callback_mode="queue")

    def test_publish_after_close_ignored(self):
        stream = Broadcast()
        seen = []
        stream.add_listener(seen.append)
        stream.close()
        stream.publish(1)
        assert seen == []
        assert stream.total_published == 0


class TestResultStream:
    @pytest.mark.asyncio
    async def test_wait_for_matching_id(self):
        stream = ResultStream()
        waiter = stream.expect(7, timeout=1)
        stream.publish(RPCResult(id=3, result="other"))
        stream.publish(RPCResult(id=7, result="0x10"))
        assert await waiter == "0x10"
        assert stream.subscriber_count == 0

    @pytest.mark.asyncio
    async def test_wait_for_timeout(self):
        stream = ResultStream()
        with pytest.raises(asyncio.TimeoutError):
            await stream.wait_for(1, timeout=0.05)

    @pytest.mark.asyncio
    async def test_wait_for_closed_stream(self):
        stream = ResultStream()
        waiter = stream.expect(1, timeout=1)
        stream.close()
        with pytest.raises(EOFError):
            await waiter


# ===================================================================
# Connection status
# ===================================================================

class TestConnectionStatusTracker:
    def test_starts_disconnected_without_reason(self):
        tracker = ConnectionStatusTracker()
        assert tracker.status == Disconnected()
        assert tracker.status.reason is None
        assert tracker.status.error is None
        assert not tracker.is_connected

    @pytest.mark.asyncio
    async def test_new_subscriber_gets_current_status_first(self):
        tracker = ConnectionStatusTracker()
        tracker.update(Connected())
        updates = tracker.subscribe()
        assert await updates.__anext__() == Connected()

    @pytest.mark.asyncio
    async def test_disconnect_reason_reaches_existing_subscribers(self):
        tracker = ConnectionStatusTracker()
        tracker.update(Connected())
        updates = tracker.subscribe()
        assert await updates.__anext__() == Connected()

        tracker.update(Disconnected(reason=DisconnectReason("going away", 1001)))

        assert tracker.status == Disconnected(reason=DisconnectReason("going away", 1001))
        nxt = await asyncio.wait_for(updates.__anext__(), timeout=1)
        assert nxt.reason.text == "going away"
        assert nxt.reason.code == 1001

    @pytest.mark.asyncio
    async def test_close_ends_subscribers(self):
        tracker = ConnectionStatusTracker()
        updates = tracker.subscribe()
        tracker.update(Connected())
        tracker.close()
        assert [s async for s in updates] == [Disconnected(), Connected()]

    def test_listener_replays_current(self):
        tracker = ConnectionStatusTracker()
        error = OSError("refused")
        tracker.update(Disconnected(error=error))
        seen = []
        tracker.add_listener(seen.append)
        tracker.update(Connected())
        assert seen == [Disconnected(error=error), Connected()]

    def test_str(self):
        assert str(Connected()) == "connected"
        assert "1000" in str(Disconnected(reason=DisconnectReason("bye", 1000)))
        assert "OSError" in str(Disconnected(error=OSError("x")))
