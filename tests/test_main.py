"""Tests for the Socket Mode run loop and its signal-driven shutdown."""

import asyncio
import os
import signal

import pytest

from labtrack.main import serve


class FakeSocketHandler:
    """Stands in for AsyncSocketModeHandler."""

    def __init__(self, fail_to_connect: bool = False):
        self.fail_to_connect = fail_to_connect
        self.connected = asyncio.Event()
        self.closed = 0

    async def connect_async(self):
        if self.fail_to_connect:
            raise ConnectionError("socket mode unavailable")
        self.connected.set()

    async def close_async(self):
        self.closed += 1


class TestServe:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("sig", [signal.SIGTERM, signal.SIGINT])
    async def test_signal_closes_connection_and_returns(self, sig):
        handler = FakeSocketHandler()
        task = asyncio.create_task(serve(handler))
        await asyncio.wait_for(handler.connected.wait(), timeout=1)

        os.kill(os.getpid(), sig)
        await asyncio.wait_for(task, timeout=2)

        assert handler.closed == 1

    @pytest.mark.asyncio
    async def test_signal_handlers_removed_after_shutdown(self):
        handler = FakeSocketHandler()
        task = asyncio.create_task(serve(handler))
        await asyncio.wait_for(handler.connected.wait(), timeout=1)

        os.kill(os.getpid(), signal.SIGTERM)
        await asyncio.wait_for(task, timeout=2)

        loop = asyncio.get_running_loop()
        assert loop.remove_signal_handler(signal.SIGTERM) is False
        assert loop.remove_signal_handler(signal.SIGINT) is False

    @pytest.mark.asyncio
    async def test_connection_failure_propagates(self):
        handler = FakeSocketHandler(fail_to_connect=True)

        with pytest.raises(ConnectionError):
            await serve(handler)

        assert asyncio.get_running_loop().remove_signal_handler(signal.SIGTERM) is False
