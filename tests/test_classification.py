"""Tests for payload classification."""

from __future__ import annotations

import asyncio
import concurrent.futures

import pytest

from genthunk import PayloadKind, classify_payload, computation, is_awaitable


@computation
def nested(get_state, extra):
    yield {"type": "A"}


class CustomAwaitable:
    def __await__(self):
        return (yield from asyncio.sleep(0, result=5).__await__())


class TestClassifyPayload:
    @pytest.mark.asyncio
    async def test_asyncio_future_is_awaitable(self):
        future = asyncio.get_running_loop().create_future()
        assert classify_payload(future) is PayloadKind.AWAITABLE
        future.cancel()

    @pytest.mark.asyncio
    async def test_coroutine_is_awaitable(self):
        coro = asyncio.sleep(0)
        try:
            assert classify_payload(coro) is PayloadKind.AWAITABLE
        finally:
            coro.close()

    def test_object_with_dunder_await_is_awaitable(self):
        assert is_awaitable(CustomAwaitable())

    def test_concurrent_future_is_awaitable(self):
        assert classify_payload(concurrent.futures.Future()) is PayloadKind.AWAITABLE

    @pytest.mark.parametrize(
        "payload",
        [
            {"type": "A"},
            None,
            42,
            "text",
            nested,
            (x for x in range(3)),
            lambda: None,
        ],
    )
    def test_everything_else_is_dispatchable(self, payload):
        assert classify_payload(payload) is PayloadKind.DISPATCHABLE
