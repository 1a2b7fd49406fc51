"""Tests for the reference Store composed with the generator thunk middleware."""

from __future__ import annotations

import asyncio

import pytest

from genthunk import (
    FrozenDict,
    InvalidMessageError,
    Store,
    apply_middleware,
    computation,
    generator_thunk,
)


def counter_reducer(state, message):
    if message["type"] == "increment":
        return {**state, "count": state.get("count", 0) + message.get("by", 1)}
    if message["type"] == "log":
        return {**state, "log": (*state.get("log", ()), message["entry"])}
    return state


async def fetch_amount(amount):
    await asyncio.sleep(0)
    return amount


class TestStore:
    def test_plain_dispatch_reduces_and_returns_message(self):
        store = Store(counter_reducer, {"count": 1})
        message = {"type": "increment", "by": 2}

        assert store.dispatch(message) is message
        assert store.get_state() == {"count": 3}

    def test_state_is_a_frozen_snapshot(self):
        store = Store(counter_reducer)
        snapshot = store.get_state()

        store.dispatch({"type": "increment"})

        assert isinstance(snapshot, FrozenDict)
        assert snapshot == {}
        assert store.get_state() == {"count": 1}
        with pytest.raises(TypeError):
            snapshot["count"] = 5  # type: ignore[index]

    def test_invalid_message_is_rejected(self):
        store = Store(counter_reducer)

        with pytest.raises(InvalidMessageError):
            store.dispatch("increment")

    def test_undecorated_generator_function_reaches_reducer(self):
        store = Store(counter_reducer, middleware=(generator_thunk,))

        def not_a_computation(get_state, extra):
            yield {"type": "increment"}

        with pytest.raises(InvalidMessageError):
            store.dispatch(not_a_computation)


class TestStoreWithMiddleware:
    @pytest.mark.asyncio
    async def test_computation_reads_state_between_dispatches(self):
        store = Store(counter_reducer, {"count": 0}, middleware=(generator_thunk,))

        @computation
        def program(get_state, extra):
            yield {"type": "increment"}
            yield {"type": "increment", "by": (yield fetch_amount(5))}
            return get_state()["count"]

        assert await store.dispatch(program) == 6

    @pytest.mark.asyncio
    async def test_yielded_computation_is_driven_before_continuing(self):
        store = Store(counter_reducer, middleware=(generator_thunk,))

        @computation
        def child(get_state, extra):
            yield {"type": "log", "entry": "child:start"}
            yield fetch_amount(0)
            yield {"type": "log", "entry": "child:end"}
            return "child-result"

        @computation
        def parent(get_state, extra):
            child_result = yield child
            yield {"type": "log", "entry": f"parent:{child_result}"}
            return get_state()["log"]

        log = await store.dispatch(parent)

        assert log == ("child:start", "child:end", "parent:child-result")

    @pytest.mark.asyncio
    async def test_child_failure_is_catchable_in_parent(self):
        store = Store(counter_reducer, middleware=(generator_thunk,))

        @computation
        def child(get_state, extra):
            yield {"type": "log", "entry": "child"}
            raise LookupError("missing")

        @computation
        def parent(get_state, extra):
            try:
                yield child
            except LookupError as e:
                yield {"type": "log", "entry": f"recovered:{e.args[0]}"}
            return get_state()["log"]

        assert await store.dispatch(parent) == ("child", "recovered:missing")

    @pytest.mark.asyncio
    async def test_extra_argument_reaches_nested_computations(self):
        services = {"rate": 3}
        store = Store(
            counter_reducer,
            middleware=(generator_thunk.with_extra_argument(services),),
        )

        @computation
        def child(get_state, extra):
            yield {"type": "increment", "by": extra["rate"]}

        @computation
        def parent(get_state, extra):
            yield child
            yield child
            return get_state()["count"]

        assert await store.dispatch(parent) == 6

    @pytest.mark.asyncio
    async def test_apply_middleware_composes_in_order(self):
        seen: list[str] = []

        def recorder(name):
            def middleware(api):
                def wrap_next(next_handler):
                    def handle(message):
                        seen.append(f"{name}:{type(message).__name__}")
                        return next_handler(message)

                    return handle

                return wrap_next

            return middleware

        store = apply_middleware(
            Store(counter_reducer), recorder("outer"), generator_thunk, recorder("inner")
        )

        @computation
        def program(get_state, extra):
            yield {"type": "increment"}

        await store.dispatch(program)

        assert seen == [
            "outer:ComputationDescriptor",
            "outer:dict",
            "inner:dict",
        ]
