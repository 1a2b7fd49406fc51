"""
The computation decorator for genthunk.

This module provides the @computation decorator that marks generator functions
as computation descriptors: messages the router drives instead of forwarding.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from genthunk.types import ComputationGenerator, GeneratorHandle

T = TypeVar("T")

GetState = Callable[[], Any]


class ComputationDescriptor(Generic[T]):
    """Named capability recognised by the router.

    Wraps a generator function taking ``(get_state, extra)``. Calling the
    descriptor with those two accessors opens a fresh :class:`GeneratorHandle`.
    Descriptors are reusable; each call produces an independent handle.
    """

    def __init__(self, func: Callable[[GetState, Any], ComputationGenerator[T]]) -> None:
        if not inspect.isgeneratorfunction(func):
            raise TypeError(
                f"@computation expects a generator function, got {func!r}"
            )
        self.func = func

        for attr in ("__doc__", "__module__", "__name__", "__qualname__"):
            value = getattr(func, attr, None)
            if value is not None:
                setattr(self, attr, value)

    def open(self, get_state: GetState, extra: Any = None) -> GeneratorHandle:
        """Start a new run of the computation without advancing it."""
        return GeneratorHandle(self.func(get_state, extra))

    def __call__(self, get_state: GetState, extra: Any = None) -> GeneratorHandle:
        return self.open(get_state, extra)

    def __repr__(self) -> str:
        return f"ComputationDescriptor({getattr(self, '__qualname__', self.func)!r})"


def computation(
    func: Callable[[GetState, Any], ComputationGenerator[T]],
) -> ComputationDescriptor[T]:
    """
    Decorator that turns a generator function into a ComputationDescriptor.

    The generator receives the store's ``get_state`` accessor and the
    middleware's extra argument. Whatever it yields is either awaited (when
    awaitable) or dispatched, and the resolved value is sent back in::

        @computation
        def load_user(get_state, api):
            yield {"type": "user/loading"}
            try:
                user = yield api.fetch_user(get_state()["user_id"])
            except LookupError:
                yield {"type": "user/missing"}
                return None
            yield {"type": "user/loaded", "user": user}
            return user

    Errors from awaited payloads are thrown at the ``yield``, so ordinary
    try/except works around suspension points.
    """
    return ComputationDescriptor(func)


def is_computation_descriptor(message: Any) -> bool:
    return isinstance(message, ComputationDescriptor)


__all__ = [
    "ComputationDescriptor",
    "GetState",
    "computation",
    "is_computation_descriptor",
]
