"""Dispatch router: recognises computation descriptors in a message pipeline.

Usage::

    from genthunk import MiddlewareAPI, generator_thunk

    handle_message = generator_thunk(MiddlewareAPI(dispatch, get_state))(next_stage)
    outcome = handle_message(message)

Descriptors are driven and their task is returned; any other message is
passed to ``next_stage`` and its return value comes back untouched.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from loguru import logger

from genthunk.descriptor import GetState, is_computation_descriptor
from genthunk.driver import Dispatch, drive
from genthunk.errors import InvalidMiddlewareAPIError
from genthunk.types import ComputationHandle

NextHandler = Callable[[Any], Any]
MessageHandler = Callable[[Any], Any]

log = logger.bind(component="genthunk.middleware")


@dataclass(frozen=True)
class MiddlewareAPI:
    """The two ambient accessors a pipeline hands to its middleware."""

    dispatch: Dispatch
    get_state: GetState


def _coerce_api(api: Any) -> MiddlewareAPI:
    if isinstance(api, MiddlewareAPI):
        dispatch, get_state = api.dispatch, api.get_state
    elif isinstance(api, Mapping):
        dispatch, get_state = api.get("dispatch"), api.get("get_state")
    else:
        raise InvalidMiddlewareAPIError(api)
    if not (callable(dispatch) and callable(get_state)):
        raise InvalidMiddlewareAPIError(api)
    if isinstance(api, MiddlewareAPI):
        return api
    return MiddlewareAPI(dispatch=dispatch, get_state=get_state)


class Router:
    """One pipeline stage: drive descriptors, forward everything else.

    Descriptors can only be handled while an event loop is running: their
    drive is scheduled as a task on the running loop, and without one asyncio
    raises ``RuntimeError`` from :meth:`handle`. Plain messages are forwarded
    with or without a loop.
    """

    def __init__(
        self,
        api: MiddlewareAPI,
        next_handler: NextHandler,
        extra_argument: Any = None,
    ) -> None:
        self.api = api
        self.next_handler = next_handler
        self.extra_argument = extra_argument

    def handle(self, message: Any = None) -> Any:
        if not is_computation_descriptor(message):
            return self.next_handler(message)

        log.debug("driving computation {!r}", message)
        get_state = self.api.get_state
        extra = self.extra_argument

        def open_handle() -> ComputationHandle:
            return message(get_state, extra)

        return drive(open_handle, self.api.dispatch)

    __call__ = handle


class GeneratorThunkMiddleware:
    """Curried middleware: ``middleware(api)(next_handler)(message)``.

    The extra argument is fixed at construction and handed unchanged to every
    computation the middleware drives.
    """

    def __init__(self, extra_argument: Any = None) -> None:
        self._extra_argument = extra_argument

    @property
    def extra_argument(self) -> Any:
        return self._extra_argument

    def with_extra_argument(self, extra_argument: Any) -> GeneratorThunkMiddleware:
        return GeneratorThunkMiddleware(extra_argument)

    def __call__(self, api: MiddlewareAPI) -> Callable[[NextHandler], MessageHandler]:
        api = _coerce_api(api)

        def wrap_next(next_handler: NextHandler) -> MessageHandler:
            return Router(api, next_handler, self._extra_argument).handle

        return wrap_next

    def __repr__(self) -> str:
        return f"GeneratorThunkMiddleware(extra_argument={self._extra_argument!r})"


def create_generator_thunk_middleware(extra_argument: Any = None) -> GeneratorThunkMiddleware:
    return GeneratorThunkMiddleware(extra_argument)


generator_thunk = GeneratorThunkMiddleware()


__all__ = [
    "GeneratorThunkMiddleware",
    "MessageHandler",
    "MiddlewareAPI",
    "NextHandler",
    "Router",
    "create_generator_thunk_middleware",
    "generator_thunk",
]
