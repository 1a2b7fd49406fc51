"""Reference message pipeline for composing middleware with a reducer."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from genthunk._vendor import FrozenDict
from genthunk.errors import InvalidMessageError
from genthunk.middleware import MessageHandler, MiddlewareAPI, NextHandler

Reducer = Callable[[FrozenDict, Mapping[str, Any]], Mapping[str, Any]]
Middleware = Callable[[MiddlewareAPI], Callable[[NextHandler], MessageHandler]]


class Store:
    """Holds state as a FrozenDict and routes messages through middleware.

    ``dispatch`` always enters the full middleware chain, so middleware that
    dispatches from inside a computation re-enters the pipeline from the top.
    """

    def __init__(
        self,
        reducer: Reducer,
        initial_state: Mapping[str, Any] | None = None,
        middleware: tuple[Middleware, ...] | list[Middleware] = (),
    ) -> None:
        self._reducer = reducer
        self._state: FrozenDict = FrozenDict(initial_state or {})
        self._dispatch: MessageHandler = self._reduce
        if middleware:
            apply_middleware(self, *middleware)

    def get_state(self) -> FrozenDict:
        return self._state

    def dispatch(self, message: Any) -> Any:
        return self._dispatch(message)

    def _reduce(self, message: Any) -> Any:
        if not isinstance(message, Mapping) or "type" not in message:
            raise InvalidMessageError(message)
        self._state = FrozenDict(self._reducer(self._state, message))
        return message


def apply_middleware(store: Store, *middleware: Middleware) -> Store:
    """Wrap the store's dispatch with ``middleware``; the first one sees messages first."""
    api = MiddlewareAPI(dispatch=store.dispatch, get_state=store.get_state)
    handler = store._dispatch
    for mw in reversed(middleware):
        handler = mw(api)(handler)
    store._dispatch = handler
    return store


__all__ = ["Middleware", "Reducer", "Store", "apply_middleware"]
