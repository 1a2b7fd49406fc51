from __future__ import annotations

from typing import Any


class GenthunkError(Exception):
    """Base class for errors raised by genthunk itself."""


class HandleExhaustedError(GenthunkError, RuntimeError):
    """Raised when a computation handle is resumed after it has finished."""

    def __init__(self, handle: Any) -> None:
        self.handle = handle
        super().__init__(
            f"Computation handle {handle!r} already finished (single-use)"
        )


class HandleBusyError(GenthunkError, RuntimeError):
    """Raised when a computation handle is resumed while a resume is in progress."""

    def __init__(self, handle: Any) -> None:
        self.handle = handle
        super().__init__(
            f"Computation handle {handle!r} is already running; "
            "advance/raise_ must not be called reentrantly"
        )


class InvalidMiddlewareAPIError(GenthunkError, TypeError):
    """Raised when the middleware is applied to something that is not a MiddlewareAPI."""

    def __init__(self, api: Any) -> None:
        self.api = api
        super().__init__(
            f"Expected a MiddlewareAPI with 'dispatch' and 'get_state' callables, got {api!r}\n"
            "Hint: apply the middleware as `generator_thunk(MiddlewareAPI(dispatch, get_state))`"
        )


class InvalidMessageError(GenthunkError, TypeError):
    """Raised by the reference store when a message reaches the reducer in an unusable shape."""

    def __init__(self, message: Any) -> None:
        self.message = message
        super().__init__(
            f"Messages reaching the reducer must be mappings with a 'type' key, got {message!r}\n"
            "Hint: computations must be decorated with @computation to be driven"
        )


__all__ = [
    "GenthunkError",
    "HandleBusyError",
    "HandleExhaustedError",
    "InvalidMessageError",
    "InvalidMiddlewareAPIError",
]
