"""Computation driver: runs a handle to completion on asyncio.

The driver owns exactly one handle per drive. Each suspended payload is either
awaited (when awaitable) or handed to the dispatch sink; both paths converge on
the same settle-then-resume step, so the loop has a single shape. Failures of a
pending value are thrown back into the computation, which may catch them and
keep yielding. Anything that escapes the computation rejects the drive.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar, Union

from loguru import logger

from genthunk._vendor import Err, FrozenDict, Ok, Result
from genthunk.classification import PayloadKind, as_awaitable, classify_payload, is_awaitable
from genthunk.descriptor import ComputationDescriptor
from genthunk.types import Completed, ComputationHandle, Suspended

if TYPE_CHECKING:
    from genthunk.descriptor import GetState

T = TypeVar("T")

Dispatch = Callable[[Any], Any]
HandleSource = Union[ComputationHandle, Callable[[], ComputationHandle]]

log = logger.bind(component="genthunk.driver")


@dataclass
class _DriveStats:
    steps: int = 0


@dataclass(frozen=True)
class DriveResult(Generic[T]):
    """Outcome of a drive, returned by drive_safe() instead of raising."""

    result: Result[T]
    steps: int = 0

    @property
    def is_ok(self) -> bool:
        return isinstance(self.result, Ok)

    @property
    def is_err(self) -> bool:
        return isinstance(self.result, Err)

    def unwrap(self) -> T:
        """Get value or raise the computation's error."""
        return self.result.unwrap()

    def unwrap_err(self) -> Exception:
        """Get error or raise if ok."""
        return self.result.unwrap_err()


def _open(source: HandleSource) -> ComputationHandle:
    if isinstance(source, ComputationHandle):
        return source
    return source()


async def _settle(pending: Any) -> Any:
    """Wait for pending if it is awaitable; plain values are already settled."""
    if is_awaitable(pending):
        return await as_awaitable(pending)
    return pending


async def _run_internal(
    source: HandleSource,
    dispatch: Dispatch,
    stats: _DriveStats,
) -> Any:
    handle = _open(source)
    log.debug("drive start: {!r}", handle)
    step = handle.advance(None)

    while True:
        match step:
            case Completed(value=v):
                log.debug("drive finished after {} step(s)", stats.steps)
                return v

            case Suspended(payload=payload):
                stats.steps += 1
                kind = classify_payload(payload)
                log.debug("step {}: suspended on {} payload", stats.steps, kind.value)
                try:
                    if kind is PayloadKind.AWAITABLE:
                        pending = payload
                    else:
                        pending = dispatch(payload)
                    value = await _settle(pending)
                except Exception as ex:
                    log.debug(
                        "step {}: injecting {} into computation",
                        stats.steps,
                        type(ex).__name__,
                    )
                    step = handle.raise_(ex)
                else:
                    step = handle.advance(value)

            case _:
                raise TypeError(f"Handle {handle!r} produced unknown step: {step!r}")


async def drive_async(source: HandleSource, dispatch: Dispatch) -> Any:
    """Drive a computation to completion and return its final value.

    ``source`` is a ComputationHandle, or a zero-argument factory producing one
    so that failures while opening the handle surface the same way as any
    other. The first unrecovered error is raised unchanged.
    """
    stats = _DriveStats()
    try:
        return await _run_internal(source, dispatch, stats)
    except Exception as ex:
        log.debug(
            "drive failed after {} step(s): {}", stats.steps, type(ex).__name__
        )
        raise


def drive(
    source: HandleSource,
    dispatch: Dispatch,
    *,
    loop: asyncio.AbstractEventLoop | None = None,
) -> asyncio.Task[Any]:
    """Schedule a drive and return its deferred result.

    The returned task never settles before the caller yields to the event loop,
    and every failure, including one raised by the very first step, is
    reported through the task rather than raised here.
    """
    if loop is None:
        loop = asyncio.get_running_loop()
    return loop.create_task(drive_async(source, dispatch))


async def drive_safe(source: HandleSource, dispatch: Dispatch) -> DriveResult[Any]:
    """Drive a computation, returning a DriveResult instead of raising."""
    stats = _DriveStats()
    try:
        value = await _run_internal(source, dispatch, stats)
    except Exception as ex:
        return DriveResult(Err(ex), stats.steps)
    return DriveResult(Ok(value), stats.steps)


def _echo(message: Any) -> Any:
    return message


def _empty_state() -> FrozenDict:
    return FrozenDict()


def run(
    source: ComputationDescriptor[T] | HandleSource,
    dispatch: Dispatch = _echo,
    get_state: GetState = _empty_state,
    extra: Any = None,
) -> T:
    """Synchronously drive a descriptor or handle on a fresh event loop."""
    if not isinstance(source, ComputationDescriptor):
        return asyncio.run(drive_async(source, dispatch))

    descriptor = source

    def open_handle() -> ComputationHandle:
        return descriptor(get_state, extra)

    return asyncio.run(drive_async(open_handle, dispatch))


__all__ = [
    "Dispatch",
    "DriveResult",
    "HandleSource",
    "drive",
    "drive_async",
    "drive_safe",
    "run",
]
