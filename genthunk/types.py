"""Step results and computation handles for the genthunk driver."""

from __future__ import annotations

from collections.abc import Generator
from dataclasses import dataclass, field
from typing import Any, Generic, Protocol, TypeAlias, TypeVar, Union, runtime_checkable

from genthunk.errors import HandleBusyError, HandleExhaustedError

T = TypeVar("T")


# ============================================================================
# Step (sum type)
# ============================================================================


@dataclass(frozen=True)
class Suspended:
    """The computation paused and offers ``payload`` for dispatch or awaiting."""

    payload: Any


@dataclass(frozen=True)
class Completed(Generic[T]):
    """Terminal: the computation finished with ``value``."""

    value: T


Step: TypeAlias = Union[Suspended, Completed[Any]]

# Computations are written as plain generators yielding payloads.
ComputationGenerator: TypeAlias = Generator[Any, Any, T]


# ============================================================================
# Computation handle
# ============================================================================


@runtime_checkable
class ComputationHandle(Protocol):
    """Stateful, single-use view of a suspended computation.

    ``advance`` resumes the computation with a value and ``raise_`` resumes it
    by throwing an error at the current suspension point. Both return the next
    :data:`Step`, or raise when the computation lets an exception escape.
    """

    def advance(self, value: Any) -> Step: ...

    def raise_(self, error: BaseException) -> Step: ...


@dataclass
class GeneratorHandle:
    """ComputationHandle backed by a native Python generator.

    Single-use: once the generator returns or raises, every further call
    raises :class:`HandleExhaustedError`.
    """

    generator: Generator[Any, Any, Any]

    _finished: bool = field(default=False, repr=False)
    _running: bool = field(default=False, repr=False)

    def advance(self, value: Any) -> Step:
        return self._resume(self.generator.send, value)

    def raise_(self, error: BaseException) -> Step:
        return self._resume(self.generator.throw, error)

    @property
    def finished(self) -> bool:
        return self._finished

    def _resume(self, resume: Any, arg: Any) -> Step:
        if self._finished:
            raise HandleExhaustedError(self)
        if self._running:
            raise HandleBusyError(self)
        self._running = True
        try:
            payload = resume(arg)
        except StopIteration as stop_exc:
            self._finished = True
            return Completed(stop_exc.value)
        except BaseException:
            self._finished = True
            raise
        finally:
            self._running = False
        return Suspended(payload)


__all__ = [
    "Completed",
    "ComputationGenerator",
    "ComputationHandle",
    "GeneratorHandle",
    "Step",
    "Suspended",
]
