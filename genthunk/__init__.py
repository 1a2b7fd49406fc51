"""
genthunk - drive generator computations through a message pipeline.

Computations are generator functions decorated with :func:`computation`. They
yield payloads: awaitables are awaited, anything else is dispatched, and the
resolved value is sent back into the generator. Failures are thrown back at
the ``yield`` so computations can recover with ordinary try/except.

Logging goes through loguru and is disabled by default; enable it with
``logger.enable("genthunk")``.
"""

from loguru import logger

from genthunk._vendor import Err, FrozenDict, Ok, Result
from genthunk.classification import PayloadKind, classify_payload, is_awaitable
from genthunk.descriptor import (
    ComputationDescriptor,
    computation,
    is_computation_descriptor,
)
from genthunk.driver import DriveResult, drive, drive_async, drive_safe, run
from genthunk.errors import (
    GenthunkError,
    HandleBusyError,
    HandleExhaustedError,
    InvalidMessageError,
    InvalidMiddlewareAPIError,
)
from genthunk.middleware import (
    GeneratorThunkMiddleware,
    MiddlewareAPI,
    Router,
    create_generator_thunk_middleware,
    generator_thunk,
)
from genthunk.store import Store, apply_middleware
from genthunk.types import (
    Completed,
    ComputationHandle,
    GeneratorHandle,
    Step,
    Suspended,
)

logger.disable("genthunk")

__version__ = "0.1.0"

__all__ = [
    "Completed",
    "ComputationDescriptor",
    "ComputationHandle",
    "DriveResult",
    "Err",
    "FrozenDict",
    "GeneratorHandle",
    "GeneratorThunkMiddleware",
    "GenthunkError",
    "HandleBusyError",
    "HandleExhaustedError",
    "InvalidMessageError",
    "InvalidMiddlewareAPIError",
    "MiddlewareAPI",
    "Ok",
    "PayloadKind",
    "Result",
    "Router",
    "Step",
    "Store",
    "Suspended",
    "apply_middleware",
    "classify_payload",
    "computation",
    "create_generator_thunk_middleware",
    "drive",
    "drive_async",
    "drive_safe",
    "generator_thunk",
    "is_awaitable",
    "is_computation_descriptor",
    "run",
]
