"""Payload classification functions for the driver."""

from __future__ import annotations

import asyncio
import concurrent.futures
import inspect
from collections.abc import Awaitable
from enum import Enum
from typing import Any


class PayloadKind(Enum):
    AWAITABLE = "awaitable"
    DISPATCHABLE = "dispatchable"


def is_awaitable(payload: Any) -> bool:
    """Check if payload settles on its own and must be awaited, not dispatched."""
    return inspect.isawaitable(payload) or isinstance(
        payload, concurrent.futures.Future
    )


def classify_payload(payload: Any) -> PayloadKind:
    """Classify a suspended payload. Total: anything not awaitable is dispatchable."""
    if is_awaitable(payload):
        return PayloadKind.AWAITABLE
    return PayloadKind.DISPATCHABLE


def as_awaitable(payload: Any) -> Awaitable[Any]:
    """Adapt an awaitable payload to something ``await`` accepts."""
    if isinstance(payload, concurrent.futures.Future):
        return asyncio.wrap_future(payload)
    return payload


__all__ = ["PayloadKind", "as_awaitable", "classify_payload", "is_awaitable"]
