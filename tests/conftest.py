"""
Pytest configuration for genthunk tests.

Provides spy fixtures standing in for a pipeline's dispatch sink and
read-state accessor.
"""

from unittest.mock import Mock

import pytest

from genthunk import FrozenDict, MiddlewareAPI


@pytest.fixture
def dispatch_spy() -> Mock:
    """Dispatch sink that records calls and returns None, like a bare sink."""
    return Mock(return_value=None)


@pytest.fixture
def echo_dispatch() -> Mock:
    """Dispatch sink that returns whatever it was given."""
    return Mock(side_effect=lambda message: message)


@pytest.fixture
def get_state_spy() -> Mock:
    return Mock(return_value=FrozenDict({"user_id": 7}))


@pytest.fixture
def api(dispatch_spy: Mock, get_state_spy: Mock) -> MiddlewareAPI:
    return MiddlewareAPI(dispatch=dispatch_spy, get_state=get_state_spy)
