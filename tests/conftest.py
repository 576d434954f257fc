"""
Pytest configuration and shared fixtures.
"""
import pytest
from unittest.mock import AsyncMock

from app.core.interfaces import IEmployeeGateway
from tests.factories import make_employee


class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested delays"""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def gateway():
    """Upstream gateway double"""
    return AsyncMock(spec=IEmployeeGateway)


@pytest.fixture
def employee_list():
    return [
        make_employee("1", "John Doe", 50000),
        make_employee("2", "Jane Smith", 75000),
        make_employee("3", "Bob Wilson", 60000),
        make_employee("4", "Alice Johnson", 85000),
        make_employee("5", "Charlie Brown", 55000),
    ]
