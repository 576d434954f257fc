"""
Core interfaces for the Employee API.

The application layer talks to upstream only through IEmployeeGateway, so
the service can be exercised against an in-memory double in tests.
"""
from abc import ABC, abstractmethod
from typing import List

from app.domain.entities import Employee, CreateEmployeeRequest


class IEmployeeGateway(ABC):
    """
    Interface for the upstream employee service.

    Implementations must:
    - Translate upstream records into domain Employees
    - Raise RateLimitedError when upstream throttles the call
    - Raise UpstreamError for every other upstream failure
    - Never retry (retry policy lives in the application layer)
    """

    @abstractmethod
    async def fetch_all(self) -> List[Employee]:
        """
        Fetch every employee known upstream.

        Returns:
            Employees in upstream order (empty list if upstream has no data)
        """
        pass

    @abstractmethod
    async def create(self, request: CreateEmployeeRequest) -> Employee:
        """
        Create an employee upstream.

        Returns:
            The created employee, including its upstream-assigned id

        Raises:
            UpstreamUnavailableError: If upstream returns no usable payload
        """
        pass

    @abstractmethod
    async def delete_by_name(self, name: str) -> bool:
        """Delete an employee by name (upstream deletes are name-keyed)"""
        pass
