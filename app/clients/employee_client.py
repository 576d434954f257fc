"""
Mock employee service client.

Upstream owns all employee data. This client issues the three upstream calls
(list, create, delete-by-name), translates upstream records into domain
Employees and classifies failures:
- 429 Too Many Requests -> RateLimitedError (retried one level up)
- anything else         -> UpstreamError

No retries here - see app.application.retry_policy.
"""
import logging
from typing import Any, List, Optional
from urllib.parse import quote

import httpx

from app.config import Settings
from app.core.interfaces import IEmployeeGateway
from app.domain.entities import (
    Employee,
    CreateEmployeeRequest,
    RateLimitedError,
    UpstreamError,
    UpstreamUnavailableError,
)

logger = logging.getLogger(__name__)

# Upstream record keys, snake_case first. camelCase is accepted as well.
_RECORD_FIELDS = {
    "name": ("employee_name", "employeeName"),
    "salary": ("employee_salary", "employeeSalary"),
    "age": ("employee_age", "employeeAge"),
    "title": ("employee_title", "employeeTitle"),
    "email": ("employee_email", "employeeEmail"),
}


def _record_value(record: dict, field: str) -> Any:
    for key in _RECORD_FIELDS[field]:
        if key in record:
            return record[key]
    return None


def to_employee(record: Any) -> Employee:
    """
    Translate one upstream employee record into a domain Employee.

    Raises:
        UpstreamError: If the record is not an object, lacks a required field or holds a wrongly typed one
    """
    if not isinstance(record, dict):
        raise UpstreamError(f"Malformed employee record: expected object, got {type(record).__name__}")

    employee_id = record.get("id")
    name = _record_value(record, "name")
    salary = _record_value(record, "salary")
    age = _record_value(record, "age")
    title = _record_value(record, "title")
    email = _record_value(record, "email")
    if employee_id is None or None in (name, salary, age, title):
        raise UpstreamError(f"Malformed employee record: missing required field (id={employee_id})")
    if not isinstance(name, str) or not isinstance(title, str):
        raise UpstreamError(f"Malformed employee record {employee_id}: name and title must be strings")
    if email is not None and not isinstance(email, str):
        raise UpstreamError(f"Malformed employee record {employee_id}: email must be a string")

    try:
        return Employee(
            id=str(employee_id),
            name=name,
            salary=int(salary),
            age=int(age),
            title=title,
            email=email,
        )
    except (TypeError, ValueError) as e:
        raise UpstreamError(f"Malformed employee record {employee_id}: {e}") from e


class MockEmployeeClient(IEmployeeGateway):
    """
    Client for the upstream mock employee service.

    Usage:
        client = MockEmployeeClient(http_client, settings)
        employees = await client.fetch_all()
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: Settings,
        logger_instance: logging.Logger = logger
    ):
        """
        Initialize upstream client.

        Args:
            http_client: httpx AsyncClient shared by the application (timeouts configured there)
            settings: Application settings containing the upstream base URL
            logger_instance: Logger for tracking upstream calls
        """
        self._http_client = http_client
        self._settings = settings
        self._logger = logger_instance
        self._base_url = settings.upstream_base_url

    async def fetch_all(self) -> List[Employee]:
        """
        Fetch all employees from upstream.

        Returns:
            List of employees in upstream order. Empty if upstream sends no body
            or an empty/absent data field.

        Raises:
            RateLimitedError: Upstream answered 429
            UpstreamError: Any other upstream failure or a malformed payload
        """
        response = await self._send("GET", self._base_url, operation="fetch_all")
        body = self._parse_body(response)

        data = body.get("data") if isinstance(body, dict) else None
        if not data:
            self._logger.warning("⚠️ Upstream returned no employee data - treating as empty list")
            return []
        if not isinstance(data, list):
            raise UpstreamError(f"Malformed list response: data is {type(data).__name__}")

        employees = [to_employee(record) for record in data]
        self._logger.info(f"✅ Fetched {len(employees)} employees from upstream")
        return employees

    async def create(self, request: CreateEmployeeRequest) -> Employee:
        """
        Create an employee upstream.

        Args:
            request: Validated creation request

        Returns:
            The created Employee (id and email assigned upstream)

        Raises:
            RateLimitedError: Upstream answered 429
            UpstreamUnavailableError: Upstream answered without a data object
            UpstreamError: Any other upstream failure
        """
        self._logger.info(f"Creating employee upstream: {request.name}")
        response = await self._send(
            "POST",
            self._base_url,
            operation="create",
            json=request.to_upstream_payload()
        )
        body = self._parse_body(response)

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict) or not data:
            self._logger.error(f"❌ Upstream create returned no usable payload for {request.name}")
            raise UpstreamUnavailableError(
                "Upstream returned no employee for create request",
                status_code=response.status_code
            )

        employee = to_employee(data)
        self._logger.info(f"✅ Created employee upstream - id: {employee.id}, name: {employee.name}")
        return employee

    async def delete_by_name(self, name: str) -> bool:
        """
        Delete an employee upstream by name.

        Upstream deletes are keyed by name, not id. If several employees share
        the name, upstream decides which one goes.

        Returns:
            True only when upstream answers data: true (absent or non-boolean values count as unconfirmed)
        """
        url = f"{self._base_url}/{quote(name, safe='')}"
        self._logger.info(f"Deleting employee upstream by name: {name}")
        response = await self._send("DELETE", url, operation="delete_by_name")
        body = self._parse_body(response)

        deleted = isinstance(body, dict) and body.get("data") is True
        if deleted:
            self._logger.info(f"✅ Upstream deleted employee: {name}")
        else:
            self._logger.warning(f"⚠️ Upstream did not confirm deletion of employee: {name}")
        return deleted

    async def _send(self, method: str, url: str, operation: str, **kwargs) -> httpx.Response:
        """Issue one upstream request and classify transport/HTTP failures"""
        try:
            response = await self._http_client.request(method, url, **kwargs)

        except httpx.TimeoutException as e:
            self._logger.error(f"❌ Upstream timeout during {operation}: {e}")
            raise UpstreamError(f"Request timeout: {str(e)}") from e

        except httpx.RequestError as e:
            self._logger.error(f"❌ Upstream request error during {operation}: {e}")
            raise UpstreamError(f"Request error: {str(e)}") from e

        if response.status_code == 429:
            self._logger.warning(f"⚠️ Upstream rate limited {operation} (429)")
            raise RateLimitedError(f"Upstream rate limited {operation}")

        if not 200 <= response.status_code < 300:
            self._logger.error(
                f"❌ Upstream error during {operation} - status: {response.status_code}"
            )
            raise UpstreamError(
                f"Upstream returned status {response.status_code} for {operation}",
                status_code=response.status_code
            )

        return response

    def _parse_body(self, response: httpx.Response) -> Optional[Any]:
        """Decode the JSON body, None for an empty body"""
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            self._logger.error(f"❌ Upstream returned invalid JSON - status: {response.status_code}")
            raise UpstreamError(
                "Upstream returned invalid JSON",
                status_code=response.status_code
            ) from e
