"""
Employee Service - Query and mutation orchestration over the upstream gateway.

Upstream only offers list, create and delete-by-name. Everything else is
computed here from a fresh full fetch:
- Lookup by id (linear scan)
- Case-insensitive name search
- Highest salary
- Top ten earners

Upstream calls are wrapped in the rate-limit retry policy. No state is kept
between calls: every operation works on the latest upstream list.
"""

from typing import Awaitable, Callable, List, Optional, TypeVar
import logging

from app.application.retry_policy import RetryPolicy, DEFAULT_RETRY_POLICY, call_with_retry
from app.core.interfaces import IEmployeeGateway
from app.domain.entities import Employee, CreateEmployeeRequest, InvalidArgumentError, UpstreamError

logger = logging.getLogger(__name__)

T = TypeVar("T")

TOP_EARNERS_LIMIT = 10


def find_employee(employees: List[Employee], employee_id: str) -> Employee:
    """
    Find an employee by exact id.

    Raises:
        InvalidArgumentError: If no employee has this id (unknown ids are
            reported the same way as malformed ones)
    """
    for employee in employees:
        if employee.id == employee_id:
            return employee

    logger.warning(f"Employee with id {employee_id} does not exist")
    raise InvalidArgumentError(f"Unknown employee id: {employee_id}")


def _require_id(employee_id: Optional[str]) -> str:
    if employee_id is None or not employee_id.strip():
        logger.warning("Empty or null employee ID provided")
        raise InvalidArgumentError("Employee id cannot be empty")
    return employee_id


class EmployeeService:
    """
    Application service for employee operations.

    Orchestrates:
    - Upstream gateway calls (list, create, delete-by-name)
    - Client-side query semantics upstream does not provide
    - Retry on upstream rate limiting
    """

    def __init__(
        self,
        gateway: IEmployeeGateway,
        retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None
    ):
        """
        Initialize employee service.

        Args:
            gateway: Upstream employee gateway
            retry_policy: Backoff settings for rate-limited calls
            sleep: Optional awaitable pause override (tests)
        """
        self._gateway = gateway
        self._retry_policy = retry_policy
        self._retry_kwargs = {"sleep": sleep} if sleep is not None else {}

    async def _with_retry(self, operation: Callable[[], Awaitable[T]], description: str) -> T:
        return await call_with_retry(
            operation,
            self._retry_policy,
            description=description,
            **self._retry_kwargs
        )

    async def get_all(self) -> List[Employee]:
        """Fetch all employees (empty list when upstream has none)"""
        logger.info("Fetching all employees from upstream")
        employees = await self._with_retry(self._gateway.fetch_all, "get_all")
        logger.info(f"Successfully fetched {len(employees)} employees")
        return employees

    async def get_by_id(self, employee_id: Optional[str]) -> Employee:
        """
        Get one employee by id.

        Raises:
            InvalidArgumentError: If the id is empty/blank or unknown
        """
        logger.info(f"Fetching employee with id: {employee_id}")
        employee_id = _require_id(employee_id)

        employee = find_employee(await self.get_all(), employee_id)
        logger.info(f"Successfully found employee: {employee.name}")
        return employee

    async def search_by_name(self, search_string: str) -> List[Employee]:
        """Employees whose name contains search_string, ignoring case"""
        logger.info(f"Searching employees by name containing: {search_string}")
        needle = (search_string or "").casefold()

        matches = [
            employee for employee in await self.get_all()
            if needle in employee.name.casefold()
        ]
        logger.info(f"Found {len(matches)} employees matching search: {search_string}")
        return matches

    async def highest_salary(self) -> int:
        """Highest salary among all employees, 0 if there are none"""
        employees = await self.get_all()
        highest = max((employee.salary for employee in employees), default=0)
        logger.info(f"Highest salary found: {highest}")
        return highest

    async def top_ten_by_earning(self) -> List[str]:
        """
        Names of the ten highest earners, highest first.

        sorted() is stable, so equal salaries keep upstream order.
        """
        employees = await self.get_all()
        ranked = sorted(employees, key=lambda employee: employee.salary, reverse=True)
        names = [employee.name for employee in ranked[:TOP_EARNERS_LIMIT]]
        logger.info(f"Found {len(names)} top earning employees")
        return names

    async def create(self, request: CreateEmployeeRequest) -> Employee:
        """Create an employee upstream"""
        logger.info(f"Creating new employee: {request.name}")
        employee = await self._with_retry(
            lambda: self._gateway.create(request),
            f"create({request.name})"
        )
        logger.info(f"Successfully created employee: {employee.name}")
        return employee

    async def delete_by_id(self, employee_id: Optional[str]) -> str:
        """
        Delete an employee by id.

        Upstream deletes by name, so the id is first resolved against a full
        fetch. If two employees share a name, upstream may delete either one.

        Returns:
            Name of the deleted employee

        Raises:
            InvalidArgumentError: If the id is empty/blank or unknown
            UpstreamError: If upstream does not confirm the deletion
        """
        logger.info(f"Deleting employee with id: {employee_id}")
        employee_id = _require_id(employee_id)

        async def resolve_and_delete() -> str:
            employee = find_employee(await self._gateway.fetch_all(), employee_id)
            deleted = await self._gateway.delete_by_name(employee.name)
            if not deleted:
                raise UpstreamError(f"Upstream did not delete employee {employee.name}")
            return employee.name

        name = await self._with_retry(resolve_and_delete, f"delete_by_id({employee_id})")
        logger.info(f"Successfully deleted employee: {name}")
        return name
