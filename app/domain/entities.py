"""
Domain Entities - Employee model and the domain error taxonomy.

Employees are owned by the upstream employee service. This service never
mutates or stores them: every Employee is built from the latest upstream
response and discarded once the request is answered.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """
    Employee as exposed by this API.

    Field names are independent of the upstream record layout
    (see MockEmployeeClient for the translation).
    """

    id: str
    name: str
    salary: int
    age: int
    title: str
    email: Optional[str] = None

    def __post_init__(self):
        if self.salary < 0:
            raise ValueError(f"Employee salary cannot be negative: {self.salary}")

    def __repr__(self) -> str:
        return f"Employee(id={self.id}, name={self.name})"


@dataclass(frozen=True)
class CreateEmployeeRequest:
    """Data needed to create an employee. The id is assigned upstream."""

    name: str
    salary: int
    age: int
    title: str

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise InvalidArgumentError("name cannot be empty")
        if not self.title or not self.title.strip():
            raise InvalidArgumentError("title cannot be empty")
        if self.salary is None or self.salary < 0:
            raise InvalidArgumentError("salary must be a non-negative integer")
        if self.age is None:
            raise InvalidArgumentError("age is required")

    def to_upstream_payload(self) -> dict:
        """Payload shape accepted by the upstream create endpoint"""
        return {
            "name": self.name,
            "salary": self.salary,
            "age": self.age,
            "title": self.title,
        }


# Domain exceptions

class DomainError(Exception):
    """Base exception for domain layer errors"""
    pass


class InvalidArgumentError(DomainError):
    """
    Raised for a blank or unknown employee id, or a missing required field.

    Unknown ids deliberately raise this too: callers cannot tell a malformed
    id from one that does not exist.
    """
    pass


class RateLimitedError(DomainError):
    """Raised when upstream answers 429 Too Many Requests"""

    def __init__(self, message: str = "Upstream rate limit exceeded"):
        super().__init__(message)


class UpstreamError(DomainError):
    """Raised for any upstream failure other than rate limiting"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class UpstreamUnavailableError(UpstreamError):
    """Raised when upstream answers without a usable payload"""
    pass
