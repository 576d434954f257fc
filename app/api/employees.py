"""
Employee API - CRUD and query endpoints.

Thin routing over EmployeeService. Domain errors propagate to the exception
handlers registered in app.main, which map them to status codes:
- InvalidArgumentError -> 400
- RateLimitedError     -> 429
- UpstreamError        -> 502
"""
from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field
from typing import List, Optional
import logging

from app.application.employee_service import EmployeeService
from app.application.retry_policy import RetryPolicy
from app.clients.employee_client import MockEmployeeClient
from app.config import settings
from app.domain.entities import Employee, CreateEmployeeRequest

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================
# Pydantic Models
# ============================================

class CreateEmployeeInput(BaseModel):
    """Request to create a new employee"""
    name: str = Field(..., min_length=1, description="Employee full name")
    salary: int = Field(..., ge=0, description="Yearly salary")
    age: int = Field(..., description="Employee age")
    title: str = Field(..., min_length=1, description="Job title")


class EmployeeResponse(BaseModel):
    """Employee details"""
    id: str
    name: str
    salary: int
    age: int
    title: str
    email: Optional[str] = None

    class Config:
        from_attributes = True


def _to_response(employee: Employee) -> EmployeeResponse:
    return EmployeeResponse.model_validate(employee)


# ============================================
# Dependencies
# ============================================

def get_employee_service(request: Request) -> EmployeeService:
    """
    Build the service for one request.

    The httpx client is created once in the app lifespan and shared; the
    gateway and service themselves hold no state.
    """
    gateway = MockEmployeeClient(request.app.state.http_client, settings)
    return EmployeeService(gateway, RetryPolicy.from_settings(settings))


# ============================================
# Endpoints
# ============================================
# Fixed paths are registered before /employees/{employee_id} so they are
# not captured as ids.

@router.get("/employees", response_model=List[EmployeeResponse])
async def get_all_employees(service: EmployeeService = Depends(get_employee_service)):
    """Get all employees"""
    logger.info("GET /employees - Getting all employees")
    employees = await service.get_all()
    return [_to_response(employee) for employee in employees]


@router.get("/employees/search/{search_string}", response_model=List[EmployeeResponse])
async def search_employees_by_name(
    search_string: str,
    service: EmployeeService = Depends(get_employee_service)
):
    """Get employees whose name contains search_string (case-insensitive)"""
    logger.info(f"GET /employees/search/{search_string} - Searching employees by name")
    employees = await service.search_by_name(search_string)
    return [_to_response(employee) for employee in employees]


@router.get("/employees/highestSalary", response_model=int)
async def get_highest_salary(service: EmployeeService = Depends(get_employee_service)):
    """Get the highest salary among all employees (0 when there are none)"""
    logger.info("GET /employees/highestSalary - Getting highest salary")
    return await service.highest_salary()


@router.get("/employees/topTenHighestEarningEmployeeNames", response_model=List[str])
async def get_top_ten_highest_earning_employee_names(
    service: EmployeeService = Depends(get_employee_service)
):
    """Get the names of the ten highest earners, highest first"""
    logger.info("GET /employees/topTenHighestEarningEmployeeNames - Getting top 10 earners")
    return await service.top_ten_by_earning()


@router.get("/employees/{employee_id}", response_model=EmployeeResponse)
async def get_employee_by_id(
    employee_id: str,
    service: EmployeeService = Depends(get_employee_service)
):
    """Get one employee by id. Unknown ids answer 400, not 404."""
    logger.info(f"GET /employees/{employee_id} - Getting employee by ID")
    employee = await service.get_by_id(employee_id)
    return _to_response(employee)


@router.post("/employees", response_model=EmployeeResponse)
async def create_employee(
    employee_input: CreateEmployeeInput,
    service: EmployeeService = Depends(get_employee_service)
):
    """Create a new employee upstream"""
    logger.info(f"POST /employees - Creating new employee: {employee_input.name}")
    request = CreateEmployeeRequest(
        name=employee_input.name,
        salary=employee_input.salary,
        age=employee_input.age,
        title=employee_input.title
    )
    employee = await service.create(request)
    return _to_response(employee)


@router.delete("/employees/{employee_id}", response_model=str)
async def delete_employee_by_id(
    employee_id: str,
    service: EmployeeService = Depends(get_employee_service)
):
    """Delete an employee by id. Returns the deleted employee's name as a JSON string."""
    logger.info(f"DELETE /employees/{employee_id} - Deleting employee by ID")
    return await service.delete_by_id(employee_id)
