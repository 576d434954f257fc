"""
Tests for EmployeeService query and mutation semantics.

The upstream gateway is an AsyncMock; retry delays are recorded, not slept.
"""
import pytest

from app.application.employee_service import EmployeeService
from app.application.retry_policy import RetryPolicy
from app.domain.entities import (
    CreateEmployeeRequest,
    InvalidArgumentError,
    RateLimitedError,
    UpstreamError,
)
from tests.factories import make_employee


@pytest.fixture
def service(gateway, recording_sleep):
    return EmployeeService(gateway, sleep=recording_sleep)


# ============================================
# get_all
# ============================================

@pytest.mark.asyncio
async def test_get_all_returns_upstream_employees(service, gateway):
    gateway.fetch_all.return_value = [
        make_employee("1", "John Doe", 50000),
        make_employee("2", "Jane Smith", 60000),
    ]

    employees = await service.get_all()

    assert [(e.name, e.salary) for e in employees] == [("John Doe", 50000), ("Jane Smith", 60000)]


@pytest.mark.asyncio
async def test_get_all_empty(service, gateway):
    gateway.fetch_all.return_value = []

    assert await service.get_all() == []


@pytest.mark.asyncio
async def test_get_all_retries_rate_limited(service, gateway, recording_sleep, employee_list):
    gateway.fetch_all.side_effect = [RateLimitedError(), employee_list]

    assert await service.get_all() == employee_list
    assert recording_sleep.delays == [1.0]


@pytest.mark.asyncio
async def test_custom_retry_policy_uses_injected_sleep(gateway, recording_sleep, employee_list):
    service = EmployeeService(gateway, RetryPolicy(max_attempts=2, base_delay_ms=250), sleep=recording_sleep)
    gateway.fetch_all.side_effect = [RateLimitedError(), employee_list]

    assert await service.get_all() == employee_list
    assert recording_sleep.delays == [0.25]


# ============================================
# get_by_id
# ============================================

@pytest.mark.asyncio
async def test_get_by_id_returns_match(service, gateway, employee_list):
    gateway.fetch_all.return_value = employee_list

    employee = await service.get_by_id("2")

    assert employee.name == "Jane Smith"
    assert employee.salary == 75000


@pytest.mark.asyncio
@pytest.mark.parametrize("employee_id", ["", "   ", None])
async def test_get_by_id_blank_is_invalid_without_upstream_call(service, gateway, employee_id):
    with pytest.raises(InvalidArgumentError):
        await service.get_by_id(employee_id)

    gateway.fetch_all.assert_not_awaited()


@pytest.mark.asyncio
async def test_get_by_id_unknown_is_invalid(service, gateway, employee_list):
    gateway.fetch_all.return_value = employee_list

    with pytest.raises(InvalidArgumentError):
        await service.get_by_id("999")


@pytest.mark.asyncio
async def test_get_by_id_rate_limited_after_retries(service, gateway):
    gateway.fetch_all.side_effect = RateLimitedError()

    with pytest.raises(RateLimitedError):
        await service.get_by_id("1")

    assert gateway.fetch_all.await_count == 3


# ============================================
# search_by_name
# ============================================

@pytest.mark.asyncio
async def test_search_is_case_insensitive_substring(service, gateway):
    gateway.fetch_all.return_value = [
        make_employee("1", "John Doe", 50000),
        make_employee("2", "Jane Smith", 60000),
        make_employee("3", "John Johnson", 55000),
    ]

    matches = await service.search_by_name("john")

    assert [e.name for e in matches] == ["John Doe", "John Johnson"]


@pytest.mark.asyncio
async def test_search_matches_inside_name(service, gateway, employee_list):
    gateway.fetch_all.return_value = employee_list

    matches = await service.search_by_name("SMI")

    assert [e.name for e in matches] == ["Jane Smith"]


@pytest.mark.asyncio
async def test_search_empty_string_matches_everything(service, gateway, employee_list):
    gateway.fetch_all.return_value = employee_list

    assert await service.search_by_name("") == employee_list


@pytest.mark.asyncio
async def test_search_no_match(service, gateway, employee_list):
    gateway.fetch_all.return_value = employee_list

    assert await service.search_by_name("zzz") == []


# ============================================
# highest_salary
# ============================================

@pytest.mark.asyncio
async def test_highest_salary(service, gateway, employee_list):
    gateway.fetch_all.return_value = employee_list

    assert await service.highest_salary() == 85000


@pytest.mark.asyncio
async def test_highest_salary_empty_is_zero(service, gateway):
    gateway.fetch_all.return_value = []

    assert await service.highest_salary() == 0


# ============================================
# top_ten_by_earning
# ============================================

@pytest.mark.asyncio
async def test_top_ten_limits_and_orders(service, gateway):
    gateway.fetch_all.return_value = [
        make_employee(str(i), f"Employee{i}", 105000 - i * 5000) for i in range(1, 13)
    ]

    names = await service.top_ten_by_earning()

    assert len(names) == 10
    assert names[0] == "Employee1"
    assert names[9] == "Employee10"
    assert "Employee11" not in names


@pytest.mark.asyncio
async def test_top_ten_fewer_employees(service, gateway, employee_list):
    gateway.fetch_all.return_value = employee_list

    names = await service.top_ten_by_earning()

    assert names == ["Alice Johnson", "Jane Smith", "Bob Wilson", "Charlie Brown", "John Doe"]


@pytest.mark.asyncio
async def test_top_ten_ties_keep_fetch_order(service, gateway):
    gateway.fetch_all.return_value = [
        make_employee("1", "First", 50000),
        make_employee("2", "Rich", 90000),
        make_employee("3", "Second", 50000),
        make_employee("4", "Third", 50000),
    ]

    assert await service.top_ten_by_earning() == ["Rich", "First", "Second", "Third"]


@pytest.mark.asyncio
async def test_top_ten_empty(service, gateway):
    gateway.fetch_all.return_value = []

    assert await service.top_ten_by_earning() == []


# ============================================
# create
# ============================================

@pytest.mark.asyncio
async def test_create_returns_created_employee(service, gateway):
    request = CreateEmployeeRequest(name="New Employee", salary=55000, age=28, title="Developer")
    gateway.create.return_value = make_employee("3", "New Employee", 55000, age=28)

    employee = await service.create(request)

    assert employee.id == "3"
    gateway.create.assert_awaited_once_with(request)


@pytest.mark.asyncio
async def test_create_succeeds_on_third_attempt(service, gateway, recording_sleep):
    """Rate limited twice: pauses ~1000ms then ~2000ms, then returns the employee"""
    created = make_employee("3", "New Employee", 55000)
    gateway.create.side_effect = [RateLimitedError(), RateLimitedError(), created]

    employee = await service.create(
        CreateEmployeeRequest(name="New Employee", salary=55000, age=28, title="Developer")
    )

    assert employee == created
    assert gateway.create.await_count == 3
    assert recording_sleep.delays == [1.0, 2.0]


@pytest.mark.asyncio
async def test_create_rate_limited_on_every_attempt(service, gateway, recording_sleep):
    gateway.create.side_effect = RateLimitedError()

    with pytest.raises(RateLimitedError):
        await service.create(
            CreateEmployeeRequest(name="New Employee", salary=55000, age=28, title="Developer")
        )

    assert gateway.create.await_count == 3
    assert recording_sleep.delays == [1.0, 2.0]


@pytest.mark.asyncio
async def test_create_upstream_error_not_retried(service, gateway, recording_sleep):
    gateway.create.side_effect = UpstreamError("boom", status_code=500)

    with pytest.raises(UpstreamError):
        await service.create(CreateEmployeeRequest(name="X", salary=1, age=20, title="T"))

    assert gateway.create.await_count == 1
    assert recording_sleep.delays == []


@pytest.mark.parametrize("fields", [
    {"name": "", "salary": 1, "age": 20, "title": "T"},
    {"name": "   ", "salary": 1, "age": 20, "title": "T"},
    {"name": "X", "salary": -1, "age": 20, "title": "T"},
    {"name": "X", "salary": 1, "age": 20, "title": ""},
    {"name": "X", "salary": None, "age": 20, "title": "T"},
    {"name": "X", "salary": 1, "age": None, "title": "T"},
])
def test_create_request_requires_fields(fields):
    with pytest.raises(InvalidArgumentError):
        CreateEmployeeRequest(**fields)


# ============================================
# delete_by_id
# ============================================

@pytest.mark.asyncio
async def test_delete_by_id_deletes_by_resolved_name(service, gateway, employee_list):
    gateway.fetch_all.return_value = employee_list
    gateway.delete_by_name.return_value = True

    name = await service.delete_by_id("1")

    assert name == "John Doe"
    gateway.delete_by_name.assert_awaited_once_with("John Doe")


@pytest.mark.asyncio
async def test_get_by_id_after_delete_is_invalid(service, gateway, employee_list):
    gateway.fetch_all.side_effect = [employee_list, employee_list[1:]]
    gateway.delete_by_name.return_value = True

    assert await service.delete_by_id("1") == "John Doe"

    with pytest.raises(InvalidArgumentError):
        await service.get_by_id("1")


@pytest.mark.asyncio
@pytest.mark.parametrize("employee_id", ["", "  ", None])
async def test_delete_by_id_blank_is_invalid(service, gateway, employee_id):
    with pytest.raises(InvalidArgumentError):
        await service.delete_by_id(employee_id)

    gateway.fetch_all.assert_not_awaited()
    gateway.delete_by_name.assert_not_awaited()


@pytest.mark.asyncio
async def test_delete_by_id_unknown_is_invalid_and_not_retried(service, gateway, employee_list, recording_sleep):
    gateway.fetch_all.return_value = employee_list

    with pytest.raises(InvalidArgumentError):
        await service.delete_by_id("999")

    assert gateway.fetch_all.await_count == 1
    gateway.delete_by_name.assert_not_awaited()
    assert recording_sleep.delays == []


@pytest.mark.asyncio
async def test_delete_by_id_retries_rate_limited_delete(service, gateway, employee_list, recording_sleep):
    gateway.fetch_all.return_value = employee_list
    gateway.delete_by_name.side_effect = [RateLimitedError(), True]

    assert await service.delete_by_id("2") == "Jane Smith"
    assert gateway.delete_by_name.await_count == 2
    assert recording_sleep.delays == [1.0]


@pytest.mark.asyncio
async def test_delete_by_id_rate_limited_after_retries(service, gateway, employee_list):
    gateway.fetch_all.return_value = employee_list
    gateway.delete_by_name.side_effect = RateLimitedError()

    with pytest.raises(RateLimitedError):
        await service.delete_by_id("2")

    assert gateway.delete_by_name.await_count == 3


@pytest.mark.asyncio
async def test_delete_by_id_unconfirmed_is_upstream_error(service, gateway, employee_list):
    gateway.fetch_all.return_value = employee_list
    gateway.delete_by_name.return_value = False

    with pytest.raises(UpstreamError):
        await service.delete_by_id("1")
