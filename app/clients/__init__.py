"""Upstream API clients"""
from app.clients.employee_client import MockEmployeeClient, to_employee

__all__ = ["MockEmployeeClient", "to_employee"]
