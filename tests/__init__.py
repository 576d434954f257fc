"""
Tests for the Employee API

- test_employee_client.py: upstream translation and failure classification
- test_retry_policy.py: rate-limit retry and backoff
- test_employee_service.py: query and mutation semantics
- test_employees_api.py: HTTP routes and error mapping
"""
