"""
Application layer - Use cases and business logic orchestration.

This layer contains:
- EmployeeService (queries and mutations over the upstream gateway)
- Retry policy for upstream rate limiting

No direct dependencies on frameworks (FastAPI, etc.)
"""
