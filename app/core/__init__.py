"""Core module containing interfaces."""

from app.core.interfaces import IEmployeeGateway

__all__ = ["IEmployeeGateway"]
