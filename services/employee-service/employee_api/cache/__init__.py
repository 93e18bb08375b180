"""Cache module initialization."""

from .memory_cache import EmployeeCache

__all__ = ["EmployeeCache"]
