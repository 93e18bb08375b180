"""
Domain entities for employee data.

Employees are created only by the upstream service; inside this system they
are request-scoped value objects and are never persisted.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """
    Value object representing one employee record.

    Every field is optional because the upstream service may omit any of
    them. Salary, when present, is a non-negative integer.
    """

    id: Optional[str] = None
    name: Optional[str] = None
    salary: Optional[int] = None
    age: Optional[int] = None
    title: Optional[str] = None
    email: Optional[str] = None

    def __post_init__(self):
        """Validate salary on creation."""
        if self.salary is not None and self.salary < 0:
            raise ValueError(f"Salary cannot be negative: {self.salary}")

    @property
    def has_salary(self) -> bool:
        return self.salary is not None

    def name_contains(self, fragment: Optional[str]) -> bool:
        """
        Case-insensitive substring match against the employee name.

        Args:
            fragment: Text to look for

        Returns:
            False when either the name or the fragment is absent
        """
        if fragment is None or self.name is None:
            return False
        return fragment.lower() in self.name.lower()

    def has_higher_salary_than(self, other: Optional["Employee"]) -> bool:
        """
        Compare salaries with another employee.

        An employee with a salary outranks one without; an employee without a
        salary never outranks anyone.
        """
        if other is None or other.salary is None:
            return self.salary is not None
        return self.salary is not None and self.salary > other.salary
