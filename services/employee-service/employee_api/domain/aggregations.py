"""
In-memory aggregations over a fully fetched employee list.

These functions are pure: they never touch the upstream service and either
return a complete result or raise.
"""

from typing import List, Optional, Sequence

from .entities import Employee

TOP_EARNERS_LIMIT = 10


def filter_by_name(employees: Sequence[Employee], fragment: Optional[str]) -> List[Employee]:
    """Employees whose name contains ``fragment`` case-insensitively, in list order."""
    return [employee for employee in employees if employee.name_contains(fragment)]


def highest_salary(employees: Sequence[Employee]) -> int:
    """
    Maximum of the present salaries.

    Returns:
        0 for an empty list or when no employee has a salary
    """
    salaries = [employee.salary for employee in employees if employee.salary is not None]
    return max(salaries, default=0)


def top_earner_names(
    employees: Sequence[Employee], limit: int = TOP_EARNERS_LIMIT
) -> List[Optional[str]]:
    """
    Names of the highest earners, highest salary first.

    Employees without a salary are excluded. ``sorted`` is stable, so ties
    keep their upstream order.
    """
    salaried = [employee for employee in employees if employee.has_salary]
    ranked = sorted(salaried, key=lambda employee: employee.salary, reverse=True)
    return [employee.name for employee in ranked[:limit]]
