"""
Tests for in-memory employee aggregations.

Covers:
- Name filtering
- Highest salary with missing values
- Top earner ranking, limit and tie order
"""

from employee_api.domain.aggregations import (
    TOP_EARNERS_LIMIT,
    filter_by_name,
    highest_salary,
    top_earner_names,
)
from employee_api.domain.entities import Employee


def _roster(*salaries):
    return [
        Employee(id=str(index), name=f"Employee {index}", salary=salary)
        for index, salary in enumerate(salaries)
    ]


class TestFilterByName:
    def test_keeps_upstream_order(self, sample_employees):
        matches = filter_by_name(sample_employees, "JAN")

        assert [employee.name for employee in matches] == ["Jane Doe", "Janet Jackson"]

    def test_no_matches(self, sample_employees):
        assert filter_by_name(sample_employees, "zzz") == []

    def test_skips_employees_without_name(self):
        employees = [Employee(id="1"), Employee(id="2", name="Jane")]

        assert filter_by_name(employees, "jane") == [employees[1]]


class TestHighestSalary:
    def test_highest(self, sample_employees):
        assert highest_salary(sample_employees) == 120000

    def test_empty_list(self):
        assert highest_salary([]) == 0

    def test_ignores_missing_salaries(self):
        assert highest_salary(_roster(None, 50000, None, 75000)) == 75000

    def test_all_salaries_missing(self):
        assert highest_salary(_roster(None, None)) == 0


class TestTopEarnerNames:
    def test_limit_is_ten(self):
        assert TOP_EARNERS_LIMIT == 10

    def test_returns_ten_highest_in_descending_order(self):
        employees = _roster(*[1000 * (12 - index) for index in range(12)])

        names = top_earner_names(employees)

        assert names == [f"Employee {index}" for index in range(10)]

    def test_ascending_input_is_reversed(self):
        employees = _roster(10, 20, 30)

        assert top_earner_names(employees) == ["Employee 2", "Employee 1", "Employee 0"]

    def test_fewer_than_limit(self, sample_employees):
        assert top_earner_names(sample_employees) == ["John Smith", "Jane Doe", "Janet Jackson"]

    def test_ties_keep_upstream_order(self):
        employees = [
            Employee(name="First", salary=100),
            Employee(name="Second", salary=200),
            Employee(name="Third", salary=100),
        ]

        assert top_earner_names(employees) == ["Second", "First", "Third"]

    def test_excludes_missing_salaries(self):
        employees = _roster(None, 300, None, 100)

        assert top_earner_names(employees) == ["Employee 1", "Employee 3"]

    def test_custom_limit(self):
        assert top_earner_names(_roster(1, 2, 3), limit=1) == ["Employee 2"]

    def test_empty(self):
        assert top_earner_names([]) == []
