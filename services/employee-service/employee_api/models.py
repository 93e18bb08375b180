"""
Wire schemas for the employee service.

Defines Pydantic models for the upstream envelope, the external employee
representation and incoming request bodies.
"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from .domain.entities import Employee

DataT = TypeVar("DataT")

SUCCESS_MARKER = "Success"


class EmployeeSchema(BaseModel):
    """
    External JSON representation of an employee.

    Field names follow the snake-case convention of the upstream service and
    are exposed unchanged to our own clients.
    """

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = Field(None, description="Opaque employee identifier")
    employee_name: Optional[str] = Field(None, examples=["Jane Doe"])
    employee_salary: Optional[int] = Field(None, examples=[75000])
    employee_age: Optional[int] = Field(None, examples=[30])
    employee_title: Optional[str] = Field(None, examples=["Software Engineer"])
    employee_email: Optional[str] = Field(None, examples=["jane@company.com"])

    def to_entity(self) -> Employee:
        """Convert to the domain entity."""
        return Employee(
            id=self.id,
            name=self.employee_name,
            salary=self.employee_salary,
            age=self.employee_age,
            title=self.employee_title,
            email=self.employee_email,
        )

    @classmethod
    def from_entity(cls, employee: Employee) -> "EmployeeSchema":
        """Build the external representation of a domain entity."""
        return cls(
            id=employee.id,
            employee_name=employee.name,
            employee_salary=employee.salary,
            employee_age=employee.age,
            employee_title=employee.title,
            employee_email=employee.email,
        )


class UpstreamResponse(BaseModel, Generic[DataT]):
    """
    Envelope returned by the mock employee API.

    A response counts as successful only when it carries a payload and its
    status contains the success marker; either signal alone is unreliable.
    """

    model_config = ConfigDict(extra="ignore")

    data: Optional[DataT] = None
    status: Optional[str] = None
    error: Optional[str] = None

    @property
    def is_successful(self) -> bool:
        return self.data is not None and self.status is not None and SUCCESS_MARKER in self.status


class CreateEmployeeRequest(BaseModel):
    """Request body for creating an employee."""

    name: str = Field(..., description="Employee name", examples=["John Doe"])
    salary: int = Field(..., ge=1, description="Salary, greater than zero", examples=[75000])
    age: int = Field(..., ge=16, le=75, description="Age between 16 and 75", examples=[30])
    title: str = Field(..., description="Job title", examples=["Software Engineer"])

    @field_validator("name", "title")
    @classmethod
    def validate_not_blank(cls, value: str, info: ValidationInfo) -> str:
        """Reject empty and whitespace-only text."""
        if not value or not value.strip():
            raise ValueError(f"Employee {info.field_name} cannot be blank")
        return value


class DeleteEmployeeRequest(BaseModel):
    """Body sent upstream to delete an employee, which is identified by name."""

    name: str = Field(..., description="Name of the employee to delete")

    @field_validator("name")
    @classmethod
    def validate_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Employee name cannot be blank")
        return value


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Human-readable error message")
    details: dict = Field(default_factory=dict, description="Additional error details")
    request_id: Optional[str] = Field(None, description="Request ID for tracing")
