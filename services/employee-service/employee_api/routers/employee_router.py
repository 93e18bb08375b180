"""
Employee API router.

Maps each business operation to one HTTP verb and path. Errors raised by the
service are translated to status codes by the application's exception
handlers; create-request bodies are validated before the service is called.
"""

from typing import List, Optional

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse

from ..config import settings
from ..dependencies import get_employee_service
from ..models import CreateEmployeeRequest, EmployeeSchema, ErrorResponse
from ..services.employee_service import EmployeeService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix=f"{settings.API_PREFIX}/employee", tags=["employees"])

SERVICE_UNAVAILABLE_RESPONSE = {
    503: {"description": "Employee API unavailable", "model": ErrorResponse}
}
INVALID_ID_RESPONSES = {
    400: {"description": "Invalid employee ID", "model": ErrorResponse},
    404: {"description": "Employee not found", "model": ErrorResponse},
    **SERVICE_UNAVAILABLE_RESPONSE,
}


@router.get(
    "",
    response_model=List[EmployeeSchema],
    responses=SERVICE_UNAVAILABLE_RESPONSE,
    summary="List all employees",
)
async def get_all_employees(
    service: EmployeeService = Depends(get_employee_service),
) -> List[EmployeeSchema]:
    """Return every employee known to the upstream service."""
    employees = await service.get_all_employees()
    logger.info("Retrieved employees", count=len(employees))
    return [EmployeeSchema.from_entity(employee) for employee in employees]


@router.get(
    "/search/{search_string}",
    response_model=List[EmployeeSchema],
    responses=SERVICE_UNAVAILABLE_RESPONSE,
    summary="Search employees by name fragment",
    description="Case-insensitive substring match on employee names. "
    "A whitespace-only fragment returns an empty list.",
)
async def get_employees_by_name_search(
    search_string: str,
    service: EmployeeService = Depends(get_employee_service),
) -> List[EmployeeSchema]:
    """Return employees whose name contains ``search_string``."""
    employees = await service.search_employees_by_name(search_string)
    logger.info("Name search finished", search_string=search_string, count=len(employees))
    return [EmployeeSchema.from_entity(employee) for employee in employees]


@router.get(
    "/highestSalary",
    response_model=int,
    responses=SERVICE_UNAVAILABLE_RESPONSE,
    summary="Highest salary among all employees",
)
async def get_highest_salary_of_employees(
    service: EmployeeService = Depends(get_employee_service),
) -> int:
    highest = await service.get_highest_salary()
    logger.info("Highest salary found", highest_salary=highest)
    return highest


@router.get(
    "/topTenHighestEarningEmployeeNames",
    response_model=List[Optional[str]],
    responses=SERVICE_UNAVAILABLE_RESPONSE,
    summary="Names of the ten highest earners",
)
async def get_top_ten_highest_earning_employee_names(
    service: EmployeeService = Depends(get_employee_service),
) -> List[Optional[str]]:
    names = await service.get_top_ten_highest_earning_employee_names()
    logger.info("Top earners found", count=len(names))
    return names


@router.get(
    "/{employee_id}",
    response_model=EmployeeSchema,
    responses=INVALID_ID_RESPONSES,
    summary="Get employee by ID",
)
async def get_employee_by_id(
    employee_id: str,
    service: EmployeeService = Depends(get_employee_service),
) -> EmployeeSchema:
    employee = await service.get_employee_by_id(employee_id)
    logger.info("Retrieved employee", employee_id=employee_id)
    return EmployeeSchema.from_entity(employee)


@router.post(
    "",
    response_model=EmployeeSchema,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid request body", "model": ErrorResponse},
        **SERVICE_UNAVAILABLE_RESPONSE,
    },
    summary="Create an employee",
)
async def create_employee(
    employee_input: CreateEmployeeRequest,
    service: EmployeeService = Depends(get_employee_service),
) -> EmployeeSchema:
    """
    Create an employee.

    The body is validated before the service is called: name and title must
    not be blank, salary must be at least 1 and age between 16 and 75.
    """
    employee = await service.create_employee(employee_input)
    logger.info("Created employee", employee_id=employee.id, name=employee.name)
    return EmployeeSchema.from_entity(employee)


@router.delete(
    "/{employee_id}",
    response_class=PlainTextResponse,
    responses=INVALID_ID_RESPONSES,
    summary="Delete employee by ID",
    description="Returns the deleted employee's name as plain text.",
)
async def delete_employee_by_id(
    employee_id: str,
    service: EmployeeService = Depends(get_employee_service),
) -> PlainTextResponse:
    deleted_name = await service.delete_employee_by_id(employee_id)
    logger.info("Deleted employee", employee_id=employee_id, name=deleted_name)
    return PlainTextResponse(deleted_name)
