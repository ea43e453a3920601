"""
Leave Request API Routes

Submit, list, fetch and review leave/travel requests.
"""

from typing import List
from typing import Optional

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Query
from fastapi import status
from loguru import logger

from leave_api.db.repository_request import RequestRepository
from leave_api.dependencies import get_request_repository
from leave_api.dependencies import get_settings
from leave_api.errors import RequestValidationFailed
from leave_api.schemas.schemas import ErrorResponse
from leave_api.schemas.schemas import LeaveRequestCreate
from leave_api.schemas.schemas import LeaveRequestRecord
from leave_api.schemas.schemas import StatusUpdateRequest
from leave_api.settings import Settings
from leave_api.validation import validate

ROUTER_REQUESTS = APIRouter(tags=["Requests"], prefix="/requests")


@ROUTER_REQUESTS.post(
    "",
    response_model=LeaveRequestRecord,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a leave/travel request",
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse, "description": "Validation failed or duplicate request"},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse, "description": "Database error"},
    },
)
async def create_request(
    payload: Optional[LeaveRequestCreate] = None,
    settings: Settings = Depends(get_settings),
    repo: RequestRepository = Depends(get_request_repository),
):
    """
    Submit a new request.

    The request is validated (required fields, employee ID, email, date range) and
    rejected when the employee already has a pending or approved request for exactly
    the same dates. New requests start as Pending.
    """
    # An absent body is treated as an empty submission
    if payload is None:
        payload = LeaveRequestCreate()
    result = validate(
        payload,
        email_domain=settings.email_domain,
        max_range_days=settings.max_request_days,
    )
    if not result.ok:
        if result.missing_fields:
            logger.warning("Missing required fields", missing_fields=result.missing_fields)
        raise RequestValidationFailed(result.kind, result.message)

    initial_status = payload.status if settings.accept_client_status else None
    created = await repo.create(result, status=initial_status)
    return LeaveRequestRecord.model_validate(created)


@ROUTER_REQUESTS.get(
    "",
    response_model=List[LeaveRequestRecord],
    summary="List requests",
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse, "description": "Database error"}},
)
async def list_requests(
    employee_id: Optional[str] = Query(default=None, alias="employeeId", description="Only this employee's requests"),
    repo: RequestRepository = Depends(get_request_repository),
):
    """List all requests, newest submission first."""
    rows = await repo.list(employee_id=employee_id)
    logger.debug("Requests listed", count=len(rows), employee_id=employee_id)
    return [LeaveRequestRecord.model_validate(row) for row in rows]


@ROUTER_REQUESTS.get(
    "/{request_id}",
    response_model=LeaveRequestRecord,
    summary="Get a request by id",
    responses={
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "Request not found"},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse, "description": "Database error"},
    },
)
async def get_request(
    request_id: int,
    repo: RequestRepository = Depends(get_request_repository),
):
    row = await repo.get_by_id(request_id)
    return LeaveRequestRecord.model_validate(row)


@ROUTER_REQUESTS.put(
    "/{request_id}",
    response_model=LeaveRequestRecord,
    summary="Update the status of a request",
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse, "description": "Invalid status"},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "Request not found"},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse, "description": "Database error"},
    },
)
async def update_request_status(
    request_id: int,
    payload: Optional[StatusUpdateRequest] = None,
    repo: RequestRepository = Depends(get_request_repository),
):
    """Set the status to Pending, Approved or Rejected. Any status may follow any other."""
    status_value = payload.status if payload is not None else None
    row = await repo.update_status(request_id, status_value)
    return LeaveRequestRecord.model_validate(row)
