####################################
# --- Request/response schemas --- #
####################################

from datetime import date
from datetime import datetime
from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


# create (Crud)
class LeaveRequestCreate(BaseModel):
    """
    Payload for submitting a leave/travel request.

    Every field is optional at the schema level so that a missing field is reported by
    the validation step as "All fields are required" (400) rather than as a schema error.
    """

    name: Optional[str] = None
    employee_id: Optional[str] = Field(default=None, alias="employeeId")
    email: Optional[str] = None
    project: Optional[str] = None
    manager: Optional[str] = None
    location: Optional[str] = None
    from_date: Optional[str] = Field(default=None, alias="fromDate")
    to_date: Optional[str] = Field(default=None, alias="toDate")
    reason: Optional[str] = None
    status: Optional[str] = None

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "name": "Jane Doe",
                "employeeId": "ATS0123",
                "email": "jane.doe@astrolitetech.com",
                "project": "Apollo",
                "manager": "John Smith",
                "location": "Hyderabad",
                "fromDate": "2026-11-02",
                "toDate": "2026-11-06",
                "reason": "Client visit",
            }
        },
    )


# update (crUd)
class StatusUpdateRequest(BaseModel):
    """Payload for changing the review status of a request."""

    status: Optional[str] = None

    model_config = ConfigDict(json_schema_extra={"example": {"status": "Approved"}})


# read (cRud)
class LeaveRequestRecord(BaseModel):
    """A persisted request row, serialized with the table's column names."""

    id: int
    name: str
    employee_id: str
    email: str
    project: str
    manager: str
    location: str
    from_date: date
    to_date: date
    reason: str
    status: str
    submitted_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ErrorResponse(BaseModel):
    """Body returned for every 4xx/5xx response."""

    error: str
    details: Optional[str] = None
