"""
Leave Request Enums

Values must match exactly what is stored in the requests table.
"""

from enum import Enum


class RequestStatus(str, Enum):
    """Review status of a leave/travel request."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class ValidationErrorKind(str, Enum):
    """Machine-checkable reason a submitted request was refused."""

    MISSING_FIELD = "MissingField"
    INVALID_EMPLOYEE_ID = "InvalidEmployeeId"
    INVALID_EMAIL = "InvalidEmail"
    INVALID_DATE_RANGE = "InvalidDateRange"
