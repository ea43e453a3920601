"""
Request Validation

Pure checks run against a submitted leave/travel request before anything touches the
database. Checks run in a fixed order and stop at the first failure:

1. every required field is present
2. employee ID format (ATS0 + 3 digits, not 000)
3. email format (organizational domain only)
4. date range (not in the past, at most one year ahead, at most 60 days long)
"""

import re
from datetime import date
from datetime import datetime
from typing import List
from typing import Optional

from leave_api.enums import ValidationErrorKind
from leave_api.schemas.schemas import LeaveRequestCreate

DEFAULT_EMAIL_DOMAIN = "astrolitetech.com"
DEFAULT_MAX_RANGE_DAYS = 60

REQUIRED_FIELDS = (
    "name",
    "employee_id",
    "email",
    "project",
    "manager",
    "location",
    "from_date",
    "to_date",
    "reason",
)

EMPLOYEE_ID_PATTERN = re.compile(r"^ATS0(?!000)[0-9]{3}$")

MISSING_FIELD_MESSAGE = "All fields are required"
INVALID_EMPLOYEE_ID_MESSAGE = "Invalid employee ID format. Must be ATS0 followed by 3 digits (not all zeros)"
INVALID_EMAIL_MESSAGE = "Invalid email format. Must be in format: firstname.lastname@{domain}"
INVALID_DATE_RANGE_MESSAGE = "Invalid date range. Must be within one year from today and not exceed {days} days"


class ValidationResult:
    """Outcome of validating a submitted request."""

    def __init__(
        self,
        candidate: LeaveRequestCreate,
        kind: Optional[ValidationErrorKind] = None,
        message: Optional[str] = None,
        missing_fields: Optional[List[str]] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ):
        self.candidate = candidate
        self.kind = kind
        self.message = message
        self.missing_fields = missing_fields or []
        self.from_date = from_date
        self.to_date = to_date

    @property
    def ok(self) -> bool:
        return self.kind is None

    @classmethod
    def success(cls, candidate: LeaveRequestCreate, from_date: date, to_date: date) -> "ValidationResult":
        return cls(candidate, from_date=from_date, to_date=to_date)

    @classmethod
    def failure(cls, candidate: LeaveRequestCreate, kind: ValidationErrorKind, message: str, **kwargs) -> "ValidationResult":
        return cls(candidate, kind=kind, message=message, **kwargs)

    def __repr__(self) -> str:
        if self.ok:
            return f"ValidationResult(ok, from_date={self.from_date}, to_date={self.to_date})"
        return f"ValidationResult({self.kind.value}: {self.message})"


def email_pattern(domain: str) -> re.Pattern:
    """Local part starts with a letter, ends with a letter or digit, and is at least 2 characters."""
    return re.compile(r"^[a-zA-Z][a-zA-Z0-9._-]*[a-zA-Z0-9]@" + re.escape(domain) + r"$")


def one_year_after(day: date) -> date:
    """Same month and day next year; Feb 29 rolls over to Mar 1."""
    try:
        return day.replace(year=day.year + 1)
    except ValueError:
        return date(day.year + 1, 3, 1)


def parse_calendar_date(value: str) -> Optional[date]:
    """Parse an ISO date (or the date part of an ISO datetime). Returns None when unparseable."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        return None


def missing_fields(candidate: LeaveRequestCreate) -> List[str]:
    return [field for field in REQUIRED_FIELDS if getattr(candidate, field) in (None, "")]


def is_valid_employee_id(employee_id: str) -> bool:
    return bool(EMPLOYEE_ID_PATTERN.fullmatch(employee_id))


def is_valid_email(email: str, domain: str = DEFAULT_EMAIL_DOMAIN) -> bool:
    return bool(email_pattern(domain).fullmatch(email))


def is_valid_date_range(
    from_date: date,
    to_date: date,
    today: date,
    max_range_days: int = DEFAULT_MAX_RANGE_DAYS,
) -> bool:
    """
    Check the requested span against today's date.

    The start may be today but not earlier, and no later than one year from today.
    The end may not precede the start and the span (to - from) may not exceed max_range_days.
    """
    if from_date < today or from_date > one_year_after(today):
        return False
    if to_date < from_date:
        return False
    return (to_date - from_date).days <= max_range_days


def validate(
    candidate: LeaveRequestCreate,
    *,
    today: Optional[date] = None,
    email_domain: str = DEFAULT_EMAIL_DOMAIN,
    max_range_days: int = DEFAULT_MAX_RANGE_DAYS,
) -> ValidationResult:
    """
    Validate a submitted request.

    Parameters
    ----------
    candidate : LeaveRequestCreate
        The submitted fields, passed through unchanged on success
    today : date, optional
        Reference date for the range check (defaults to the current local date)
    email_domain : str
        Domain every requester email must belong to
    max_range_days : int
        Longest allowed span between fromDate and toDate

    Returns
    -------
    ValidationResult
        ok with the parsed dates, or the first failure found
    """
    missing = missing_fields(candidate)
    if missing:
        return ValidationResult.failure(
            candidate, ValidationErrorKind.MISSING_FIELD, MISSING_FIELD_MESSAGE, missing_fields=missing
        )

    if not is_valid_employee_id(candidate.employee_id):
        return ValidationResult.failure(
            candidate, ValidationErrorKind.INVALID_EMPLOYEE_ID, INVALID_EMPLOYEE_ID_MESSAGE
        )

    if not is_valid_email(candidate.email, email_domain):
        return ValidationResult.failure(
            candidate, ValidationErrorKind.INVALID_EMAIL, INVALID_EMAIL_MESSAGE.format(domain=email_domain)
        )

    date_range_failure = ValidationResult.failure(
        candidate,
        ValidationErrorKind.INVALID_DATE_RANGE,
        INVALID_DATE_RANGE_MESSAGE.format(days=max_range_days),
    )
    from_date = parse_calendar_date(candidate.from_date)
    to_date = parse_calendar_date(candidate.to_date)
    if from_date is None or to_date is None:
        return date_range_failure

    if not is_valid_date_range(from_date, to_date, today or date.today(), max_range_days):
        return date_range_failure

    return ValidationResult.success(candidate, from_date, to_date)
