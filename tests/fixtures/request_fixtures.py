"""Fixtures for request payloads and stored rows."""

from datetime import date
from datetime import datetime
from datetime import timedelta

import pytest

# Fixed reference date for validation tests
TODAY = date(2026, 10, 17)


@pytest.fixture
def valid_payload():
    """JSON body of a request that passes every check, starting 10 days from the real today."""
    start = date.today() + timedelta(days=10)
    end = start + timedelta(days=4)
    return {
        "name": "Jane Doe",
        "employeeId": "ATS0123",
        "email": "jane.doe@astrolitetech.com",
        "project": "Apollo",
        "manager": "John Smith",
        "location": "Hyderabad",
        "fromDate": start.isoformat(),
        "toDate": end.isoformat(),
        "reason": "Client visit",
    }


@pytest.fixture
def make_row():
    """Build a row dict shaped like SELECT * FROM requests."""

    def _make_row(**overrides):
        row = {
            "id": 1,
            "name": "Jane Doe",
            "employee_id": "ATS0123",
            "email": "jane.doe@astrolitetech.com",
            "project": "Apollo",
            "manager": "John Smith",
            "location": "Hyderabad",
            "from_date": date(2026, 10, 27),
            "to_date": date(2026, 10, 31),
            "reason": "Client visit",
            "status": "Pending",
            "submitted_at": datetime(2026, 10, 17, 9, 30, 0),
        }
        row.update(overrides)
        return row

    return _make_row
