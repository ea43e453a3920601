"""
Request Repository

CRUD access to the requests table using parameterized SQL.

The duplicate guard in create() is a read-then-write pre-check with no transaction and
no unique constraint behind it. Two concurrent submissions for the same employee and
dates can both pass the check and both be inserted.
"""

import asyncio
from contextlib import asynccontextmanager
from datetime import date
from typing import Any
from typing import Dict
from typing import List
from typing import Optional

import asyncpg
from loguru import logger

from leave_api.enums import RequestStatus
from leave_api.errors import DuplicateRequestError
from leave_api.errors import InvalidStatusError
from leave_api.errors import RequestNotFoundError
from leave_api.errors import StoreError
from leave_api.validation import ValidationResult

# Driver, network and timeout failures; all surface as StoreError (HTTP 500)
STORE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)

CREATE_FAILED = "Failed to create request"
LIST_FAILED = "Failed to fetch requests"
GET_FAILED = "Failed to fetch request"
UPDATE_FAILED = "Failed to update request"


class RequestRepository:
    """Leave/travel request repository."""

    def __init__(self, pool):
        """
        Initialize the repository.

        Args:
            pool: RequestDBPool (or asyncpg.Pool); anything exposing acquire()
        """
        self.pool = pool

    @asynccontextmanager
    async def _connection(self, failure_message: str):
        """Acquire a connection and convert driver errors into StoreError."""
        try:
            async with self.pool.acquire() as conn:
                yield conn
        except STORE_ERRORS as e:
            logger.bind(error_type=type(e).__name__, error_message=str(e)).error(failure_message)
            raise StoreError(failure_message, details=str(e)) from e

    async def find_active_duplicate(
        self,
        employee_id: str,
        from_date: date,
        to_date: date,
        conn: Optional[asyncpg.Connection] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Find a non-rejected request for the same employee and exact date span.

        Returns:
            Dict of row data or None if there is no such request
        """
        query = """
            SELECT * FROM requests
            WHERE employee_id = $1 AND from_date = $2 AND to_date = $3 AND status != $4
            ORDER BY id
            LIMIT 1
        """
        params = (employee_id, from_date, to_date, RequestStatus.REJECTED.value)

        if conn is not None:
            row = await conn.fetchrow(query, *params)
        else:
            async with self._connection(CREATE_FAILED) as own_conn:
                row = await own_conn.fetchrow(query, *params)

        return dict(row) if row else None

    async def create(self, submission: ValidationResult, status: Optional[str] = None) -> Dict[str, Any]:
        """
        Insert a validated request unless a non-rejected duplicate exists.

        Args:
            submission: Successful validation result (fields plus parsed dates)
            status: Initial status; Pending when None or empty

        Returns:
            The persisted row, including id and submitted_at

        Raises:
            DuplicateRequestError: a Pending/Approved request already covers these dates
            StoreError: the database call failed
        """
        if not submission.ok:
            raise ValueError(f"Refusing to store a request that failed validation: {submission!r}")

        candidate = submission.candidate

        async with self._connection(CREATE_FAILED) as conn:
            existing = await self.find_active_duplicate(
                candidate.employee_id, submission.from_date, submission.to_date, conn=conn
            )
            if existing is None:
                row = await conn.fetchrow(
                    """
                    INSERT INTO requests (
                        name, employee_id, email, project, manager, location,
                        from_date, to_date, reason, status, submitted_at
                    ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, CURRENT_TIMESTAMP)
                    RETURNING *
                    """,
                    candidate.name,
                    candidate.employee_id,
                    candidate.email,
                    candidate.project,
                    candidate.manager,
                    candidate.location,
                    submission.from_date,
                    submission.to_date,
                    candidate.reason,
                    status or RequestStatus.PENDING.value,
                )

        if existing is not None:
            raise DuplicateRequestError(existing["status"])

        created = dict(row)
        logger.info("Request created", request_id=created["id"], employee_id=created["employee_id"])
        return created

    async def list(self, employee_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        List requests, newest first.

        Rows without submitted_at sort as if submitted now, i.e. first.

        Args:
            employee_id: Only return this employee's requests when given

        Returns:
            List of dicts, one per row
        """
        query = "SELECT * FROM requests"
        values = []

        if employee_id:
            query += " WHERE employee_id = $1"
            values.append(employee_id)

        query += " ORDER BY COALESCE(submitted_at, CURRENT_TIMESTAMP) DESC"

        async with self._connection(LIST_FAILED) as conn:
            rows = await conn.fetch(query, *values)

        return [dict(row) for row in rows]

    async def get_by_id(self, request_id: int) -> Dict[str, Any]:
        """Get a single request or raise RequestNotFoundError."""
        async with self._connection(GET_FAILED) as conn:
            row = await conn.fetchrow("SELECT * FROM requests WHERE id = $1", request_id)

        if row is None:
            raise RequestNotFoundError(request_id)
        return dict(row)

    async def update_status(self, request_id: int, new_status: Optional[str]) -> Dict[str, Any]:
        """
        Overwrite the status of a request.

        Any status may replace any other; only the value itself is checked.

        Raises:
            InvalidStatusError: new_status is not Pending, Approved or Rejected
            RequestNotFoundError: no request with this id
            StoreError: the database call failed
        """
        if new_status not in RequestStatus.values():
            raise InvalidStatusError(new_status)

        async with self._connection(UPDATE_FAILED) as conn:
            row = await conn.fetchrow(
                "UPDATE requests SET status = $1 WHERE id = $2 RETURNING *",
                new_status,
                request_id,
            )

        if row is None:
            raise RequestNotFoundError(request_id)

        logger.info("Request status updated", request_id=request_id, status=new_status)
        return dict(row)
