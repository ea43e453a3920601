"""
Request Store Connection Pool

Manages the asyncpg connection pool for the requests database.
Creates the requests table on initialization when it does not exist yet.

Schema Evolution:
-----------------
schema.sql only uses CREATE ... IF NOT EXISTS, so it never changes an existing table.
Column changes on a deployed database have to be applied by hand.
"""

from pathlib import Path
from typing import Optional

import asyncpg
from loguru import logger

SCHEMA_PATH = Path(__file__).parent / "schema.sql"


class RequestDBPool:
    """Requests database connection pool manager."""

    EXPECTED_COLUMNS = {
        "id",
        "name",
        "employee_id",
        "email",
        "project",
        "manager",
        "location",
        "from_date",
        "to_date",
        "reason",
        "status",
        "submitted_at",
    }

    def __init__(
        self,
        connection_string: str,
        min_size: int = 1,
        max_size: int = 10,
        command_timeout: float = 60,
        init_schema: bool = True,
    ):
        """
        Initialize the requests DB pool.

        Args:
            connection_string: PostgreSQL connection string
            min_size: Minimum pooled connections
            max_size: Maximum pooled connections
            command_timeout: Per-statement timeout in seconds
            init_schema: Run schema.sql after the pool is created
        """
        self.connection_string = connection_string
        self.min_size = min_size
        self.max_size = max_size
        self.command_timeout = command_timeout
        self.init_schema = init_schema
        self.pool: Optional[asyncpg.Pool] = None

    async def initialize(self) -> None:
        """Create the connection pool and, if enabled, the requests table."""
        if self.pool is not None:
            logger.debug("Requests DB pool already initialized")
            return

        try:
            logger.info("Initializing requests database pool", min_size=self.min_size, max_size=self.max_size)

            self.pool = await asyncpg.create_pool(
                self.connection_string,
                min_size=self.min_size,
                max_size=self.max_size,
                command_timeout=self.command_timeout,
            )

            async with self.pool.acquire() as conn:
                result = await conn.fetchval("SELECT 1")
                if result != 1:
                    raise RuntimeError("Pool validation query failed")

            logger.info("Requests DB pool validated")

            if self.init_schema:
                await self._run_migrations()

            logger.success("Requests database initialized successfully")

        except Exception as e:
            logger.bind(error=str(e)).error("Failed to initialize requests DB pool")
            if self.pool:
                await self.pool.close()
                self.pool = None
            raise

    async def _run_migrations(self) -> None:
        """Execute schema.sql and log the columns of the resulting table."""
        schema_sql = SCHEMA_PATH.read_text(encoding="utf-8")

        async with self.pool.acquire() as conn:
            await conn.execute(schema_sql)

            rows = await conn.fetch(
                """
                SELECT column_name
                FROM information_schema.columns
                WHERE table_name = 'requests'
                """
            )
            columns = {row["column_name"] for row in rows}

        logger.info("Table columns", columns=sorted(columns))

        missing_columns = self.EXPECTED_COLUMNS - columns
        if missing_columns:
            # An older requests table predates one of the columns; queries touching it will fail
            logger.warning("requests table is missing columns", missing=sorted(missing_columns))

    async def close(self) -> None:
        """Close the connection pool gracefully."""
        if self.pool:
            logger.info("Closing requests database pool")
            await self.pool.close()
            self.pool = None
            logger.info("Requests DB pool closed")

    def acquire(self):
        """
        Acquire a database connection from the pool.

        Usage:
            async with pool.acquire() as conn:
                row = await conn.fetchrow("SELECT * FROM requests WHERE id = $1", request_id)
        """
        if not self.pool:
            raise RuntimeError("Requests DB pool not initialized - call initialize() first")
        return self.pool.acquire()

    async def health_check(self) -> bool:
        """
        Check if database connection is healthy.

        Returns:
            True if connection is healthy, False otherwise
        """
        try:
            if not self.pool:
                return False

            async with self.pool.acquire() as conn:
                result = await conn.fetchval("SELECT 1")
                return result == 1
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            logger.bind(error=str(e)).error("Requests DB health check failed")
            return False
