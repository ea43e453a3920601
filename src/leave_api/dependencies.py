"""FastAPI dependencies for accessing app state."""

from fastapi import Depends
from fastapi import Request

from leave_api.db.pool import RequestDBPool
from leave_api.db.repository_request import RequestRepository
from leave_api.settings import Settings


def get_settings(request: Request) -> Settings:
    """
    Get application settings from request state.

    Parameters
    ----------
    request : Request
        FastAPI request object

    Returns
    -------
    Settings
        Application settings instance
    """
    return request.app.state.settings


def get_db_pool(request: Request) -> RequestDBPool:
    """Get the shared requests database pool created by create_app()."""
    return request.app.state.db_pool


def get_request_repository(db_pool: RequestDBPool = Depends(get_db_pool)) -> RequestRepository:
    """
    Build a repository bound to the shared pool.

    Repositories hold no state besides the pool, so one per request is fine.
    """
    return RequestRepository(db_pool)
