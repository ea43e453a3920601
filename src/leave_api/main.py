from textwrap import dedent

import pydantic
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from loguru import logger

from leave_api.db.pool import RequestDBPool
from leave_api.errors import LeaveRequestError
from leave_api.errors import handle_broad_exceptions
from leave_api.errors import handle_leave_request_errors
from leave_api.errors import handle_pydantic_validation_errors
from leave_api.monitoring.logger import configure_logger
from leave_api.monitoring.request_context import RequestContextMiddleware
from leave_api.routes.routes_health import ROUTER_HEALTH
from leave_api.routes.routes_requests import ROUTER_REQUESTS
from leave_api.settings import Settings


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create a FastAPI application.

    Configuration is loaded from environment variables (or a local .env file) via pydantic-settings.
    """
    settings = settings or Settings()

    configure_logger(log_level=settings.log_level)

    logger.info(
        "Configuration loaded successfully",
        db_host=settings.db_host if not settings.database_url else "<database_url>",
        db_name=settings.db_name,
        email_domain=settings.email_domain,
        max_request_days=settings.max_request_days,
        accept_client_status=settings.accept_client_status,
    )

    app = FastAPI(
        title="Leave Request API",
        version="v1",
        description=dedent(
            """
        Employees submit leave/travel requests; HR reviews and approves or rejects them.

        | Status | Meaning |
        | --- | --- |
        | `Pending` | submitted, awaiting review |
        | `Approved` | accepted by HR |
        | `Rejected` | declined by HR; the same dates may be requested again |
        """
        ),
        generate_unique_id_function=custom_generate_unique_id,
    )
    app.state.settings = settings

    db_pool = RequestDBPool(
        settings.dsn,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
        command_timeout=settings.db_command_timeout,
        init_schema=settings.init_schema,
    )
    app.state.db_pool = db_pool

    @app.on_event("startup")
    async def startup_database():
        """Open the connection pool and make sure the requests table exists."""
        await app.state.db_pool.initialize()

    @app.on_event("shutdown")
    async def shutdown_database():
        """Close database connections."""
        await app.state.db_pool.close()

    # Add request context middleware for tracking who/where requests come from
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.include_router(ROUTER_HEALTH)
    app.include_router(ROUTER_REQUESTS, prefix="/api")

    app.add_exception_handler(
        exc_class_or_status_code=LeaveRequestError,
        handler=handle_leave_request_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=RequestValidationError,
        handler=handle_pydantic_validation_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=pydantic.ValidationError,
        handler=handle_pydantic_validation_errors,
    )

    app.middleware("http")(handle_broad_exceptions)

    logger.info("Starting Leave Request API application")

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    if route.tags:
        return f"{route.tags[0]}-{route.name}"
    return route.name
