"""Settings for the leave request API."""

from typing import List
from typing import Optional
from urllib.parse import quote

from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings for the leave request API.

    [pydantic.BaseSettings](https://docs.pydantic.dev/latest/concepts/pydantic_settings/) is a popular
    framework for organizing, validating, and reading configuration values from a variety of sources
    including environment variables.

    This class automatically reads from:
    1. Environment variables (production)
    2. .env file (local development)

    Environment variable names are treated case-insensitively (DB_HOST and db_host both work).
    """

    # PostgreSQL connection
    database_url: Optional[str] = None
    """Full PostgreSQL connection string. When set, the db_* parts below are ignored."""

    db_host: str = "localhost"
    """PostgreSQL host."""

    db_port: int = 5432
    """PostgreSQL port."""

    db_name: str = "new_employee_db"
    """PostgreSQL database name."""

    db_user: str = "postgres"
    """PostgreSQL user."""

    db_password: Optional[str] = None
    """PostgreSQL password."""

    db_pool_min_size: int = 1
    """Minimum number of pooled connections."""

    db_pool_max_size: int = 10
    """Maximum number of pooled connections."""

    db_command_timeout: float = 60
    """Per-statement timeout in seconds."""

    init_schema: bool = True
    """Create the requests table (if missing) when the application starts."""

    # HTTP
    port: int = 3078
    """Port used when the service is started through app.py."""

    cors_origins: List[str] = ["*"]
    """Allowed CORS origins (JSON list in the environment, e.g. '["http://localhost:5500"]')."""

    # Request rules
    email_domain: str = "astrolitetech.com"
    """Organizational email domain every requester address must belong to."""

    max_request_days: int = 60
    """Maximum number of days between fromDate and toDate."""

    accept_client_status: bool = False
    """Store the status supplied by the caller at creation time instead of always using Pending."""

    # Logging
    log_level: str = "INFO"
    """Minimum level for console logging."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",  # Load from .env file if it exists (local development)
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra environment variables not defined in the model
        validate_default=True,
    )

    @property
    def dsn(self) -> str:
        """PostgreSQL connection string built from database_url or the db_* parts."""
        if self.database_url:
            return self.database_url

        credentials = quote(self.db_user, safe="")
        if self.db_password:
            credentials += ":" + quote(self.db_password, safe="")
        return f"postgresql://{credentials}@{self.db_host}:{self.db_port}/{self.db_name}"
