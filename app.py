"""ASGI entry point.

This module provides the FastAPI application instance.

Usage:
    - Production: uvicorn app:app --host 0.0.0.0 --port 3078
    - Local: python app.py (listens on PORT, default 3078)
"""

import uvicorn

from leave_api.main import create_app
from leave_api.settings import Settings

settings = Settings()
app = create_app(settings=settings)


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
