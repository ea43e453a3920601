"""Request store access: connection pool and repositories."""
