"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields, so the
API starts with an empty in‑memory store on port 3000 when nothing is
set.  Tests build their own ``Settings`` instances and pass them to
``create_app``.
"""

import os
from dataclasses import dataclass
from typing import Optional


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "City Management API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None

    # Prefix for the city routes.  Empty keeps the ``/cities`` layout;
    # ``/api`` reproduces ``/api/cities``.
    api_prefix: str = os.getenv("API_PREFIX", "")

    # ``memory`` keeps cities for the lifetime of the process only.
    # ``sqlite`` stores them in ``database_url``.
    store_backend: str = os.getenv("STORE_BACKEND", "memory")

    # Path to the SQLite database file, used only by the sqlite backend.
    # Relative paths are resolved against the current working directory.
    database_url: str = os.getenv("DATABASE_URL", "cities.db")

    # Populate an empty store with a few demo cities at startup.
    seed_demo_data: bool = _env_flag("SEED_DEMO_DATA")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# must be set before importing this module.
settings = Settings()
