"""
Application configuration using python-dotenv.

Values are read from os.environ once at import time. Outside of pytest a
``.env`` file is loaded first, so local runs and scripts pick up the same
settings as a deployed process.
"""

import os
import pathlib
from dotenv import load_dotenv


# Tests must not depend on a developer's local .env
is_testing = os.getenv("PYTEST_VERSION") is not None

if not is_testing:
    _backend_dir = pathlib.Path(__file__).resolve().parent.parent.parent
    _env_candidates = [
        _backend_dir / ".env",
        _backend_dir.parent / ".env",
        pathlib.Path.cwd() / ".env",
    ]
    for _env_file in _env_candidates:
        if _env_file.exists():
            load_dotenv(_env_file)
            break


# Defaults match backend/.env.example
def get_database_url() -> str:
    """Get the database URL from environment."""
    return os.getenv("DATABASE_URL", "sqlite:///./study_scheduler.db")


DATABASE_URL = get_database_url()

# Day-grouped schedule cache (JsonFileScheduleCache)
SCHEDULE_CACHE_DIR = os.getenv("SCHEDULE_CACHE_DIR", ".schedule_cache")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Legacy Cognito attribute store, read only by migrations
COGNITO_USER_POOL_ID = os.getenv("COGNITO_USER_POOL_ID", "")
AWS_REGION = os.getenv("AWS_REGION", "us-east-1")
