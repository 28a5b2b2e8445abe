"""
Configuration for the task tracker, read once from the environment.
A local .env file is honoured when present.
"""

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()

# Debug flag is also exposed as a function so tests can flip it at runtime
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# HTTP surface
API_TITLE = os.getenv("API_TITLE", "Task Tracker API")
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")

# Task business rules
TASK_TITLE_MAX_LENGTH = int(os.getenv("TASK_TITLE_MAX_LENGTH", "200"))
TASK_DESCRIPTION_MAX_LENGTH = int(os.getenv("TASK_DESCRIPTION_MAX_LENGTH", "1000"))

# Version string
VERSION = "1.0.0"

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


def get_cors_origins() -> List[str]:
    """Allowed CORS origins as a list, blanks dropped."""
    return [origin.strip() for origin in CORS_ORIGINS.split(",") if origin.strip()]


def validate_config():
    """Validate configuration and return any issues."""
    issues = []

    if LOG_LEVEL not in VALID_LOG_LEVELS:
        issues.append(f"Invalid LOG_LEVEL: {LOG_LEVEL}")

    if TASK_TITLE_MAX_LENGTH < 1:
        issues.append("TASK_TITLE_MAX_LENGTH must be >= 1")

    if TASK_DESCRIPTION_MAX_LENGTH < 0:
        issues.append("TASK_DESCRIPTION_MAX_LENGTH must be >= 0")

    return issues
