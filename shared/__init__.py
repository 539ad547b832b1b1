"""
BIZCOMPLY Shared Library
========================

Common utilities, configuration, and abstractions used by the compliance
checker service.

Modules:
    - config: Configuration management with Pydantic Settings
    - logging: Structured logging with structlog
    - database: PostgreSQL and Redis client abstractions
    - models: Shared Pydantic models (businesses, regulations, results)

Version: 0.1.0
"""

__version__ = "0.1.0"
__author__ = "Bizcomply Team"

from shared.config import settings
from shared.logging import get_logger, setup_logging

__all__ = [
    "settings",
    "get_logger",
    "setup_logging",
    "__version__",
]
