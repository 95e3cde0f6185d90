from .base import *  # noqa: F403

DEBUG = True

# Development: Enable template debugging
TEMPLATES[0]["OPTIONS"]["debug"] = True  # noqa: F405

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "[::1]"]

# Surface slow valuation passes early
SLOW_REQUEST_THRESHOLD = 0.5

# Development-specific logging: verbose output with colors
from config.logging import configure_structlog, get_logging_config  # noqa: E402

configure_structlog(debug=True)
LOGGING = get_logging_config(debug=True)
# Engine debug events (holdings_calculated, allocation_slices_built, ...)
LOGGING["loggers"]["holdings"]["level"] = "DEBUG"
LOGGING["loggers"]["holdings.services"]["level"] = "DEBUG"
