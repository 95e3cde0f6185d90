"""
Startup validation checks for production environment.

Validates that all required configuration is present before the application starts.
"""

import os

from django.core.exceptions import ImproperlyConfigured

REQUIRED_VARS = [
    "SECRET_KEY",
    "ALLOWED_HOSTS",
]


def validate_production_config() -> None:
    """
    Validate required environment variables for production deployment.

    Raises:
        ImproperlyConfigured: If any required environment variable is missing,
            or SLOW_REQUEST_THRESHOLD is set but not a positive number.
    """
    missing = [var for var in REQUIRED_VARS if not os.getenv(var)]

    if missing:
        raise ImproperlyConfigured(
            f"Missing required environment variables for production: {', '.join(missing)}\n"
            f"Please set these in your environment or .env file."
        )

    allowed_hosts = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "").split(",") if h.strip()]
    if not allowed_hosts:
        raise ImproperlyConfigured(
            "ALLOWED_HOSTS environment variable must contain at least one hostname"
        )

    threshold = os.getenv("SLOW_REQUEST_THRESHOLD")
    if threshold is not None:
        try:
            valid = float(threshold) > 0
        except ValueError:
            valid = False
        if not valid:
            raise ImproperlyConfigured(
                f"SLOW_REQUEST_THRESHOLD must be a positive number of seconds, got {threshold!r}"
            )
