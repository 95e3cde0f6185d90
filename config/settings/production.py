"""
Production settings for the holdings service.

SECURITY WARNING: This configuration is for production environments only.
Ensure all environment variables are properly set before deployment.
"""

import os

# Validate production configuration immediately
from config.startup_checks import validate_production_config  # noqa: E402

from .base import *  # noqa: F403

validate_production_config()

# Ensure logs directory exists
LOGS_DIR = BASE_DIR / "logs"  # noqa: F405
LOGS_DIR.mkdir(exist_ok=True)

# ============================================================================
# SECURITY SETTINGS
# ============================================================================

DEBUG = False

# Environment variables validated by startup_checks
SECRET_KEY = os.getenv("SECRET_KEY")  # type: ignore # noqa: F405
ALLOWED_HOSTS = [
    h.strip() for h in os.getenv("ALLOWED_HOSTS", "").split(",") if h.strip()
]

# HTTPS/SSL Configuration
SECURE_SSL_REDIRECT = os.getenv("SECURE_SSL_REDIRECT", "True") == "True"
SECURE_HSTS_SECONDS = 31536000  # 1 year
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")

# Large portfolios take longer to value; only flag genuinely slow passes
SLOW_REQUEST_THRESHOLD = float(os.getenv("SLOW_REQUEST_THRESHOLD", "2.0"))

# ============================================================================
# LOGGING CONFIGURATION
# ============================================================================

from config.logging import get_logging_config  # noqa: E402

LOGGING = get_logging_config(debug=False)

# Production-specific enhancements: Add file handlers with rotation
LOGGING["handlers"]["file"] = {
    "class": "logging.handlers.RotatingFileHandler",
    "filename": LOGS_DIR / "holdings.log",
    "maxBytes": 10 * 1024 * 1024,  # 10MB
    "backupCount": 5,
    "formatter": "json",
    "level": "INFO",
}

LOGGING["root"]["handlers"] = ["console", "file"]
LOGGING["loggers"]["holdings"]["handlers"] = ["console", "file"]
LOGGING["loggers"]["django.request"]["handlers"] = ["console", "file"]
