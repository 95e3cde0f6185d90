"""
Django settings for the holdings service.

Base settings shared by all environments.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# config/settings/base.py is 3 levels below the project root
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.getenv("SECRET_KEY") or "django-insecure-placeholder-key-for-tests-and-local-dev"

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = os.getenv("DEBUG", "False") == "True"

# Configure logging early (before Django uses it)
from config.logging import configure_structlog, get_logging_config  # noqa: E402

configure_structlog(debug=DEBUG)

ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "").split(",") if h.strip()]
if not ALLOWED_HOSTS and DEBUG:
    ALLOWED_HOSTS = ["localhost", "127.0.0.1", "[::1]"]


# Application definition

INSTALLED_APPS = [
    "holdings",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "holdings.middleware.RequestContextMiddleware",  # Request id and timing first
    "django.middleware.common.CommonMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "config.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
            ],
        },
    },
]

WSGI_APPLICATION = "config.wsgi.application"

# Holdings are computed per request from the posted contract; nothing is persisted
DATABASES = {}

LANGUAGE_CODE = "en-us"

TIME_ZONE = "UTC"

USE_I18N = True

USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ============================================================================
# HOLDINGS DEFAULTS
# ============================================================================

# Initial view state for a holdings page; query parameters override per request
HOLDINGS_DEFAULTS = {
    "view_mode": os.getenv("HOLDINGS_DEFAULT_VIEW", "summary"),
    "group_by": os.getenv("HOLDINGS_DEFAULT_GROUP_BY", "ASSET_CLASS"),
    "value_in": os.getenv("HOLDINGS_DEFAULT_VALUE_IN", "PORTFOLIO"),
    "hide_empty": os.getenv("HOLDINGS_HIDE_EMPTY", "True") == "True",
    "sort_key": "assetName",
    "sort_direction": "asc",
}

# ============================================================================
# MONITORING CONFIGURATION
# ============================================================================

# Threshold in seconds for logging slow requests
SLOW_REQUEST_THRESHOLD = float(os.getenv("SLOW_REQUEST_THRESHOLD", "1.0"))

# Logging Configuration
# Using structlog for structured logging with Django's logging system
LOGGING = get_logging_config(debug=DEBUG)
