from .base import *  # noqa: F403

DEBUG = False

ALLOWED_HOSTS = ["testserver", "localhost"]

HOLDINGS_DEFAULTS = {
    "view_mode": "summary",
    "group_by": "ASSET_CLASS",
    "value_in": "PORTFOLIO",
    "hide_empty": True,
    "sort_key": "assetName",
    "sort_direction": "asc",
}

# Disable logging during tests to keep output clean(er)
LOGGING = {
    "version": 1,
    "disable_existing_loggers": True,
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
        },
    },
    "loggers": {
        "holdings": {
            "handlers": ["console"],
            "level": "CRITICAL",
        },
    },
}
