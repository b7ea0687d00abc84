"""CORS configuration for the FastAPI application."""

import os

from .environment import IS_PRODUCTION_ENVIRONMENT


def _production_origins() -> list:
    """Read the comma-separated production origin list."""
    raw = os.environ.get('CORS_ALLOWED_ORIGINS', '')
    return [origin.strip() for origin in raw.split(',') if origin.strip()]


# CORS Origins configuration
ALLOWED_ORIGINS = {
    False: ["*"],  # Development - allow all
    True: _production_origins(),  # Production - restricted to the configured frontends
}

# CORS Methods configuration
ALLOWED_METHODS = [
    "GET",      # Event lookups
    "POST",     # Event creation, chat and webhooks
    "PUT",      # Event updates
    "DELETE",   # Event removal
    "OPTIONS"   # Required for CORS preflight
]

# CORS Headers configuration
ALLOWED_HEADERS = [
    "Authorization",
    "Content-Type",
    "Accept",
]

CORS_CONFIG = {
    "allow_origins": ALLOWED_ORIGINS[IS_PRODUCTION_ENVIRONMENT],
    "allow_credentials": True,
    "allow_methods": ALLOWED_METHODS,
    "allow_headers": ALLOWED_HEADERS,
    "expose_headers": [],
    "max_age": 3600,
}
