"""Deployment environment for WhatsEvent.

Importing this module loads `.env` with python-dotenv, so it has to come
before any module that reads settings from the environment. On a hosted
platform the variables are set directly and `.env` is usually absent.

`ENVIRONMENT` selects `development` or `production`. Any other value, or
none, falls back to development with a warning.
"""

import logging
import os

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEVELOPMENT = 'development'
PRODUCTION = 'production'
VALID_ENVIRONMENTS = (DEVELOPMENT, PRODUCTION)

load_dotenv()


def resolve_environment(value: str) -> str:
    """Normalize an ENVIRONMENT value to one of VALID_ENVIRONMENTS."""
    name = (value or '').strip().lower()
    if name in VALID_ENVIRONMENTS:
        return name
    logger.warning(
        f"ENVIRONMENT '{value}' is not one of {', '.join(VALID_ENVIRONMENTS)}; "
        f"running as {DEVELOPMENT}"
    )
    return DEVELOPMENT


ENVIRONMENT_NAME = resolve_environment(os.environ.get('ENVIRONMENT', ''))
IS_PRODUCTION_ENVIRONMENT = ENVIRONMENT_NAME == PRODUCTION

__all__ = ['ENVIRONMENT_NAME', 'IS_PRODUCTION_ENVIRONMENT', 'resolve_environment']
