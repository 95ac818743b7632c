"""Environment settings for the event lifecycle service.

Import this before anything that reads DATABASE_URL, ADMIN_ORIGINS or
LOG_LEVEL, so a local .env file is loaded first. That applies to both the
lifecycle API and scripts/events.py. On a deployed host the variables come
from the platform, and .env is normally absent.

    from event_lifecycle.config.environment import IS_PRODUCTION_ENVIRONMENT
"""

import os
import logging
from dotenv import load_dotenv

# Populate os.environ from .env before the constants below are read
load_dotenv()

env_setting = os.environ.get('ENVIRONMENT', '').lower()
IS_PRODUCTION_ENVIRONMENT = env_setting == 'production'

if env_setting not in ['development', 'production']:
    logging.warning(
        f"Environment setting '{env_setting}' is invalid or not specified. "
        "Expected 'development' or 'production'. Defaulting to development environment."
    )

# Log level for the application loggers
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

__all__ = ['IS_PRODUCTION_ENVIRONMENT', 'LOG_LEVEL']
