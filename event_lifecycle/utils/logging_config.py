"""Logging configuration for the application."""

import logging
import sys

from ..config.environment import LOG_LEVEL

def setup_logging():
    """Configure logging for the application."""
    root_logger = logging.getLogger()

    # Avoid stacking handlers when the app factory runs more than once
    if any(getattr(h, '_event_lifecycle', False) for h in root_logger.handlers):
        return

    # Create a formatter
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Create a console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler._event_lifecycle = True

    # Configure the root logger
    root_logger.setLevel(logging.INFO)
    root_logger.addHandler(console_handler)

    # Set higher log levels for noisy components
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)

    # Configure specific loggers
    loggers = [
        'event_lifecycle.lifecycle.executor',
        'event_lifecycle.lifecycle.service',
        'event_lifecycle.db.operations',
    ]

    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(LOG_LEVEL)
        # Don't add handler here since it's already handled by root logger
