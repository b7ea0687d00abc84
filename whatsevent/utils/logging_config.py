"""Logging configuration for the application."""

import logging
import sys

def setup_logging():
    """Configure logging for the application."""
    # Create a formatter
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)

    # The app module may be imported more than once (uvicorn reload, tests)
    if not any(getattr(handler, '_whatsevent', False) for handler in root_logger.handlers):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler._whatsevent = True
        root_logger.addHandler(console_handler)

    # Set higher log levels for noisy components
    for noisy in ('httpcore', 'httpx', 'openai', 'multipart', 'python_multipart'):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    # Application loggers stay at INFO even if the root level is raised
    loggers = [
        'whatsevent.api',
        'whatsevent.chat',
        'whatsevent.event_handler',
        'whatsevent.utils.llm',
    ]

    for logger_name in loggers:
        logging.getLogger(logger_name).setLevel(logging.INFO)
