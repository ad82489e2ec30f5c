"""
Error handling utilities for Investisizer.

This module provides centralized error handling and logging for the projection
engine. It includes the package exception class and a decorator that turns
unexpected failures into consistently logged, detail-carrying errors.
"""

import os
import traceback
import logging
from functools import wraps
import sys
from datetime import datetime

# Configure logging: no file handler on serverless (read-only filesystem)
_handlers = [logging.StreamHandler(sys.stdout)]
if not os.getenv("VERCEL"):
    _handlers.append(logging.FileHandler("investisizer.log"))

logging.basicConfig(
    level=os.getenv("INVESTISIZER_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=_handlers,
)

logger = logging.getLogger(__name__)


class InvestisizerError(Exception):
    """Base exception class for Investisizer errors"""

    def __init__(self, message, details=None):
        self.message = message
        self.details = details
        self.timestamp = datetime.now()
        super().__init__(self.message)


def error_handler(func):
    """Decorator for handling errors and providing detailed information"""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except InvestisizerError:
            # Already logged and wrapped further down the call stack
            raise
        except Exception as e:
            exc_type, exc_value, exc_tb = sys.exc_info()
            tb = traceback.extract_tb(exc_tb)

            error_location = f"{tb[-1].filename}:{tb[-1].lineno}"
            error_function = tb[-1].name

            error_details = {
                "error_type": exc_type.__name__,
                "location": error_location,
                "function": error_function,
                "arguments": {"args": str(args), "kwargs": str(kwargs)},
                "traceback": traceback.format_exc(),
            }

            logger.error(f"Error in {error_location} - {error_function}: {str(e)}")
            logger.debug(f"Detailed error information: {error_details}")

            raise InvestisizerError(
                f"Error in {error_function} at {error_location}: {str(e)}",
                error_details,
            ) from e

    return wrapper


# Module metadata
__version__ = "1.0.0"
__author__ = "Investisizer Contributors"
__description__ = "Error handling utilities for Investisizer"
