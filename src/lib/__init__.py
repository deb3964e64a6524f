"""
Lib package for Mythic Journey.

Contains shared utilities:
- exceptions.py: Exception hierarchy rooted at MythicJourneyException
- errors.py: Centralized error codes and i18n error messages
- logging.py: structlog configuration
"""

from src.lib.errors import build_error_response, get_error_message
from src.lib.exceptions import (
    ConfigurationError,
    CorruptPersistedState,
    InvalidEntry,
    MythicJourneyException,
    SerializationError,
    StorageError,
    StorageUnavailable,
    ValidationError,
)

__all__ = [
    "MythicJourneyException",
    "ConfigurationError",
    "ValidationError",
    "SerializationError",
    "StorageError",
    "InvalidEntry",
    "CorruptPersistedState",
    "StorageUnavailable",
    "get_error_message",
    "build_error_response",
]
