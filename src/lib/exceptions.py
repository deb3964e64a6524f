"""
Custom exception hierarchy for Mythic Journey.

Provides structured exception types for all subsystems:
- Configuration, validation, serialization
- Storage of the persisted journey document

All exceptions inherit from MythicJourneyException, enabling
catch-all for journey-specific errors while keeping the
ability to catch specific error types.
"""

from __future__ import annotations


class MythicJourneyException(Exception):
    """Base exception for all Mythic Journey errors."""


class ConfigurationError(MythicJourneyException):
    """Missing environment variables, invalid config values, or startup failures."""


class ValidationError(MythicJourneyException):
    """Input validation, parsing, or type conversion failures."""


class SerializationError(MythicJourneyException):
    """JSON encode/decode, data serialization/deserialization failures."""


class StorageError(MythicJourneyException):
    """Failures of the backing store that holds the journey document."""


class InvalidEntry(ValidationError):
    """A journal entry was submitted with empty or whitespace-only content.

    The caller must not retry with the same input.
    """


class CorruptPersistedState(SerializationError):
    """The stored journey document could not be parsed or is missing fields."""


class StorageUnavailable(StorageError):
    """The backing store could not be read or written (quota, permissions, disk)."""
