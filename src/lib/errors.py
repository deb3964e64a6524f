"""
Centralized Error Response Builder for Mythic Journey.

Provides consistent error codes, messages, and i18n-ready error responses
for use across the API and the engine boundary.

Error codes are constants that map to translatable message strings.
The builder returns structured error dicts compatible with the API
response envelope.
"""

from __future__ import annotations

from typing import Any

# =============================================================================
# Error Code Constants
# =============================================================================

INVALID_ENTRY = "INVALID_ENTRY"
VALIDATION_ERROR = "VALIDATION_ERROR"
STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"
INTERNAL_ERROR = "INTERNAL_ERROR"

# =============================================================================
# i18n Message Registry
#
# Maps (error_code, language) -> translated message string.
# Falls back to "en" if a translation is missing for the requested language.
# =============================================================================

_ERROR_MESSAGES: dict[str, dict[str, str]] = {
    INVALID_ENTRY: {
        "en": "A memory needs some words. Please write something before inscribing it.",
        "de": "Eine Erinnerung braucht Worte. Bitte schreibe etwas, bevor du sie einritzt.",
    },
    VALIDATION_ERROR: {
        "en": "Invalid input. Please check your request.",
        "de": "Ungueltige Eingabe. Bitte ueberpruefen Sie Ihre Anfrage.",
    },
    STORAGE_UNAVAILABLE: {
        "en": "Your journey could not be saved. Changes are kept for this session only.",
        "de": "Deine Reise konnte nicht gespeichert werden. Aenderungen gelten nur fuer diese Sitzung.",
    },
    INTERNAL_ERROR: {
        "en": "An internal error occurred. Please try again.",
        "de": "Ein interner Fehler ist aufgetreten. Bitte erneut versuchen.",
    },
}

# Default fallback language
_DEFAULT_LANG = "en"


# =============================================================================
# Error Response Builder
# =============================================================================


def get_error_message(code: str, lang: str = "en") -> str:
    """
    Get a translated error message for a given error code.

    Falls back to English if the requested language is not available.
    Falls back to a generic message if the error code is unknown.

    Args:
        code: Error code constant (e.g. INVALID_ENTRY, STORAGE_UNAVAILABLE)
        lang: ISO 639-1 language code (e.g. "en", "de")

    Returns:
        Translated error message string
    """
    messages = _ERROR_MESSAGES.get(code, {})
    return messages.get(lang, messages.get(_DEFAULT_LANG, "An error occurred."))


def build_error_response(
    code: str,
    message: str | None = None,
    details: dict[str, Any] | None = None,
    lang: str = "en",
) -> dict[str, Any]:
    """
    Build a structured error dict.

    If no message is provided, the i18n-translated message for the error code
    and language is used automatically.

    Args:
        code: Error code constant
        message: Optional override message (bypasses i18n lookup)
        details: Optional additional error details
        lang: ISO 639-1 language code for i18n message lookup

    Returns:
        Structured error dict: {"code": str, "message": str, "details": dict | None}
    """
    resolved_message = message if message is not None else get_error_message(code, lang)
    error: dict[str, Any] = {
        "code": code,
        "message": resolved_message,
    }
    if details is not None:
        error["details"] = details
    return error


__all__ = [
    "INVALID_ENTRY",
    "VALIDATION_ERROR",
    "STORAGE_UNAVAILABLE",
    "INTERNAL_ERROR",
    "get_error_message",
    "build_error_response",
]
