"""
Tests for the centralized error response builder (src/lib/errors.py).
"""

from __future__ import annotations

import pytest

from src.lib.errors import (
    INTERNAL_ERROR,
    INVALID_ENTRY,
    STORAGE_UNAVAILABLE,
    VALIDATION_ERROR,
    build_error_response,
    get_error_message,
)

ALL_CODES = [INVALID_ENTRY, VALIDATION_ERROR, STORAGE_UNAVAILABLE, INTERNAL_ERROR]


class TestGetErrorMessage:
    """Tests for get_error_message()."""

    @pytest.mark.parametrize("code", ALL_CODES)
    @pytest.mark.parametrize("lang", ["en", "de"])
    def test_every_code_translated(self, code: str, lang: str) -> None:
        assert get_error_message(code, lang)

    def test_german(self) -> None:
        assert get_error_message(INVALID_ENTRY, "de").startswith("Eine Erinnerung")

    def test_unknown_language_falls_back_to_english(self) -> None:
        assert get_error_message(STORAGE_UNAVAILABLE, "fr") == get_error_message(STORAGE_UNAVAILABLE, "en")

    def test_unknown_code(self) -> None:
        assert get_error_message("NO_SUCH_CODE") == "An error occurred."


class TestBuildErrorResponse:
    """Tests for build_error_response()."""

    def test_default_message(self) -> None:
        error = build_error_response(INVALID_ENTRY)
        assert error == {"code": INVALID_ENTRY, "message": get_error_message(INVALID_ENTRY)}

    def test_override_message(self) -> None:
        assert build_error_response(VALIDATION_ERROR, "bad realm")["message"] == "bad realm"

    def test_details(self) -> None:
        error = build_error_response(VALIDATION_ERROR, details={"fields": ["body.content"]})
        assert error["details"] == {"fields": ["body.content"]}

    def test_no_details_key_when_absent(self) -> None:
        assert "details" not in build_error_response(INTERNAL_ERROR)
