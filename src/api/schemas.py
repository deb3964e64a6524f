"""
Pydantic Schemas for the Mythic Journey REST API.

Defines request bodies for the journey endpoints and the response
envelope shared by every endpoint:

    {"success": bool, "data": Any, "error": {...} | None, "meta": {"timestamp": str}}
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.lib.errors import build_error_response

MAX_CONTENT_LENGTH = 20000

# =============================================================================
# Response Envelope
# =============================================================================


def _meta() -> dict[str, Any]:
    return {"timestamp": datetime.now(UTC).isoformat()}


def success_response(data: Any, warnings: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    """Wrap a payload in a success envelope.

    Warnings (error dicts for problems that did not fail the request) are
    listed under meta.warnings.
    """
    meta = _meta()
    if warnings:
        meta["warnings"] = warnings
    return {"success": True, "data": data, "error": None, "meta": meta}


def error_response(
    code: str,
    message: str | None = None,
    details: dict[str, Any] | None = None,
    lang: str = "en",
) -> dict[str, Any]:
    """Wrap an error in a failure envelope (message defaults to the i18n text)."""
    return {
        "success": False,
        "data": None,
        "error": build_error_response(code, message, details, lang),
        "meta": _meta(),
    }


# =============================================================================
# Journey Request Models
# =============================================================================


class AddEntryRequest(BaseModel):
    """Input for inscribing a journal entry.

    Blank content is accepted here and rejected by the engine, so the
    client gets the INVALID_ENTRY error instead of a schema error.
    """

    content: str = Field(..., max_length=MAX_CONTENT_LENGTH)
    title: str | None = Field(default=None, max_length=200)
    emotion: str | None = Field(default=None, max_length=50)
    rune: str | None = Field(default=None, max_length=8)


class ChangeRealmRequest(BaseModel):
    realm: str = Field(..., min_length=1, max_length=50)


class BondSpiritRequest(BaseModel):
    """A spirit to bond. Unknown keys are kept as spirit attributes."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(..., min_length=1, max_length=100)
    name: str = Field(default="", max_length=200)
    kind: str = Field(default="", alias="type", max_length=100)
    attributes: dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    def to_mapping(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class UnlockLegendRequest(BaseModel):
    id: str = Field(..., min_length=1, max_length=100)


class AchieveMilestoneRequest(BaseModel):
    id: str = Field(default="", max_length=100)
    name: str = Field(default="", max_length=200)
    description: str = Field(default="", max_length=2000)


__all__ = [
    "success_response",
    "error_response",
    "AddEntryRequest",
    "ChangeRealmRequest",
    "BondSpiritRequest",
    "UnlockLegendRequest",
    "AchieveMilestoneRequest",
]
