"""
FastAPI dependencies for the journey endpoints.
"""

from __future__ import annotations

from fastapi import Request

from src.journey.facade import ProgressionFacade


def get_facade(request: Request) -> ProgressionFacade:
    """The facade created by create_app() for this application."""
    return request.app.state.facade


def get_lang(request: Request) -> str:
    """Primary language of the Accept-Language header ("en" if absent)."""
    header = request.headers.get("accept-language", "en")
    return header.split(",")[0].split("-")[0].strip().lower() or "en"
