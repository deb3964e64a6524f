"""
REST API Routes for Mythic Journey.

All responses use the response envelope (see src/api/schemas.py).
Engine errors (InvalidEntry, ValueError) are turned into 422 envelopes by
the handlers registered in create_app().

Endpoints (all under /api/v1 prefix):
- /health - Health check
- /journey - Full journey snapshot
- /journey/entries - List and inscribe entries
- /journey/realm - Change the active realm
- /journey/spirits - Bond a spirit
- /journey/legends - Unlock a legend
- /journey/milestones - Record a milestone
- /journey/metrics - Writing statistics
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter as FastAPIRouter
from fastapi import Depends, Query

from src.api.dependencies import get_facade, get_lang
from src.api.schemas import (
    AchieveMilestoneRequest,
    AddEntryRequest,
    BondSpiritRequest,
    ChangeRealmRequest,
    UnlockLegendRequest,
    success_response,
)
from src.journey.facade import ProgressionFacade
from src.lib.errors import STORAGE_UNAVAILABLE, build_error_response


router = FastAPIRouter(prefix="/api/v1")


def _journey_response(
    facade: ProgressionFacade, data: dict[str, Any], lang: str = "en"
) -> dict[str, Any]:
    """Envelope for journey payloads, flagged when the last write was not saved."""
    data["durable"] = facade.durable
    warnings = None
    if not facade.durable:
        warnings = [build_error_response(STORAGE_UNAVAILABLE, lang=lang)]
    return success_response(data, warnings=warnings)


# =============================================================================
# Health
# =============================================================================


@router.get("/health")
async def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return success_response({"status": "ok"})


# =============================================================================
# Journey Endpoints
# =============================================================================


@router.get("/journey")
async def get_journey(
    facade: ProgressionFacade = Depends(get_facade),
    lang: str = Depends(get_lang),
) -> dict[str, Any]:
    """
    Full journey snapshot.

    Returns:
        Envelope with the persisted document plus computed values
        (dominantTheme, treeStage, season, journeyDay ...)
    """
    return _journey_response(facade, facade.snapshot(), lang)


@router.get("/journey/entries")
async def list_entries(
    limit: int | None = Query(default=None, ge=1, le=1000),
    facade: ProgressionFacade = Depends(get_facade),
) -> dict[str, Any]:
    """
    List entries, oldest first.

    Args:
        limit: Only return the newest ``limit`` entries

    Returns:
        Envelope with entries and the total entry count
    """
    entries = facade.recent_entries(limit) if limit is not None else facade.state.entries
    return success_response({
        "entries": [entry.to_dict() for entry in entries],
        "total": facade.state.total_entries,
    })


@router.post("/journey/entries", status_code=201)
async def add_entry(
    data: AddEntryRequest,
    facade: ProgressionFacade = Depends(get_facade),
    lang: str = Depends(get_lang),
) -> dict[str, Any]:
    """
    Inscribe a journal entry, then unlock any legends and milestones it earned.

    Returns:
        Envelope with the new entry, new unlocks and the updated growth values
    """
    entry = facade.add_entry(
        data.content, title=data.title, emotion=data.emotion, rune=data.rune
    )
    unlocked = facade.sync_unlocks()
    state = facade.state
    return _journey_response(facade, {
        "entry": entry.to_dict(),
        "unlocked": unlocked.to_dict(),
        "totalEntries": state.total_entries,
        "treeGrowth": state.tree_growth,
        "treeStage": facade.tree_stage().value,
        "spiritEnergy": state.spirit_energy,
    }, lang)


@router.post("/journey/realm")
async def change_realm(
    data: ChangeRealmRequest,
    facade: ProgressionFacade = Depends(get_facade),
    lang: str = Depends(get_lang),
) -> dict[str, Any]:
    """Make a realm active (unlocking it on the first visit)."""
    facade.change_realm(data.realm)
    state = facade.state
    return _journey_response(facade, {
        "activeRealm": state.active_realm.value,
        "unlockedRealms": [realm.value for realm in state.unlocked_realms],
    }, lang)


@router.post("/journey/spirits")
async def bond_spirit(
    data: BondSpiritRequest,
    facade: ProgressionFacade = Depends(get_facade),
    lang: str = Depends(get_lang),
) -> dict[str, Any]:
    """Bond a spirit; bonding the same id again is a no-op."""
    bonded = facade.bond_spirit(data.to_mapping())
    return _journey_response(facade, {
        "bonded": bonded,
        "spiritId": data.id,
        "spiritEnergy": facade.state.spirit_energy,
    }, lang)


@router.post("/journey/legends")
async def unlock_legend(
    data: UnlockLegendRequest,
    facade: ProgressionFacade = Depends(get_facade),
    lang: str = Depends(get_lang),
) -> dict[str, Any]:
    """Unlock a legend by id."""
    unlocked = facade.unlock_legend(data.id)
    return _journey_response(facade, {
        "unlocked": unlocked,
        "unlockedLegends": list(facade.state.unlocked_legends),
    }, lang)


@router.post("/journey/milestones")
async def achieve_milestone(
    data: AchieveMilestoneRequest,
    facade: ProgressionFacade = Depends(get_facade),
    lang: str = Depends(get_lang),
) -> dict[str, Any]:
    """Record a milestone by id (or by name when no id is given)."""
    achieved = facade.achieve_milestone(data.model_dump())
    return _journey_response(facade, {
        "achieved": achieved,
        "achievedMilestones": [m.to_dict() for m in facade.state.achieved_milestones],
    }, lang)


@router.get("/journey/metrics")
async def get_metrics(facade: ProgressionFacade = Depends(get_facade)) -> dict[str, Any]:
    """Writing statistics for the journey."""
    return success_response(facade.metrics().to_dict())


# =============================================================================
# Route Discovery
# =============================================================================


def get_routes() -> dict[str, dict[str, Any]]:
    """
    Get all registered routes keyed by "METHOD /path".

    Paths are relative to the /api/v1 prefix.
    """
    routes: dict[str, dict[str, Any]] = {}
    prefix = router.prefix
    for route in router.routes:
        if hasattr(route, "methods") and hasattr(route, "endpoint"):
            full_path = getattr(route, "path", "")
            path = full_path[len(prefix):] if full_path.startswith(prefix) else full_path
            for method in route.methods:
                routes[f"{method} {path}"] = {"handler": route.endpoint, "method": method}
    return routes


router.get_routes = get_routes  # type: ignore[attr-defined]


__all__ = ["router", "get_routes"]
