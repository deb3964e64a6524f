"""
Progression facade.

The single object that UI consumers and the REST API talk to. Writes are
delegated to the JourneyStore; reads are computed from the current state
on every call, so they never go stale.

The facade is created once and passed by reference (see create_app);
there is no module-level instance.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

import structlog

from src.journey import growth, unlocks
from src.journey.analytics import JournalMetrics, compute_metrics
from src.journey.analyzer import dominant
from src.journey.lexicon import DEFAULT_THEME
from src.journey.models import JournalEntry, JourneyState, Realm
from src.journey.store import JourneyStore

logger = structlog.get_logger(__name__)

DEFAULT_RECENT_LIMIT = 7


class ProgressionFacade:
    """Read/write surface over one journey.

    Usage:
        facade = ProgressionFacade(JourneyStore.open(InMemoryStorage()))
        facade.add_entry("A brave day", emotion="strength")
        facade.sync_unlocks()
        facade.tree_stage()  # TreeStage.SEEDLING
    """

    def __init__(self, store: JourneyStore) -> None:
        self._store = store

    @property
    def store(self) -> JourneyStore:
        return self._store

    @property
    def state(self) -> JourneyState:
        return self._store.state

    @property
    def durable(self) -> bool:
        """False while recent changes exist only in memory."""
        return self._store.durable

    @property
    def recovered_from_corruption(self) -> bool:
        return self._store.recovered_from_corruption

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def add_entry(
        self,
        content: str,
        title: str | None = None,
        emotion: str | None = None,
        rune: str | None = None,
    ) -> JournalEntry:
        return self._store.add_entry(content, title=title, emotion=emotion, rune=rune)

    def change_realm(self, realm: Realm | str) -> None:
        self._store.change_realm(realm)

    def bond_spirit(self, spirit: Mapping[str, Any]) -> bool:
        return self._store.bond_spirit(spirit)

    def unlock_legend(self, legend_id: str) -> bool:
        return self._store.unlock_legend(legend_id)

    def achieve_milestone(self, milestone: Mapping[str, Any] | str) -> bool:
        return self._store.achieve_milestone(milestone)

    def sync_unlocks(self) -> unlocks.UnlockResult:
        """Apply every legend and milestone whose rule is met.

        Returns:
            UnlockResult with the ids unlocked by this call (empty if none)
        """
        result = unlocks.UnlockResult()
        state = self._store.state
        for legend in unlocks.due_legends(state):
            if self._store.unlock_legend(legend.id):
                result.legends.append(legend.id)
        for milestone in unlocks.due_milestones(state):
            if self._store.achieve_milestone(milestone.as_milestone()):
                result.milestones.append(milestone.id)
        if result:
            logger.info("journey_unlocks_synced", **result.to_dict())
        return result

    # ------------------------------------------------------------------
    # Computed reads
    # ------------------------------------------------------------------

    def dominant_theme(self) -> str:
        """Theme with the highest cumulative score; balance before any writing."""
        order = self._store.analyzer.lexicon.themes
        return dominant(self.state.themes, order) or DEFAULT_THEME.value

    def journey_age(self, now: datetime | None = None) -> int:
        """Whole days since the journey began."""
        now = now or self._store.now()
        return max(0, (now - self.state.created_at).days)

    def tree_stage(self) -> growth.TreeStage:
        return growth.tree_stage(self.state.tree_growth)

    def journey_day(self) -> int:
        return unlocks.journey_day(self.state.total_entries)

    def season(self) -> unlocks.Season:
        return unlocks.season(self.journey_day())

    def recent_entries(self, limit: int = DEFAULT_RECENT_LIMIT) -> list[JournalEntry]:
        """The newest ``limit`` entries, oldest first."""
        if limit <= 0:
            return []
        return list(self.state.entries[-limit:])

    def metrics(self, now: datetime | None = None) -> JournalMetrics:
        return compute_metrics(self.state.entries, now or self._store.now())

    def snapshot(self) -> dict[str, Any]:
        """The persisted document plus every computed value."""
        document = self._store.document()
        document.update(
            {
                "dominantTheme": self.dominant_theme(),
                "journeyAge": self.journey_age(),
                "treeStage": self.tree_stage().value,
                "journeyDay": self.journey_day(),
                "season": self.season().value,
                "durable": self.durable,
                "recoveredFromCorruption": self.recovered_from_corruption,
            }
        )
        return document
