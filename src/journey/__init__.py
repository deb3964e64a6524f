"""
Journey engine for Mythic Journey.

Turns journal entries into mythic progression:
- Lexicon + TextAnalyzer: keyword theme scoring
- RuneAssigner: one glyph per entry from its dominant theme or emotion
- Growth: tree growth, glow and particles as pure functions of entry count
- JourneyStore: the single writer of the persisted journey document
- Unlocks: legend and milestone rules on the 365-day journey calendar
- Analytics: writing statistics (streaks, word counts, active hours)
- ProgressionFacade: the read/write surface handed to consumers
"""

from __future__ import annotations

from .analytics import JournalMetrics, compute_metrics
from .analyzer import TextAnalyzer, dominant
from .facade import ProgressionFacade
from .growth import GrowthSnapshot, TreeStage, glow_intensity, particle_density, tree_growth, tree_stage
from .lexicon import DEFAULT_LEXICON, DEFAULT_THEME, EMOTIONS, Lexicon, Theme
from .models import BondedSpirit, JournalEntry, JourneyState, Milestone, Realm
from .runes import RuneAssigner
from .storage import InMemoryStorage, JsonFileStorage, StorageAdapter
from .store import JourneyStore
from .unlocks import LEGEND_RULES, MILESTONE_RULES, Season, UnlockResult

__all__ = [
    # Lexicon / analysis
    "Lexicon",
    "Theme",
    "DEFAULT_LEXICON",
    "DEFAULT_THEME",
    "EMOTIONS",
    "TextAnalyzer",
    "dominant",
    "RuneAssigner",
    # Growth
    "GrowthSnapshot",
    "TreeStage",
    "tree_growth",
    "glow_intensity",
    "particle_density",
    "tree_stage",
    # Model
    "JournalEntry",
    "BondedSpirit",
    "Milestone",
    "JourneyState",
    "Realm",
    # Persistence
    "StorageAdapter",
    "InMemoryStorage",
    "JsonFileStorage",
    "JourneyStore",
    # Progression
    "LEGEND_RULES",
    "MILESTONE_RULES",
    "Season",
    "UnlockResult",
    "JournalMetrics",
    "compute_metrics",
    "ProgressionFacade",
]
