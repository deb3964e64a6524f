"""
Data model for the journey engine.

- JournalEntry: one inscribed memory, frozen once created
- BondedSpirit: a companion bonded to the journey
- Milestone: an achieved journey milestone
- JourneyState: the single persisted progression document

Domain objects use snake_case attributes; to_dict() produces the camelCase
document shape that is persisted and handed to UI consumers.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from src.journey import growth
from src.journey.lexicon import NEUTRAL_EMOTION, Theme

DEFAULT_TITLE = "Untitled Memory"


class Realm(StrEnum):
    """Narrative realms a writer can be active in."""

    SKY = "sky"
    MIDGARD = "midgard"
    UNDERWORLD = "underworld"


HOME_REALM = Realm.MIDGARD
HOME_REALM_AFFINITY = 10


def empty_themes() -> dict[str, int]:
    """Zeroed cumulative theme counters in canonical order."""
    return {theme.value: 0 for theme in Theme}


def initial_affinities() -> dict[str, int]:
    """Affinities of a new journey: the home realm starts ahead."""
    affinities = {realm.value: 0 for realm in Realm}
    affinities[HOME_REALM.value] = HOME_REALM_AFFINITY
    return affinities


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class JournalEntry:
    """An inscribed memory.

    ``themes`` holds this entry's contribution only, not the cumulative
    totals, and is exposed read-only.
    """

    id: str
    timestamp: datetime
    realm: Realm
    content: str
    title: str = DEFAULT_TITLE
    emotion: str = NEUTRAL_EMOTION
    rune: str = ""
    themes: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "themes", MappingProxyType(dict(self.themes)))

    @property
    def word_count(self) -> int:
        return len(self.content.split())

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted document shape."""
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "realm": self.realm.value,
            "title": self.title,
            "content": self.content,
            "emotion": self.emotion,
            "rune": self.rune,
            "themes": dict(self.themes),
        }


@dataclass
class BondedSpirit:
    """A spirit companion bonded to the journey."""

    id: str
    bonded_at: datetime
    name: str = ""
    kind: str = ""
    attributes: dict[str, Any] = field(default_factory=dict)
    bond_strength: int = 1

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted document shape."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.kind,
            "attributes": dict(self.attributes),
            "bondedAt": self.bonded_at.isoformat(),
            "bondStrength": self.bond_strength,
        }


@dataclass
class Milestone:
    """An achieved milestone on the journey."""

    id: str
    achieved_at: datetime
    name: str = ""
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted document shape."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "achievedAt": self.achieved_at.isoformat(),
        }


@dataclass
class JourneyState:
    """The persisted progression document.

    Only JourneyStore mutates instances of this class. ``tree_growth``,
    ``glow_intensity`` and ``particle_density`` are caches of
    growth.snapshot(total_entries) and are refreshed by the store.
    """

    journey_id: str
    created_at: datetime
    entries: list[JournalEntry] = field(default_factory=list)
    total_entries: int = 0
    themes: dict[str, int] = field(default_factory=empty_themes)
    tree_growth: float = 0.0
    glow_intensity: float = growth.GLOW_BASE
    particle_density: float = growth.PARTICLE_BASE
    bonded_spirits: list[BondedSpirit] = field(default_factory=list)
    spirit_energy: int = 0
    active_realm: Realm = HOME_REALM
    unlocked_realms: list[Realm] = field(default_factory=lambda: [HOME_REALM])
    realm_affinities: dict[str, int] = field(default_factory=initial_affinities)
    unlocked_legends: list[str] = field(default_factory=list)
    achieved_milestones: list[Milestone] = field(default_factory=list)
    last_entry_date: datetime | None = None

    @classmethod
    def new(cls, journey_id: str, created_at: datetime | None = None) -> JourneyState:
        """Create the state of a journey that has just begun."""
        return cls(journey_id=journey_id, created_at=created_at or datetime.now(UTC))

    def is_bonded(self, spirit_id: str) -> bool:
        return any(spirit.id == spirit_id for spirit in self.bonded_spirits)

    def has_milestone(self, milestone_id: str) -> bool:
        return any(milestone.id == milestone_id for milestone in self.achieved_milestones)

    def apply_growth(self, snap: growth.GrowthSnapshot) -> None:
        self.tree_growth = snap.tree_growth
        self.glow_intensity = snap.glow_intensity
        self.particle_density = snap.particle_density

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted camelCase document."""
        return {
            "journeyId": self.journey_id,
            "createdAt": self.created_at.isoformat(),
            "entries": [entry.to_dict() for entry in self.entries],
            "totalEntries": self.total_entries,
            "themes": dict(self.themes),
            "treeGrowth": self.tree_growth,
            "glowIntensity": self.glow_intensity,
            "particleDensity": self.particle_density,
            "bondedSpirits": [spirit.to_dict() for spirit in self.bonded_spirits],
            "spiritEnergy": self.spirit_energy,
            "activeRealm": self.active_realm.value,
            "unlockedRealms": [realm.value for realm in self.unlocked_realms],
            "realmAffinities": dict(self.realm_affinities),
            "unlockedLegends": list(self.unlocked_legends),
            "achievedMilestones": [m.to_dict() for m in self.achieved_milestones],
            "lastEntryDate": _iso(self.last_entry_date),
        }
