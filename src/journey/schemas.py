"""
Pydantic schema of the persisted journey document.

The stored document is untrusted input: it may have been written by an
older version, edited by hand, or truncated. parse_document() validates it
and converts it into a JourneyState, raising CorruptPersistedState when the
document cannot be used.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeFloat,
    NonNegativeInt,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from src.journey.lexicon import NEUTRAL_EMOTION
from src.journey.models import (
    DEFAULT_TITLE,
    HOME_REALM,
    BondedSpirit,
    JournalEntry,
    JourneyState,
    Milestone,
    Realm,
    empty_themes,
    initial_affinities,
)
from src.lib.exceptions import CorruptPersistedState


def _utc(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _first_by_id(items: list[Any]) -> list[Any]:
    """Drop repeated ids, keeping the first record of each."""
    kept: dict[str, Any] = {}
    for item in items:
        kept.setdefault(item.id, item)
    return list(kept.values())


class _DocumentModel(BaseModel):
    """Base for document models: camelCase on the wire, snake_case in code."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class EntryDocument(_DocumentModel):
    id: str = Field(..., min_length=1)
    timestamp: datetime
    realm: Realm = HOME_REALM
    title: str = DEFAULT_TITLE
    content: str
    emotion: str = NEUTRAL_EMOTION
    rune: str = ""
    themes: dict[str, NonNegativeInt] = Field(default_factory=dict)

    def to_entry(self) -> JournalEntry:
        return JournalEntry(
            id=self.id,
            timestamp=_utc(self.timestamp),
            realm=self.realm,
            title=self.title,
            content=self.content,
            emotion=self.emotion,
            rune=self.rune,
            themes=self.themes,
        )


class SpiritDocument(_DocumentModel):
    id: str
    name: str = ""
    kind: str = Field(default="", alias="type")
    attributes: dict[str, Any] = Field(default_factory=dict)
    bonded_at: datetime
    bond_strength: NonNegativeInt = 1

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, value: Any) -> Any:
        # Older documents stored numeric spirit ids
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    def to_spirit(self) -> BondedSpirit:
        return BondedSpirit(
            id=self.id,
            name=self.name,
            kind=self.kind,
            attributes=self.attributes,
            bonded_at=_utc(self.bonded_at),
            bond_strength=self.bond_strength,
        )


class MilestoneDocument(_DocumentModel):
    id: str
    name: str = ""
    description: str = ""
    achieved_at: datetime

    def to_milestone(self) -> Milestone:
        return Milestone(
            id=self.id,
            name=self.name,
            description=self.description,
            achieved_at=_utc(self.achieved_at),
        )


class JourneyDocument(_DocumentModel):
    """The whole persisted journey. journeyId, createdAt and entries are required."""

    journey_id: str = Field(..., min_length=1)
    created_at: datetime
    entries: list[EntryDocument]
    total_entries: NonNegativeInt = 0
    themes: dict[str, NonNegativeInt] = Field(default_factory=empty_themes)
    tree_growth: NonNegativeFloat = 0.0
    glow_intensity: NonNegativeFloat = 0.0
    particle_density: NonNegativeFloat = 0.0
    bonded_spirits: list[SpiritDocument] = Field(default_factory=list)
    spirit_energy: NonNegativeInt = 0
    active_realm: Realm = HOME_REALM
    unlocked_realms: list[Realm] = Field(default_factory=lambda: [HOME_REALM])
    realm_affinities: dict[Realm, NonNegativeInt] = Field(default_factory=dict)
    unlocked_legends: list[str] = Field(default_factory=list)
    achieved_milestones: list[MilestoneDocument] = Field(default_factory=list)
    last_entry_date: datetime | None = None

    def to_state(self) -> JourneyState:
        """Convert to a JourneyState.

        Missing theme and realm keys are filled with zeros; the active realm
        is added to the unlocked realms if a hand-edited document lost it.
        Realms, legends, spirits and milestones keep the first record per id.
        Counters are taken as stored; JourneyStore checks them against the
        entries afterwards.
        """
        themes = empty_themes()
        themes.update(self.themes)

        affinities = {realm.value: 0 for realm in Realm} if self.realm_affinities else initial_affinities()
        affinities.update({realm.value: value for realm, value in self.realm_affinities.items()})

        unlocked: list[Realm] = []
        for realm in self.unlocked_realms:
            if realm not in unlocked:
                unlocked.append(realm)
        if self.active_realm not in unlocked:
            unlocked.append(self.active_realm)

        return JourneyState(
            journey_id=self.journey_id,
            created_at=_utc(self.created_at),
            entries=[entry.to_entry() for entry in self.entries],
            total_entries=self.total_entries,
            themes=themes,
            tree_growth=self.tree_growth,
            glow_intensity=self.glow_intensity,
            particle_density=self.particle_density,
            bonded_spirits=[spirit.to_spirit() for spirit in _first_by_id(self.bonded_spirits)],
            spirit_energy=self.spirit_energy,
            active_realm=self.active_realm,
            unlocked_realms=unlocked,
            realm_affinities=affinities,
            unlocked_legends=list(dict.fromkeys(self.unlocked_legends)),
            achieved_milestones=[m.to_milestone() for m in _first_by_id(self.achieved_milestones)],
            last_entry_date=_utc(self.last_entry_date) if self.last_entry_date else None,
        )


def parse_document(raw: Any) -> JourneyState:
    """Validate a loaded document and build the journey state from it.

    Args:
        raw: Decoded JSON value from storage

    Returns:
        The restored JourneyState

    Raises:
        CorruptPersistedState: If the value is not a valid journey document
    """
    if not isinstance(raw, dict):
        raise CorruptPersistedState(
            f"journey document must be a JSON object, got {type(raw).__name__}"
        )
    try:
        document = JourneyDocument.model_validate(raw)
    except PydanticValidationError as exc:
        raise CorruptPersistedState(
            f"journey document failed validation ({exc.error_count()} errors)"
        ) from exc
    return document.to_state()
