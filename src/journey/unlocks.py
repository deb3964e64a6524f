"""
Unlock rules for legends and milestones.

Legends are narrative rewards gated on entry count or cumulative theme
scores. Milestones mark days of the 365-day journey calendar, where the
journey day is the number of entries written (capped at 365). The same
calendar gives the journey's season.

Rules are data; evaluating them has no side effects. The facade applies
due rules through the store.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from src.journey.lexicon import Theme
from src.journey.models import JourneyState

JOURNEY_LENGTH_DAYS = 365


class Season(StrEnum):
    """Quarter of the journey calendar."""

    SPRING = "spring"
    SUMMER = "summer"
    AUTUMN = "autumn"
    WINTER = "winter"


# (first day of the next season, season); days below the bound belong to the season
_SEASON_BOUNDS: tuple[tuple[int, Season], ...] = (
    (91, Season.SPRING),
    (182, Season.SUMMER),
    (273, Season.AUTUMN),
)


@dataclass(frozen=True)
class LegendRule:
    """A legend and the threshold that unlocks it."""

    id: str
    title: str
    requirement: str
    min_entries: int = 0
    theme: str | None = None
    min_theme_score: int = 0

    def is_met(self, state: JourneyState) -> bool:
        if state.total_entries < self.min_entries:
            return False
        if self.theme is not None and state.themes.get(self.theme, 0) < self.min_theme_score:
            return False
        return True


@dataclass(frozen=True)
class MilestoneRule:
    """A milestone reached on a given journey day."""

    id: str
    name: str
    day: int
    description: str = ""

    def is_met(self, state: JourneyState) -> bool:
        return journey_day(state.total_entries) >= self.day

    def as_milestone(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "description": self.description}


LEGEND_RULES: tuple[LegendRule, ...] = (
    LegendRule(
        id="beginning",
        title="The Beginning",
        requirement="Write your first journal entry",
        min_entries=1,
    ),
    LegendRule(
        id="first-encounter",
        title="First Encounter",
        requirement="Write 3 journal entries",
        min_entries=3,
    ),
    LegendRule(
        id="awakening",
        title="The Awakening",
        requirement="Write 5 journal entries",
        min_entries=5,
    ),
    LegendRule(
        id="wisdom-path",
        title="Path of the Sage",
        requirement="Reach 10 wisdom",
        theme=Theme.WISDOM.value,
        min_theme_score=10,
    ),
    LegendRule(
        id="courage-path",
        title="Path of the Warrior",
        requirement="Reach 10 courage",
        theme=Theme.COURAGE.value,
        min_theme_score=10,
    ),
)

MILESTONE_RULES: tuple[MilestoneRule, ...] = (
    MilestoneRule("first-dawn", "First Dawn", 1, "The first memory is inscribed."),
    MilestoneRule("first-week", "First Week", 7, "Seven days of writing."),
    MilestoneRule("first-moon", "First Moon", 30, "A full moon of memories."),
    MilestoneRule("century-mark", "Century Mark", 100, "One hundred days on the path."),
    MilestoneRule("midpoint-journey", "Midpoint Journey", 180, "Halfway around the year."),
    MilestoneRule("autumn-gate", "Autumn Gate", 270, "The leaves begin to turn."),
    MilestoneRule("full-circle", "Full Circle", 365, "A whole year of the World Tree."),
)


def journey_day(total_entries: int) -> int:
    """Day of the journey calendar reached after ``total_entries`` entries."""
    return max(0, min(total_entries, JOURNEY_LENGTH_DAYS))


def season(day: int) -> Season:
    """Season of a journey day: spring < 91 <= summer < 182 <= autumn < 273 <= winter."""
    for bound, name in _SEASON_BOUNDS:
        if day < bound:
            return name
    return Season.WINTER


def due_legends(state: JourneyState) -> list[LegendRule]:
    """Legends whose thresholds are met but which are not unlocked yet."""
    return [
        rule for rule in LEGEND_RULES
        if rule.id not in state.unlocked_legends and rule.is_met(state)
    ]


def due_milestones(state: JourneyState) -> list[MilestoneRule]:
    """Milestones that are reached but not yet recorded."""
    return [
        rule for rule in MILESTONE_RULES
        if not state.has_milestone(rule.id) and rule.is_met(state)
    ]


@dataclass
class UnlockResult:
    """Legends and milestones newly unlocked by one evaluation."""

    legends: list[str] = field(default_factory=list)
    milestones: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.legends or self.milestones)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {"legends": list(self.legends), "milestones": list(self.milestones)}
