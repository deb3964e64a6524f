"""
Lexicon for the journey engine.

Static tables mapping theme names to trigger keywords, plus the emotion
tags offered to writers. Declaration order is canonical: every tie-break
in the engine (dominant theme, rune choice) resolves to the theme declared
first here.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import StrEnum


class Theme(StrEnum):
    """Narrative themes accumulated from entry text, in canonical order."""

    WISDOM = "wisdom"      # Knowledge, learning, enlightenment
    COURAGE = "courage"    # Bravery, action, adventure
    FATE = "fate"          # Destiny, prophecy, time
    BALANCE = "balance"    # Harmony, nature, equilibrium
    SHADOW = "shadow"      # Introspection, mystery, depth


# Returned by dominant-theme lookups when nothing has been written yet
DEFAULT_THEME = Theme.BALANCE

THEME_KEYWORDS: dict[str, tuple[str, ...]] = {
    Theme.WISDOM.value: (
        "learn", "knowledge", "understand", "wisdom", "teach", "discover", "truth",
    ),
    Theme.COURAGE.value: (
        "brave", "courage", "fight", "battle", "strong", "hero", "overcome", "challenge",
    ),
    Theme.FATE.value: (
        "destiny", "fate", "future", "prophecy", "time", "path", "journey", "purpose",
    ),
    Theme.BALANCE.value: (
        "balance", "harmony", "peace", "nature", "calm", "center", "equilibrium",
    ),
    Theme.SHADOW.value: (
        "dark", "shadow", "deep", "mystery", "secret", "hidden", "reflect", "introspect",
    ),
}

NEUTRAL_EMOTION = "neutral"

# Emotion tags offered by the entry form; callers may still pass any tag.
EMOTIONS: tuple[str, ...] = (
    "joy",
    "wonder",
    "calm",
    "strength",
    "contemplative",
    NEUTRAL_EMOTION,
)


@dataclass(frozen=True)
class Lexicon:
    """An ordered theme -> keywords table.

    Keywords are stored lower-cased so that matching only has to
    lower-case the text once.
    """

    table: tuple[tuple[str, tuple[str, ...]], ...]

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, tuple[str, ...] | list[str]]) -> Lexicon:
        """Build a lexicon from a mapping, keeping its iteration order."""
        return cls(
            table=tuple(
                (theme, tuple(keyword.lower() for keyword in keywords if keyword))
                for theme, keywords in mapping.items()
            )
        )

    @property
    def themes(self) -> tuple[str, ...]:
        """Theme names in canonical order."""
        return tuple(theme for theme, _ in self.table)

    def keywords(self, theme: str) -> tuple[str, ...]:
        for name, words in self.table:
            if name == theme:
                return words
        raise KeyError(theme)

    def __iter__(self) -> Iterator[tuple[str, tuple[str, ...]]]:
        return iter(self.table)

    def __len__(self) -> int:
        return len(self.table)


DEFAULT_LEXICON = Lexicon.from_mapping(THEME_KEYWORDS)
