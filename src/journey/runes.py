"""
Rune assignment for journal entries.

Each entry is stamped with one Elder Futhark glyph at creation time:
- the glyph of the entry's dominant theme, if any keyword matched
- otherwise the glyph of its emotion tag, if the tag is known
- otherwise the neutral Othala glyph

The glyph tables are static; the same inputs always give the same rune.
"""

from __future__ import annotations

from src.journey.analyzer import TextAnalyzer, dominant
from src.journey.lexicon import NEUTRAL_EMOTION, Theme

NEUTRAL_RUNE = "ᛟ"  # Othala: inheritance, home

THEME_RUNES: dict[str, str] = {
    Theme.WISDOM.value: "ᚨ",   # Ansuz
    Theme.COURAGE.value: "ᛏ",  # Tiwaz
    Theme.FATE.value: "ᛈ",     # Perthro
    Theme.BALANCE.value: "ᛞ",  # Dagaz
    Theme.SHADOW.value: "ᛇ",   # Eihwaz
}

EMOTION_RUNES: dict[str, str] = {
    "joy": "ᚹ",            # Wunjo
    "wonder": "ᚲ",         # Kenaz
    "calm": "ᛚ",           # Laguz
    "strength": "ᚢ",       # Uruz
    "contemplative": "ᛁ",  # Isa
}


class RuneAssigner:
    """Derives an entry's rune from its themes or emotion."""

    def __init__(self, analyzer: TextAnalyzer | None = None) -> None:
        self._analyzer = analyzer or TextAnalyzer()

    def assign(
        self,
        content: str,
        emotion: str = NEUTRAL_EMOTION,
        themes: dict[str, int] | None = None,
    ) -> str:
        """Pick the rune for an entry.

        Args:
            content: Entry text (only analyzed when ``themes`` is not given)
            emotion: Emotion tag chosen by the writer
            themes: Precomputed per-entry theme scores

        Returns:
            A single glyph
        """
        if themes is None:
            themes = self._analyzer.analyze(content)

        theme = dominant(themes, self._analyzer.lexicon.themes)
        if theme is not None and theme in THEME_RUNES:
            return THEME_RUNES[theme]

        tag = (emotion or "").strip().lower()
        if tag and tag != NEUTRAL_EMOTION and tag in EMOTION_RUNES:
            return EMOTION_RUNES[tag]

        return NEUTRAL_RUNE
