"""
Text analysis for journal entries.

Scores an entry's text against the lexicon: one point per keyword
occurrence, found by case-insensitive substring search. A word can feed
several themes ("strong" is courage, "stronghold" is too). No stemming and
no weighting.
"""

from __future__ import annotations

from src.journey.lexicon import DEFAULT_LEXICON, Lexicon


class TextAnalyzer:
    """Keyword scorer over a fixed lexicon.

    Usage:
        analyzer = TextAnalyzer()
        scores = analyzer.analyze("I found wisdom today")
        # {"wisdom": 1, "courage": 0, "fate": 0, "balance": 0, "shadow": 0}
    """

    def __init__(self, lexicon: Lexicon = DEFAULT_LEXICON) -> None:
        self._lexicon = lexicon

    @property
    def lexicon(self) -> Lexicon:
        return self._lexicon

    def analyze(self, content: str) -> dict[str, int]:
        """Score text per theme.

        Args:
            content: Raw entry text, any length including empty

        Returns:
            Mapping with every lexicon theme present, in lexicon order
        """
        text = content.lower() if content else ""
        scores: dict[str, int] = {}
        for theme, keywords in self._lexicon:
            scores[theme] = sum(text.count(keyword) for keyword in keywords) if text else 0
        return scores


def dominant(scores: dict[str, int], order: tuple[str, ...]) -> str | None:
    """Return the highest-scoring theme, or None if nothing scored.

    Ties go to the theme that appears first in ``order``.
    """
    best: str | None = None
    best_score = 0
    for theme in order:
        score = scores.get(theme, 0)
        if score > best_score:
            best, best_score = theme, score
    return best
