"""
Journal analytics.

Read-only statistics over the entry list, used by dashboards:
word and character counts, writing streaks, recent activity,
most active weekday and hour, mood distribution and frequent words.

All "pick the max" choices use explicit tie-breaks (earlier weekday,
lower hour, first-seen word) so results never depend on dict order.
Days and hours are taken from the entry timestamps as stored (UTC).
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from typing import Any

from src.journey.lexicon import NEUTRAL_EMOTION
from src.journey.models import JournalEntry

WEEKDAYS: tuple[str, ...] = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)

READING_WORDS_PER_MINUTE = 200
WRITING_MINUTES_PER_100_WORDS = 3
TOP_WORDS_LIMIT = 10
MIN_WORD_LENGTH = 4

STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "up", "about", "into", "through", "i",
    "my", "me", "is", "was", "are", "been", "be", "have", "has", "had",
    "do", "does", "did", "will", "would", "could", "should", "it", "this",
    "that", "these", "those", "as", "if", "when", "where", "why", "how",
})

_WORD_RE = re.compile(r"\b\w+\b")


@dataclass
class JournalMetrics:
    """Aggregate writing statistics for a journey."""

    total_entries: int = 0
    total_words: int = 0
    total_characters: int = 0
    average_words_per_entry: int = 0
    average_reading_minutes: int = 0
    longest_entry_id: str | None = None
    shortest_entry_id: str | None = None
    longest_streak: int = 0
    current_streak: int = 0
    entries_this_week: int = 0
    entries_this_month: int = 0
    most_active_day: str | None = None
    most_active_hour: int | None = None
    mood_distribution: dict[str, int] = field(default_factory=dict)
    top_words: dict[str, int] = field(default_factory=dict)
    estimated_total_minutes: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase API shape."""
        return {
            "totalEntries": self.total_entries,
            "totalWords": self.total_words,
            "totalCharacters": self.total_characters,
            "averageWordsPerEntry": self.average_words_per_entry,
            "averageReadingMinutes": self.average_reading_minutes,
            "longestEntryId": self.longest_entry_id,
            "shortestEntryId": self.shortest_entry_id,
            "longestStreak": self.longest_streak,
            "currentStreak": self.current_streak,
            "entriesThisWeek": self.entries_this_week,
            "entriesThisMonth": self.entries_this_month,
            "mostActiveDay": self.most_active_day,
            "mostActiveHour": self.most_active_hour,
            "moodDistribution": dict(self.mood_distribution),
            "topWords": dict(self.top_words),
            "estimatedTotalMinutes": self.estimated_total_minutes,
        }


def compute_metrics(
    entries: Sequence[JournalEntry],
    now: datetime | None = None,
) -> JournalMetrics:
    """Compute writing statistics.

    Args:
        entries: Entries in chronological order
        now: Reference time for streaks and recent counts (default: now, UTC)

    Returns:
        JournalMetrics; all zero/None for an empty journal
    """
    if not entries:
        return JournalMetrics()
    now = now or datetime.now(UTC)

    word_counts = [entry.word_count for entry in entries]
    total_words = sum(word_counts)
    average_words = round(total_words / len(entries))

    # First entry wins ties in both directions
    longest = max(range(len(entries)), key=lambda i: word_counts[i])
    shortest = min(range(len(entries)), key=lambda i: word_counts[i])

    longest_streak, current_streak = _streaks(
        [entry.timestamp.date() for entry in entries], now.date()
    )

    week_ago = now - timedelta(days=7)
    month_ago = now - timedelta(days=30)

    return JournalMetrics(
        total_entries=len(entries),
        total_words=total_words,
        total_characters=sum(len(entry.content) for entry in entries),
        average_words_per_entry=average_words,
        average_reading_minutes=round(average_words / READING_WORDS_PER_MINUTE),
        longest_entry_id=entries[longest].id,
        shortest_entry_id=entries[shortest].id,
        longest_streak=longest_streak,
        current_streak=current_streak,
        entries_this_week=sum(1 for entry in entries if entry.timestamp >= week_ago),
        entries_this_month=sum(1 for entry in entries if entry.timestamp >= month_ago),
        most_active_day=_most_active_day(entries),
        most_active_hour=_most_active_hour(entries),
        mood_distribution=dict(
            Counter(entry.emotion or NEUTRAL_EMOTION for entry in entries)
        ),
        top_words=_top_words(entries),
        estimated_total_minutes=round(total_words / 100 * WRITING_MINUTES_PER_100_WORDS),
    )


def _streaks(days: list[date], today: date) -> tuple[int, int]:
    """Longest run of consecutive writing days, and the run still alive today.

    The current streak only counts if the last writing day is today or
    yesterday.
    """
    unique_days = sorted(set(days))
    longest = run = 1
    for previous, current in zip(unique_days, unique_days[1:]):
        run = run + 1 if (current - previous).days == 1 else 1
        longest = max(longest, run)

    last_day = unique_days[-1]
    alive = (today - last_day).days in (0, 1)
    return longest, run if alive else 0


def _most_active_day(entries: Sequence[JournalEntry]) -> str:
    counts = Counter(entry.timestamp.weekday() for entry in entries)
    best = max(sorted(counts), key=lambda day: counts[day])
    return WEEKDAYS[best]


def _most_active_hour(entries: Sequence[JournalEntry]) -> int:
    counts = Counter(entry.timestamp.hour for entry in entries)
    return max(sorted(counts), key=lambda hour: counts[hour])


def _top_words(entries: Sequence[JournalEntry]) -> dict[str, int]:
    counts: Counter[str] = Counter()
    for entry in entries:
        for word in _WORD_RE.findall(entry.content.lower()):
            if len(word) >= MIN_WORD_LENGTH and word not in STOP_WORDS:
                counts[word] += 1
    # most_common keeps first-seen order among equal counts
    return dict(counts.most_common(TOP_WORDS_LIMIT))
