"""
Tests for journal analytics (src/journey/analytics.py).
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from src.journey.analytics import JournalMetrics, compute_metrics
from src.journey.models import JournalEntry, Realm


def _entry(entry_id: str, when: datetime, content: str, emotion: str = "neutral") -> JournalEntry:
    return JournalEntry(
        id=entry_id, timestamp=when, realm=Realm.MIDGARD, content=content, emotion=emotion
    )


@pytest.fixture()
def entries() -> list[JournalEntry]:
    """Three consecutive days, Monday to Wednesday."""
    return [
        _entry("e1", datetime(2026, 3, 2, 9, 0, tzinfo=UTC), "river stone river", "joy"),
        _entry("e2", datetime(2026, 3, 3, 21, 0, tzinfo=UTC), "stone path", "calm"),
        _entry("e3", datetime(2026, 3, 4, 9, 15, tzinfo=UTC), "river mountain forest river stone", "joy"),
    ]


class TestComputeMetrics:
    """Tests for compute_metrics()."""

    NOW = datetime(2026, 3, 4, 20, 0, tzinfo=UTC)

    def test_empty_journal(self) -> None:
        metrics = compute_metrics([], self.NOW)
        assert metrics == JournalMetrics()
        assert metrics.most_active_day is None
        assert metrics.total_words == 0

    def test_counts(self, entries: list[JournalEntry]) -> None:
        metrics = compute_metrics(entries, self.NOW)
        assert metrics.total_entries == 3
        assert metrics.total_words == 10
        assert metrics.total_characters == 17 + 10 + 33
        assert metrics.average_words_per_entry == 3
        assert metrics.average_reading_minutes == 0
        assert metrics.estimated_total_minutes == 0

    def test_longest_and_shortest(self, entries: list[JournalEntry]) -> None:
        metrics = compute_metrics(entries, self.NOW)
        assert metrics.longest_entry_id == "e3"
        assert metrics.shortest_entry_id == "e2"

    def test_length_ties_go_to_first_entry(self) -> None:
        when = datetime(2026, 3, 2, tzinfo=UTC)
        tied = [_entry("a", when, "one two"), _entry("b", when, "three four")]
        metrics = compute_metrics(tied, when)
        assert metrics.longest_entry_id == "a"
        assert metrics.shortest_entry_id == "a"

    def test_streak_alive_today(self, entries: list[JournalEntry]) -> None:
        metrics = compute_metrics(entries, self.NOW)
        assert metrics.longest_streak == 3
        assert metrics.current_streak == 3

    def test_streak_alive_yesterday(self, entries: list[JournalEntry]) -> None:
        metrics = compute_metrics(entries, datetime(2026, 3, 5, 12, 0, tzinfo=UTC))
        assert metrics.current_streak == 3

    def test_streak_broken(self, entries: list[JournalEntry]) -> None:
        metrics = compute_metrics(entries, datetime(2026, 3, 7, 12, 0, tzinfo=UTC))
        assert metrics.longest_streak == 3
        assert metrics.current_streak == 0

    def test_streak_with_gap(self) -> None:
        days = [1, 2, 4, 5, 6, 7]
        gappy = [
            _entry(f"d{day}", datetime(2026, 3, day, 8, 0, tzinfo=UTC), "entry text")
            for day in days
        ]
        metrics = compute_metrics(gappy, datetime(2026, 3, 7, 22, 0, tzinfo=UTC))
        assert metrics.longest_streak == 4
        assert metrics.current_streak == 4

    def test_same_day_entries_count_once(self) -> None:
        when = datetime(2026, 3, 2, 8, 0, tzinfo=UTC)
        same_day = [_entry("a", when, "x"), _entry("b", when.replace(hour=20), "y")]
        metrics = compute_metrics(same_day, when)
        assert metrics.longest_streak == 1

    def test_recent_activity(self, entries: list[JournalEntry]) -> None:
        old = _entry("old", datetime(2026, 2, 20, 9, 0, tzinfo=UTC), "older memory")
        metrics = compute_metrics([old, *entries], self.NOW)
        assert metrics.entries_this_week == 3
        assert metrics.entries_this_month == 4

    def test_most_active_day_tie_goes_to_earlier_weekday(self, entries: list[JournalEntry]) -> None:
        assert compute_metrics(entries, self.NOW).most_active_day == "Monday"

    def test_most_active_hour(self, entries: list[JournalEntry]) -> None:
        assert compute_metrics(entries, self.NOW).most_active_hour == 9

    def test_mood_distribution(self, entries: list[JournalEntry]) -> None:
        assert compute_metrics(entries, self.NOW).mood_distribution == {"joy": 2, "calm": 1}

    def test_top_words(self, entries: list[JournalEntry]) -> None:
        top = compute_metrics(entries, self.NOW).top_words
        assert list(top.items()) == [
            ("river", 4),
            ("stone", 3),
            ("path", 1),
            ("mountain", 1),
            ("forest", 1),
        ]

    def test_top_words_skip_short_and_stop_words(self) -> None:
        when = datetime(2026, 3, 2, tzinfo=UTC)
        text = "with these would the owl forest"
        assert compute_metrics([_entry("a", when, text)], when).top_words == {"forest": 1}

    def test_reading_and_writing_estimates(self) -> None:
        when = datetime(2026, 3, 2, tzinfo=UTC)
        long_entry = _entry("a", when, " ".join(["word"] * 400))
        metrics = compute_metrics([long_entry], when)
        assert metrics.average_reading_minutes == 2
        assert metrics.estimated_total_minutes == 12

    def test_to_dict(self, entries: list[JournalEntry]) -> None:
        data = compute_metrics(entries, self.NOW).to_dict()
        assert data["totalWords"] == 10
        assert data["mostActiveDay"] == "Monday"
        assert data["moodDistribution"] == {"joy": 2, "calm": 1}
        assert data["longestEntryId"] == "e3"
        assert not [key for key in data if "_" in key]
