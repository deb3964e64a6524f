"""
Growth model for the world tree.

Pure functions of the entry count:
- tree_growth: 0-100, saturating curve (each entry adds less than the last)
- glow_intensity: 0.5 at the start, +0.01 per entry, capped at 1.0
- particle_density: 1.0 at the start, +0.05 per entry, uncapped
- tree_stage: step function over fixed growth thresholds

The growth curve is 100 * (1 - e^(-n/50)), so stages are reached at
6 entries (sapling), 18 (young), 46 (mature) and 116 (ancient).
It never exceeds 100.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

GROWTH_CEILING = 100.0
GROWTH_SCALE = 50.0  # entries per e-fold of the remaining growth

GLOW_BASE = 0.5
GLOW_PER_ENTRY = 0.01
GLOW_CAP = 1.0

PARTICLE_BASE = 1.0
PARTICLE_PER_ENTRY = 0.05


class TreeStage(StrEnum):
    """Visual stage of the world tree."""

    SEEDLING = "seedling"
    SAPLING = "sapling"
    YOUNG = "young"
    MATURE = "mature"
    ANCIENT = "ancient"


# (lower bound inclusive, stage); checked from the top down
_STAGE_THRESHOLDS: tuple[tuple[float, TreeStage], ...] = (
    (90.0, TreeStage.ANCIENT),
    (60.0, TreeStage.MATURE),
    (30.0, TreeStage.YOUNG),
    (10.0, TreeStage.SAPLING),
)


def _check_count(total_entries: int) -> None:
    if total_entries < 0:
        raise ValueError(f"total_entries must be >= 0, got {total_entries}")


def tree_growth(total_entries: int) -> float:
    """Tree growth percentage for a given number of entries."""
    _check_count(total_entries)
    if total_entries == 0:
        return 0.0
    growth = GROWTH_CEILING * (1.0 - math.exp(-total_entries / GROWTH_SCALE))
    return min(GROWTH_CEILING, round(growth, 2))


def glow_intensity(total_entries: int) -> float:
    """Glow strength of the tree, 0.5 to 1.0."""
    _check_count(total_entries)
    return min(GLOW_CAP, round(GLOW_BASE + total_entries * GLOW_PER_ENTRY, 4))


def particle_density(total_entries: int) -> float:
    """Multiplier for the ambient particle count."""
    _check_count(total_entries)
    return round(PARTICLE_BASE + total_entries * PARTICLE_PER_ENTRY, 4)


def tree_stage(growth: float) -> TreeStage:
    """Map a growth percentage to a tree stage.

    Boundaries are inclusive on the lower end: 10.0 is a sapling.
    """
    for lower_bound, stage in _STAGE_THRESHOLDS:
        if growth >= lower_bound:
            return stage
    return TreeStage.SEEDLING


@dataclass(frozen=True)
class GrowthSnapshot:
    """Derived visual values for one entry count."""

    tree_growth: float = 0.0
    glow_intensity: float = GLOW_BASE
    particle_density: float = PARTICLE_BASE

    @property
    def stage(self) -> TreeStage:
        return tree_stage(self.tree_growth)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "tree_growth": self.tree_growth,
            "glow_intensity": self.glow_intensity,
            "particle_density": self.particle_density,
            "stage": self.stage.value,
        }


def snapshot(total_entries: int) -> GrowthSnapshot:
    """Compute every derived growth value for an entry count."""
    return GrowthSnapshot(
        tree_growth=tree_growth(total_entries),
        glow_intensity=glow_intensity(total_entries),
        particle_density=particle_density(total_entries),
    )
