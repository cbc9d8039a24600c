"""Level thresholds and the pure point/level arithmetic."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

LEVEL_THRESHOLDS: Sequence[Tuple[int, int]] = (
    (1, 0),
    (2, 50),
    (3, 150),
    (4, 250),
    (5, 400),
    (6, 600),
    (7, 800),
)

# Past the table every level costs the same flat step.
EXTRAPOLATION_STEP = 200

_LAST_LEVEL, _LAST_THRESHOLD = LEVEL_THRESHOLDS[-1]


@dataclass(frozen=True)
class LevelProgress:
    level: int
    current_threshold: int
    next_threshold: int
    points_into_level: int
    points_to_next_level: int

    @property
    def percent(self) -> float:
        span = self.next_threshold - self.current_threshold
        return round(self.points_into_level / span * 100, 1)


def threshold_for_level(level: int) -> int:
    """Return the minimum point total at which ``level`` begins."""
    if level < 1:
        raise ValueError(f"Level must be >= 1, got {level}")
    if level <= _LAST_LEVEL:
        return LEVEL_THRESHOLDS[level - 1][1]
    # Level 8 opens at the last table threshold, so level 7 has an empty band.
    return _LAST_THRESHOLD + (level - _LAST_LEVEL - 1) * EXTRAPOLATION_STEP


def level_for_points(points: int) -> int:
    """Return the greatest level whose threshold is ``<= points``.

    Totals below zero floor to level 1. From the last table entry upwards
    the flat ``EXTRAPOLATION_STEP`` applies.
    """
    if points >= _LAST_THRESHOLD:
        return _LAST_LEVEL + (points - _LAST_THRESHOLD) // EXTRAPOLATION_STEP + 1
    level = 1
    for candidate, threshold in LEVEL_THRESHOLDS:
        if points >= threshold:
            level = candidate
        else:
            break
    return level


def level_progress(points: int) -> LevelProgress:
    points = max(points, 0)
    level = level_for_points(points)
    current = threshold_for_level(level)
    upcoming = threshold_for_level(level + 1)
    return LevelProgress(
        level=level,
        current_threshold=current,
        next_threshold=upcoming,
        points_into_level=points - current,
        points_to_next_level=upcoming - points,
    )
