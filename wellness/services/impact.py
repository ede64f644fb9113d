"""Well-being impact of one attended session.

``impact_from_pair`` works on two completed assessments and nothing else, so
it can be called any number of times with identical results.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Optional, Protocol

from wellness.core.errors import IncompleteAssessments


class MetricSource(Protocol):
    sleep_quality: Optional[int]
    stress_level: Optional[int]
    mood: Optional[int]

    @property
    def is_completed(self) -> bool: ...


@dataclass(frozen=True)
class WellnessImpact:
    sleep_quality_change: int
    stress_level_change: int
    mood_change: int
    overall_impact: float

    def as_dict(self) -> dict:
        return asdict(self)


def impact_from_pair(pre: Optional[MetricSource], post: Optional[MetricSource]) -> WellnessImpact:
    if pre is None or post is None or not pre.is_completed or not post.is_completed:
        raise IncompleteAssessments()

    sleep = post.sleep_quality - pre.sleep_quality
    stress = post.stress_level - pre.stress_level
    mood = post.mood - pre.mood
    # lower stress is better, so its delta counts negated
    overall = (sleep + (-stress) + mood) / 3

    return WellnessImpact(
        sleep_quality_change=sleep,
        stress_level_change=stress,
        mood_change=mood,
        overall_impact=round(overall, 2),
    )
