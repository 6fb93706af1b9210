from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from partner_match.schemas.partners import Partner
from partner_match.services.profile_normalizer import ProfileRecord, tier_for_display_level

STYLE_MATCH_POINTS = 20
LEVEL_EXACT_POINTS = 15
LEVEL_ADJACENT_POINTS = 10
CITY_MATCH_POINTS = 15
TIME_SLOT_POINTS = 5

LEVEL_ORDER = ("beginner", "intermediate", "advanced", "professional")


@dataclass(frozen=True)
class RelevanceBreakdown:
    styles: int = 0
    level: int = 0
    city: int = 0
    times: int = 0

    @property
    def total(self) -> int:
        return self.styles + self.level + self.city + self.times


def _levels_adjacent(a: str, b: str) -> bool:
    if a not in LEVEL_ORDER or b not in LEVEL_ORDER:
        return False
    return abs(LEVEL_ORDER.index(a) - LEVEL_ORDER.index(b)) == 1


def _level_points(requester_level: Optional[str], candidate_level: str) -> int:
    if not requester_level or not candidate_level:
        return 0
    candidate_tier = tier_for_display_level(candidate_level)
    if requester_level == candidate_tier:
        return LEVEL_EXACT_POINTS
    if _levels_adjacent(requester_level, candidate_tier):
        return LEVEL_ADJACENT_POINTS
    return 0


def score_breakdown(candidate: Partner, requester: Optional[ProfileRecord]) -> RelevanceBreakdown:
    if requester is None:
        return RelevanceBreakdown()

    # Requester styles are compared as stored, against the candidate's canonical labels.
    style_matches = sum(1 for style in requester.dance_styles if style in candidate.dance_styles)

    city = 0
    if requester.city and candidate.city and requester.city in candidate.city:
        city = CITY_MATCH_POINTS

    time_matches = sum(1 for slot in requester.available_times if slot in candidate.available_times)

    return RelevanceBreakdown(
        styles=style_matches * STYLE_MATCH_POINTS,
        level=_level_points(requester.level, candidate.level),
        city=city,
        times=time_matches * TIME_SLOT_POINTS,
    )


def score(candidate: Partner, requester: Optional[ProfileRecord]) -> int:
    return score_breakdown(candidate, requester).total
