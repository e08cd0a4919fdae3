"""
Two-Tier Mutual Transfer Matching
=================================

For a subject teacher and a roster of candidates:

1. **Perfect match** -- each wants the other's current district and both
   teach the same grade level.  Score is fixed at 100; distance is the
   direct current-location distance between the two.
2. **Nearby match** -- same grade level, and the candidate's posting is
   closer to the subject's home than the subject's own posting, within the
   subject's ``max_distance``.  Score decays one point per 10 km.

Coordinate resolution
---------------------
The current-to-current and current-to-home legs use precise coordinates
only when both ends have them; otherwise both ends use district centroids.
The candidate-to-subject-home leg resolves each end on its own (see
``distance.resolve_location``).  A leg with an unresolvable endpoint
measures 0 km.  For the nearby test that zero can undercut the subject's
home distance and produce a match; this is kept as the literal behaviour.

Ordering
--------
Perfect before nearby, then ascending distance.  ``sorted`` is stable, so
ties keep roster order.

Complexity
----------
O(N) distance evaluations for N candidates, plus O(N log N) for the sort.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Optional

from .distance import distance_between, get_district_coordinates, resolve_location
from .entities import Location, MatchResult, TeacherProfile
from .enums import MatchType

PERFECT_SCORE = 100
KM_PER_SCORE_POINT = 10

_TYPE_RANK = {MatchType.PERFECT: 0, MatchType.NEARBY: 1}


def find_matches(
    subject: TeacherProfile, candidates: Iterable[TeacherProfile]
) -> list[MatchResult]:
    """Return the ranked matches for *subject* among *candidates*."""
    matches: list[MatchResult] = []

    for candidate in candidates:
        if candidate.id == subject.id or not candidate.is_active:
            continue

        if is_perfect_match(subject, candidate):
            matches.append(
                MatchResult(
                    teacher=candidate,
                    match_type=MatchType.PERFECT,
                    distance=current_distance(subject, candidate),
                    score=PERFECT_SCORE,
                )
            )
            continue

        nearby = check_nearby_match(subject, candidate)
        if nearby is not None:
            matches.append(nearby)

    return sorted(matches, key=lambda m: (_TYPE_RANK[m.match_type], m.distance))


def is_perfect_match(first: TeacherProfile, second: TeacherProfile) -> bool:
    """Mutual interest in each other's current district at the same grade level."""
    return (
        second.current_district in first.preferred_districts
        and first.current_district in second.preferred_districts
        and first.grade_level == second.grade_level
    )


def check_nearby_match(
    subject: TeacherProfile, candidate: TeacherProfile
) -> Optional[MatchResult]:
    """
    A candidate is *nearby* when swapping would bring the subject closer to
    home than they are now, within the subject's ``max_distance``.
    """
    if subject.grade_level != candidate.grade_level:
        return None

    home_distance = distance_to_home(subject)
    candidate_to_home = distance_to_subject_home(candidate, subject)

    if candidate_to_home < home_distance and candidate_to_home <= subject.max_distance:
        return MatchResult(
            teacher=candidate,
            match_type=MatchType.NEARBY,
            distance=candidate_to_home,
            score=nearby_score(candidate_to_home),
        )
    return None


def nearby_score(distance_km: float) -> int:
    """``max(0, 100 - floor(d / 10))``"""
    return max(0, PERFECT_SCORE - math.floor(distance_km / KM_PER_SCORE_POINT))


# ── Distance legs ─────────────────────────────────────────────────────


def _paired_distance(
    a_point: Optional[Location],
    a_district: str,
    b_point: Optional[Location],
    b_district: str,
) -> float:
    """Precise points when both ends have them, otherwise both district centroids."""
    if a_point is not None and b_point is not None:
        return distance_between(a_point, b_point)
    return distance_between(
        get_district_coordinates(a_district), get_district_coordinates(b_district)
    )


def _posting_location(teacher: TeacherProfile) -> Optional[Location]:
    """School coordinates, then current coordinates, then current district."""
    return resolve_location(
        teacher.school_point,
        teacher.current_point,
        get_district_coordinates(teacher.current_district),
    )


def _home_target(teacher: TeacherProfile) -> Optional[Location]:
    """Home coordinates, then preferred-location coordinates, then home district."""
    return resolve_location(
        teacher.home_point,
        teacher.preferred_point,
        get_district_coordinates(teacher.home_district),
    )


def current_distance(first: TeacherProfile, second: TeacherProfile) -> float:
    """Distance between two teachers' current postings."""
    return _paired_distance(
        first.current_point,
        first.current_district,
        second.current_point,
        second.current_district,
    )


def distance_to_home(teacher: TeacherProfile) -> float:
    """How far *teacher* is posted from home."""
    return _paired_distance(
        teacher.current_point,
        teacher.current_district,
        teacher.home_point,
        teacher.home_district,
    )


def distance_to_subject_home(
    candidate: TeacherProfile, subject: TeacherProfile
) -> float:
    """Distance from *candidate*'s posting to *subject*'s home, resolved per end."""
    return distance_between(_posting_location(candidate), _home_target(subject))
