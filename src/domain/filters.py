"""
Caller-side refinements of a ranked match list.

These run after ``find_matches`` and never reorder; they only drop entries.
``"all"`` (or ``None``) disables the match-type and subject filters.
"""

from __future__ import annotations

from typing import Optional

from .entities import MatchResult

ALL = "all"


def apply_filters(
    matches: list[MatchResult],
    match_type: Optional[str] = None,
    max_distance: Optional[float] = None,
    subject: Optional[str] = None,
) -> list[MatchResult]:
    filtered = matches

    if match_type and match_type != ALL:
        filtered = [m for m in filtered if m.match_type.value == match_type]

    if max_distance is not None:
        # Whole kilometres, matching how the limit is entered
        limit = int(max_distance)
        filtered = [m for m in filtered if m.distance <= limit]

    if subject and subject != ALL:
        needle = subject.lower()
        filtered = [
            m for m in filtered if any(needle in s.lower() for s in m.teacher.subjects)
        ]

    return filtered
