"""
Round robin generation: every entrant plays every other entrant exactly once.

The schedule is flat (all matches in round 1) with no dependencies between
matches; standings are derived from completed results elsewhere.
"""

from typing import List, Optional, Sequence

from tourney.models.match import Match
from tourney.services.errors import InsufficientEntrantsError


def rr_match_count(n: int) -> int:
    """Round robin match count: n * (n-1) / 2"""
    return (n * (n - 1)) // 2


def generate_round_robin_matches(
    entrant_ids: Sequence[str],
    stage_id: Optional[str] = None,
    group_name: Optional[str] = None,
) -> List[Match]:
    """One upcoming match per unordered pair (i, j), i < j, numbered from 1."""
    if len(entrant_ids) < 2:
        raise InsufficientEntrantsError(2, len(entrant_ids))

    matches: List[Match] = []
    match_number = 1
    for i in range(len(entrant_ids)):
        for j in range(i + 1, len(entrant_ids)):
            matches.append(
                Match(
                    stage_id=stage_id,
                    round=1,
                    match_number=match_number,
                    team1_id=entrant_ids[i],
                    team2_id=entrant_ids[j],
                    group_name=group_name,
                )
            )
            match_number += 1
    return matches
