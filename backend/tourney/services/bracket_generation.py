"""
Single-elimination bracket generation.

Pads the entrant list with byes up to the next power of two, shuffles it, and
lays out every round up front. Byes are resolved before the bracket is returned:
an entrant drawn against a bye is completed and already placed in round 2.
"""

import logging
import math
import random
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from tourney.models.match import Match, MatchStatus
from tourney.services.errors import InsufficientEntrantsError

logger = logging.getLogger(__name__)

BYE_PREFIX = "bye-"


def is_bye(entrant_id: Optional[str]) -> bool:
    return entrant_id is not None and entrant_id.startswith(BYE_PREFIX)


def bracket_size(entrant_count: int) -> int:
    """Smallest power of two >= entrant_count"""
    return 1 << max(0, math.ceil(math.log2(entrant_count)))


def generate_single_elimination_matches(
    entrant_ids: Sequence[str],
    stage_id: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> List[Match]:
    """
    Build a complete single-elimination bracket.

    Args:
        entrant_ids: Team ids in any order (order is discarded by the shuffle)
        stage_id: Optional stage tag for multi-stage tournaments
        rng: Random source for the draw; unseeded when omitted

    Returns:
        All matches of all rounds, round 1 first. match_number runs sequentially
        across the whole bracket.

    Raises:
        InsufficientEntrantsError: fewer than 2 entrants
    """
    if len(entrant_ids) < 2:
        raise InsufficientEntrantsError(2, len(entrant_ids))

    rng = rng or random.Random()

    size = bracket_size(len(entrant_ids))
    bye_count = size - len(entrant_ids)
    round_count = int(math.log2(size))

    padded = list(entrant_ids) + [f"{BYE_PREFIX}{i}" for i in range(bye_count)]
    rng.shuffle(padded)

    matches: List[Match] = []
    match_number = 1

    for round_number in range(1, round_count + 1):
        matches_in_round = size >> round_number
        for index in range(matches_in_round):
            if round_number == 1:
                match = _first_round_match(padded[index * 2], padded[index * 2 + 1], match_number, stage_id)
            else:
                match = Match(stage_id=stage_id, round=round_number, match_number=match_number)
            matches.append(match)
            match_number += 1

    _advance_bye_winners(matches)

    logger.debug(
        "Generated bracket: %d entrants, %d byes, %d rounds, %d matches",
        len(entrant_ids),
        bye_count,
        round_count,
        len(matches),
    )
    return matches


def _first_round_match(entrant_a: str, entrant_b: str, match_number: int, stage_id: Optional[str]) -> Match:
    a_is_bye = is_bye(entrant_a)
    b_is_bye = is_bye(entrant_b)

    if a_is_bye and b_is_bye:
        # Dead slot, never played
        return Match(stage_id=stage_id, round=1, match_number=match_number)

    if a_is_bye or b_is_bye:
        real = entrant_b if a_is_bye else entrant_a
        return Match(
            stage_id=stage_id,
            round=1,
            match_number=match_number,
            team1_id=real,
            team2_id=None,
            status=MatchStatus.completed,
            winner_id=real,
        )

    return Match(
        stage_id=stage_id,
        round=1,
        match_number=match_number,
        team1_id=entrant_a,
        team2_id=entrant_b,
    )


def _advance_bye_winners(matches: List[Match]) -> None:
    """Place round-1 winners (bye walkovers) into their round-2 slots."""
    by_round: Dict[int, List[Match]] = defaultdict(list)
    for match in matches:
        by_round[match.round].append(match)

    next_round = by_round.get(2)
    if not next_round:
        return

    for index, match in enumerate(by_round[1]):
        if match.winner_id is None:
            continue
        target = next_round[index // 2]
        if index % 2 == 0:
            target.team1_id = match.winner_id
        else:
            target.team2_id = match.winner_id
