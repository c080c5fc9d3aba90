"""
Americano scheduling: rotating doubles partners for individual players.

Every possible 2v2 match is enumerated, shuffled, and accepted greedily while
each partnership stays under the cap. Accepted matches are then packed into
rounds of up to `courts` matches in which no player appears twice.
"""

import logging
import random
from collections import Counter
from itertools import combinations
from typing import List, Optional, Sequence, Tuple

from tourney.models.match import Match
from tourney.models.tournament import generate_id
from tourney.services.errors import InsufficientEntrantsError

logger = logging.getLogger(__name__)

MIN_PLAYERS = 4
MAX_PARTNERSHIPS = 3

Pair = Tuple[str, str]
Pairing = Tuple[Pair, Pair]


def partnership_cap(player_count: int) -> int:
    return min(MAX_PARTNERSHIPS, player_count - 1)


def enumerate_pairings(player_ids: Sequence[str]) -> List[Pairing]:
    """
    All distinct 2v2 matches over the player set.

    Each side is a sorted pair and the sides are ordered (team1 < team2), so
    {team1, team2} and {team2, team1} are not counted twice. Four players yield
    three matches: ab-cd, ac-bd, ad-bc.
    """
    pairs: List[Pair] = [tuple(sorted(p)) for p in combinations(player_ids, 2)]
    pairings: List[Pairing] = []
    for team1, team2 in combinations(pairs, 2):
        if set(team1) & set(team2):
            continue
        pairings.append((team1, team2) if team1 < team2 else (team2, team1))
    return pairings


def select_pairings(pairings: Sequence[Pairing], cap: int) -> List[Pairing]:
    """Greedy pass in the given order; both partnerships must be under the cap."""
    partnerships: Counter = Counter()
    selected: List[Pairing] = []
    for team1, team2 in pairings:
        if partnerships[team1] < cap and partnerships[team2] < cap:
            partnerships[team1] += 1
            partnerships[team2] += 1
            selected.append((team1, team2))
    return selected


def pack_rounds(pairings: Sequence[Pairing], courts: int) -> List[List[Pairing]]:
    """
    Pack pairings into rounds without double-booking a player.

    Each scan walks the unused pairings in order and takes up to `courts` of
    them. Packing stops at the first scan that takes nothing; anything left at
    that point is dropped.
    """
    used = [False] * len(pairings)
    rounds: List[List[Pairing]] = []

    while True:
        current: List[Pairing] = []
        busy = set()
        for index, (team1, team2) in enumerate(pairings):
            if len(current) >= courts:
                break
            if used[index]:
                continue
            players = set(team1) | set(team2)
            if players & busy:
                continue
            current.append((team1, team2))
            busy |= players
            used[index] = True
        if not current:
            break
        rounds.append(current)

    dropped = used.count(False)
    if dropped:
        logger.info("Americano packing dropped %d unschedulable matches", dropped)
    return rounds


def generate_americano_matches(
    player_ids: Sequence[str],
    courts: int,
    rng: Optional[random.Random] = None,
) -> List[Match]:
    """
    Build the full Americano schedule.

    Args:
        player_ids: Individual player ids (at least 4)
        courts: Matches played in parallel per round (at least 1)
        rng: Random source for candidate ordering; unseeded when omitted

    Returns:
        Matches ordered by round; match_number is the court within the round.
        Each side gets an ephemeral team id and its two player ids.

    Raises:
        InsufficientEntrantsError: fewer than 4 players
        ValueError: courts < 1
    """
    if len(player_ids) < MIN_PLAYERS:
        raise InsufficientEntrantsError(
            MIN_PLAYERS, len(player_ids), entrant_kind="players", context="an Americano tournament"
        )
    if courts < 1:
        raise ValueError(f"courts must be >= 1, got {courts}")

    rng = rng or random.Random()

    candidates = enumerate_pairings(player_ids)
    rng.shuffle(candidates)
    selected = select_pairings(candidates, partnership_cap(len(player_ids)))

    matches: List[Match] = []
    for round_number, round_pairings in enumerate(pack_rounds(selected, courts), start=1):
        for court, (team1, team2) in enumerate(round_pairings, start=1):
            matches.append(
                Match(
                    round=round_number,
                    match_number=court,
                    team1_id=generate_id(),
                    team2_id=generate_id(),
                    team1_player_ids=list(team1),
                    team2_player_ids=list(team2),
                )
            )

    logger.debug(
        "Generated Americano schedule: %d players, %d candidates, %d selected, %d scheduled",
        len(player_ids),
        len(candidates),
        len(selected),
        len(matches),
    )
    return matches
