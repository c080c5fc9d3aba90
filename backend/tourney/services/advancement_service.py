"""
Match progression: record a result and keep the knockout bracket consistent.

When a knockout match is completed its winner moves into the next round. When
a result is corrected or reopened, the old winner is pulled back out of every
downstream match it reached; downstream matches that were already completed
are reset and their own winners retracted in turn, all the way to the final if
needed.

All functions operate on in-memory match lists; loading and saving is the
caller's job.
"""
import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

from tourney.models.match import Match, MatchStatus
from tourney.models.stage import Stage, StageType
from tourney.models.tournament import TournamentFormat, TournamentStatus
from tourney.services.bracket_generation import is_bye

logger = logging.getLogger(__name__)

SLOT_TEAM1 = "team1_id"
SLOT_TEAM2 = "team2_id"


class BracketIndex:
    """
    Position lookup over a flat match collection.

    Matches are grouped by (stage_id, round) and sorted by match_number. A
    match at position p feeds position p // 2 of the next round: even
    positions fill team1, odd positions fill team2.
    """

    def __init__(self, matches: Sequence[Match]):
        self._rounds: Dict[Tuple[Optional[str], int], List[Match]] = defaultdict(list)
        for match in matches:
            self._rounds[(match.stage_id, match.round)].append(match)

        self._positions: Dict[str, int] = {}
        for round_matches in self._rounds.values():
            round_matches.sort(key=lambda m: m.match_number)
            for position, match in enumerate(round_matches):
                self._positions[match.id] = position

    def position(self, match: Match) -> int:
        return self._positions[match.id]

    def downstream(self, match: Match) -> Optional[Tuple[Match, str]]:
        """Return (next match, slot attribute) or None for the final."""
        next_round = self._rounds.get((match.stage_id, match.round + 1))
        if not next_round:
            return None
        position = self.position(match)
        target_position = position // 2
        if target_position >= len(next_round):
            return None
        slot = SLOT_TEAM1 if position % 2 == 0 else SLOT_TEAM2
        return next_round[target_position], slot


def decide_winner(match: Match) -> Optional[str]:
    """Higher score wins; a tie has no winner."""
    if match.team1_score > match.team2_score:
        return match.team1_id
    if match.team2_score > match.team1_score:
        return match.team2_id
    return None


def is_knockout_match(tournament_format: str, stages: Sequence[Stage], match: Match) -> bool:
    if tournament_format == TournamentFormat.single_elimination:
        return True
    if tournament_format == TournamentFormat.multi_stage:
        stage = next((s for s in stages if s.id == match.stage_id), None)
        return stage is not None and stage.type == StageType.knockout
    return False


def advance_winner(index: BracketIndex, match: Match) -> bool:
    """Place match.winner_id into its downstream slot. Returns True if a slot was written."""
    if match.winner_id is None:
        return False
    target = index.downstream(match)
    if target is None:
        return False
    next_match, slot = target
    setattr(next_match, slot, match.winner_id)
    logger.debug(
        "Advanced %s from round %d #%d to round %d #%d (%s)",
        match.winner_id,
        match.round,
        match.match_number,
        next_match.round,
        next_match.match_number,
        slot,
    )
    return True


def retract_winner(index: BracketIndex, match: Match, winner_id: Optional[str]) -> int:
    """
    Remove winner_id from the downstream slot fed by match.

    If the downstream match was already completed it is reopened (scores zeroed,
    status upcoming) and its own winner is retracted recursively.

    Returns:
        Number of downstream matches reset
    """
    if winner_id is None:
        return 0
    target = index.downstream(match)
    if target is None:
        return 0
    next_match, slot = target
    if getattr(next_match, slot) != winner_id:
        return 0

    setattr(next_match, slot, None)
    logger.debug("Retracted %s from round %d #%d (%s)", winner_id, next_match.round, next_match.match_number, slot)

    if next_match.status != MatchStatus.completed:
        return 0

    next_match.status = MatchStatus.upcoming
    next_match.team1_score = 0
    next_match.team2_score = 0
    stale_winner = next_match.winner_id
    next_match.winner_id = None
    return 1 + retract_winner(index, next_match, stale_winner)


def apply_score_update(
    matches: Sequence[Match],
    match: Match,
    team1_score: int,
    team2_score: int,
    status: Optional[str] = None,
    knockout: bool = False,
) -> Match:
    """
    Record a score on match and propagate the outcome through the bracket.

    Args:
        matches: Every match of the tournament (match included)
        match: The match being scored
        status: New status; the current status is kept when omitted
        knockout: True when the match belongs to a bracket whose winners advance

    Returns:
        The updated match
    """
    previous_winner_id = match.winner_id
    was_completed = match.status == MatchStatus.completed

    match.team1_score = team1_score
    match.team2_score = team2_score
    if status is not None:
        match.status = status

    index = BracketIndex(matches) if knockout else None

    if match.status == MatchStatus.completed:
        match.winner_id = decide_winner(match)
        if index is not None:
            if was_completed and previous_winner_id and previous_winner_id != match.winner_id:
                retract_winner(index, match, previous_winner_id)
            if match.winner_id:
                advance_winner(index, match)
    else:
        match.winner_id = None
        if index is not None and was_completed and previous_winner_id:
            retract_winner(index, match, previous_winner_id)

    return match


def is_playable(match: Match) -> bool:
    """Both slots hold real entrants (no empty slot, no bye marker)."""
    return bool(match.team1_id) and bool(match.team2_id) and not is_bye(match.team1_id) and not is_bye(match.team2_id)


def derive_tournament_status(matches: Sequence[Match]) -> TournamentStatus:
    """Completed iff at least one playable match exists and all playable matches are completed."""
    playable = [m for m in matches if is_playable(m)]
    if playable and all(m.status == MatchStatus.completed for m in playable):
        return TournamentStatus.completed
    return TournamentStatus.active
