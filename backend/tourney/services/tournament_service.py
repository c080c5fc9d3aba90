"""
Tournament Service

Creation:
1. Materialize teams and players with fresh ids
2. Run exactly one generator for the format
3. Tag every stage and match with the tournament id
4. Hand the complete draft to the store in one transaction

Generation errors are raised before the store is touched, so a tournament is
either stored whole or not at all.

Score updates load the tournament, run the advancement service over its
matches, recompute the tournament status, and save.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional

from tourney.models.match import Match
from tourney.models.player import Player
from tourney.models.stage import Stage
from tourney.models.team import Team
from tourney.models.tournament import Tournament, TournamentFormat, generate_id
from tourney.schemas import MatchDetailsUpdate, MatchScoreUpdate, TournamentCreate
from tourney.services.advancement_service import (
    apply_score_update,
    derive_tournament_status,
    is_knockout_match,
)
from tourney.services.americano_scheduler import generate_americano_matches
from tourney.services.bracket_generation import generate_single_elimination_matches
from tourney.services.errors import InsufficientEntrantsError
from tourney.services.multi_stage import StageConfig, generate_multi_stage_matches
from tourney.services.round_robin import generate_round_robin_matches
from tourney.services.tournament_store import TournamentStore

logger = logging.getLogger(__name__)


@dataclass
class TournamentDraft:
    """A fully generated tournament that has not been stored yet."""

    tournament: Tournament
    teams: List[Team] = field(default_factory=list)
    players: List[Player] = field(default_factory=list)
    stages: List[Stage] = field(default_factory=list)
    matches: List[Match] = field(default_factory=list)


def build_tournament(request: TournamentCreate, rng: Optional[random.Random] = None) -> TournamentDraft:
    """
    Generate a complete tournament from a validated creation request.

    Raises:
        InsufficientEntrantsError: too few teams (or players for Americano)
        ValueError: stage or court configuration the generators cannot honour
    """
    tournament = Tournament(
        name=request.name,
        type=request.type,
        format=request.format,
        americano_settings=request.americano_settings.model_dump() if request.americano_settings else None,
    )
    draft = TournamentDraft(tournament=tournament)

    if request.format == TournamentFormat.americano:
        draft.players = [Player(name=p.name, tournament_id=tournament.id) for p in request.players or []]
        draft.matches = generate_americano_matches(
            [p.id for p in draft.players],
            courts=request.americano_settings.courts,
            rng=rng,
        )
    else:
        for team_input in request.teams or []:
            team = Team(name=team_input.name, tournament_id=tournament.id)
            draft.teams.append(team)
            draft.players.extend(Player(name=p.name, team_id=team.id) for p in team_input.players)
        team_ids = [t.id for t in draft.teams]
        if len(team_ids) < 2:
            raise InsufficientEntrantsError(2, len(team_ids))

        if request.format == TournamentFormat.single_elimination:
            draft.matches = generate_single_elimination_matches(team_ids, rng=rng)
        elif request.format == TournamentFormat.round_robin:
            draft.matches = generate_round_robin_matches(team_ids)
        elif request.format == TournamentFormat.multi_stage:
            if not request.stages:
                raise ValueError("multi-stage tournaments need at least one stage")
            configs = [
                StageConfig(
                    id=generate_id(),
                    name=s.name,
                    type=s.type,
                    order=s.order,
                    group_count=s.group_count,
                    qualified_count=s.qualified_count,
                )
                for s in request.stages
            ]
            result = generate_multi_stage_matches(team_ids, configs, rng=rng)
            draft.matches = result.matches
            draft.stages = result.stages
        else:
            raise ValueError(f"Unknown tournament format: {request.format}")

    for stage in draft.stages:
        stage.tournament_id = tournament.id
    for match in draft.matches:
        match.tournament_id = tournament.id

    tournament.status = derive_tournament_status(draft.matches)
    return draft


def create_tournament(
    store: TournamentStore, request: TournamentCreate, rng: Optional[random.Random] = None
) -> Tournament:
    draft = build_tournament(request, rng=rng)
    tournament = store.add(draft)
    logger.info(
        "Created %s tournament %s (%s): %d teams, %d players, %d matches",
        tournament.format,
        tournament.id,
        tournament.type,
        len(draft.teams),
        len(draft.players),
        len(draft.matches),
    )
    return tournament


def get_tournament(store: TournamentStore, tournament_id: str) -> Optional[Tournament]:
    return store.get(tournament_id)


def list_tournaments(store: TournamentStore, tournament_type: Optional[str] = None) -> List[Tournament]:
    return store.list_tournaments(tournament_type)


def _find_match(tournament: Tournament, match_id: str) -> Optional[Match]:
    return next((m for m in tournament.matches if m.id == match_id), None)


def update_match_score(
    store: TournamentStore, tournament_id: str, match_id: str, update: MatchScoreUpdate
) -> Optional[Match]:
    """
    Apply a score/status update and keep the bracket consistent.

    Returns None (and changes nothing) when the tournament or match is missing.
    """
    tournament = store.get(tournament_id)
    if tournament is None:
        return None
    match = _find_match(tournament, match_id)
    if match is None:
        return None

    knockout = is_knockout_match(tournament.format, tournament.stages, match)
    apply_score_update(
        tournament.matches,
        match,
        update.team1_score,
        update.team2_score,
        status=update.status,
        knockout=knockout,
    )
    tournament.status = derive_tournament_status(tournament.matches)
    store.save(tournament)

    logger.info(
        "Scored match %s (round %d #%d) %d-%d status=%s winner=%s; tournament %s is %s",
        match.id,
        match.round,
        match.match_number,
        match.team1_score,
        match.team2_score,
        match.status,
        match.winner_id,
        tournament.id,
        tournament.status,
    )
    return match


def update_match_details(
    store: TournamentStore, tournament_id: str, match_id: str, details: MatchDetailsUpdate
) -> Optional[Match]:
    """Set free-text schedule/venue metadata. Only fields present in the payload change."""
    tournament = store.get(tournament_id)
    if tournament is None:
        return None
    match = _find_match(tournament, match_id)
    if match is None:
        return None

    for field_name, value in details.model_dump(exclude_unset=True).items():
        setattr(match, field_name, value)
    store.save(tournament)
    return match
