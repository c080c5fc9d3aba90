from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict
from sqlmodel import Session

from tourney.database import get_session
from tourney.models.match import Match
from tourney.models.stage import Stage
from tourney.models.tournament import Tournament, TournamentFormat, TournamentType
from tourney.schemas import TournamentCreate
from tourney.services import tournament_service
from tourney.services.errors import InsufficientEntrantsError
from tourney.services.tournament_store import TournamentStore

router = APIRouter()


class PlayerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str


class TeamResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    players: List[PlayerResponse] = []


class GroupResponse(BaseModel):
    id: str
    name: str
    team_ids: List[str]


class StageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: str
    order: int
    groups: Optional[List[GroupResponse]] = None
    qualified_count: Optional[int] = None


class MatchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    tournament_id: str
    stage_id: Optional[str] = None
    round: int
    match_number: int
    team1_id: Optional[str] = None
    team2_id: Optional[str] = None
    team1_score: int
    team2_score: int
    status: str
    winner_id: Optional[str] = None
    team1_player_ids: Optional[List[str]] = None
    team2_player_ids: Optional[List[str]] = None
    group_name: Optional[str] = None
    scheduled_time: Optional[str] = None
    venue: Optional[str] = None


class TournamentResponse(BaseModel):
    id: str
    name: str
    type: str
    format: str
    status: str
    teams: List[TeamResponse]
    matches: List[MatchResponse]
    stages: Optional[List[StageResponse]] = None
    players: Optional[List[PlayerResponse]] = None
    americano_settings: Optional[Dict[str, Any]] = None
    created_at: datetime


def _match_sort_key(stage_order: Dict[str, int]):
    def key(m: Match):
        return (stage_order.get(m.stage_id, 0), m.group_name or "", m.round, m.match_number)

    return key


def _tournament_to_response(t: Tournament) -> TournamentResponse:
    """Shape a stored tournament; matches in stage, group, round, bracket order."""
    stages: List[Stage] = list(t.stages)
    stage_order = {s.id: s.order for s in stages}
    is_americano = t.format == TournamentFormat.americano
    return TournamentResponse(
        id=t.id,
        name=t.name,
        type=t.type,
        format=t.format,
        status=t.status,
        teams=[TeamResponse.model_validate(team) for team in t.teams],
        matches=[MatchResponse.model_validate(m) for m in sorted(t.matches, key=_match_sort_key(stage_order))],
        stages=[StageResponse.model_validate(s) for s in stages] if t.format == TournamentFormat.multi_stage else None,
        players=[PlayerResponse.model_validate(p) for p in t.players] if is_americano else None,
        americano_settings=t.americano_settings,
        created_at=t.created_at,
    )


@router.get("/tournaments", response_model=List[TournamentResponse])
def list_tournaments(
    type: Optional[TournamentType] = Query(default=None),
    session: Session = Depends(get_session),
):
    """List tournaments, newest first; optionally only one sport type"""
    store = TournamentStore(session)
    tournaments = tournament_service.list_tournaments(store, type.value if type else None)
    return [_tournament_to_response(t) for t in tournaments]


@router.get("/tournaments/{tournament_id}", response_model=TournamentResponse)
def get_tournament(tournament_id: str, session: Session = Depends(get_session)):
    """Get a tournament by ID"""
    tournament = tournament_service.get_tournament(TournamentStore(session), tournament_id)
    if not tournament:
        raise HTTPException(status_code=404, detail="Tournament not found")
    return _tournament_to_response(tournament)


@router.post("/tournaments", response_model=TournamentResponse, status_code=201)
def create_tournament(tournament_data: TournamentCreate, session: Session = Depends(get_session)):
    """Create a tournament and generate its full match set"""
    try:
        tournament = tournament_service.create_tournament(TournamentStore(session), tournament_data)
    except InsufficientEntrantsError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _tournament_to_response(tournament)
