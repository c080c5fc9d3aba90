"""
Runtime: match scoring and metadata.

Score updates go through the advancement service, which fills or clears
downstream bracket slots and recomputes the tournament status.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from tourney.database import get_session
from tourney.routes.tournaments import MatchResponse
from tourney.schemas import MatchDetailsUpdate, MatchScoreUpdate
from tourney.services import tournament_service
from tourney.services.tournament_store import TournamentStore

router = APIRouter()


@router.patch(
    "/tournaments/{tournament_id}/matches/{match_id}",
    response_model=MatchResponse,
)
def update_match_score(
    tournament_id: str,
    match_id: str,
    payload: MatchScoreUpdate,
    session: Session = Depends(get_session),
) -> MatchResponse:
    """Record scores (and optionally status). Completing a knockout match advances its winner;
    correcting or reopening one retracts the previous winner downstream."""
    match = tournament_service.update_match_score(TournamentStore(session), tournament_id, match_id, payload)
    if match is None:
        raise HTTPException(status_code=404, detail="Match or tournament not found")
    return MatchResponse.model_validate(match)


@router.patch(
    "/tournaments/{tournament_id}/matches/{match_id}/details",
    response_model=MatchResponse,
)
def update_match_details(
    tournament_id: str,
    match_id: str,
    payload: MatchDetailsUpdate,
    session: Session = Depends(get_session),
) -> MatchResponse:
    """Set free-text scheduled_time / venue. No conflict checking."""
    match = tournament_service.update_match_details(TournamentStore(session), tournament_id, match_id, payload)
    if match is None:
        raise HTTPException(status_code=404, detail="Match or tournament not found")
    return MatchResponse.model_validate(match)
