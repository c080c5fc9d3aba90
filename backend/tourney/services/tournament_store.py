"""
Tournament persistence.

The store only loads and saves; every rule about what a tournament contains
lives in the generators and the advancement service.
"""
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from tourney.models.tournament import Tournament

if TYPE_CHECKING:
    from tourney.services.tournament_service import TournamentDraft


class TournamentStore:
    def __init__(self, session: Session):
        self.session = session

    def get(self, tournament_id: str) -> Optional[Tournament]:
        return self.session.get(Tournament, tournament_id)

    def list_tournaments(self, tournament_type: Optional[str] = None) -> List[Tournament]:
        """All tournaments, newest first, optionally filtered by sport type."""
        query = select(Tournament)
        if tournament_type is not None:
            query = query.where(Tournament.type == tournament_type)
        query = query.order_by(Tournament.created_at.desc())
        return list(self.session.exec(query).all())

    def add(self, draft: "TournamentDraft") -> Tournament:
        """
        Persist a freshly generated tournament in one transaction.

        Rows are flushed parent-first so foreign keys resolve on every backend.
        On failure nothing is kept.
        """
        try:
            self.session.add(draft.tournament)
            self.session.flush()
            self.session.add_all(draft.teams)
            self.session.flush()
            self.session.add_all(draft.players)
            self.session.add_all(draft.stages)
            self.session.flush()
            self.session.add_all(draft.matches)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

        self.session.refresh(draft.tournament)
        return draft.tournament

    def save(self, tournament: Tournament) -> None:
        try:
            self.session.add(tournament)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
