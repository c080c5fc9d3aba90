from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import JSON, String
from sqlmodel import Column, Field, Relationship, SQLModel

from tourney.models.tournament import generate_id

if TYPE_CHECKING:
    from tourney.models.tournament import Tournament


class MatchStatus(str, Enum):
    upcoming = "upcoming"
    live = "live"
    completed = "completed"


class Match(SQLModel, table=True):
    id: str = Field(default_factory=generate_id, primary_key=True)
    tournament_id: Optional[str] = Field(default=None, foreign_key="tournament.id", index=True)
    stage_id: Optional[str] = Field(default=None, foreign_key="stage.id", index=True)
    round: int
    match_number: int  # Unique within (stage_id, round); bracket position left to right

    # Slot ids are plain strings: Americano matches use ephemeral pairing ids, not Team rows
    team1_id: Optional[str] = Field(default=None)
    team2_id: Optional[str] = Field(default=None)
    team1_score: int = Field(default=0)
    team2_score: int = Field(default=0)
    status: MatchStatus = Field(default=MatchStatus.upcoming, sa_column=Column(String, nullable=False))
    winner_id: Optional[str] = Field(default=None)

    # Americano: the two player ids on each side
    team1_player_ids: Optional[List[str]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    team2_player_ids: Optional[List[str]] = Field(default=None, sa_column=Column(JSON, nullable=True))

    group_name: Optional[str] = Field(default=None)  # "Group A" | "Group B" | ...

    # Free-text metadata; recorded only, never checked for conflicts
    scheduled_time: Optional[str] = Field(default=None)
    venue: Optional[str] = Field(default=None)

    # Relationships
    tournament: Optional["Tournament"] = Relationship(back_populates="matches")
