from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import uuid4

from sqlalchemy import JSON, String
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from tourney.models.match import Match
    from tourney.models.player import Player
    from tourney.models.stage import Stage
    from tourney.models.team import Team


def generate_id() -> str:
    return str(uuid4())


class TournamentType(str, Enum):
    padel = "padel"
    padel_americano = "padel-americano"
    football_8 = "football-8"
    football_5 = "football-5"
    basketball = "basketball"
    volleyball = "volleyball"
    badminton_singles = "badminton-singles"
    badminton_doubles = "badminton-doubles"
    tennis_singles = "tennis-singles"
    tennis_doubles = "tennis-doubles"


class TournamentFormat(str, Enum):
    single_elimination = "single-elimination"
    round_robin = "round-robin"
    multi_stage = "multi-stage"
    americano = "americano"


class TournamentStatus(str, Enum):
    draft = "draft"
    active = "active"
    completed = "completed"


class Tournament(SQLModel, table=True):
    id: str = Field(default_factory=generate_id, primary_key=True)
    name: str
    type: TournamentType = Field(sa_column=Column(String, nullable=False, index=True))
    format: TournamentFormat = Field(sa_column=Column(String, nullable=False))
    status: TournamentStatus = Field(default=TournamentStatus.active, sa_column=Column(String, nullable=False))
    # {"points_per_match": int, "courts": int}; Americano only
    americano_settings: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    teams: List["Team"] = Relationship(back_populates="tournament")
    players: List["Player"] = Relationship(back_populates="tournament")
    stages: List["Stage"] = Relationship(
        back_populates="tournament", sa_relationship_kwargs={"order_by": "Stage.order"}
    )
    matches: List["Match"] = Relationship(back_populates="tournament")
