from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

from tourney.models.tournament import generate_id

if TYPE_CHECKING:
    from tourney.models.team import Team
    from tourney.models.tournament import Tournament


class Player(SQLModel, table=True):
    id: str = Field(default_factory=generate_id, primary_key=True)
    name: str

    # Exactly one owner: a team, or the tournament itself (Americano)
    team_id: Optional[str] = Field(default=None, foreign_key="team.id", index=True)
    tournament_id: Optional[str] = Field(default=None, foreign_key="tournament.id", index=True)

    # Relationships
    team: Optional["Team"] = Relationship(back_populates="players")
    tournament: Optional["Tournament"] = Relationship(back_populates="players")
