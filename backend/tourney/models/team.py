from typing import TYPE_CHECKING, List

from sqlmodel import Field, Relationship, SQLModel

from tourney.models.tournament import generate_id

if TYPE_CHECKING:
    from tourney.models.player import Player
    from tourney.models.tournament import Tournament


class Team(SQLModel, table=True):
    id: str = Field(default_factory=generate_id, primary_key=True)
    tournament_id: str = Field(foreign_key="tournament.id", index=True)
    name: str

    # Relationships
    tournament: "Tournament" = Relationship(back_populates="teams")
    players: List["Player"] = Relationship(back_populates="team")
