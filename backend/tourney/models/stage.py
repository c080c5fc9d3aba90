from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from sqlalchemy import JSON, String
from sqlmodel import Column, Field, Relationship, SQLModel

from tourney.models.tournament import generate_id

if TYPE_CHECKING:
    from tourney.models.tournament import Tournament


class StageType(str, Enum):
    group = "group"
    knockout = "knockout"


class Stage(SQLModel, table=True):
    id: str = Field(default_factory=generate_id, primary_key=True)
    tournament_id: str = Field(foreign_key="tournament.id", index=True)
    name: str
    type: StageType = Field(sa_column=Column(String, nullable=False))
    order: int
    qualified_count: Optional[int] = Field(default=None)

    # Group stages only: [{"id": str, "name": "Group A", "team_ids": [str, ...]}, ...]
    groups: Optional[List[Dict[str, Any]]] = Field(default=None, sa_column=Column(JSON, nullable=True))

    # Relationships
    tournament: "Tournament" = Relationship(back_populates="stages")
