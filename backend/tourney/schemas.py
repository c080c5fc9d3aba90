"""
Request shapes shared by the API routes and the tournament service.

Shape rules live here; entrant counts are left to the generators so that a
short team or player list surfaces as InsufficientEntrantsError.
"""
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from tourney.models.match import MatchStatus
from tourney.models.stage import StageType
from tourney.models.tournament import TournamentFormat, TournamentType


def _required_name(v: str, what: str) -> str:
    if not v or not v.strip():
        raise ValueError(f"{what} name is required")
    return v.strip()


class PlayerCreate(BaseModel):
    id: Optional[str] = None  # client-side id; replaced on creation
    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _required_name(v, "Player")


class TeamCreate(BaseModel):
    id: Optional[str] = None  # client-side id; replaced on creation
    name: str
    players: List[PlayerCreate] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _required_name(v, "Team")


class StageCreate(BaseModel):
    id: Optional[str] = None  # client-side id; replaced on creation
    name: str
    type: StageType
    order: int = Field(ge=1)
    group_count: Optional[int] = Field(default=None, ge=1, le=26)
    qualified_count: Optional[int] = Field(default=None, ge=1)


class AmericanoSettings(BaseModel):
    points_per_match: int = Field(default=32, ge=1)
    courts: int = Field(default=1, ge=1)


class TournamentCreate(BaseModel):
    name: str
    type: TournamentType
    format: TournamentFormat
    teams: Optional[List[TeamCreate]] = None
    players: Optional[List[PlayerCreate]] = None
    americano_settings: Optional[AmericanoSettings] = None
    stages: Optional[List[StageCreate]] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _required_name(v, "Tournament")

    @model_validator(mode="after")
    def validate_entrants(self):
        if self.format == TournamentFormat.americano:
            if self.teams:
                raise ValueError("americano tournaments take players, not teams")
            if self.players is None:
                raise ValueError("players is required for americano tournaments")
            if self.americano_settings is None:
                self.americano_settings = AmericanoSettings()
        else:
            if self.players:
                raise ValueError(f"{self.format.value} tournaments take teams, not players")
            if self.teams is None:
                raise ValueError(f"teams is required for {self.format.value} tournaments")
            if self.americano_settings is not None:
                raise ValueError(f"americano_settings only apply to americano tournaments, not {self.format.value}")
            if self.format == TournamentFormat.multi_stage and not self.stages:
                raise ValueError("stages is required for multi-stage tournaments")
        if self.stages and self.format != TournamentFormat.multi_stage:
            raise ValueError(f"stages only apply to multi-stage tournaments, not {self.format.value}")
        return self


class MatchScoreUpdate(BaseModel):
    team1_score: int = Field(ge=0)
    team2_score: int = Field(ge=0)
    status: Optional[MatchStatus] = None


class MatchDetailsUpdate(BaseModel):
    scheduled_time: Optional[str] = None
    venue: Optional[str] = None
