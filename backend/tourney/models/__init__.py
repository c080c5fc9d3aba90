from tourney.models.match import Match, MatchStatus
from tourney.models.player import Player
from tourney.models.stage import Stage, StageType
from tourney.models.team import Team
from tourney.models.tournament import (
    Tournament,
    TournamentFormat,
    TournamentStatus,
    TournamentType,
    generate_id,
)

__all__ = [
    "Tournament",
    "TournamentFormat",
    "TournamentStatus",
    "TournamentType",
    "Team",
    "Player",
    "Stage",
    "StageType",
    "Match",
    "MatchStatus",
    "generate_id",
]
