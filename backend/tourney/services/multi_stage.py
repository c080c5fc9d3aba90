"""
Multi-stage composition: group stages (round robin per group) and a knockout stage.

Stages are processed in ascending order. Group stages split the entrant list
into contiguous groups; a knockout stage that opens the tournament gets a full
bracket over every entrant. A knockout stage that follows another stage is
recorded without matches, since seeding it from group qualifiers is not
implemented.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from tourney.models.match import Match
from tourney.models.stage import Stage, StageType
from tourney.models.tournament import generate_id
from tourney.services.bracket_generation import generate_single_elimination_matches
from tourney.services.round_robin import generate_round_robin_matches

logger = logging.getLogger(__name__)

DEFAULT_GROUP_COUNT = 2


@dataclass
class StageConfig:
    """Declared stage, as received at tournament creation."""

    id: str
    name: str
    type: StageType
    order: int
    group_count: Optional[int] = None
    qualified_count: Optional[int] = None


@dataclass
class MultiStageResult:
    matches: List[Match] = field(default_factory=list)
    stages: List[Stage] = field(default_factory=list)


def group_name_for_index(index: int) -> str:
    """0 -> "Group A", 1 -> "Group B", ..."""
    return f"Group {chr(ord('A') + index)}"


def partition_contiguous(entrant_ids: Sequence[str], group_count: int) -> List[List[str]]:
    """
    Split entrants into group_count contiguous blocks whose sizes differ by at most 1.

    Earlier groups take the extra entrants:
        10 entrants, 4 groups -> sizes 3, 3, 2, 2
    """
    if group_count < 1:
        raise ValueError(f"group_count must be >= 1, got {group_count}")

    base, extra = divmod(len(entrant_ids), group_count)
    groups: List[List[str]] = []
    start = 0
    for group_index in range(group_count):
        size = base + (1 if group_index < extra else 0)
        groups.append(list(entrant_ids[start : start + size]))
        start += size
    return groups


def generate_multi_stage_matches(
    entrant_ids: Sequence[str],
    stage_configs: Sequence[StageConfig],
    rng: Optional[random.Random] = None,
) -> MultiStageResult:
    """
    Generate matches for every declared stage.

    Raises:
        InsufficientEntrantsError: a group (or the opening bracket) has fewer than 2 entrants
        ValueError: a group stage declares group_count < 1
    """
    result = MultiStageResult()

    for config in sorted(stage_configs, key=lambda c: c.order):
        stage = Stage(
            id=config.id,
            name=config.name,
            type=config.type,
            order=config.order,
            qualified_count=config.qualified_count,
        )

        if config.type == StageType.group:
            group_count = config.group_count or DEFAULT_GROUP_COUNT
            groups = []
            for group_index, group_entrants in enumerate(partition_contiguous(entrant_ids, group_count)):
                group_name = group_name_for_index(group_index)
                groups.append({"id": generate_id(), "name": group_name, "team_ids": group_entrants})
                result.matches.extend(
                    generate_round_robin_matches(group_entrants, stage_id=config.id, group_name=group_name)
                )
            stage.groups = groups

        elif config.type == StageType.knockout:
            if config.order == 1:
                result.matches.extend(generate_single_elimination_matches(entrant_ids, stage_id=config.id, rng=rng))
            else:
                logger.warning(
                    "Knockout stage %r (order %d) follows another stage; qualifier seeding is not "
                    "implemented, no matches generated",
                    config.name,
                    config.order,
                )

        result.stages.append(stage)

    return result
