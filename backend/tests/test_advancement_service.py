"""Match progression: advancing winners, retracting corrected results, tournament status."""
import random

import pytest

from tourney.models.match import Match
from tourney.models.stage import Stage, StageType
from tourney.services.advancement_service import (
    BracketIndex,
    apply_score_update,
    decide_winner,
    derive_tournament_status,
    is_knockout_match,
    is_playable,
)
from tourney.services.bracket_generation import generate_single_elimination_matches
from tourney.services.round_robin import generate_round_robin_matches


@pytest.fixture
def four_team_bracket():
    """A v B and C v D semifinals feeding an empty final."""
    semi1 = Match(round=1, match_number=1, team1_id="A", team2_id="B")
    semi2 = Match(round=1, match_number=2, team1_id="C", team2_id="D")
    final = Match(round=2, match_number=3)
    return {"matches": [semi1, semi2, final], "semi1": semi1, "semi2": semi2, "final": final}


def _score(bracket, match, s1, s2, status="completed"):
    return apply_score_update(bracket["matches"], match, s1, s2, status=status, knockout=True)


def _state(matches):
    return [
        (m.team1_id, m.team2_id, m.team1_score, m.team2_score, m.status, m.winner_id)
        for m in matches
    ]


def test_decide_winner():
    m = Match(round=1, match_number=1, team1_id="A", team2_id="B", team1_score=3, team2_score=1)
    assert decide_winner(m) == "A"
    m.team2_score = 5
    assert decide_winner(m) == "B"
    m.team1_score = 5
    assert decide_winner(m) is None


def test_winner_advances_to_correct_slots(four_team_bracket):
    b = four_team_bracket
    _score(b, b["semi1"], 6, 2)
    assert b["semi1"].winner_id == "A"
    assert b["final"].team1_id == "A"
    assert b["final"].team2_id is None

    _score(b, b["semi2"], 1, 6)
    assert b["semi2"].winner_id == "D"
    assert b["final"].team2_id == "D"


def test_live_update_does_not_advance(four_team_bracket):
    b = four_team_bracket
    _score(b, b["semi1"], 3, 0, status="live")
    assert b["semi1"].winner_id is None
    assert b["final"].team1_id is None


def test_status_is_kept_when_omitted(four_team_bracket):
    b = four_team_bracket
    _score(b, b["semi1"], 1, 0, status="live")
    apply_score_update(b["matches"], b["semi1"], 2, 0, knockout=True)
    assert b["semi1"].status == "live"
    assert (b["semi1"].team1_score, b["semi1"].team2_score) == (2, 0)


def test_correction_retracts_through_the_final(four_team_bracket):
    """Re-scoring a semifinal clears the old winner from the final, resets it, and inserts the new winner."""
    b = four_team_bracket
    _score(b, b["semi1"], 6, 2)  # A
    _score(b, b["semi2"], 6, 3)  # C
    _score(b, b["final"], 4, 2)  # A wins the final
    assert b["final"].winner_id == "A"

    semi2_before = _state([b["semi2"]])

    _score(b, b["semi1"], 2, 6)  # correction: B wins

    final = b["final"]
    assert b["semi1"].winner_id == "B"
    assert final.team1_id == "B"
    assert final.team2_id == "C"
    assert final.status == "upcoming"
    assert (final.team1_score, final.team2_score) == (0, 0)
    assert final.winner_id is None
    assert _state([b["semi2"]]) == semi2_before


def test_reopening_a_match_retracts_its_winner(four_team_bracket):
    b = four_team_bracket
    _score(b, b["semi1"], 6, 2)
    _score(b, b["semi2"], 6, 3)
    _score(b, b["final"], 4, 2)

    _score(b, b["semi1"], 6, 2, status="live")

    assert b["semi1"].winner_id is None
    assert b["final"].team1_id is None
    assert b["final"].team2_id == "C"
    assert b["final"].status == "upcoming"
    assert b["final"].winner_id is None


def test_tie_retracts_previous_winner_without_advancing(four_team_bracket):
    b = four_team_bracket
    _score(b, b["semi1"], 6, 2)
    assert b["final"].team1_id == "A"

    _score(b, b["semi1"], 3, 3)
    assert b["semi1"].status == "completed"
    assert b["semi1"].winner_id is None
    assert b["final"].team1_id is None


def test_identical_update_is_idempotent(four_team_bracket):
    b = four_team_bracket
    _score(b, b["semi1"], 6, 2)
    _score(b, b["semi2"], 6, 3)
    _score(b, b["final"], 4, 2)
    once = _state(b["matches"])

    _score(b, b["final"], 4, 2)
    _score(b, b["semi1"], 6, 2)
    assert _state(b["matches"]) == once


def test_same_winner_correction_keeps_downstream(four_team_bracket):
    b = four_team_bracket
    _score(b, b["semi1"], 6, 2)
    _score(b, b["semi2"], 6, 3)
    _score(b, b["final"], 4, 2)

    _score(b, b["semi1"], 7, 5)  # still A
    assert b["final"].status == "completed"
    assert b["final"].winner_id == "A"
    assert (b["final"].team1_score, b["final"].team2_score) == (4, 2)


def test_non_knockout_update_touches_only_the_match():
    matches = generate_round_robin_matches(["A", "B", "C"])
    before = _state(matches[1:])
    apply_score_update(matches, matches[0], 2, 1, status="completed", knockout=False)
    assert matches[0].winner_id == "A"
    assert _state(matches[1:]) == before


def test_correction_cascades_across_every_round():
    """In an 8-team bracket, flipping a first-round result unwinds every later match it reached."""
    matches = generate_single_elimination_matches([f"T{i}" for i in range(8)], rng=random.Random(5))
    index = BracketIndex(matches)

    # Play every round in order; team1 always wins
    for round_number in (1, 2, 3):
        for m in sorted((m for m in matches if m.round == round_number), key=lambda m: m.match_number):
            apply_score_update(matches, m, 3, 1, status="completed", knockout=True)

    first = min((m for m in matches if m.round == 1), key=lambda m: m.match_number)
    champion = first.team1_id
    path = []
    current = first
    while index.downstream(current) is not None:
        current = index.downstream(current)[0]
        path.append(current)
    assert len(path) == 2
    assert all(m.winner_id == champion for m in path)

    path_ids = {first.id} | {m.id for m in path}
    untouched = [m for m in matches if m.id not in path_ids]
    untouched_before = _state(untouched)

    apply_score_update(matches, first, 1, 3, status="completed", knockout=True)
    new_winner = first.team2_id

    semi, final = path
    assert semi.team1_id == new_winner
    assert semi.status == "upcoming" and semi.winner_id is None
    assert (semi.team1_score, semi.team2_score) == (0, 0)
    assert final.team1_id is None
    assert final.status == "upcoming" and final.winner_id is None
    assert _state(untouched) == untouched_before


def test_index_keeps_stages_apart():
    group = Match(stage_id="groups", round=1, match_number=1, team1_id="A", team2_id="B")
    ko_semi = Match(stage_id="ko", round=1, match_number=1, team1_id="A", team2_id="C")
    ko_final = Match(stage_id="ko", round=2, match_number=2)
    index = BracketIndex([group, ko_semi, ko_final])

    assert index.downstream(group) is None
    assert index.downstream(ko_semi) == (ko_final, "team1_id")
    assert index.downstream(ko_final) is None


def test_is_knockout_match():
    groups = Stage(id="g", tournament_id="t", name="Groups", type=StageType.group, order=1)
    knockout = Stage(id="k", tournament_id="t", name="Knockout", type=StageType.knockout, order=1)
    in_group = Match(stage_id="g", round=1, match_number=1)
    in_knockout = Match(stage_id="k", round=1, match_number=1)
    plain = Match(round=1, match_number=1)

    assert is_knockout_match("single-elimination", [], plain)
    assert not is_knockout_match("round-robin", [], plain)
    assert not is_knockout_match("americano", [], plain)
    assert not is_knockout_match("multi-stage", [groups, knockout], in_group)
    assert is_knockout_match("multi-stage", [groups, knockout], in_knockout)


def test_playable_matches():
    assert is_playable(Match(round=1, match_number=1, team1_id="A", team2_id="B"))
    assert not is_playable(Match(round=1, match_number=1, team1_id="A"))
    assert not is_playable(Match(round=1, match_number=1))
    assert not is_playable(Match(round=1, match_number=1, team1_id="bye-0", team2_id="B"))


def test_tournament_status_flips_with_completion():
    matches = generate_round_robin_matches(["A", "B", "C"])
    assert derive_tournament_status(matches) == "active"

    for m in matches:
        apply_score_update(matches, m, 1, 0, status="completed")
    assert derive_tournament_status(matches) == "completed"

    apply_score_update(matches, matches[1], 1, 0, status="live")
    assert derive_tournament_status(matches) == "active"


def test_walkovers_do_not_count_as_playable():
    matches = generate_single_elimination_matches(["A", "B", "C"], rng=random.Random(0))
    playable = [m for m in matches if is_playable(m)]
    assert len(playable) == 1
    assert derive_tournament_status([]) == "active"
