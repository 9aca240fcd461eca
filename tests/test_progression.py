from datetime import datetime, timezone

from engine.game import add_round, create_match, update_round_results
from engine.progression import (
    PlayerStatus,
    evaluate_progression,
    near_winning_players,
    player_status,
    ranked_standings,
    total_scores,
)
from engine.state import Match, Round

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def play_round(match, cards, predictions, results):
    match = add_round(match, cards, predictions)
    return update_round_results(match, len(match.rounds) - 1, results, now=FIXED_NOW)


def scored_round(scores):
    return Round(
        cards_per_player=2,
        player_predictions={player: 0 for player in scores},
        player_results={player: 0 for player in scores},
        player_scores=dict(scores),
    )


def test_exact_and_missed_predictions_scored():
    match = create_match(["p1", "p2"], 50)
    match = play_round(match, 5, {"p1": 2, "p2": 1}, {"p1": 2, "p2": 3})

    assert match.rounds[0].player_scores == {"p1": 30, "p2": -20}
    assert total_scores(match) == {"p1": 30, "p2": -20}
    assert match.losers == []
    assert match.is_active


def test_totals_accumulate_across_rounds():
    match = create_match(["p1", "p2", "p3"], 500)
    match = play_round(match, 2, {"p1": 1, "p2": 0, "p3": 0}, {"p1": 1, "p2": 1, "p3": 0})
    match = play_round(match, 3, {"p1": 1, "p2": 1, "p3": 0}, {"p1": 1, "p2": 2, "p3": 0})

    assert total_scores(match) == {"p1": 40, "p2": -20, "p3": 20}


def test_reaching_points_with_two_players_decides_winner():
    match = create_match(["p1", "p2"], 50)
    match = play_round(match, 4, {"p1": 4, "p2": 1}, {"p1": 4, "p2": 0})

    assert match.losers == ["p1"]
    assert match.winner == "p2"
    assert not match.is_active
    assert match.completed_at == FIXED_NOW
    assert player_status(match, "p1") is PlayerStatus.FINISHED
    assert player_status(match, "p2") is PlayerStatus.WINNER


def test_first_finisher_leaves_the_active_set():
    match = create_match(["p1", "p2", "p3"], 50)
    match = play_round(match, 4, {"p1": 4, "p2": 1, "p3": 0}, {"p1": 4, "p2": 0, "p3": 0})

    assert match.losers == ["p1"]
    assert match.winner is None
    assert match.is_active
    assert match.active_players() == ["p2", "p3"]

    match = add_round(match, 1, {"p2": 0, "p3": 0})
    assert set(match.rounds[-1].player_predictions) == {"p2", "p3"}


def test_same_round_qualifiers_ordered_by_round_score_then_seat():
    match = create_match(["p1", "p2", "p3", "p4"], 10)
    match = play_round(
        match,
        2,
        {"p1": 0, "p2": 1, "p3": 0, "p4": 0},
        {"p1": 0, "p2": 1, "p3": 0, "p4": 1},
    )

    assert match.losers == ["p2", "p1", "p3"]
    assert match.winner == "p4"
    assert not match.is_active


def test_losers_never_cover_every_player():
    match = Match(players=["a", "b", "c"], winning_points=10, rounds=[scored_round({"a": 20, "b": 10, "c": 10})])

    evaluate_progression(match, FIXED_NOW)

    assert match.losers == ["a", "b"]
    assert match.winner == "c"
    assert len(match.losers) == len(match.players) - 1


def test_evaluation_is_noop_without_qualifiers():
    match = Match(players=["a", "b"], winning_points=100, rounds=[scored_round({"a": 20, "b": -10})])
    evaluate_progression(match)
    assert match.losers == []
    assert match.is_active


def test_ranking_lists_finishers_then_active_by_total():
    match = create_match(["p1", "p2", "p3", "p4"], 50)
    match = play_round(
        match,
        4,
        {"p1": 4, "p2": 1, "p3": 0, "p4": 0},
        {"p1": 4, "p2": 0, "p3": 0, "p4": 0},
    )

    standings = ranked_standings(match)
    assert [s.player for s in standings] == ["p1", "p3", "p4", "p2"]
    assert [s.total for s in standings] == [50, 10, 10, -10]
    assert standings[0].status is PlayerStatus.FINISHED
    assert all(s.status is PlayerStatus.ACTIVE for s in standings[1:])


def test_last_place_when_everyone_finished():
    match = Match(players=["a", "b"], winning_points=10, losers=["a", "b"], is_active=False)
    assert player_status(match, "b") is PlayerStatus.LAST_PLACE
    assert [s.player for s in ranked_standings(match)] == ["a", "b"]


def test_near_winning_players():
    match = create_match(["p1", "p2", "p3"], 50)
    match = play_round(match, 3, {"p1": 3, "p2": 1, "p3": 0}, {"p1": 3, "p2": 0, "p3": 0})

    assert total_scores(match)["p1"] == 40
    assert near_winning_players(match) == ["p1"]
    assert near_winning_players(match, ratio=0.9) == []
    assert ranked_standings(match)[0].near_win
