import pytest

from engine.game import add_round, cancel_match, complete_match, create_match, update_round_results
from engine.stats import PlayerStats, leaders, player_stats, ranked_players


def decided_match(players, finisher_predictions, results):
    match = create_match(players, 50)
    match = add_round(match, 4, finisher_predictions)
    return update_round_results(match, 0, results)


def test_stats_count_wins_losses_and_final_rounds():
    first = decided_match(["p1", "p2"], {"p1": 4, "p2": 1}, {"p1": 4, "p2": 0})
    second = decided_match(["p2", "p1"], {"p2": 4, "p1": 1}, {"p2": 4, "p1": 0})
    third = decided_match(["p1", "p3"], {"p1": 4, "p3": 1}, {"p1": 4, "p3": 0})

    stats = player_stats([first, second, third], "p1")
    assert stats.matches_played == 3
    assert stats.matches_won == 1
    assert stats.matches_lost == 2
    assert stats.final_rounds_played == 3
    assert stats.total_points == 50 - 10 + 50
    assert abs(stats.win_rate - 1 / 3) < 1e-9


def test_cancelled_and_active_matches_do_not_count():
    active = create_match(["p1", "p2"], 50)
    cancelled = cancel_match(create_match(["p1", "p2"], 50))
    assert player_stats([active, cancelled], "p1") == PlayerStats()
    assert PlayerStats().win_rate == 0.0


def test_forced_completion_is_neither_win_nor_loss():
    forced = complete_match(create_match(["p1", "p2", "p3"], 50))
    stats = player_stats([forced], "p3")
    assert stats.matches_played == 1
    assert stats.matches_won == 0
    assert stats.matches_lost == 0


def test_leaders():
    p2_wins = decided_match(["p1", "p2"], {"p1": 4, "p2": 1}, {"p1": 4, "p2": 0})
    p2_wins_again = decided_match(["p1", "p2"], {"p1": 4, "p2": 1}, {"p1": 4, "p2": 0})
    p1_wins = decided_match(["p3", "p1"], {"p3": 4, "p1": 1}, {"p3": 4, "p1": 0})

    top = leaders([p2_wins, p2_wins_again, p1_wins], ["p1", "p2", "p3"])
    assert top.most_wins == "p2"
    assert top.most_losses == "p1"


def test_leaders_pick_first_player_on_ties():
    p2_wins = decided_match(["p1", "p2"], {"p1": 4, "p2": 1}, {"p1": 4, "p2": 0})
    p1_wins = decided_match(["p3", "p1"], {"p3": 4, "p1": 1}, {"p3": 4, "p1": 0})

    top = leaders([p2_wins, p1_wins], ["p1", "p2", "p3"])
    assert top.most_wins == "p1"
    assert top.most_losses == "p1"

    assert leaders([], ["p1"]).most_wins is None


def test_average_position_follows_ranked_standings():
    first = decided_match(["p1", "p2"], {"p1": 4, "p2": 1}, {"p1": 4, "p2": 0})
    second = decided_match(["p2", "p1"], {"p2": 4, "p1": 1}, {"p2": 4, "p1": 0})
    third = decided_match(["p1", "p3"], {"p1": 4, "p3": 1}, {"p1": 4, "p3": 0})

    # Finishers rank ahead of the last remaining player.
    assert player_stats([first, second, third], "p1").average_position == pytest.approx(4 / 3)
    assert player_stats([first, second], "p2").average_position == pytest.approx(1.5)

    forced = complete_match(create_match(["p1", "p2", "p3"], 50))
    assert player_stats([forced], "p3").average_position == 3.0


def test_ranked_players_sorts_by_stat_column():
    first = decided_match(["p1", "p2"], {"p1": 4, "p2": 1}, {"p1": 4, "p2": 0})
    second = decided_match(["p2", "p1"], {"p2": 4, "p1": 1}, {"p2": 4, "p1": 0})
    third = decided_match(["p1", "p3"], {"p1": 4, "p3": 1}, {"p1": 4, "p3": 0})
    matches = [first, second, third]
    players = ["p3", "p2", "p1"]

    by_points = ranked_players(matches, players, "total_points")
    assert [player for player, _ in by_points] == ["p1", "p2", "p3"]
    assert by_points[0][1].total_points == 90

    by_position = ranked_players(matches, players, "average_position", descending=False)
    assert [player for player, _ in by_position] == ["p1", "p2", "p3"]

    # Every player has one win, so the given order is kept.
    assert [player for player, _ in ranked_players(matches, players, "matches_won")] == players


def test_ranked_players_rejects_unknown_column():
    with pytest.raises(ValueError, match="nickname"):
        ranked_players([], ["p1"], "nickname")
