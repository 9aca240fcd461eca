import json

import pytest

from engine.rules_schema import DEFAULT_RULES, RuleSet, RulesError, ScoringConfig, load_rules


def test_defaults_match_documented_scoring():
    assert DEFAULT_RULES.scoring == ScoringConfig(exact_base=10, exact_per_hand=10, miss_per_hand=10)
    assert DEFAULT_RULES.min_players == 2
    assert DEFAULT_RULES.max_default_cards == 10


def test_load_partial_rules(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text(json.dumps({"scoring": {"miss_per_hand": 5}, "max_default_cards": 7}))

    rules = load_rules(path)
    assert isinstance(rules, RuleSet)
    assert rules.scoring.miss_per_hand == 5
    assert rules.scoring.exact_base == 10
    assert rules.max_default_cards == 7


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        "[1, 2]",
        json.dumps({"min_players": 1}),
        json.dumps({"near_win_ratio": 1.5}),
        json.dumps({"scoring": {"exact_base": 0, "exact_per_hand": 0}}),
    ],
)
def test_invalid_rules_rejected(tmp_path, content):
    path = tmp_path / "rules.json"
    path.write_text(content)
    with pytest.raises(RulesError):
        load_rules(path)


def test_missing_rules_file(tmp_path):
    with pytest.raises(RulesError):
        load_rules(tmp_path / "absent.json")
