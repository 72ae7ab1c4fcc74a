"""
Tests for YAML configuration loading.
"""

import pytest
from pathlib import Path
import yaml
from werewolf.config import GameConfig, load_config, load_config_from_yaml


def write_yaml(tmp_path, data):
    path = tmp_path / "game.yaml"
    path.write_text(yaml.safe_dump(data))
    return str(path)


def test_defaults():
    config = load_config()
    assert config.player_count == 10
    assert config.badge_vote_weight == 1.5
    assert config.max_revote_count == 3
    assert config.max_badge_revote_count == 4
    assert config.decision_timeout == 30.0
    assert config.human_decision_timeout == 120.0


def test_load_values(tmp_path):
    path = write_yaml(tmp_path, {
        "player_count": 12,
        "witch_self_save": "never",
        "badge_weight_rounding": "floor",
        "agent_types": {"0": "simple_llm_agent"},
        "random_seed": 5,
    })
    config = load_config(path)

    assert config.player_count == 12
    assert config.witch_self_save == "never"
    assert config.badge_weight_rounding == "floor"
    assert config.agent_types == {0: "simple_llm_agent"}
    assert config.random_seed == 5


def test_unknown_key_warns(tmp_path, capsys):
    path = write_yaml(tmp_path, {"moon_phase": "full", "decision_timeout": 5})
    config = load_config_from_yaml(path)

    out = capsys.readouterr().out
    assert "moon_phase" in out
    # Derived properties cannot be overwritten from YAML
    assert "decision_timeout" in out
    assert config.decision_timeout == 30.0


def test_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config_from_yaml(str(path)) == GameConfig()


def test_missing_file():
    with pytest.raises(FileNotFoundError):
        load_config_from_yaml("does/not/exist.yaml")


@pytest.mark.parametrize("key,value", [
    ("player_count", 7),
    ("player_count", 13),
    ("witch_self_save", "sometimes"),
    ("badge_transfer_policy", "burn"),
    ("max_revote_count", -1),
    ("decision_timeout_ms", 0),
    ("human_seat", 10),
])
def test_invalid_values(tmp_path, key, value):
    path = write_yaml(tmp_path, {key: value})
    with pytest.raises(ValueError):
        load_config_from_yaml(path)


def test_loader_does_not_touch_defaults(tmp_path):
    from werewolf.config import default_config
    path = write_yaml(tmp_path, {"player_count": 8})
    load_config(path)
    assert default_config.player_count == 10


@pytest.mark.parametrize("name", ["dummy_agent.yaml", "simple_llm_agent.yaml"])
def test_shipped_configs_load(name):
    path = Path(__file__).parent.parent / "configs" / name
    config = load_config(str(path))
    assert config.agent_type == name.replace(".yaml", "")
