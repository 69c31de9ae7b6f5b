from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from delve.config import DungeonConfig, GenerationStrategy
from delve.errors import InvalidDungeonConfig


def test_packaged_defaults_match_model_defaults():
    assert DungeonConfig.load() == DungeonConfig()
    assert DungeonConfig.defaults()["width"] == 60


def test_user_yaml_is_merged_over_defaults(tmp_path: Path):
    p = tmp_path / "dungeon.yaml"
    p.write_text("dungeon:\n  width: 30\n  seed: abc\n  strategy: corridor_first\n", encoding="utf-8")
    cfg = DungeonConfig.load(p)
    assert cfg.width == 30
    assert cfg.height == 40
    assert cfg.seed == "abc"
    assert cfg.strategy is GenerationStrategy.CORRIDOR_FIRST


def test_flat_yaml_and_keyword_overrides(tmp_path: Path):
    p = tmp_path / "flat.yaml"
    p.write_text("height: 25\nwidth: 35\n", encoding="utf-8")
    cfg = DungeonConfig.load(p, width=50, seed=None)
    assert cfg.height == 25
    assert cfg.width == 50
    assert cfg.seed is None


def test_missing_user_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        DungeonConfig.load(tmp_path / "nope.yaml")


def test_invalid_values_are_collected():
    with pytest.raises(InvalidDungeonConfig) as ei:
        DungeonConfig.from_mapping({"width": 0, "corridor_width": 0, "bogus": 1})
    locs = {e["loc"] for e in ei.value.errors}
    assert ("width",) in locs
    assert ("corridor_width",) in locs
    assert ("bogus",) in locs
    assert "at width" in ei.value.to_human()


def test_rooms_must_fit_area():
    with pytest.raises(InvalidDungeonConfig) as ei:
        DungeonConfig.from_mapping({"width": 10, "height": 10, "min_room_width": 9})
    assert "<root>" in ei.value.to_human()


def test_seed_normalisation():
    assert DungeonConfig(seed="42").seed == 42
    assert DungeonConfig(seed=" 7 ").seed == 7
    assert DungeonConfig(seed="run-1").seed == "run-1"
    with pytest.raises(ValidationError):
        DungeonConfig(seed=-1)


def test_config_is_frozen():
    cfg = DungeonConfig()
    with pytest.raises(ValidationError):
        cfg.width = 10


def test_partition_minimum_includes_margins():
    cfg = DungeonConfig(min_room_width=5, min_room_height=3, room_margin=2)
    assert cfg.min_partition_width == 9
    assert cfg.min_partition_height == 7


def test_from_env_overrides():
    env = {"DELVE_WIDTH": "30", "DELVE_SEED": "7", "DELVE_STRATEGY": "corridor_first", "OTHER": "x"}
    cfg = DungeonConfig.from_env(env, base=DungeonConfig())
    assert cfg.width == 30
    assert cfg.seed == 7
    assert cfg.strategy is GenerationStrategy.CORRIDOR_FIRST
    assert cfg.height == 40


def test_from_env_reads_process_environment(monkeypatch):
    monkeypatch.setenv("DELVE_HEIGHT", "22")
    monkeypatch.setenv("DELVE_ROOM_RATIO", "0.5")
    cfg = DungeonConfig.from_env()
    assert cfg.height == 22
    assert cfg.room_ratio == 0.5


def test_from_env_rejects_bad_values():
    with pytest.raises(InvalidDungeonConfig):
        DungeonConfig.from_env({"DELVE_WIDTH": "wide"}, base=DungeonConfig())


def test_yaml_round_trip(tmp_path: Path):
    cfg = DungeonConfig(width=44, seed=99, strategy=GenerationStrategy.CORRIDOR_FIRST, room_ratio=0.25)
    out = tmp_path / "nested" / "saved.yaml"
    cfg.to_yaml(out)
    assert out.exists()
    assert DungeonConfig.load(out) == cfg


def test_load_layers_env_between_file_and_keywords(tmp_path: Path, monkeypatch):
    p = tmp_path / "dungeon.yaml"
    p.write_text("dungeon:\n  width: 30\n  height: 30\n", encoding="utf-8")
    monkeypatch.setenv("DELVE_WIDTH", "44")
    monkeypatch.setenv("DELVE_HEIGHT", "22")

    cfg = DungeonConfig.load(p, height=26)
    assert cfg.width == 44, "environment should override the user file"
    assert cfg.height == 26, "keyword overrides should win over the environment"


def test_load_reads_process_environment(monkeypatch):
    monkeypatch.setenv("DELVE_HEIGHT", "22")
    assert DungeonConfig.load().height == 22


def test_load_with_explicit_environ_ignores_process_env(monkeypatch):
    monkeypatch.setenv("DELVE_WIDTH", "31")
    cfg = DungeonConfig.load(environ={"DELVE_SEED": "12"})
    assert cfg.width == 60
    assert cfg.seed == 12
