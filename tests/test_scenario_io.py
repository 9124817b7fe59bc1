import json
from pathlib import Path

import pytest

from darkscenario.content.catalogs import load_scenario_catalogs
from darkscenario.content.io import load_scenario_json, save_scenario_json
from darkscenario.gen.config import ScenarioConfig
from darkscenario.gen.generator import GENERATOR_VERSION, generate
from darkscenario.gen.hash import scenario_hash
from darkscenario.gen.models import GeneratedScenario


def _scenario(seed: str = "save-me") -> GeneratedScenario:
    config = ScenarioConfig(seed=seed, map_size="large", difficulty="hard", player_count=5)
    return generate(config, load_scenario_catalogs())


def test_save_then_load_round_trip_matches_scenario_hash(tmp_path: Path) -> None:
    scenario = _scenario()
    out_path = tmp_path / "nested" / "scenario.json"

    save_scenario_json(out_path, scenario)
    loaded = load_scenario_json(out_path)

    assert loaded == scenario
    assert scenario_hash(loaded) == scenario_hash(scenario)


def test_save_includes_versions_and_hash(tmp_path: Path) -> None:
    scenario = _scenario()
    out_path = tmp_path / "scenario.json"

    save_scenario_json(out_path, scenario)
    payload = json.loads(out_path.read_text(encoding="utf-8"))

    assert payload["schema_version"] == 1
    assert payload["generator_version"] == GENERATOR_VERSION
    assert payload["scenario_hash"] == scenario_hash(scenario)
    assert payload["scenario"]["mapLayout"]["layoutType"] == scenario.map_layout.layout_type
    assert list(tmp_path.iterdir()) == [out_path]


def test_loader_fails_when_scenario_hash_does_not_match(tmp_path: Path) -> None:
    out_path = tmp_path / "scenario.json"
    save_scenario_json(out_path, _scenario())

    payload = json.loads(out_path.read_text(encoding="utf-8"))
    payload["scenario"]["name"] = "Tampered"
    out_path.write_text(json.dumps(payload), encoding="utf-8")

    with pytest.raises(ValueError, match="scenario_hash mismatch"):
        load_scenario_json(out_path)


def test_loader_rejects_unsupported_schema_version(tmp_path: Path) -> None:
    out_path = tmp_path / "scenario.json"
    save_scenario_json(out_path, _scenario())

    payload = json.loads(out_path.read_text(encoding="utf-8"))
    payload["schema_version"] = 99
    out_path.write_text(json.dumps(payload), encoding="utf-8")

    with pytest.raises(ValueError, match="unsupported schema_version"):
        load_scenario_json(out_path)


def test_loader_rejects_token_total_mismatch(tmp_path: Path) -> None:
    out_path = tmp_path / "scenario.json"
    save_scenario_json(out_path, _scenario())

    payload = json.loads(out_path.read_text(encoding="utf-8"))
    payload["scenario"]["tokens"][0]["count"] += 1
    out_path.write_text(json.dumps(payload), encoding="utf-8")

    with pytest.raises(ValueError, match="token total mismatch"):
        load_scenario_json(out_path)


def test_loader_rejects_broken_objective_order(tmp_path: Path) -> None:
    out_path = tmp_path / "scenario.json"
    save_scenario_json(out_path, _scenario())

    payload = json.loads(out_path.read_text(encoding="utf-8"))
    payload["scenario"]["objectives"][0]["order"] = 7
    out_path.write_text(json.dumps(payload), encoding="utf-8")

    with pytest.raises(ValueError, match="order must be contiguous"):
        load_scenario_json(out_path)
