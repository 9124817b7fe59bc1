from __future__ import annotations

import json
import os
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

from darkscenario.content.schema import validate_scenario_payload
from darkscenario.gen.generator import GENERATOR_VERSION
from darkscenario.gen.hash import scenario_hash, scenario_payload_hash
from darkscenario.gen.layout import check_layout_integrity
from darkscenario.gen.models import GeneratedScenario

SCHEMA_VERSION = 1
CANONICAL_JSON_INDENT = 2
CANONICAL_JSON_SEPARATORS = (",", ": ")


def build_scenario_payload(scenario: GeneratedScenario) -> dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "generator_version": GENERATOR_VERSION,
        "scenario_hash": scenario_hash(scenario),
        "scenario": scenario.to_dict(),
    }


def canonical_json(payload: dict[str, Any]) -> str:
    return json.dumps(
        payload,
        indent=CANONICAL_JSON_INDENT,
        separators=CANONICAL_JSON_SEPARATORS,
        sort_keys=True,
        ensure_ascii=False,
    )


def _write_atomic_json(path: str | Path, payload: dict[str, Any]) -> None:
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    serialized = canonical_json(payload)

    temp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=destination.parent,
            delete=False,
            suffix=".tmp",
        ) as temp_file:
            temp_file.write(serialized)
            temp_file.flush()
            os.fsync(temp_file.fileno())
            temp_path = Path(temp_file.name)
        os.replace(temp_path, destination)
    except Exception:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        raise


def save_scenario_json(path: str | Path, scenario: GeneratedScenario) -> dict[str, Any]:
    payload = build_scenario_payload(scenario)
    validate_scenario_payload(payload)
    _write_atomic_json(path, payload)
    return payload


def load_scenario_payload(payload: dict[str, Any]) -> GeneratedScenario:
    validate_scenario_payload(payload)

    expected_hash = payload["scenario_hash"]
    actual_hash = scenario_payload_hash(payload["scenario"])
    if expected_hash != actual_hash:
        raise ValueError(
            f"scenario_hash mismatch while loading scenario (stored={expected_hash}, recomputed={actual_hash})"
        )

    scenario = GeneratedScenario.from_dict(payload["scenario"])
    check_layout_integrity(scenario.map_layout)
    return scenario


def load_scenario_json(path: str | Path) -> GeneratedScenario:
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    return load_scenario_payload(payload)
