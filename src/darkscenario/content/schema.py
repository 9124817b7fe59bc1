from __future__ import annotations

from typing import Any

from darkscenario.gen.config import DOOR_TYPES, LAYOUT_TYPES, TILE_ROLES

SUPPORTED_SCHEMA_VERSIONS = {1}
REQUIRED_SCENARIO_FIELDS = {
    "name",
    "icon",
    "narrative",
    "seed",
    "config",
    "tiles",
    "mapLayout",
    "objectives",
    "specialRules",
    "tokens",
    "conditions",
    "difficultyModifiers",
}


def _require_list(value: Any, *, field_name: str) -> list[Any]:
    if not isinstance(value, list):
        raise ValueError(f"{field_name} must be a list")
    for index, row in enumerate(value):
        if not isinstance(row, dict):
            raise ValueError(f"{field_name}[{index}] must be an object")
    return value


def _validate_map_layout(layout: Any) -> None:
    if not isinstance(layout, dict):
        raise ValueError("scenario.mapLayout must be an object")
    if layout.get("layoutType") not in LAYOUT_TYPES:
        raise ValueError(f"scenario.mapLayout.layoutType unsupported: {layout.get('layoutType')}")
    grid_size = layout.get("gridSize")
    if not isinstance(grid_size, dict) or not {"rows", "cols"} <= grid_size.keys():
        raise ValueError("scenario.mapLayout.gridSize must contain rows and cols")

    tiles = _require_list(layout.get("placedTiles"), field_name="scenario.mapLayout.placedTiles")
    for index, tile in enumerate(tiles):
        field_name = f"scenario.mapLayout.placedTiles[{index}]"
        if tile.get("role") not in TILE_ROLES:
            raise ValueError(f"{field_name}.role unsupported: {tile.get('role')}")
        position = tile.get("position")
        if not isinstance(position, dict) or not {"row", "col"} <= position.keys():
            raise ValueError(f"{field_name}.position must contain row and col")
        _require_list(tile.get("tokens", []), field_name=f"{field_name}.tokens")

    connections = _require_list(layout.get("connections"), field_name="scenario.mapLayout.connections")
    for index, connection in enumerate(connections):
        if connection.get("doorType") not in DOOR_TYPES:
            raise ValueError(
                f"scenario.mapLayout.connections[{index}].doorType unsupported: {connection.get('doorType')}"
            )


def _validate_objective_order(objectives: list[dict[str, Any]]) -> None:
    orders = sorted(objective.get("order") for objective in objectives if isinstance(objective.get("order"), int))
    if orders != list(range(1, len(objectives) + 1)):
        raise ValueError(f"scenario.objectives order must be contiguous from 1: {orders}")


def _validate_token_totals(scenario: dict[str, Any]) -> None:
    table = {row.get("name"): row.get("count") for row in scenario["tokens"]}
    placed: dict[str, int] = {}
    for tile in scenario["mapLayout"]["placedTiles"]:
        for token in tile.get("tokens", []):
            name = token.get("name")
            placed[name] = placed.get(name, 0) + int(token.get("count", 0))
    for name, total in table.items():
        if placed.get(name, 0) != total:
            raise ValueError(f"token total mismatch for {name}: table={total} placed={placed.get(name, 0)}")
    unknown = sorted(set(placed) - set(table))
    if unknown:
        raise ValueError(f"placed tokens missing from summary table: {unknown}")


def validate_scenario_dict(scenario: dict[str, Any]) -> None:
    if not isinstance(scenario, dict):
        raise ValueError("scenario must be an object")
    missing = REQUIRED_SCENARIO_FIELDS - set(scenario.keys())
    if missing:
        raise ValueError(f"scenario missing fields: {sorted(missing)}")

    config = scenario["config"]
    if not isinstance(config, dict):
        raise ValueError("scenario.config must be an object")
    if config.get("seed") != scenario["seed"]:
        raise ValueError("scenario.seed must echo scenario.config.seed")

    _validate_map_layout(scenario["mapLayout"])
    objectives = _require_list(scenario["objectives"], field_name="scenario.objectives")
    if not objectives:
        raise ValueError("scenario.objectives must not be empty")
    _validate_objective_order(objectives)
    _require_list(scenario["specialRules"], field_name="scenario.specialRules")
    _require_list(scenario["tokens"], field_name="scenario.tokens")
    _require_list(scenario["tiles"], field_name="scenario.tiles")
    _validate_token_totals(scenario)

    conditions = scenario["conditions"]
    if not isinstance(conditions, dict) or not {"victory", "defeat"} <= conditions.keys():
        raise ValueError("scenario.conditions must contain victory and defeat")
    modifiers = scenario["difficultyModifiers"]
    if not isinstance(modifiers, list) or not all(isinstance(value, str) for value in modifiers):
        raise ValueError("scenario.difficultyModifiers must be a list of strings")


def validate_scenario_payload(payload: dict[str, Any]) -> None:
    if not isinstance(payload, dict):
        raise ValueError("scenario payload must be an object")

    schema_version = payload.get("schema_version")
    if not isinstance(schema_version, int):
        raise ValueError("scenario payload must contain integer field: schema_version")
    if schema_version not in SUPPORTED_SCHEMA_VERSIONS:
        raise ValueError(f"unsupported schema_version: {schema_version}")

    generator_version = payload.get("generator_version")
    if isinstance(generator_version, bool) or not isinstance(generator_version, int):
        raise ValueError("scenario payload must contain integer field: generator_version")

    digest = payload.get("scenario_hash")
    if not isinstance(digest, str) or not digest:
        raise ValueError("scenario payload must contain string field: scenario_hash")

    validate_scenario_dict(payload.get("scenario"))
