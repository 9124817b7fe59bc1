from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeVar

from darkscenario.gen.config import (
    DIFFICULTIES,
    DOOR_TYPES,
    LAYOUT_TYPES,
    MAP_SIZES,
    MAX_PLAYERS,
    MIN_PLAYERS,
    PLAYER_COUNTS,
    TILE_ROLES,
    ScenarioConfig,
)
from darkscenario.gen.errors import CatalogExhausted
from darkscenario.gen.models import TILE_SIDES, GridPosition, MapTile, reachable_from

CATALOG_SCHEMA_VERSION = 1
DEFAULT_CONTENT_ROOT = "content/scenario"
CATALOG_FILES = {
    "map_tiles": "map_tiles.json",
    "layouts": "layouts.json",
    "objectives": "objectives.json",
    "special_rules": "special_rules.json",
    "tokens": "tokens.json",
    "adventures": "adventures.json",
    "difficulty": "difficulty.json",
}
TILE_COUNTS_BY_MAP_SIZE = {"small": (2,), "medium": (3,), "large": (4, 5)}
OBJECTIVE_TYPES = (
    "COLLECT_ITEMS",
    "ACTIVATE_SWITCHES",
    "ESCORT_NPC",
    "FORGE_ARTIFACT",
    "DESTROY_TARGETS",
    "HUNT_MONSTERS",
    "DEFEAT_BOSS",
    "COLLECT_SOULS",
    "TIMED_COLLECTION",
    "CLOSE_RIFT",
    "DEFEND_ZONE",
    "SURVIVE_WAVES",
    "PURIFY_CORRUPTION",
    "RACE_TO_EXIT",
    "RITUAL_SEQUENCE",
)

E = TypeVar("E")


def _require_str(row: dict[str, Any], key: str, *, field_name: str) -> str:
    value = row.get(key)
    if not isinstance(value, str) or not value:
        raise ValueError(f"{field_name}.{key} must be a non-empty string")
    return value


def _require_int(row: dict[str, Any], key: str, *, field_name: str, minimum: int = 0) -> int:
    value = row.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{field_name}.{key} must be an integer")
    if value < minimum:
        raise ValueError(f"{field_name}.{key} must be >= {minimum}")
    return value


def _optional_int(row: dict[str, Any], key: str, *, field_name: str, minimum: int = 0) -> int | None:
    if row.get(key) is None:
        return None
    return _require_int(row, key, field_name=field_name, minimum=minimum)


def _require_str_list(row: dict[str, Any], key: str, *, field_name: str, allowed: Sequence[str]) -> tuple[str, ...]:
    values = row.get(key, [])
    if not isinstance(values, list):
        raise ValueError(f"{field_name}.{key} must be a list when present")
    for index, value in enumerate(values):
        if value not in allowed:
            raise ValueError(f"{field_name}.{key}[{index}] unsupported value: {value!r}")
    # Keep the canonical order of ``allowed`` so normalization is stable.
    return tuple(value for value in allowed if value in values)


def _require_rows(payload: dict[str, Any], key: str, *, catalog: str) -> list[dict[str, Any]]:
    if not isinstance(payload, dict):
        raise ValueError(f"{catalog} payload must be an object")
    schema_version = payload.get("schema_version")
    if not isinstance(schema_version, int):
        raise ValueError(f"{catalog} must contain integer field: schema_version")
    if schema_version != CATALOG_SCHEMA_VERSION:
        raise ValueError(f"unsupported {catalog} schema_version: {schema_version}")
    rows = payload.get(key)
    if not isinstance(rows, list) or not rows:
        raise ValueError(f"{catalog} must contain non-empty list field: {key}")
    for index, row in enumerate(rows):
        if not isinstance(row, dict):
            raise ValueError(f"{key}[{index}] must be an object")
    return rows


def _require_template(text: str, *, field_name: str, **sample: Any) -> str:
    """Reject text whose ``{placeholders}`` cannot be filled from ``sample`` keys."""
    try:
        text.format(**sample)
    except (KeyError, IndexError, ValueError) as exc:
        allowed = ", ".join(sorted(sample)) or "none"
        raise ValueError(f"{field_name} has an invalid placeholder (allowed: {allowed}): {exc}") from exc
    return text


def _require_unique_id(row: dict[str, Any], key: str, seen: set[str], *, field_name: str) -> str:
    row_id = _require_str(row, key, field_name=field_name)
    if row_id in seen:
        raise ValueError(f"duplicate {key}: {row_id}")
    seen.add(row_id)
    return row_id


@dataclass(frozen=True)
class Applicability:
    """Entry filter shared by every catalog; empty tuples mean unrestricted."""

    min_players: int = MIN_PLAYERS
    max_players: int = MAX_PLAYERS
    difficulties: tuple[str, ...] = ()
    map_sizes: tuple[str, ...] = ()

    def matches(self, config: ScenarioConfig) -> bool:
        if not self.min_players <= config.player_count <= self.max_players:
            return False
        if self.difficulties and config.difficulty not in self.difficulties:
            return False
        if self.map_sizes and config.map_size not in self.map_sizes:
            return False
        return True

    @classmethod
    def from_row(cls, row: dict[str, Any], *, field_name: str) -> "Applicability":
        min_players = _optional_int(row, "min_players", field_name=field_name, minimum=MIN_PLAYERS)
        max_players = _optional_int(row, "max_players", field_name=field_name, minimum=MIN_PLAYERS)
        min_players = MIN_PLAYERS if min_players is None else min_players
        max_players = MAX_PLAYERS if max_players is None else max_players
        if max_players > MAX_PLAYERS:
            raise ValueError(f"{field_name}.max_players must be <= {MAX_PLAYERS}")
        if min_players > max_players:
            raise ValueError(f"{field_name}.min_players must be <= max_players")
        return cls(
            min_players=min_players,
            max_players=max_players,
            difficulties=_require_str_list(row, "difficulties", field_name=field_name, allowed=DIFFICULTIES),
            map_sizes=_require_str_list(row, "map_sizes", field_name=field_name, allowed=MAP_SIZES),
        )


@dataclass(frozen=True)
class TierQuantity:
    count: int
    count_at_3_plus: int | None = None
    count_at_5_plus: int | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any], *, field_name: str) -> "TierQuantity":
        return cls(
            count=_require_int(row, "count", field_name=field_name, minimum=1),
            count_at_3_plus=_optional_int(row, "count_at_3_plus", field_name=field_name, minimum=1),
            count_at_5_plus=_optional_int(row, "count_at_5_plus", field_name=field_name, minimum=1),
        )


@dataclass(frozen=True)
class LayoutTemplate:
    template_id: str
    layout_type: str
    map_size: str
    weight: int
    grid_rows: int
    grid_cols: int
    cells: tuple[GridPosition, ...]
    links: tuple[tuple[int, int], ...]

    @property
    def tile_count(self) -> int:
        return len(self.cells)

    @property
    def has_boss(self) -> bool:
        return self.tile_count >= 4


@dataclass(frozen=True)
class ObjectiveTemplate:
    template_id: str
    type: str
    title: str
    description: str
    icon: str
    quantity: TierQuantity | None
    requires_boss: bool
    defeat_clause: str | None
    applicability: Applicability


@dataclass(frozen=True)
class SpecialRuleDef:
    rule_id: str
    name: str
    description: str
    icon: str
    applicability: Applicability


@dataclass(frozen=True)
class TokenDef:
    token_id: str
    name: str
    icon: str
    quantity: TierQuantity
    placement_roles: tuple[str, ...]
    applicability: Applicability


@dataclass(frozen=True)
class AdventureDef:
    adventure_id: str
    name: str
    icon: str
    narrative: str
    applicability: Applicability


@dataclass(frozen=True)
class DifficultyProfile:
    difficulty: str
    door_weights: tuple[tuple[str, int], ...]
    objective_counts: tuple[tuple[str, int], ...]
    special_rule_count: int
    modifiers: tuple[str, ...]
    defeat: str

    def objective_count(self, map_size: str) -> int:
        return dict(self.objective_counts)[map_size]


@dataclass(frozen=True)
class DifficultyTable:
    baseline_modifiers: tuple[str, ...]
    role_weights: tuple[tuple[str, int], ...]
    victory_chain: str
    victory_exit: str
    profiles: tuple[DifficultyProfile, ...]

    def profile(self, difficulty: str) -> DifficultyProfile:
        for profile in self.profiles:
            if profile.difficulty == difficulty:
                return profile
        raise CatalogExhausted(f"no difficulty profile for: {difficulty}")

    def role_weight(self, role: str) -> int:
        return dict(self.role_weights).get(role, 0)


@dataclass(frozen=True)
class ScenarioCatalogs:
    schema_version: int
    map_tiles: tuple[MapTile, ...]
    layouts: tuple[LayoutTemplate, ...]
    objectives: tuple[ObjectiveTemplate, ...]
    special_rules: tuple[SpecialRuleDef, ...]
    tokens: tuple[TokenDef, ...]
    adventures: tuple[AdventureDef, ...]
    difficulty: DifficultyTable

    def tile_numbers(self) -> tuple[int, ...]:
        return tuple(sorted({tile.number for tile in self.map_tiles}))

    def map_tile(self, number: int, side: str) -> MapTile:
        for tile in self.map_tiles:
            if tile.number == number and tile.side == side:
                return tile
        raise CatalogExhausted(f"no map tile for number={number} side={side}")

    def layouts_for(self, map_size: str) -> tuple[LayoutTemplate, ...]:
        return tuple(template for template in self.layouts if template.map_size == map_size)


def _map_tiles_from_payload(payload: dict[str, Any]) -> tuple[MapTile, ...]:
    rows = _require_rows(payload, "tiles", catalog="map tiles")
    tiles: list[MapTile] = []
    seen: set[str] = set()
    for index, row in enumerate(rows):
        field_name = f"tiles[{index}]"
        tile_id = _require_unique_id(row, "id", seen, field_name=field_name)
        side = _require_str(row, "side", field_name=field_name)
        if side not in TILE_SIDES:
            raise ValueError(f"{field_name}.side must be one of {'|'.join(TILE_SIDES)}")
        number = _require_int(row, "number", field_name=field_name, minimum=1)
        if tile_id != f"{number}{side}":
            raise ValueError(f"{field_name}.id must equal number followed by side: {tile_id}")
        tiles.append(MapTile(id=tile_id, side=side, number=number))
    tiles.sort(key=lambda tile: (tile.number, tile.side))
    return tuple(tiles)


def _layouts_from_payload(payload: dict[str, Any]) -> tuple[LayoutTemplate, ...]:
    rows = _require_rows(payload, "templates", catalog="layout templates")
    templates: list[LayoutTemplate] = []
    seen: set[str] = set()
    for index, row in enumerate(rows):
        field_name = f"templates[{index}]"
        template_id = _require_unique_id(row, "template_id", seen, field_name=field_name)

        layout_type = _require_str(row, "layout_type", field_name=field_name)
        if layout_type not in LAYOUT_TYPES:
            raise ValueError(f"{field_name} unsupported layout_type: {layout_type}")
        map_size = _require_str(row, "map_size", field_name=field_name)
        if map_size not in MAP_SIZES:
            raise ValueError(f"{field_name} unsupported map_size: {map_size}")
        weight = _require_int(row, "weight", field_name=field_name, minimum=1)

        grid_size = row.get("grid_size")
        if not isinstance(grid_size, dict):
            raise ValueError(f"{field_name}.grid_size must be an object")
        grid_rows = _require_int(grid_size, "rows", field_name=f"{field_name}.grid_size", minimum=1)
        grid_cols = _require_int(grid_size, "cols", field_name=f"{field_name}.grid_size", minimum=1)

        raw_cells = row.get("cells")
        if not isinstance(raw_cells, list):
            raise ValueError(f"{field_name}.cells must be a list")
        cells: list[GridPosition] = []
        for cell_index, raw_cell in enumerate(raw_cells):
            cell_field = f"{field_name}.cells[{cell_index}]"
            if not isinstance(raw_cell, dict):
                raise ValueError(f"{cell_field} must be an object")
            cell = GridPosition(
                row=_require_int(raw_cell, "row", field_name=cell_field),
                col=_require_int(raw_cell, "col", field_name=cell_field),
            )
            if cell.row >= grid_rows or cell.col >= grid_cols:
                raise ValueError(f"{cell_field} lies outside grid_size")
            if cell in cells:
                raise ValueError(f"{cell_field} duplicates an earlier cell")
            cells.append(cell)
        if len(cells) not in TILE_COUNTS_BY_MAP_SIZE[map_size]:
            raise ValueError(
                f"{field_name} has {len(cells)} cells; map_size {map_size} requires "
                f"{'/'.join(str(count) for count in TILE_COUNTS_BY_MAP_SIZE[map_size])}"
            )

        raw_links = row.get("links")
        if not isinstance(raw_links, list) or not raw_links:
            raise ValueError(f"{field_name}.links must be a non-empty list")
        links: list[tuple[int, int]] = []
        for link_index, raw_link in enumerate(raw_links):
            link_field = f"{field_name}.links[{link_index}]"
            if (
                not isinstance(raw_link, list)
                or len(raw_link) != 2
                or not all(isinstance(value, int) and not isinstance(value, bool) for value in raw_link)
            ):
                raise ValueError(f"{link_field} must be a pair of cell indexes")
            a, b = raw_link
            if not (0 <= a < len(cells) and 0 <= b < len(cells)) or a == b:
                raise ValueError(f"{link_field} references invalid cell indexes: {raw_link}")
            if not cells[a].is_adjacent(cells[b]):
                raise ValueError(f"{link_field} joins cells that are not grid-adjacent")
            link = (min(a, b), max(a, b))
            if link in links:
                raise ValueError(f"{link_field} duplicates an earlier link")
            links.append(link)
        if reachable_from(0, links) != set(range(len(cells))):
            raise ValueError(f"{field_name}.links must connect every cell to the start cell")

        templates.append(
            LayoutTemplate(
                template_id=template_id,
                layout_type=layout_type,
                map_size=map_size,
                weight=weight,
                grid_rows=grid_rows,
                grid_cols=grid_cols,
                cells=tuple(cells),
                links=tuple(links),
            )
        )
    templates.sort(key=lambda template: template.template_id)
    return tuple(templates)


def _objectives_from_payload(payload: dict[str, Any]) -> tuple[ObjectiveTemplate, ...]:
    rows = _require_rows(payload, "objectives", catalog="objectives")
    objectives: list[ObjectiveTemplate] = []
    seen: set[str] = set()
    for index, row in enumerate(rows):
        field_name = f"objectives[{index}]"
        template_id = _require_unique_id(row, "template_id", seen, field_name=field_name)
        objective_type = _require_str(row, "type", field_name=field_name)
        if objective_type not in OBJECTIVE_TYPES:
            raise ValueError(f"{field_name} unsupported objective type: {objective_type}")
        quantity_row = row.get("quantity")
        if quantity_row is not None and not isinstance(quantity_row, dict):
            raise ValueError(f"{field_name}.quantity must be an object when present")
        requires_boss = row.get("requires_boss", False)
        if not isinstance(requires_boss, bool):
            raise ValueError(f"{field_name}.requires_boss must be a boolean when present")
        defeat_clause = row.get("defeat_clause")
        if defeat_clause is not None and (not isinstance(defeat_clause, str) or not defeat_clause):
            raise ValueError(f"{field_name}.defeat_clause must be a non-empty string when present")
        description = _require_template(
            _require_str(row, "description", field_name=field_name),
            field_name=f"{field_name}.description",
            count=1,
            players=1,
        )
        if "{count}" in description and quantity_row is None:
            raise ValueError(f"{field_name}.description uses {{count}} without a quantity")
        objectives.append(
            ObjectiveTemplate(
                template_id=template_id,
                type=objective_type,
                title=_require_template(
                    _require_str(row, "title", field_name=field_name),
                    field_name=f"{field_name}.title",
                    count=1,
                    players=1,
                ),
                description=description,
                icon=_require_str(row, "icon", field_name=field_name),
                quantity=(
                    TierQuantity.from_row(quantity_row, field_name=f"{field_name}.quantity")
                    if quantity_row is not None
                    else None
                ),
                requires_boss=requires_boss,
                defeat_clause=defeat_clause,
                applicability=Applicability.from_row(row, field_name=field_name),
            )
        )
    return tuple(objectives)


def _special_rules_from_payload(payload: dict[str, Any]) -> tuple[SpecialRuleDef, ...]:
    rows = _require_rows(payload, "rules", catalog="special rules")
    rules: list[SpecialRuleDef] = []
    seen: set[str] = set()
    seen_names: set[str] = set()
    for index, row in enumerate(rows):
        field_name = f"rules[{index}]"
        rules.append(
            SpecialRuleDef(
                rule_id=_require_unique_id(row, "rule_id", seen, field_name=field_name),
                name=_require_unique_id(row, "name", seen_names, field_name=field_name),
                description=_require_str(row, "description", field_name=field_name),
                icon=_require_str(row, "icon", field_name=field_name),
                applicability=Applicability.from_row(row, field_name=field_name),
            )
        )
    return tuple(rules)


def _tokens_from_payload(payload: dict[str, Any]) -> tuple[TokenDef, ...]:
    rows = _require_rows(payload, "tokens", catalog="tokens")
    tokens: list[TokenDef] = []
    seen: set[str] = set()
    seen_names: set[str] = set()
    for index, row in enumerate(rows):
        field_name = f"tokens[{index}]"
        placement_roles = _require_str_list(row, "placement_roles", field_name=field_name, allowed=TILE_ROLES)
        if "start" in placement_roles:
            raise ValueError(f"{field_name}.placement_roles must not include start")
        tokens.append(
            TokenDef(
                token_id=_require_unique_id(row, "token_id", seen, field_name=field_name),
                name=_require_unique_id(row, "name", seen_names, field_name=field_name),
                icon=_require_str(row, "icon", field_name=field_name),
                quantity=TierQuantity.from_row(row, field_name=field_name),
                placement_roles=placement_roles,
                applicability=Applicability.from_row(row, field_name=field_name),
            )
        )
    return tuple(tokens)


def _adventures_from_payload(payload: dict[str, Any]) -> tuple[AdventureDef, ...]:
    rows = _require_rows(payload, "adventures", catalog="adventures")
    adventures: list[AdventureDef] = []
    seen: set[str] = set()
    for index, row in enumerate(rows):
        field_name = f"adventures[{index}]"
        adventures.append(
            AdventureDef(
                adventure_id=_require_unique_id(row, "adventure_id", seen, field_name=field_name),
                name=_require_str(row, "name", field_name=field_name),
                icon=_require_str(row, "icon", field_name=field_name),
                narrative=_require_str(row, "narrative", field_name=field_name),
                applicability=Applicability.from_row(row, field_name=field_name),
            )
        )
    return tuple(adventures)


def _weights_from_row(row: Any, *, field_name: str, keys: Sequence[str], minimum: int) -> tuple[tuple[str, int], ...]:
    if not isinstance(row, dict):
        raise ValueError(f"{field_name} must be an object")
    unknown = set(row.keys()) - set(keys)
    if unknown:
        raise ValueError(f"{field_name} has unsupported keys: {sorted(unknown)}")
    return tuple((key, _require_int(row, key, field_name=field_name, minimum=minimum)) for key in keys)


def _string_list(value: Any, *, field_name: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"{field_name} must be a list")
    for index, item in enumerate(value):
        if not isinstance(item, str) or not item:
            raise ValueError(f"{field_name}[{index}] must be a non-empty string")
    return tuple(value)


def _difficulty_from_payload(payload: dict[str, Any]) -> DifficultyTable:
    rows = _require_rows(payload, "levels", catalog="difficulty table")

    profiles: dict[str, DifficultyProfile] = {}
    for index, row in enumerate(rows):
        field_name = f"levels[{index}]"
        difficulty = _require_str(row, "difficulty", field_name=field_name)
        if difficulty not in DIFFICULTIES:
            raise ValueError(f"{field_name} unsupported difficulty: {difficulty}")
        if difficulty in profiles:
            raise ValueError(f"duplicate difficulty: {difficulty}")
        door_weights = _weights_from_row(
            row.get("door_weights"), field_name=f"{field_name}.door_weights", keys=DOOR_TYPES, minimum=0
        )
        if sum(weight for door_type, weight in door_weights if door_type != "gate") <= 0:
            raise ValueError(f"{field_name}.door_weights needs a positive normal or locked weight")
        profiles[difficulty] = DifficultyProfile(
            difficulty=difficulty,
            door_weights=door_weights,
            objective_counts=_weights_from_row(
                row.get("objective_counts"), field_name=f"{field_name}.objective_counts", keys=MAP_SIZES, minimum=1
            ),
            special_rule_count=_require_int(row, "special_rule_count", field_name=field_name),
            modifiers=tuple(
                _require_template(modifier, field_name=f"{field_name}.modifiers", players=1)
                for modifier in _string_list(row.get("modifiers", []), field_name=f"{field_name}.modifiers")
            ),
            defeat=_require_template(
                _require_str(row, "defeat", field_name=field_name), field_name=f"{field_name}.defeat", players=1
            ),
        )
    missing = set(DIFFICULTIES) - set(profiles)
    if missing:
        raise ValueError(f"difficulty table missing levels: {sorted(missing)}")

    role_weights = _weights_from_row(
        payload.get("role_weights"),
        field_name="role_weights",
        keys=tuple(role for role in TILE_ROLES if role != "start"),
        minimum=1,
    )
    victory = payload.get("victory")
    if not isinstance(victory, dict):
        raise ValueError("difficulty table must contain object field: victory")
    return DifficultyTable(
        baseline_modifiers=tuple(
            _require_template(modifier, field_name="baseline_modifiers", players=1)
            for modifier in _string_list(payload.get("baseline_modifiers"), field_name="baseline_modifiers")
        ),
        role_weights=role_weights,
        victory_chain=_require_template(
            _require_str(victory, "chain", field_name="victory"), field_name="victory.chain", count=1, chain=""
        ),
        victory_exit=_require_template(
            _require_str(victory, "exit", field_name="victory"), field_name="victory.exit", exit_tile="1A"
        ),
        profiles=tuple(profiles[difficulty] for difficulty in DIFFICULTIES),
    )


def applicable(entries: Sequence[E], config: ScenarioConfig) -> list[E]:
    """Entries whose applicability filter admits ``config``, in catalog order."""
    return [entry for entry in entries if entry.applicability.matches(config)]


def applicable_objectives(
    catalogs: ScenarioCatalogs, config: ScenarioConfig, *, has_boss: bool
) -> list[ObjectiveTemplate]:
    return [
        objective
        for objective in applicable(catalogs.objectives, config)
        if has_boss or not objective.requires_boss
    ]


def audit_catalog_coverage(catalogs: ScenarioCatalogs) -> list[str]:
    """Check that every valid config leaves a non-empty pool for each required draw.

    Returns the audited combination labels; raises ``CatalogExhausted`` on the first gap.
    """
    max_tiles = max(template.tile_count for template in catalogs.layouts)
    if max_tiles > len(catalogs.tile_numbers()):
        raise CatalogExhausted(f"layouts need {max_tiles} distinct tiles; catalog has {len(catalogs.tile_numbers())}")
    for number in catalogs.tile_numbers():
        for side in TILE_SIDES:
            catalogs.map_tile(number, side)

    audited: list[str] = []
    for map_size in MAP_SIZES:
        templates = catalogs.layouts_for(map_size)
        if not templates:
            raise CatalogExhausted(f"no layout template for map_size={map_size}")
        boss_variants = sorted({template.has_boss for template in templates})
        for difficulty in DIFFICULTIES:
            profile = catalogs.difficulty.profile(difficulty)
            for player_count in PLAYER_COUNTS:
                config = ScenarioConfig(
                    seed="audit", map_size=map_size, difficulty=difficulty, player_count=player_count
                )
                label = f"{map_size}/{difficulty}/{player_count}"
                if not applicable(catalogs.adventures, config):
                    raise CatalogExhausted(f"no adventure for {label}")
                for has_boss in boss_variants:
                    pool = applicable_objectives(catalogs, config, has_boss=has_boss)
                    if len(pool) < profile.objective_count(map_size):
                        raise CatalogExhausted(
                            f"objective pool for {label} (boss={has_boss}) has {len(pool)} entries; "
                            f"needs {profile.objective_count(map_size)}"
                        )
                rules = applicable(catalogs.special_rules, config)
                if len(rules) < max(1, profile.special_rule_count):
                    raise CatalogExhausted(
                        f"special rule pool for {label} has {len(rules)} entries; needs {profile.special_rule_count}"
                    )
                if not applicable(catalogs.tokens, config):
                    raise CatalogExhausted(f"no token entry for {label}")
                audited.append(label)
    return audited


def load_scenario_catalogs_payload(payloads: dict[str, dict[str, Any]]) -> ScenarioCatalogs:
    """Public, test-friendly entrypoint. Performs full validation, normalization and coverage audit."""
    missing = set(CATALOG_FILES) - set(payloads)
    if missing:
        raise ValueError(f"catalog payloads missing: {sorted(missing)}")
    catalogs = ScenarioCatalogs(
        schema_version=CATALOG_SCHEMA_VERSION,
        map_tiles=_map_tiles_from_payload(payloads["map_tiles"]),
        layouts=_layouts_from_payload(payloads["layouts"]),
        objectives=_objectives_from_payload(payloads["objectives"]),
        special_rules=_special_rules_from_payload(payloads["special_rules"]),
        tokens=_tokens_from_payload(payloads["tokens"]),
        adventures=_adventures_from_payload(payloads["adventures"]),
        difficulty=_difficulty_from_payload(payloads["difficulty"]),
    )
    audit_catalog_coverage(catalogs)
    return catalogs


def read_catalog_payloads(root: str | Path = DEFAULT_CONTENT_ROOT) -> dict[str, dict[str, Any]]:
    base = Path(root)
    return {
        name: json.loads((base / filename).read_text(encoding="utf-8"))
        for name, filename in CATALOG_FILES.items()
    }


def load_scenario_catalogs(root: str | Path = DEFAULT_CONTENT_ROOT) -> ScenarioCatalogs:
    return load_scenario_catalogs_payload(read_catalog_payloads(root))
