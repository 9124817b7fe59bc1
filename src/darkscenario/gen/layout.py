from __future__ import annotations

from darkscenario.content.catalogs import DifficultyProfile, LayoutTemplate, ScenarioCatalogs
from darkscenario.gen.config import DOOR_TYPES, ScenarioConfig
from darkscenario.gen.models import MapLayout, PlacedTile, TileConnection, reachable_from
from darkscenario.gen.rng import ScenarioRng

BOSS_MIN_TILES = 4
OBJECTIVE_MIN_TILES = 3


def select_template(rng: ScenarioRng, catalogs: ScenarioCatalogs, config: ScenarioConfig) -> LayoutTemplate:
    templates = catalogs.layouts_for(config.map_size)
    return rng.weighted_pick(templates, [template.weight for template in templates])


def assign_roles(rng: ScenarioRng, tile_count: int) -> list[str]:
    """Path order roles: first start, last exit, then boss and objective drawn from the interior."""
    roles = ["middle"] * tile_count
    roles[0] = "start"
    roles[-1] = "exit"
    interior = list(range(1, tile_count - 1))
    if tile_count >= BOSS_MIN_TILES:
        boss_index = rng.pick(interior)
        interior.remove(boss_index)
        roles[boss_index] = "boss"
    if tile_count >= OBJECTIVE_MIN_TILES:
        roles[rng.pick(interior)] = "objective"
    return roles


def place_tiles(rng: ScenarioRng, catalogs: ScenarioCatalogs, template: LayoutTemplate) -> list[PlacedTile]:
    numbers = rng.shuffle(catalogs.tile_numbers())[: template.tile_count]
    sides = ["A" if rng.int(0, 1) == 0 else "B" for _ in numbers]
    roles = assign_roles(rng, template.tile_count)
    placed: list[PlacedTile] = []
    for number, side, role, cell in zip(numbers, sides, roles, template.cells):
        tile = catalogs.map_tile(number, side)
        placed.append(
            PlacedTile(id=tile.id, side=tile.side, number=tile.number, position=cell, role=role)
        )
    return placed


def connect_tiles(
    rng: ScenarioRng, template: LayoutTemplate, placed: list[PlacedTile], profile: DifficultyProfile
) -> list[TileConnection]:
    weights = dict(profile.door_weights)
    connections: list[TileConnection] = []
    for a, b in template.links:
        link_weights = [weights[door_type] for door_type in DOOR_TYPES]
        if placed[a].role == "start" or placed[b].role == "start":
            # The party must be able to leave the start tile without a key.
            link_weights[DOOR_TYPES.index("gate")] = 0
        door_type = rng.weighted_pick(DOOR_TYPES, link_weights)
        connections.append(TileConnection(from_tile_id=placed[a].id, to_tile_id=placed[b].id, door_type=door_type))
    return connections


def build_layout(
    rng: ScenarioRng, catalogs: ScenarioCatalogs, config: ScenarioConfig, profile: DifficultyProfile
) -> MapLayout:
    template = select_template(rng, catalogs, config)
    placed = place_tiles(rng, catalogs, template)
    connections = connect_tiles(rng, template, placed, profile)
    return MapLayout(
        placed_tiles=tuple(placed),
        connections=tuple(connections),
        grid_rows=template.grid_rows,
        grid_cols=template.grid_cols,
        layout_type=template.layout_type,
    )


def check_layout_integrity(layout: MapLayout) -> None:
    tiles = layout.placed_tiles
    if not tiles:
        raise ValueError("layout must contain at least one placed tile")

    for role, expected in (
        ("start", 1),
        ("exit", 1),
        ("boss", 1 if len(tiles) >= BOSS_MIN_TILES else 0),
    ):
        actual = len(layout.tiles_with_role(role))
        if actual != expected:
            raise ValueError(f"layout must contain {expected} {role} tile(s); found {actual}")

    by_id = layout.tile_by_id()
    if len(by_id) != len(tiles):
        raise ValueError("placed tile ids must be unique")
    if len({tile.number for tile in tiles}) != len(tiles):
        raise ValueError("a tile number may be placed only once")
    positions = [tile.position for tile in tiles]
    if len(set(positions)) != len(positions):
        raise ValueError("placed tiles must occupy distinct grid cells")
    for tile in tiles:
        if not (0 <= tile.position.row < layout.grid_rows and 0 <= tile.position.col < layout.grid_cols):
            raise ValueError(f"tile {tile.id} lies outside the layout grid")

    seen_pairs: set[frozenset[str]] = set()
    for connection in layout.connections:
        if connection.from_tile_id not in by_id or connection.to_tile_id not in by_id:
            raise ValueError(
                f"connection {connection.from_tile_id}-{connection.to_tile_id} references an unknown tile"
            )
        pair = frozenset((connection.from_tile_id, connection.to_tile_id))
        if pair in seen_pairs:
            raise ValueError(f"duplicate connection {connection.from_tile_id}-{connection.to_tile_id}")
        seen_pairs.add(pair)
        if not by_id[connection.from_tile_id].position.is_adjacent(by_id[connection.to_tile_id].position):
            raise ValueError(
                f"connection {connection.from_tile_id}-{connection.to_tile_id} joins non-adjacent cells"
            )

    start = layout.tiles_with_role("start")[0]
    reached = reachable_from(
        start.id, [(connection.from_tile_id, connection.to_tile_id) for connection in layout.connections]
    )
    unreachable = sorted(set(by_id) - reached)
    if unreachable:
        raise ValueError(f"tiles unreachable from start: {unreachable}")
