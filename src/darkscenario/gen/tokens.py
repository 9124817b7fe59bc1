from __future__ import annotations

from dataclasses import replace

from darkscenario.content.catalogs import DifficultyTable, ScenarioCatalogs, TokenDef, applicable
from darkscenario.gen.config import ScenarioConfig, tier_count
from darkscenario.gen.errors import CatalogExhausted
from darkscenario.gen.models import PlacedTile, TileToken, TokenPlacement
from darkscenario.gen.rng import ScenarioRng


def resolve_token_table(catalogs: ScenarioCatalogs, config: ScenarioConfig) -> list[tuple[TokenDef, TokenPlacement]]:
    entries = applicable(catalogs.tokens, config)
    if not entries:
        raise CatalogExhausted(
            f"no token entry for {config.map_size}/{config.difficulty}/{config.player_count}"
        )
    table: list[tuple[TokenDef, TokenPlacement]] = []
    for entry in entries:
        quantity = entry.quantity
        table.append(
            (
                entry,
                TokenPlacement(
                    name=entry.name,
                    icon=entry.icon,
                    count=tier_count(
                        quantity.count, quantity.count_at_3_plus, quantity.count_at_5_plus, config.player_count
                    ),
                    count_at_3_plus=quantity.count_at_3_plus,
                    count_at_5_plus=quantity.count_at_5_plus,
                ),
            )
        )
    return table


def _candidate_indexes(placed: list[PlacedTile], entry: TokenDef) -> list[int]:
    candidates = [index for index, tile in enumerate(placed) if tile.role != "start"]
    if entry.placement_roles:
        restricted = [index for index in candidates if placed[index].role in entry.placement_roles]
        if restricted:
            return restricted
    return candidates


def allocate_tokens(
    rng: ScenarioRng,
    placed: list[PlacedTile],
    table: list[tuple[TokenDef, TokenPlacement]],
    difficulty: DifficultyTable,
) -> list[PlacedTile]:
    """Spread every token instance over non-start tiles; per-tile sums match the table totals."""
    per_tile: list[dict[str, int]] = [{} for _ in placed]
    for entry, placement in table:
        candidates = _candidate_indexes(placed, entry)
        if not candidates:
            raise CatalogExhausted(f"no tile can hold token: {entry.name}")
        weights = [difficulty.role_weight(placed[index].role) for index in candidates]
        for _ in range(placement.count):
            index = rng.weighted_pick(candidates, weights)
            per_tile[index][entry.name] = per_tile[index].get(entry.name, 0) + 1

    allocated: list[PlacedTile] = []
    for tile, counts in zip(placed, per_tile):
        tokens = tuple(
            TileToken(name=placement.name, icon=placement.icon, count=counts[placement.name])
            for _, placement in table
            if counts.get(placement.name)
        )
        allocated.append(replace(tile, tokens=tokens))
    return allocated
