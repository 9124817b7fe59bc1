"""Seed-driven scenario generation.

All randomness comes from one ``ScenarioRng`` created from ``config.seed`` and
consumed in this fixed order:

1. layout template, weighted by template weight, among templates for the map size
2. tile numbers (one shuffle of the catalog numbers), one side draw per tile,
   the boss tile (4+ tiles) and the objective tile (3+ tiles)
3. one door type per template link, weighted by difficulty
4. adventure name, icon and narrative
5. objectives: one shuffle of the applicable pool, head taken in order
6. special rules: one shuffle of the applicable pool, head taken in order
7. one tile draw per token instance, token entries in catalog order

Victory/defeat text and difficulty modifiers are derived without draws.
``build_scenario`` runs these steps against a caller-supplied cursor, so the
number of draws one call consumes can be checked from outside.
Reordering any of the above changes every later draw; bump
``GENERATOR_VERSION`` when that happens so stored seeds can be told apart.
"""

from __future__ import annotations

from typing import Any

from darkscenario.content.catalogs import (
    DifficultyProfile,
    ObjectiveTemplate,
    ScenarioCatalogs,
    applicable,
    applicable_objectives,
)
from darkscenario.gen.config import ScenarioConfig, tier_count
from darkscenario.gen.errors import CatalogExhausted
from darkscenario.gen.layout import build_layout, check_layout_integrity
from darkscenario.gen.models import (
    GeneratedScenario,
    MapLayout,
    Objective,
    SpecialRule,
    WinLoseConditions,
)
from darkscenario.gen.rng import ScenarioRng
from darkscenario.gen.tokens import allocate_tokens, resolve_token_table

GENERATOR_VERSION = 1
OBJECTIVE_CHAIN_SEPARATOR = " -> "


def _coerce_config(config: ScenarioConfig | dict[str, Any]) -> ScenarioConfig:
    if isinstance(config, ScenarioConfig):
        return config
    return ScenarioConfig.from_dict(config)


def _label(config: ScenarioConfig) -> str:
    return f"{config.map_size}/{config.difficulty}/{config.player_count}"


def _resolve_objective(template: ObjectiveTemplate, order: int, config: ScenarioConfig) -> Objective:
    count = 0
    if template.quantity is not None:
        quantity = template.quantity
        count = tier_count(quantity.count, quantity.count_at_3_plus, quantity.count_at_5_plus, config.player_count)
    values = {"count": count, "players": config.player_count}
    return Objective(
        type=template.type,
        order=order,
        title=template.title.format(**values),
        description=template.description.format(**values),
        icon=template.icon,
    )


def _draw_objectives(
    rng: ScenarioRng,
    catalogs: ScenarioCatalogs,
    config: ScenarioConfig,
    profile: DifficultyProfile,
    layout: MapLayout,
) -> tuple[list[Objective], list[ObjectiveTemplate]]:
    has_boss = bool(layout.tiles_with_role("boss"))
    pool = applicable_objectives(catalogs, config, has_boss=has_boss)
    if not pool:
        raise CatalogExhausted(f"no objective template for {_label(config)}")
    chosen = rng.shuffle(pool)[: profile.objective_count(config.map_size)]
    objectives = [_resolve_objective(template, order, config) for order, template in enumerate(chosen, start=1)]
    return objectives, chosen


def _draw_special_rules(
    rng: ScenarioRng, catalogs: ScenarioCatalogs, config: ScenarioConfig, profile: DifficultyProfile
) -> list[SpecialRule]:
    pool = applicable(catalogs.special_rules, config)
    if not pool:
        raise CatalogExhausted(f"no special rule for {_label(config)}")
    chosen = rng.shuffle(pool)[: profile.special_rule_count]
    return [SpecialRule(name=rule.name, description=rule.description, icon=rule.icon) for rule in chosen]


def build_conditions(
    catalogs: ScenarioCatalogs,
    config: ScenarioConfig,
    profile: DifficultyProfile,
    objectives: list[Objective],
    templates: list[ObjectiveTemplate],
    layout: MapLayout,
) -> WinLoseConditions:
    chain = OBJECTIVE_CHAIN_SEPARATOR.join(f"{objective.order}. {objective.title}" for objective in objectives)
    exit_tile = layout.tiles_with_role("exit")[0]
    victory = " ".join(
        (
            catalogs.difficulty.victory_chain.format(count=len(objectives), chain=chain),
            catalogs.difficulty.victory_exit.format(exit_tile=exit_tile.id),
        )
    )

    defeat_parts = [profile.defeat.format(players=config.player_count)]
    for template in templates:
        if template.defeat_clause and template.defeat_clause not in defeat_parts:
            defeat_parts.append(template.defeat_clause)
    return WinLoseConditions(victory=victory, defeat=" ".join(defeat_parts))


def build_difficulty_modifiers(
    catalogs: ScenarioCatalogs, config: ScenarioConfig, profile: DifficultyProfile
) -> list[str]:
    modifiers = [*catalogs.difficulty.baseline_modifiers, *profile.modifiers]
    return [modifier.format(players=config.player_count) for modifier in modifiers]


def build_scenario(rng: ScenarioRng, config: ScenarioConfig, catalogs: ScenarioCatalogs) -> GeneratedScenario:
    """Run every drawing step against ``rng`` in the documented order."""
    profile = catalogs.difficulty.profile(config.difficulty)

    layout = build_layout(rng, catalogs, config, profile)

    adventures = applicable(catalogs.adventures, config)
    if not adventures:
        raise CatalogExhausted(f"no adventure for {_label(config)}")
    adventure = rng.pick(adventures)

    objectives, objective_templates = _draw_objectives(rng, catalogs, config, profile, layout)
    special_rules = _draw_special_rules(rng, catalogs, config, profile)

    token_table = resolve_token_table(catalogs, config)
    placed = allocate_tokens(rng, list(layout.placed_tiles), token_table, catalogs.difficulty)
    layout = MapLayout(
        placed_tiles=tuple(placed),
        connections=layout.connections,
        grid_rows=layout.grid_rows,
        grid_cols=layout.grid_cols,
        layout_type=layout.layout_type,
    )
    check_layout_integrity(layout)

    return GeneratedScenario(
        name=adventure.name,
        icon=adventure.icon,
        narrative=adventure.narrative,
        seed=config.seed,
        config=config,
        tiles=tuple(tile.tile for tile in layout.placed_tiles),
        map_layout=layout,
        objectives=tuple(objectives),
        special_rules=tuple(special_rules),
        tokens=tuple(placement for _, placement in token_table),
        conditions=build_conditions(catalogs, config, profile, objectives, objective_templates, layout),
        difficulty_modifiers=tuple(build_difficulty_modifiers(catalogs, config, profile)),
    )


def generate(config: ScenarioConfig | dict[str, Any], catalogs: ScenarioCatalogs) -> GeneratedScenario:
    """Build the complete scenario for ``config``; same config and catalogs give an identical result."""
    config = _coerce_config(config)
    return build_scenario(ScenarioRng(config.seed), config, catalogs)
