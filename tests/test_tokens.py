from darkscenario.content.catalogs import load_scenario_catalogs
from darkscenario.gen.config import ScenarioConfig
from darkscenario.gen.layout import build_layout
from darkscenario.gen.rng import ScenarioRng
from darkscenario.gen.tokens import allocate_tokens, resolve_token_table


def _table_counts(config: ScenarioConfig) -> dict[str, int]:
    catalogs = load_scenario_catalogs()
    return {placement.name: placement.count for _, placement in resolve_token_table(catalogs, config)}


def test_token_table_scales_with_player_tier() -> None:
    one = _table_counts(ScenarioConfig(seed="x", map_size="medium", difficulty="hard", player_count=1))
    four = _table_counts(ScenarioConfig(seed="x", map_size="medium", difficulty="hard", player_count=4))
    six = _table_counts(ScenarioConfig(seed="x", map_size="medium", difficulty="hard", player_count=6))

    assert (one["Life Spark"], four["Life Spark"], six["Life Spark"]) == (1, 2, 3)
    assert (one["Treasure"], four["Treasure"], six["Treasure"]) == (2, 3, 4)
    assert (one["Portal"], four["Portal"], six["Portal"]) == (1, 2, 2)
    # Roaming Monster has no 3-4 value and keeps its base count there.
    assert (one["Roaming Monster"], four["Roaming Monster"], six["Roaming Monster"]) == (1, 1, 2)


def test_token_table_respects_applicability() -> None:
    small_easy = _table_counts(ScenarioConfig(seed="x", map_size="small", difficulty="easy", player_count=2))
    large_hard = _table_counts(ScenarioConfig(seed="x", map_size="large", difficulty="hard", player_count=2))

    assert "Trap" not in small_easy
    assert "Boss Marker" not in small_easy
    assert "Trap" in large_hard
    assert "Boss Marker" in large_hard


def test_allocation_sums_match_table_and_skip_start_tile() -> None:
    catalogs = load_scenario_catalogs()

    for index in range(30):
        config = ScenarioConfig(seed=f"tokens-{index}", map_size="large", difficulty="hard", player_count=5)
        rng = ScenarioRng(config.seed)
        layout = build_layout(rng, catalogs, config, catalogs.difficulty.profile(config.difficulty))
        table = resolve_token_table(catalogs, config)

        placed = allocate_tokens(rng, list(layout.placed_tiles), table, catalogs.difficulty)

        for _, placement in table:
            assert sum(tile.token_count(placement.name) for tile in placed) == placement.count
        start = [tile for tile in placed if tile.role == "start"][0]
        assert start.tokens == ()
        boss = [tile for tile in placed if tile.role == "boss"][0]
        assert boss.token_count("Boss Marker") == 1


def test_allocation_falls_back_when_no_tile_has_a_placement_role() -> None:
    catalogs = load_scenario_catalogs()
    config = ScenarioConfig(seed="fallback", map_size="small", difficulty="easy", player_count=2)
    rng = ScenarioRng(config.seed)
    layout = build_layout(rng, catalogs, config, catalogs.difficulty.profile(config.difficulty))

    placed = allocate_tokens(rng, list(layout.placed_tiles), resolve_token_table(catalogs, config), catalogs.difficulty)

    exit_tile = [tile for tile in placed if tile.role == "exit"][0]
    assert exit_tile.token_count("Objective Marker") == 1
