import pytest

from darkscenario.content.catalogs import load_scenario_catalogs
from darkscenario.gen.config import ScenarioConfig
from darkscenario.gen.layout import assign_roles, build_layout, check_layout_integrity, select_template
from darkscenario.gen.models import GridPosition, MapLayout, PlacedTile, TileConnection
from darkscenario.gen.rng import ScenarioRng


def _config(seed: str, map_size: str = "large", difficulty: str = "nightmare") -> ScenarioConfig:
    return ScenarioConfig(seed=seed, map_size=map_size, difficulty=difficulty, player_count=3)


def _two_tile_layout(**overrides) -> MapLayout:
    fields = {
        "placed_tiles": (
            PlacedTile(id="1A", side="A", number=1, position=GridPosition(0, 0), role="start"),
            PlacedTile(id="2B", side="B", number=2, position=GridPosition(0, 1), role="exit"),
        ),
        "connections": (TileConnection(from_tile_id="1A", to_tile_id="2B", door_type="normal"),),
        "grid_rows": 1,
        "grid_cols": 2,
        "layout_type": "linear",
    }
    fields.update(overrides)
    return MapLayout(**fields)


@pytest.mark.parametrize("map_size", ["small", "medium", "large"])
def test_select_template_stays_within_map_size(map_size: str) -> None:
    catalogs = load_scenario_catalogs()
    rng = ScenarioRng(f"template-{map_size}")

    for _ in range(30):
        assert select_template(rng, catalogs, _config("x", map_size=map_size)).map_size == map_size


@pytest.mark.parametrize(
    ("tile_count", "expected"),
    [
        (2, {"start": 1, "exit": 1}),
        (3, {"start": 1, "objective": 1, "exit": 1}),
        (4, {"start": 1, "boss": 1, "objective": 1, "exit": 1}),
        (5, {"start": 1, "boss": 1, "objective": 1, "middle": 1, "exit": 1}),
    ],
)
def test_assign_roles_counts(tile_count: int, expected: dict[str, int]) -> None:
    roles = assign_roles(ScenarioRng("roles"), tile_count)

    assert roles[0] == "start"
    assert roles[-1] == "exit"
    assert {role: roles.count(role) for role in set(roles)} == expected


def test_built_layouts_pass_integrity_checks() -> None:
    catalogs = load_scenario_catalogs()

    for index in range(40):
        for map_size in ("small", "medium", "large"):
            config = _config(f"layout-{index}", map_size=map_size)
            layout = build_layout(
                ScenarioRng(config.seed), catalogs, config, catalogs.difficulty.profile(config.difficulty)
            )
            check_layout_integrity(layout)
            assert len({tile.number for tile in layout.placed_tiles}) == len(layout.placed_tiles)


def test_start_tile_is_never_behind_a_gate() -> None:
    catalogs = load_scenario_catalogs()
    profile = catalogs.difficulty.profile("nightmare")

    for index in range(100):
        config = _config(f"gate-{index}")
        layout = build_layout(ScenarioRng(config.seed), catalogs, config, profile)
        start = layout.tiles_with_role("start")[0]
        for connection in layout.connections:
            if connection.joins(start.id):
                assert connection.door_type != "gate"


def test_easy_layouts_never_use_gates() -> None:
    catalogs = load_scenario_catalogs()
    profile = catalogs.difficulty.profile("easy")

    for index in range(50):
        config = _config(f"easy-{index}", difficulty="easy")
        layout = build_layout(ScenarioRng(config.seed), catalogs, config, profile)
        assert all(connection.door_type != "gate" for connection in layout.connections)


def test_integrity_rejects_missing_exit() -> None:
    layout = _two_tile_layout(
        placed_tiles=(
            PlacedTile(id="1A", side="A", number=1, position=GridPosition(0, 0), role="start"),
            PlacedTile(id="2B", side="B", number=2, position=GridPosition(0, 1), role="middle"),
        )
    )

    with pytest.raises(ValueError, match="1 exit tile"):
        check_layout_integrity(layout)


def test_integrity_rejects_shared_cell() -> None:
    layout = _two_tile_layout(
        placed_tiles=(
            PlacedTile(id="1A", side="A", number=1, position=GridPosition(0, 0), role="start"),
            PlacedTile(id="2B", side="B", number=2, position=GridPosition(0, 0), role="exit"),
        ),
        connections=(),
    )

    with pytest.raises(ValueError, match="distinct grid cells"):
        check_layout_integrity(layout)


def test_integrity_rejects_both_sides_of_one_tile() -> None:
    layout = _two_tile_layout(
        placed_tiles=(
            PlacedTile(id="1A", side="A", number=1, position=GridPosition(0, 0), role="start"),
            PlacedTile(id="1B", side="B", number=1, position=GridPosition(0, 1), role="exit"),
        ),
        connections=(TileConnection(from_tile_id="1A", to_tile_id="1B", door_type="normal"),),
    )

    with pytest.raises(ValueError, match="placed only once"):
        check_layout_integrity(layout)


def test_integrity_rejects_unreachable_tile() -> None:
    layout = _two_tile_layout(connections=())

    with pytest.raises(ValueError, match="unreachable from start"):
        check_layout_integrity(layout)


def test_integrity_rejects_non_adjacent_connection() -> None:
    layout = _two_tile_layout(
        placed_tiles=(
            PlacedTile(id="1A", side="A", number=1, position=GridPosition(0, 0), role="start"),
            PlacedTile(id="2B", side="B", number=2, position=GridPosition(0, 2), role="exit"),
        ),
        grid_cols=3,
    )

    with pytest.raises(ValueError, match="non-adjacent"):
        check_layout_integrity(layout)
