from darkscenario.cli.viewer import AsciiMapViewer
from darkscenario.content.catalogs import load_scenario_catalogs
from darkscenario.gen.config import ScenarioConfig
from darkscenario.gen.generator import generate
from darkscenario.gen.models import GridPosition, MapLayout, PlacedTile, TileConnection


def test_render_grid_draws_tiles_and_doors() -> None:
    layout = MapLayout(
        placed_tiles=(
            PlacedTile(id="1A", side="A", number=1, position=GridPosition(0, 0), role="start"),
            PlacedTile(id="2B", side="B", number=2, position=GridPosition(0, 1), role="objective"),
            PlacedTile(id="3A", side="A", number=3, position=GridPosition(1, 1), role="exit"),
        ),
        connections=(
            TileConnection(from_tile_id="1A", to_tile_id="2B", door_type="locked"),
            TileConnection(from_tile_id="2B", to_tile_id="3A", door_type="normal"),
        ),
        grid_rows=2,
        grid_cols=2,
        layout_type="L-shape",
    )

    lines = AsciiMapViewer().render_grid(layout)

    assert lines == [
        "[S:1A]L[O:2B]",
        "         |",
        "  ..   [E:3A]",
    ]


def test_render_lists_tokens_and_objectives() -> None:
    scenario = generate(
        ScenarioConfig(seed="viewer", map_size="medium", difficulty="normal", player_count=3),
        load_scenario_catalogs(),
    )

    text = AsciiMapViewer().render(scenario)

    assert text.startswith(f"layout={scenario.map_layout.layout_type} ")
    assert "tokens[" in text
    assert "Life_Spark" in text
    assert "objective[1] " in text
