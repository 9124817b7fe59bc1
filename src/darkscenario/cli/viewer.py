from __future__ import annotations

from darkscenario.gen.models import GeneratedScenario, GridPosition, MapLayout

ROLE_GLYPHS = {"start": "S", "middle": "M", "objective": "O", "boss": "B", "exit": "E"}
HORIZONTAL_DOOR_GLYPHS = {"normal": "-", "locked": "L", "gate": "G"}
VERTICAL_DOOR_GLYPHS = {"normal": "|", "locked": "L", "gate": "G"}
CELL_WIDTH = 6
EMPTY_CELL = "  ..  "


class AsciiMapViewer:
    """Read-only projection of a generated scenario's layout for terminal display."""

    def render(self, scenario: GeneratedScenario) -> str:
        layout = scenario.map_layout
        lines = [
            f"layout={layout.layout_type} grid={layout.grid_rows}x{layout.grid_cols} seed={scenario.seed}",
        ]
        lines.extend(self.render_grid(layout))

        for tile in layout.placed_tiles:
            if tile.tokens:
                tokens = " ".join(f"{token.name.replace(' ', '_')}x{token.count}" for token in tile.tokens)
                lines.append(f"tokens[{tile.id}] {tokens}")
        for objective in scenario.objectives:
            lines.append(f"objective[{objective.order}] {objective.type} {objective.title}")
        return "\n".join(lines)

    def render_grid(self, layout: MapLayout) -> list[str]:
        by_cell = {tile.position: tile for tile in layout.placed_tiles}
        doors = {
            frozenset((connection.from_tile_id, connection.to_tile_id)): connection.door_type
            for connection in layout.connections
        }

        def door_between(a: GridPosition, b: GridPosition, glyphs: dict[str, str]) -> str:
            tile_a = by_cell.get(a)
            tile_b = by_cell.get(b)
            if tile_a is None or tile_b is None:
                return " "
            door_type = doors.get(frozenset((tile_a.id, tile_b.id)))
            return glyphs[door_type] if door_type else " "

        lines: list[str] = []
        for row in range(layout.grid_rows):
            parts: list[str] = []
            for col in range(layout.grid_cols):
                position = GridPosition(row, col)
                tile = by_cell.get(position)
                parts.append(f"[{ROLE_GLYPHS[tile.role]}:{tile.id}]" if tile else EMPTY_CELL)
                if col < layout.grid_cols - 1:
                    parts.append(door_between(position, GridPosition(row, col + 1), HORIZONTAL_DOOR_GLYPHS))
            lines.append("".join(parts).rstrip())

            if row < layout.grid_rows - 1:
                vertical = [
                    door_between(GridPosition(row, col), GridPosition(row + 1, col), VERTICAL_DOOR_GLYPHS).center(
                        CELL_WIDTH
                    )
                    for col in range(layout.grid_cols)
                ]
                lines.append(" ".join(vertical).rstrip())
        return lines
