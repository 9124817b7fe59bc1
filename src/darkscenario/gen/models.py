from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from darkscenario.gen.config import DOOR_TYPES, LAYOUT_TYPES, TILE_ROLES, ScenarioConfig

TILE_SIDES = ("A", "B")


def reachable_from(start: Any, edges: Iterable[tuple[Any, Any]]) -> set[Any]:
    """Nodes reachable from ``start`` over undirected ``edges``."""
    neighbours: dict[Any, set[Any]] = {}
    for a, b in edges:
        neighbours.setdefault(a, set()).add(b)
        neighbours.setdefault(b, set()).add(a)
    seen = {start}
    frontier = [start]
    while frontier:
        node = frontier.pop()
        for neighbour in neighbours.get(node, ()):
            if neighbour not in seen:
                seen.add(neighbour)
                frontier.append(neighbour)
    return seen


@dataclass(frozen=True, order=True)
class GridPosition:
    """Cell on the layout grid, zero-based."""

    row: int
    col: int

    def is_adjacent(self, other: "GridPosition") -> bool:
        return abs(self.row - other.row) + abs(self.col - other.col) == 1

    def to_dict(self) -> dict[str, int]:
        return {"row": self.row, "col": self.col}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GridPosition":
        return cls(row=int(data["row"]), col=int(data["col"]))


@dataclass(frozen=True)
class MapTile:
    id: str
    side: str
    number: int

    def __post_init__(self) -> None:
        if self.side not in TILE_SIDES:
            raise ValueError(f"invalid tile side: {self.side}")
        if isinstance(self.number, bool) or not isinstance(self.number, int) or self.number < 1:
            raise ValueError("tile number must be a positive integer")
        if self.id != f"{self.number}{self.side}":
            raise ValueError(f"tile id {self.id!r} does not match number/side")

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "side": self.side, "number": self.number}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MapTile":
        return cls(id=str(data["id"]), side=str(data["side"]), number=int(data["number"]))


@dataclass(frozen=True)
class TileToken:
    name: str
    icon: str
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "icon": self.icon, "count": self.count}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TileToken":
        return cls(name=str(data["name"]), icon=str(data["icon"]), count=int(data["count"]))


@dataclass(frozen=True)
class PlacedTile:
    id: str
    side: str
    number: int
    position: GridPosition
    role: str
    tokens: tuple[TileToken, ...] = ()

    def __post_init__(self) -> None:
        if self.role not in TILE_ROLES:
            raise ValueError(f"invalid tile role: {self.role}")

    @property
    def tile(self) -> MapTile:
        return MapTile(id=self.id, side=self.side, number=self.number)

    def token_count(self, name: str) -> int:
        return sum(token.count for token in self.tokens if token.name == name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "side": self.side,
            "number": self.number,
            "position": self.position.to_dict(),
            "role": self.role,
            "tokens": [token.to_dict() for token in self.tokens],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlacedTile":
        return cls(
            id=str(data["id"]),
            side=str(data["side"]),
            number=int(data["number"]),
            position=GridPosition.from_dict(data["position"]),
            role=str(data["role"]),
            tokens=tuple(TileToken.from_dict(row) for row in data.get("tokens", [])),
        )


@dataclass(frozen=True)
class TileConnection:
    from_tile_id: str
    to_tile_id: str
    door_type: str

    def __post_init__(self) -> None:
        if self.door_type not in DOOR_TYPES:
            raise ValueError(f"invalid door type: {self.door_type}")
        if self.from_tile_id == self.to_tile_id:
            raise ValueError("a connection must join two different tiles")

    def joins(self, tile_id: str) -> bool:
        return tile_id in (self.from_tile_id, self.to_tile_id)

    def to_dict(self) -> dict[str, Any]:
        return {"fromTileId": self.from_tile_id, "toTileId": self.to_tile_id, "doorType": self.door_type}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TileConnection":
        return cls(
            from_tile_id=str(data["fromTileId"]),
            to_tile_id=str(data["toTileId"]),
            door_type=str(data["doorType"]),
        )


@dataclass(frozen=True)
class MapLayout:
    placed_tiles: tuple[PlacedTile, ...]
    connections: tuple[TileConnection, ...]
    grid_rows: int
    grid_cols: int
    layout_type: str

    def __post_init__(self) -> None:
        if self.layout_type not in LAYOUT_TYPES:
            raise ValueError(f"invalid layout type: {self.layout_type}")

    def tile_by_id(self) -> dict[str, PlacedTile]:
        return {tile.id: tile for tile in self.placed_tiles}

    def tiles_with_role(self, role: str) -> list[PlacedTile]:
        return [tile for tile in self.placed_tiles if tile.role == role]

    def to_dict(self) -> dict[str, Any]:
        return {
            "placedTiles": [tile.to_dict() for tile in self.placed_tiles],
            "connections": [connection.to_dict() for connection in self.connections],
            "gridSize": {"rows": self.grid_rows, "cols": self.grid_cols},
            "layoutType": self.layout_type,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MapLayout":
        grid_size = dict(data["gridSize"])
        return cls(
            placed_tiles=tuple(PlacedTile.from_dict(row) for row in data["placedTiles"]),
            connections=tuple(TileConnection.from_dict(row) for row in data["connections"]),
            grid_rows=int(grid_size["rows"]),
            grid_cols=int(grid_size["cols"]),
            layout_type=str(data["layoutType"]),
        )


@dataclass(frozen=True)
class Objective:
    type: str
    order: int
    title: str
    description: str
    icon: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "order": self.order,
            "title": self.title,
            "description": self.description,
            "icon": self.icon,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Objective":
        return cls(
            type=str(data["type"]),
            order=int(data["order"]),
            title=str(data["title"]),
            description=str(data["description"]),
            icon=str(data["icon"]),
        )


@dataclass(frozen=True)
class SpecialRule:
    name: str
    description: str
    icon: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description, "icon": self.icon}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SpecialRule":
        return cls(name=str(data["name"]), description=str(data["description"]), icon=str(data["icon"]))


@dataclass(frozen=True)
class TokenPlacement:
    name: str
    icon: str
    count: int
    count_at_3_plus: int | None = None
    count_at_5_plus: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "icon": self.icon, "count": self.count}
        if self.count_at_3_plus is not None:
            data["countAt3Plus"] = self.count_at_3_plus
        if self.count_at_5_plus is not None:
            data["countAt5Plus"] = self.count_at_5_plus
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TokenPlacement":
        return cls(
            name=str(data["name"]),
            icon=str(data["icon"]),
            count=int(data["count"]),
            count_at_3_plus=(int(data["countAt3Plus"]) if data.get("countAt3Plus") is not None else None),
            count_at_5_plus=(int(data["countAt5Plus"]) if data.get("countAt5Plus") is not None else None),
        )


@dataclass(frozen=True)
class WinLoseConditions:
    victory: str
    defeat: str

    def to_dict(self) -> dict[str, str]:
        return {"victory": self.victory, "defeat": self.defeat}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WinLoseConditions":
        return cls(victory=str(data["victory"]), defeat=str(data["defeat"]))


@dataclass(frozen=True)
class GeneratedScenario:
    name: str
    icon: str
    narrative: str
    seed: str
    config: ScenarioConfig
    tiles: tuple[MapTile, ...]
    map_layout: MapLayout
    objectives: tuple[Objective, ...]
    special_rules: tuple[SpecialRule, ...]
    tokens: tuple[TokenPlacement, ...]
    conditions: WinLoseConditions
    difficulty_modifiers: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "icon": self.icon,
            "narrative": self.narrative,
            "seed": self.seed,
            "config": self.config.to_dict(),
            "tiles": [tile.to_dict() for tile in self.tiles],
            "mapLayout": self.map_layout.to_dict(),
            "objectives": [objective.to_dict() for objective in self.objectives],
            "specialRules": [rule.to_dict() for rule in self.special_rules],
            "tokens": [token.to_dict() for token in self.tokens],
            "conditions": self.conditions.to_dict(),
            "difficultyModifiers": list(self.difficulty_modifiers),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GeneratedScenario":
        return cls(
            name=str(data["name"]),
            icon=str(data["icon"]),
            narrative=str(data["narrative"]),
            seed=str(data["seed"]),
            config=ScenarioConfig.from_dict(dict(data["config"])),
            tiles=tuple(MapTile.from_dict(row) for row in data["tiles"]),
            map_layout=MapLayout.from_dict(dict(data["mapLayout"])),
            objectives=tuple(Objective.from_dict(row) for row in data["objectives"]),
            special_rules=tuple(SpecialRule.from_dict(row) for row in data["specialRules"]),
            tokens=tuple(TokenPlacement.from_dict(row) for row in data["tokens"]),
            conditions=WinLoseConditions.from_dict(dict(data["conditions"])),
            difficulty_modifiers=tuple(str(value) for value in data.get("difficultyModifiers", [])),
        )
