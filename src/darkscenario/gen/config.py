from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from darkscenario.gen.errors import InvalidConfig

MAP_SIZES = ("small", "medium", "large")
DIFFICULTIES = ("easy", "normal", "hard", "nightmare")
MIN_PLAYERS = 1
MAX_PLAYERS = 6
PLAYER_COUNTS = tuple(range(MIN_PLAYERS, MAX_PLAYERS + 1))

TILE_ROLES = ("start", "middle", "objective", "boss", "exit")
DOOR_TYPES = ("normal", "locked", "gate")
LAYOUT_TYPES = ("linear", "L-shape", "T-shape", "cross", "zigzag")

# Player-count tiers used for token scaling: 1-2, 3-4, 5-6.
TIER_BASE = 0
TIER_3_PLUS = 1
TIER_5_PLUS = 2


def player_tier(player_count: int) -> int:
    if player_count >= 5:
        return TIER_5_PLUS
    if player_count >= 3:
        return TIER_3_PLUS
    return TIER_BASE


def tier_count(count: int, count_at_3_plus: int | None, count_at_5_plus: int | None, player_count: int) -> int:
    """Resolve a tiered quantity; a tier without its own value uses the base count."""
    tier = player_tier(player_count)
    if tier == TIER_5_PLUS and count_at_5_plus is not None:
        return count_at_5_plus
    if tier == TIER_3_PLUS and count_at_3_plus is not None:
        return count_at_3_plus
    return count


@dataclass(frozen=True)
class ScenarioConfig:
    seed: str
    map_size: str
    difficulty: str
    player_count: int

    def __post_init__(self) -> None:
        if not isinstance(self.seed, str) or not self.seed.strip():
            raise InvalidConfig("seed must be a non-empty string")
        if self.map_size not in MAP_SIZES:
            raise InvalidConfig(f"unknown map_size: {self.map_size!r}")
        if self.difficulty not in DIFFICULTIES:
            raise InvalidConfig(f"unknown difficulty: {self.difficulty!r}")
        if isinstance(self.player_count, bool) or not isinstance(self.player_count, int):
            raise InvalidConfig("player_count must be an integer")
        if not MIN_PLAYERS <= self.player_count <= MAX_PLAYERS:
            raise InvalidConfig(f"player_count must be within {MIN_PLAYERS}..{MAX_PLAYERS}: {self.player_count}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "seed": self.seed,
            "mapSize": self.map_size,
            "difficulty": self.difficulty,
            "playerCount": self.player_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScenarioConfig":
        if not isinstance(data, dict):
            raise InvalidConfig("scenario config must be an object")
        missing = {"seed", "mapSize", "difficulty", "playerCount"} - set(data.keys())
        if missing:
            raise InvalidConfig(f"scenario config missing fields: {sorted(missing)}")
        return cls(
            seed=data["seed"],
            map_size=data["mapSize"],
            difficulty=data["difficulty"],
            player_count=data["playerCount"],
        )
