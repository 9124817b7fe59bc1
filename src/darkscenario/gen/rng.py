from __future__ import annotations

import hashlib
import math
import random
from collections.abc import Sequence
from typing import TypeVar

from darkscenario.gen.errors import CatalogExhausted, InvalidConfig

T = TypeVar("T")

RANDOM_SEED_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
DEFAULT_RANDOM_SEED_LENGTH = 8


def _require_seed(seed: str) -> str:
    if not isinstance(seed, str) or not seed.strip():
        raise InvalidConfig("seed must be a non-empty string")
    return seed


def derive_seed(seed: str) -> int:
    """Map a seed string onto a 64-bit integer seed for the underlying generator."""
    digest = hashlib.sha256(_require_seed(seed).encode("utf-8")).digest()
    return int.from_bytes(digest[:8], byteorder="big", signed=False)


class ScenarioRng:
    """Explicit random cursor threaded through one generation call.

    Every helper is built on ``next()`` and consumes a fixed number of draws,
    so the number and order of calls fully determine the output.
    """

    def __init__(self, seed: str) -> None:
        self.seed = _require_seed(seed)
        self._random = random.Random(derive_seed(seed))
        self.draws = 0

    def next(self) -> float:
        self.draws += 1
        return self._random.random()

    def int(self, low: int, high: int) -> int:
        if high < low:
            raise ValueError(f"int bounds are inverted: {low}..{high}")
        return low + math.floor(self.next() * (high - low + 1))

    def pick(self, items: Sequence[T]) -> T:
        if not items:
            raise CatalogExhausted("cannot pick from an empty candidate list")
        return items[self.int(0, len(items) - 1)]

    def weighted_pick(self, items: Sequence[T], weights: Sequence[float]) -> T:
        if not items:
            raise CatalogExhausted("cannot pick from an empty candidate list")
        if len(items) != len(weights):
            raise ValueError("weighted_pick requires one weight per item")
        if any(weight < 0 for weight in weights):
            raise ValueError("weighted_pick weights must be >= 0")
        total = float(sum(weights))
        if total <= 0:
            raise ValueError("weighted_pick requires a positive total weight")

        roll = self.next() * total
        cumulative = 0.0
        for item, weight in zip(items, weights):
            cumulative += weight
            if roll < cumulative:
                return item
        # Float accumulation can leave roll == total; fall back to the last weighted item.
        for item, weight in zip(reversed(items), reversed(weights)):
            if weight > 0:
                return item
        raise AssertionError("unreachable: positive total weight without a positive weight")

    def shuffle(self, items: Sequence[T]) -> list[T]:
        shuffled = list(items)
        for index in range(len(shuffled) - 1, 0, -1):
            swap = self.int(0, index)
            shuffled[index], shuffled[swap] = shuffled[swap], shuffled[index]
        return shuffled


def create_rng(seed: str) -> ScenarioRng:
    return ScenarioRng(seed)


def random_seed(length: int = DEFAULT_RANDOM_SEED_LENGTH) -> str:
    """Fresh seed for callers that did not supply one. Not deterministic."""
    if length <= 0:
        raise ValueError("length must be > 0")
    source = random.SystemRandom()
    return "".join(source.choice(RANDOM_SEED_ALPHABET) for _ in range(length))
