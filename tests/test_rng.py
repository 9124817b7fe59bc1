import random

import pytest

from darkscenario.gen.errors import CatalogExhausted, InvalidConfig
from darkscenario.gen.rng import (
    RANDOM_SEED_ALPHABET,
    ScenarioRng,
    create_rng,
    derive_seed,
    random_seed,
)


def test_derived_seed_is_stable_for_same_string() -> None:
    assert derive_seed("abc") == derive_seed("abc")
    assert derive_seed("abc") != derive_seed("abd")


def test_cursor_reads_one_stream_seeded_from_the_seed_string() -> None:
    rng = ScenarioRng("single")
    reference = random.Random(derive_seed("single"))

    assert [rng.next() for _ in range(10)] == [reference.random() for _ in range(10)]
    with pytest.raises(TypeError):
        ScenarioRng("single", stream_name="layout")


def test_same_seed_gives_same_draw_sequence() -> None:
    rng_a = create_rng("dungeon")
    rng_b = create_rng("dungeon")

    assert [rng_a.next() for _ in range(20)] == [rng_b.next() for _ in range(20)]


@pytest.mark.parametrize("seed", ["", "   ", "\t"])
def test_blank_seed_is_rejected(seed: str) -> None:
    with pytest.raises(InvalidConfig, match="seed must be a non-empty string"):
        ScenarioRng(seed)


def test_helpers_consume_fixed_draw_counts() -> None:
    rng = ScenarioRng("counts")

    value = rng.int(3, 5)
    assert 3 <= value <= 5
    assert rng.draws == 1

    rng.pick(["a", "b", "c"])
    assert rng.draws == 2

    rng.weighted_pick(["a", "b"], [1, 3])
    assert rng.draws == 3

    rng.shuffle([1, 2, 3, 4, 5])
    assert rng.draws == 7


def test_shuffle_returns_new_permutation_and_keeps_input() -> None:
    items = list(range(8))
    shuffled = ScenarioRng("shuffle").shuffle(items)

    assert items == list(range(8))
    assert sorted(shuffled) == items


def test_weighted_pick_never_returns_zero_weight_item() -> None:
    rng = ScenarioRng("weights")

    picks = {rng.weighted_pick(["normal", "locked", "gate"], [5, 5, 0]) for _ in range(200)}

    assert picks == {"normal", "locked"}


def test_weighted_pick_rejects_bad_weights() -> None:
    rng = ScenarioRng("weights")

    with pytest.raises(ValueError, match="positive total weight"):
        rng.weighted_pick(["a", "b"], [0, 0])
    with pytest.raises(ValueError, match="one weight per item"):
        rng.weighted_pick(["a", "b"], [1])
    with pytest.raises(ValueError, match=">= 0"):
        rng.weighted_pick(["a", "b"], [2, -1])


def test_pick_from_empty_list_raises_catalog_exhausted() -> None:
    with pytest.raises(CatalogExhausted):
        ScenarioRng("empty").pick([])


def test_random_seed_uses_unambiguous_alphabet() -> None:
    seed = random_seed()

    assert len(seed) == 8
    assert set(seed) <= set(RANDOM_SEED_ALPHABET)
    assert len(random_seed(12)) == 12
