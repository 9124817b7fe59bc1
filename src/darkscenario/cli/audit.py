from __future__ import annotations

import argparse
from itertools import product
from typing import Sequence

from darkscenario.content.catalogs import DEFAULT_CONTENT_ROOT, audit_catalog_coverage, load_scenario_catalogs
from darkscenario.content.schema import validate_scenario_dict
from darkscenario.gen.config import DIFFICULTIES, MAP_SIZES, PLAYER_COUNTS, ScenarioConfig
from darkscenario.gen.generator import generate
from darkscenario.gen.hash import layout_hash, scenario_hash
from darkscenario.gen.layout import check_layout_integrity

DEFAULT_AUDIT_SEEDS = 5


def _positive_int(value: str) -> int:
    parsed = int(value)
    if parsed <= 0:
        raise argparse.ArgumentTypeError("seeds must be > 0")
    return parsed


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="darkscenario-audit",
        description=(
            "Audit the scenario catalogs: check coverage for every map size, difficulty and player count, "
            "then generate scenarios for each combination and verify layout and token invariants."
        ),
    )
    parser.add_argument(
        "--seeds",
        type=_positive_int,
        default=DEFAULT_AUDIT_SEEDS,
        help=f"Seeds generated per combination (default: {DEFAULT_AUDIT_SEEDS})",
    )
    parser.add_argument(
        "--content-root",
        default=DEFAULT_CONTENT_ROOT,
        help=f"Directory holding the scenario catalog JSON files (default: {DEFAULT_CONTENT_ROOT})",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        catalogs = load_scenario_catalogs(args.content_root)
        combos = audit_catalog_coverage(catalogs)

        scenario_count = 0
        layouts: set[str] = set()
        for map_size, difficulty, player_count in product(MAP_SIZES, DIFFICULTIES, PLAYER_COUNTS):
            for index in range(args.seeds):
                config = ScenarioConfig(
                    seed=f"audit-{index}",
                    map_size=map_size,
                    difficulty=difficulty,
                    player_count=player_count,
                )
                scenario = generate(config, catalogs)
                check_layout_integrity(scenario.map_layout)
                validate_scenario_dict(scenario.to_dict())
                if scenario_hash(generate(config, catalogs)) != scenario_hash(scenario):
                    raise ValueError(
                        f"non-deterministic generation for seed={config.seed} "
                        f"{map_size}/{difficulty}/{player_count}"
                    )
                layouts.add(layout_hash(scenario.map_layout))
                scenario_count += 1

        print(f"audit combos={len(combos)} scenarios={scenario_count} distinct_layouts={len(layouts)}")
        print("integrity=OK")
    except Exception as exc:
        print(f"error: {exc}")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
