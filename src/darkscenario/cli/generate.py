from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from darkscenario.cli.viewer import AsciiMapViewer
from darkscenario.content.catalogs import DEFAULT_CONTENT_ROOT, load_scenario_catalogs
from darkscenario.content.io import canonical_json, save_scenario_json
from darkscenario.gen.config import DIFFICULTIES, MAP_SIZES, ScenarioConfig
from darkscenario.gen.generator import generate
from darkscenario.gen.hash import scenario_hash
from darkscenario.gen.rng import random_seed


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="darkscenario-generate",
        description=(
            "Generate a deterministic dungeon scenario from a seed, map size, difficulty and player count. "
            "The same inputs and catalogs always produce the same scenario."
        ),
    )
    parser.add_argument("--seed", help="Scenario seed string (default: a fresh random seed)")
    parser.add_argument("--map-size", choices=MAP_SIZES, default="medium", help="Map size (default: medium)")
    parser.add_argument("--difficulty", choices=DIFFICULTIES, default="normal", help="Difficulty (default: normal)")
    parser.add_argument("--players", type=int, default=2, help="Player count 1-6 (default: 2)")
    parser.add_argument(
        "--content-root",
        default=DEFAULT_CONTENT_ROOT,
        help=f"Directory holding the scenario catalog JSON files (default: {DEFAULT_CONTENT_ROOT})",
    )
    parser.add_argument("--out", help="Optional path to write the canonical scenario JSON")
    parser.add_argument("--force", action="store_true", help="Overwrite --out if it already exists")
    parser.add_argument("--print-map", action="store_true", help="Print an ASCII rendering of the layout")
    parser.add_argument("--json", action="store_true", help="Print the scenario as canonical JSON")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = ScenarioConfig(
            seed=args.seed if args.seed is not None else random_seed(),
            map_size=args.map_size,
            difficulty=args.difficulty,
            player_count=args.players,
        )

        out_path = Path(args.out) if args.out else None
        if out_path is not None and out_path.exists() and not args.force:
            raise ValueError(f"output exists: {out_path} (use --force to overwrite)")

        catalogs = load_scenario_catalogs(args.content_root)
        scenario = generate(config, catalogs)
        if out_path is not None:
            save_scenario_json(out_path, scenario)

        if args.print_map:
            print(AsciiMapViewer().render(scenario))
        if args.json:
            print(canonical_json(scenario.to_dict()))

        print(
            "ok "
            f"seed={scenario.seed} "
            f"layout={scenario.map_layout.layout_type} "
            f"tiles={','.join(tile.id for tile in scenario.map_layout.placed_tiles)} "
            f"objectives={len(scenario.objectives)} "
            f"scenario_hash={scenario_hash(scenario)}"
        )
    except Exception as exc:
        print(f"error: {exc}")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
