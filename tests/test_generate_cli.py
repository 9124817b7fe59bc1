import json
from pathlib import Path

from darkscenario.cli.generate import _build_parser, main
from darkscenario.content.io import load_scenario_json
from darkscenario.gen.hash import scenario_hash


def test_generate_parser_defaults() -> None:
    args = _build_parser().parse_args([])

    assert args.seed is None
    assert args.map_size == "medium"
    assert args.difficulty == "normal"
    assert args.players == 2
    assert args.content_root == "content/scenario"


def test_generate_writes_canonical_scenario(tmp_path: Path, capsys) -> None:
    out_path = tmp_path / "scenario.json"

    exit_code = main(
        [
            "--seed",
            "abc",
            "--map-size",
            "large",
            "--difficulty",
            "nightmare",
            "--players",
            "6",
            "--out",
            str(out_path),
            "--print-map",
        ]
    )

    output = capsys.readouterr().out
    assert exit_code == 0
    assert out_path.exists()
    assert "ok seed=abc " in output
    assert "layout=" in output
    assert "grid=" in output
    assert "[S:" in output
    assert "[B:" in output

    scenario = load_scenario_json(out_path)
    assert f"scenario_hash={scenario_hash(scenario)}" in output


def test_generate_is_repeatable_for_same_seed(capsys) -> None:
    assert main(["--seed", "repeat", "--map-size", "small"]) == 0
    first = capsys.readouterr().out
    assert main(["--seed", "repeat", "--map-size", "small"]) == 0
    second = capsys.readouterr().out

    assert first == second


def test_generate_without_seed_uses_random_seed(capsys) -> None:
    exit_code = main(["--map-size", "small", "--difficulty", "easy"])

    output = capsys.readouterr().out
    assert exit_code == 0
    assert output.startswith("ok seed=")


def test_generate_json_flag_prints_scenario(capsys) -> None:
    exit_code = main(["--seed", "json", "--json"])

    output = capsys.readouterr().out
    assert exit_code == 0
    document = output[: output.rindex("ok seed=")]
    scenario = json.loads(document)
    assert scenario["seed"] == "json"
    assert scenario["config"]["mapSize"] == "medium"


def test_generate_rejects_invalid_player_count(capsys) -> None:
    exit_code = main(["--seed", "abc", "--players", "7"])

    output = capsys.readouterr().out
    assert exit_code == 1
    assert "error: player_count must be within 1..6" in output


def test_generate_requires_force_to_overwrite(tmp_path: Path, capsys) -> None:
    out_path = tmp_path / "existing.json"
    out_path.write_text(json.dumps({"existing": True}), encoding="utf-8")

    exit_code = main(["--seed", "abc", "--out", str(out_path)])
    output = capsys.readouterr().out

    assert exit_code == 1
    assert "use --force" in output

    overwrite_exit_code = main(["--seed", "abc", "--out", str(out_path), "--force"])
    assert overwrite_exit_code == 0


def test_generate_reports_missing_content_root(tmp_path: Path, capsys) -> None:
    exit_code = main(["--seed", "abc", "--content-root", str(tmp_path / "missing")])

    output = capsys.readouterr().out
    assert exit_code == 1
    assert output.startswith("error: ")
