import json
from pathlib import Path

from explorewards.cli.preview import _print_plan_warnings, main
from explorewards.content.io import load_location_states_json
from explorewards.content.locations import DEFAULT_LOCATIONS_PATH
from explorewards.sim.rewards import (
    PLAN_OUTCOME_NON_POSITIVE_QUANTITY,
    PLAN_OUTCOME_PARTIAL,
    PLAN_OUTCOME_PLACED,
    PlanOutcome,
)


def _lines(output: str, prefix: str) -> list[str]:
    return [line for line in output.splitlines() if line.startswith(prefix)]


def test_preview_prints_every_slot_and_hash(capsys) -> None:
    exit_code = main([DEFAULT_LOCATIONS_PATH, "--location", "abandoned_depot", "--seed", "11"])

    output = capsys.readouterr().out
    assert exit_code == 0
    assert "location location_id=abandoned_depot total_slots=18 seed=11 plans=4" in output
    assert len(_lines(output, "slot index=")) == 18
    assert len(_lines(output, "schedule_hash=")) == 1


def test_preview_is_deterministic_for_seed(capsys) -> None:
    main(["--location", "abandoned_depot", "--seed", "5"])
    first = capsys.readouterr().out
    main(["--location", "abandoned_depot", "--seed", "5"])
    second = capsys.readouterr().out

    assert first == second


def test_preview_warns_about_relaxed_or_partial_plans(capsys) -> None:
    exit_code = main(["--location", "collapsed_tunnel", "--seed", "3", "--items-path", "content/items/items.json"])

    output = capsys.readouterr().out
    assert exit_code == 0
    warnings = _lines(output, "warning: plan index=0 item_id=power_cell")
    assert len(warnings) == 1
    assert "relaxed_draws=0" not in warnings[0]


def test_preview_unknown_location_reports_error(capsys) -> None:
    exit_code = main(["--location", "nowhere"])

    output = capsys.readouterr().out
    assert exit_code == 1
    assert "error: unknown location_id: nowhere" in output


def test_preview_writes_save_matching_printed_schedule(tmp_path: Path, capsys) -> None:
    save_path = tmp_path / "save.json"

    exit_code = main(["--location", "abandoned_depot", "--seed", "9", "--save-path", str(save_path)])

    output = capsys.readouterr().out
    assert exit_code == 0
    assert f"ok save_path={save_path}" in output

    state = load_location_states_json(save_path).get("abandoned_depot")
    assert state is not None
    assert state.seed_used == 9
    assert state.explored_slots == 0
    for index, slot in enumerate(state.schedule):
        item_text = "-" if slot.is_empty else slot.item_id
        assert f"slot index={index} item_id={item_text} quantity={slot.quantity}" in output


def test_preview_requires_force_to_overwrite_save(tmp_path: Path, capsys) -> None:
    save_path = tmp_path / "save.json"
    save_path.write_text(json.dumps({"existing": True}), encoding="utf-8")

    exit_code = main(["--location", "abandoned_depot", "--save-path", str(save_path)])
    output = capsys.readouterr().out

    assert exit_code == 1
    assert "use --force" in output

    overwrite_exit_code = main(["--location", "abandoned_depot", "--save-path", str(save_path), "--force"])
    assert overwrite_exit_code == 0


def test_plan_warnings_report_skipped_plans_separately(capsys) -> None:
    outcomes = [
        PlanOutcome(0, "scrap", 4, 4, 0, PLAN_OUTCOME_PLACED),
        PlanOutcome(1, "ration", 0, 0, 0, PLAN_OUTCOME_NON_POSITIVE_QUANTITY),
        PlanOutcome(2, "cell", 3, 1, 2, PLAN_OUTCOME_PARTIAL),
    ]
    _print_plan_warnings(outcomes)

    output = capsys.readouterr().out
    assert "index=0" not in output
    assert _lines(output, "warning: plan skipped ") == [
        "warning: plan skipped index=1 item_id=ration outcome=skipped_non_positive_quantity requested=0"
    ]
    assert _lines(output, "warning: plan index=") == [
        "warning: plan index=2 item_id=cell outcome=partial requested=3 placed=1 relaxed_draws=2"
    ]
