from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from explorewards.content.io import save_location_states_json
from explorewards.content.items import load_items_json
from explorewards.content.locations import DEFAULT_LOCATIONS_PATH, load_locations_json
from explorewards.sim.hash import schedule_hash
from explorewards.sim.location import LocationStates
from explorewards.sim.rewards import PLAN_OUTCOME_PLACED, PlanOutcome, Schedule


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="explorewards-preview",
        description="Generate and print the per-slot reward schedule for one location.",
    )
    parser.add_argument(
        "locations_path",
        nargs="?",
        default=DEFAULT_LOCATIONS_PATH,
        help=f"Path to location registry JSON (default: {DEFAULT_LOCATIONS_PATH})",
    )
    parser.add_argument("--location", required=True, help="location_id to schedule")
    parser.add_argument("--seed", type=int, default=0, help="Master seed for the schedule (default: 0)")
    parser.add_argument("--items-path", help="Optional item registry JSON used to check reward item ids")
    parser.add_argument("--save-path", help="Optional output path for a new location-state save")
    parser.add_argument("--force", action="store_true", help="Overwrite save path if it already exists")
    return parser


def _print_schedule(schedule: Schedule) -> None:
    for index, slot in enumerate(schedule):
        item_text = "-" if slot.is_empty else str(slot.item_id)
        print(f"slot index={index} item_id={item_text} quantity={slot.quantity}")


def _print_plan_warnings(outcomes: Sequence[PlanOutcome]) -> None:
    for outcome in outcomes:
        if outcome.skipped:
            print(
                "warning: plan skipped "
                f"index={outcome.plan_index} "
                f"item_id={outcome.item_id} "
                f"outcome={outcome.outcome} "
                f"requested={outcome.requested}"
            )
            continue
        if outcome.outcome == PLAN_OUTCOME_PLACED and outcome.relaxed_draws == 0:
            continue
        print(
            "warning: plan "
            f"index={outcome.plan_index} "
            f"item_id={outcome.item_id} "
            f"outcome={outcome.outcome} "
            f"requested={outcome.requested} "
            f"placed={outcome.placed} "
            f"relaxed_draws={outcome.relaxed_draws}"
        )


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        items = load_items_json(args.items_path) if args.items_path else None
        registry = load_locations_json(args.locations_path, items=items)
        location = registry.get(args.location)

        save_path = Path(args.save_path) if args.save_path else None
        if save_path is not None and save_path.exists() and not args.force:
            raise ValueError(f"output exists: {save_path} (use --force to overwrite)")

        states = LocationStates(master_seed=args.seed)
        state = states.get_or_create(location)

        print(
            "location "
            f"location_id={location.location_id} "
            f"total_slots={state.total_slots} "
            f"seed={state.seed_used} "
            f"plans={len(location.rewards)}"
        )
        _print_schedule(state.schedule)
        _print_plan_warnings(state.schedule.outcomes)
        print(f"schedule_hash={schedule_hash(state.schedule)}")

        if save_path is not None:
            save_location_states_json(save_path, states)
            print(f"ok save_path={save_path}")
    except Exception as exc:
        print(f"error: {exc}")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
