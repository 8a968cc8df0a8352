from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from explorewards.content.io import load_location_states_json, save_location_states_json
from explorewards.content.items import load_items_json
from explorewards.content.locations import DEFAULT_LOCATIONS_PATH, load_locations_json
from explorewards.sim.location import LocationStates


def _positive_int(value: str) -> int:
    parsed = int(value)
    if parsed <= 0:
        raise argparse.ArgumentTypeError("steps must be > 0")
    return parsed


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="explorewards-explore",
        description=(
            "Advance exploration of one location in a location-state save. "
            "The save is created from --seed when it does not exist yet."
        ),
    )
    parser.add_argument("save_path", help="Path to location-state save JSON")
    parser.add_argument(
        "locations_path",
        nargs="?",
        default=DEFAULT_LOCATIONS_PATH,
        help=f"Path to location registry JSON (default: {DEFAULT_LOCATIONS_PATH})",
    )
    parser.add_argument("--location", required=True, help="location_id to explore")
    parser.add_argument("--steps", type=_positive_int, default=1, help="Slots to advance (default: 1)")
    parser.add_argument("--seed", type=int, default=0, help="Master seed used when creating a new save (default: 0)")
    parser.add_argument("--items-path", help="Optional item registry JSON used to check reward item ids")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        items = load_items_json(args.items_path) if args.items_path else None
        registry = load_locations_json(args.locations_path, items=items)
        location = registry.get(args.location)

        save_path = Path(args.save_path)
        states = load_location_states_json(save_path) if save_path.exists() else LocationStates(master_seed=args.seed)
        result = states.explore(location, args.steps)

        if not result.found_items:
            print("found none")
        for item in result.found_items:
            print(f"found item_id={item.item_id} quantity={item.quantity}")

        print(
            "ok "
            f"location_id={result.location_id} "
            f"outcome={result.outcome} "
            f"start={result.start_index} "
            f"end={result.end_index} "
            f"explorations_left={result.explorations_left} "
            f"final={str(result.is_final_exploration).lower()}"
        )
        save_location_states_json(save_path, states)
    except Exception as exc:
        print(f"error: {exc}")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
