from __future__ import annotations

import random
from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import Any

from explorewards.content.locations import LocationDef
from explorewards.sim.rewards import Schedule, SlotReward
from explorewards.sim.rng import derive_location_seed, time_seed
from explorewards.sim.scheduler import DEFAULT_ATTEMPTS_PER_UNIT, build_schedule

EXPLORATION_OUTCOME_EXPLORED = "explored"
EXPLORATION_OUTCOME_EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class ExplorationResult:
    location_id: str
    outcome: str
    found_items: tuple[SlotReward, ...]
    start_index: int
    end_index: int
    explorations_left: int

    @property
    def is_final_exploration(self) -> bool:
        return self.outcome == EXPLORATION_OUTCOME_EXPLORED and self.explorations_left == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "location_id": self.location_id,
            "outcome": self.outcome,
            "found_items": [item.to_dict() for item in self.found_items],
            "start_index": self.start_index,
            "end_index": self.end_index,
            "explorations_left": self.explorations_left,
            "is_final_exploration": self.is_final_exploration,
        }


@dataclass
class LocationRuntimeState:
    """Per-location exploration progress over a schedule generated once."""

    location_id: str
    total_slots: int
    seed_used: int
    schedule: Schedule
    explored_slots: int = 0

    @classmethod
    def create(
        cls,
        location: LocationDef,
        *,
        seed: int | None = None,
        attempts_per_unit: int = DEFAULT_ATTEMPTS_PER_UNIT,
    ) -> "LocationRuntimeState":
        seed_used = time_seed() if seed is None else seed
        rng = random.Random(derive_location_seed(seed_used, location.location_id))
        schedule = build_schedule(
            location.total_explorations,
            location.rewards,
            rng,
            attempts_per_unit=attempts_per_unit,
        )
        return cls(
            location_id=location.location_id,
            total_slots=max(0, location.total_explorations),
            seed_used=seed_used,
            schedule=schedule,
        )

    @property
    def remaining_explorations(self) -> int:
        return self.total_slots - self.explored_slots

    def explore(self, steps: int = 1) -> ExplorationResult:
        """Advance through the next ``steps`` slots and collect their rewards.

        ``steps`` is clamped into [1, remaining]. Same-item rewards inside the
        covered range are merged in first-seen order.
        """
        remaining = self.remaining_explorations
        if remaining <= 0:
            return ExplorationResult(
                location_id=self.location_id,
                outcome=EXPLORATION_OUTCOME_EXHAUSTED,
                found_items=(),
                start_index=self.explored_slots,
                end_index=self.explored_slots,
                explorations_left=0,
            )

        steps = min(max(steps, 1), remaining)
        start = self.explored_slots
        end = start + steps

        merged: dict[Hashable, int] = {}
        for slot in self.schedule.slots[start:end]:
            if slot.is_empty:
                continue
            merged[slot.item_id] = merged.get(slot.item_id, 0) + slot.quantity

        self.explored_slots = end
        return ExplorationResult(
            location_id=self.location_id,
            outcome=EXPLORATION_OUTCOME_EXPLORED,
            found_items=tuple(SlotReward(item_id=item_id, quantity=quantity) for item_id, quantity in merged.items()),
            start_index=start,
            end_index=end,
            explorations_left=self.remaining_explorations,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "location_id": self.location_id,
            "total_slots": self.total_slots,
            "seed_used": self.seed_used,
            "explored_slots": self.explored_slots,
            "schedule": self.schedule.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LocationRuntimeState":
        if not isinstance(data, dict):
            raise ValueError("location state must be an object")
        location_id = data.get("location_id")
        if not isinstance(location_id, str) or not location_id:
            raise ValueError("location state location_id must be a non-empty string")
        total_slots = data.get("total_slots")
        if isinstance(total_slots, bool) or not isinstance(total_slots, int) or total_slots < 0:
            raise ValueError(f"location state {location_id} total_slots must be integer >= 0")
        seed_used = data.get("seed_used")
        if isinstance(seed_used, bool) or not isinstance(seed_used, int):
            raise ValueError(f"location state {location_id} seed_used must be an integer")
        explored_slots = data.get("explored_slots", 0)
        if isinstance(explored_slots, bool) or not isinstance(explored_slots, int):
            raise ValueError(f"location state {location_id} explored_slots must be an integer")
        if not 0 <= explored_slots <= total_slots:
            raise ValueError(f"location state {location_id} explored_slots must be within [0, total_slots]")

        schedule = Schedule.from_dict(data.get("schedule"))
        if len(schedule) != total_slots:
            raise ValueError(
                f"location state {location_id} schedule length {len(schedule)} does not match total_slots {total_slots}"
            )
        return cls(
            location_id=location_id,
            total_slots=total_slots,
            seed_used=seed_used,
            schedule=schedule,
            explored_slots=explored_slots,
        )


@dataclass
class LocationStates:
    """Location runtime states keyed by location_id, created lazily on first visit."""

    master_seed: int | None = None
    states: dict[str, LocationRuntimeState] = field(default_factory=dict)

    def get(self, location_id: str) -> LocationRuntimeState | None:
        return self.states.get(location_id)

    def get_or_create(self, location: LocationDef, *, seed: int | None = None) -> LocationRuntimeState:
        state = self.states.get(location.location_id)
        if state is None:
            if seed is None:
                seed = self.master_seed
            state = LocationRuntimeState.create(location, seed=seed)
            self.states[location.location_id] = state
        return state

    def explore(self, location: LocationDef, steps: int = 1) -> ExplorationResult:
        return self.get_or_create(location).explore(steps)

    def to_dict(self) -> dict[str, Any]:
        return {
            "master_seed": self.master_seed,
            "states": [self.states[location_id].to_dict() for location_id in sorted(self.states)],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LocationStates":
        if not isinstance(data, dict):
            raise ValueError("location_states must be an object")
        master_seed = data.get("master_seed")
        if master_seed is not None and (isinstance(master_seed, bool) or not isinstance(master_seed, int)):
            raise ValueError("location_states.master_seed must be an integer or null")
        rows = data.get("states", [])
        if not isinstance(rows, list):
            raise ValueError("location_states.states must be a list")
        states: dict[str, LocationRuntimeState] = {}
        for row in rows:
            state = LocationRuntimeState.from_dict(row)
            if state.location_id in states:
                raise ValueError(f"duplicate location state: {state.location_id}")
            states[state.location_id] = state
        return cls(master_seed=master_seed, states=states)
