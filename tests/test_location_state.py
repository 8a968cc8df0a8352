import pytest

from explorewards.content.locations import LocationDef
from explorewards.sim.location import (
    EXPLORATION_OUTCOME_EXHAUSTED,
    EXPLORATION_OUTCOME_EXPLORED,
    LocationRuntimeState,
    LocationStates,
)
from explorewards.sim.rewards import RewardDistributionRule, RewardPlanItem, Schedule, SlotReward


def _location(location_id: str = "depot", total_explorations: int = 12) -> LocationDef:
    return LocationDef(
        location_id=location_id,
        name="Depot",
        total_explorations=total_explorations,
        rewards=(
            RewardPlanItem("scrap", 6, RewardDistributionRule(peak_boost=3.0, peak_max_per_point=2)),
            RewardPlanItem("ration", 3, RewardDistributionRule(min_distance_between_same=2)),
        ),
    )


def _handmade_state() -> LocationRuntimeState:
    schedule = Schedule(
        slots=(
            SlotReward("scrap", 1),
            SlotReward(),
            SlotReward("scrap", 2),
            SlotReward("ration", 1),
            SlotReward(),
        )
    )
    return LocationRuntimeState(location_id="depot", total_slots=5, seed_used=0, schedule=schedule)


def test_create_is_deterministic_for_seed() -> None:
    state_a = LocationRuntimeState.create(_location(), seed=99)
    state_b = LocationRuntimeState.create(_location(), seed=99)

    assert state_a.seed_used == 99
    assert state_a.schedule == state_b.schedule
    assert len(state_a.schedule) == 12
    assert state_a.schedule.quantity_of("scrap") == 6
    assert state_a.schedule.quantity_of("ration") == 3


def test_create_without_seed_records_generated_seed() -> None:
    state = LocationRuntimeState.create(_location())
    assert isinstance(state.seed_used, int)
    assert LocationRuntimeState.create(_location(), seed=state.seed_used).schedule == state.schedule


def test_same_seed_differs_between_locations() -> None:
    depot = LocationRuntimeState.create(_location("depot", 30), seed=5)
    tunnel = LocationRuntimeState.create(_location("tunnel", 30), seed=5)
    assert depot.schedule.to_dict() != tunnel.schedule.to_dict()


def test_explore_merges_rewards_over_covered_range() -> None:
    state = _handmade_state()

    result = state.explore(3)

    assert result.outcome == EXPLORATION_OUTCOME_EXPLORED
    assert result.found_items == (SlotReward("scrap", 3),)
    assert (result.start_index, result.end_index) == (0, 3)
    assert result.explorations_left == 2
    assert not result.is_final_exploration
    assert state.explored_slots == 3


def test_explore_clamps_steps_to_remaining_and_marks_final() -> None:
    state = _handmade_state()
    state.explore(3)

    result = state.explore(10)

    assert result.found_items == (SlotReward("ration", 1),)
    assert (result.start_index, result.end_index) == (3, 5)
    assert result.explorations_left == 0
    assert result.is_final_exploration


def test_explore_non_positive_steps_advance_one_slot() -> None:
    state = _handmade_state()
    result = state.explore(0)
    assert (result.start_index, result.end_index) == (0, 1)
    assert result.found_items == (SlotReward("scrap", 1),)


def test_explore_exhausted_location_is_a_no_op() -> None:
    state = _handmade_state()
    state.explore(5)

    result = state.explore(1)

    assert result.outcome == EXPLORATION_OUTCOME_EXHAUSTED
    assert result.found_items == ()
    assert result.explorations_left == 0
    assert not result.is_final_exploration
    assert state.explored_slots == 5


def test_zero_slot_location_is_exhausted_immediately() -> None:
    state = LocationRuntimeState.create(_location(total_explorations=0), seed=1)
    assert len(state.schedule) == 0
    assert state.explore().outcome == EXPLORATION_OUTCOME_EXHAUSTED


def test_explore_walks_the_whole_schedule_exactly_once() -> None:
    state = LocationRuntimeState.create(_location(), seed=3)
    collected: dict[str, int] = {}
    while state.remaining_explorations > 0:
        for item in state.explore(2).found_items:
            collected[item.item_id] = collected.get(item.item_id, 0) + item.quantity
    assert collected == {"scrap": 6, "ration": 3}


def test_state_payload_round_trip_keeps_schedule_and_progress() -> None:
    state = LocationRuntimeState.create(_location(), seed=8)
    state.explore(4)

    restored = LocationRuntimeState.from_dict(state.to_dict())

    assert restored.to_dict() == state.to_dict()
    assert restored.explore(1).start_index == 4


def test_state_payload_rejects_schedule_length_mismatch() -> None:
    payload = _handmade_state().to_dict()
    payload["total_slots"] = 6
    with pytest.raises(ValueError, match="does not match total_slots"):
        LocationRuntimeState.from_dict(payload)


def test_state_payload_rejects_progress_past_end() -> None:
    payload = _handmade_state().to_dict()
    payload["explored_slots"] = 9
    with pytest.raises(ValueError, match="explored_slots"):
        LocationRuntimeState.from_dict(payload)


def test_location_states_create_once_per_location() -> None:
    states = LocationStates(master_seed=21)

    first = states.get_or_create(_location())
    first.explore(2)
    second = states.get_or_create(_location(), seed=999)

    assert second is first
    assert second.explored_slots == 2
    assert first.seed_used == 21


def test_location_states_explore_and_round_trip() -> None:
    states = LocationStates(master_seed=4)
    states.explore(_location("depot"), 3)
    states.explore(_location("tunnel"), 1)

    restored = LocationStates.from_dict(states.to_dict())

    assert restored.to_dict() == states.to_dict()
    assert restored.get("depot").explored_slots == 3
    assert restored.get("tunnel").explored_slots == 1
    assert restored.get("vault") is None
