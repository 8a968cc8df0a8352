from __future__ import annotations

from collections.abc import Hashable, Sequence

from explorewards.sim.constraints import SlotWindow, base_weights, effective_weights, relaxed_weights, resolve_window
from explorewards.sim.rewards import (
    PLAN_OUTCOME_EMPTY_WINDOW,
    PLAN_OUTCOME_MISSING_ITEM,
    PLAN_OUTCOME_NON_POSITIVE_QUANTITY,
    PLAN_OUTCOME_PARTIAL,
    PLAN_OUTCOME_PLACED,
    PlanOutcome,
    RewardPlanItem,
    Schedule,
    SlotReward,
)
from explorewards.sim.sampling import RandomSource, pick_index, pick_k_distinct

DEFAULT_ATTEMPTS_PER_UNIT = 20


def build_schedule(
    total_slots: int,
    plans: Sequence[RewardPlanItem],
    rng: RandomSource,
    *,
    attempts_per_unit: int = DEFAULT_ATTEMPTS_PER_UNIT,
) -> Schedule:
    """Distribute every plan's quantity over ``total_slots`` exploration slots.

    Plans are processed in the given order, so earlier plans claim slots
    first. Each slot ends up holding at most one item. Plans that cannot be
    placed in full are recorded in ``Schedule.outcomes`` instead of raising;
    ``attempts_per_unit`` bounds each plan's loop at ``quantity *
    attempts_per_unit`` iterations.
    """
    if not isinstance(attempts_per_unit, int) or attempts_per_unit <= 0:
        raise ValueError("attempts_per_unit must be a positive integer")
    if total_slots <= 0:
        return Schedule()

    occupants: list[Hashable | None] = [None] * total_slots
    quantities = [0] * total_slots
    outcomes: list[PlanOutcome] = []

    for plan_index, plan in enumerate(plans):
        outcome = _place_plan(
            plan_index,
            plan,
            total_slots=total_slots,
            occupants=occupants,
            quantities=quantities,
            rng=rng,
            attempts_per_unit=attempts_per_unit,
        )
        outcomes.append(outcome)

    slots = tuple(
        SlotReward(item_id=occupants[index], quantity=quantities[index])
        if occupants[index] is not None
        else SlotReward()
        for index in range(total_slots)
    )
    return Schedule(slots=slots, outcomes=tuple(outcomes))


def _place_plan(
    plan_index: int,
    plan: RewardPlanItem,
    *,
    total_slots: int,
    occupants: list[Hashable | None],
    quantities: list[int],
    rng: RandomSource,
    attempts_per_unit: int,
) -> PlanOutcome:
    item_id = plan.item_id
    requested = plan.quantity

    if item_id is None:
        return _skipped(plan_index, plan, PLAN_OUTCOME_MISSING_ITEM)
    if requested <= 0:
        return _skipped(plan_index, plan, PLAN_OUTCOME_NON_POSITIVE_QUANTITY)

    rule = plan.rule
    window = resolve_window(rule, total_slots)
    if window is None or window.count <= 0:
        return _skipped(plan_index, plan, PLAN_OUTCOME_EMPTY_WINDOW)

    weights_base = base_weights(rule, window)
    peak_caps = _designate_peaks(plan, window, weights_base, rng)

    used_slots: list[int] = []
    remaining = requested
    relaxed_draws = 0
    guard = 0
    while remaining > 0 and guard < requested * attempts_per_unit:
        guard += 1

        weights = effective_weights(
            window,
            weights_base,
            rule=rule,
            item_id=item_id,
            occupants=occupants,
            used_slots=used_slots,
            peak_caps=peak_caps,
        )
        total = sum(weights)
        if total <= 0.0:
            weights = relaxed_weights(window, item_id=item_id, occupants=occupants)
            total = sum(weights)
            if total <= 0.0:
                break
            relaxed_draws += 1

        slot = window.earliest + pick_index(weights, total, rng)
        if occupants[slot] is None:
            occupants[slot] = item_id
            quantities[slot] = 1
        else:
            quantities[slot] += 1

        used_slots.append(slot)
        if slot in peak_caps:
            peak_caps[slot] = max(0, peak_caps[slot] - 1)
        remaining -= 1

    placed = requested - remaining
    return PlanOutcome(
        plan_index=plan_index,
        item_id=item_id,
        requested=requested,
        placed=placed,
        relaxed_draws=relaxed_draws,
        outcome=PLAN_OUTCOME_PLACED if remaining == 0 else PLAN_OUTCOME_PARTIAL,
    )


def _designate_peaks(
    plan: RewardPlanItem,
    window: SlotWindow,
    weights_base: list[float],
    rng: RandomSource,
) -> dict[int, int]:
    rule = plan.rule
    if not rule.peaks_enabled:
        return {}
    peak_count = min(max(1, plan.quantity // rule.peak_max_per_point), window.count)
    return {
        window.earliest + offset: rule.peak_max_per_point
        for offset in pick_k_distinct(weights_base, peak_count, rng)
    }


def _skipped(plan_index: int, plan: RewardPlanItem, outcome: str) -> PlanOutcome:
    return PlanOutcome(
        plan_index=plan_index,
        item_id=plan.item_id,
        requested=max(0, plan.quantity),
        placed=0,
        relaxed_draws=0,
        outcome=outcome,
    )
