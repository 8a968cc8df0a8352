from __future__ import annotations

from collections.abc import Hashable, Mapping, Sequence
from dataclasses import dataclass

from explorewards.sim.rewards import RewardDistributionRule
from explorewards.sim.shape import normalized_position, shape_weight

MIN_BASE_WEIGHT = 1e-6


@dataclass(frozen=True)
class SlotWindow:
    """Inclusive absolute slot range a plan may place into."""

    earliest: int
    latest: int

    @property
    def count(self) -> int:
        return self.latest - self.earliest + 1

    def slots(self) -> range:
        return range(self.earliest, self.latest + 1)


def resolve_window(rule: RewardDistributionRule, total_slots: int) -> SlotWindow | None:
    if total_slots <= 0:
        return None
    last_slot = total_slots - 1
    earliest = min(max(rule.earliest_index, 0), last_slot)
    latest = last_slot if rule.latest_index <= 0 else min(max(rule.latest_index, earliest), last_slot)
    if latest < earliest:
        return None
    return SlotWindow(earliest=earliest, latest=latest)


def base_weights(rule: RewardDistributionRule, window: SlotWindow) -> list[float]:
    weights: list[float] = []
    for offset in range(window.count):
        weight = shape_weight(normalized_position(offset, window.count), rule.mean, rule.kappa)
        weights.append(weight if weight > 0.0 else MIN_BASE_WEIGHT)
    return weights


def occupied_by_other(occupant: Hashable | None, item_id: Hashable) -> bool:
    return occupant is not None and occupant != item_id


def blocked_by_distance(slot: int, used_slots: Sequence[int], min_distance: int) -> bool:
    if min_distance <= 0:
        return False
    return any(abs(used - slot) < min_distance for used in used_slots)


def slot_weight(
    slot: int,
    base: float,
    *,
    rule: RewardDistributionRule,
    item_id: Hashable,
    occupant: Hashable | None,
    used_slots: Sequence[int],
    peak_caps: Mapping[int, int],
) -> float:
    """Effective sampling weight of one slot under every soft and hard constraint."""
    if blocked_by_distance(slot, used_slots, rule.min_distance_between_same):
        return 0.0
    if occupied_by_other(occupant, item_id):
        return 0.0
    cap = peak_caps.get(slot)
    if cap is None:
        return base
    if cap <= 0:
        return 0.0
    return base * (1.0 + rule.peak_boost)


def effective_weights(
    window: SlotWindow,
    weights_base: Sequence[float],
    *,
    rule: RewardDistributionRule,
    item_id: Hashable,
    occupants: Sequence[Hashable | None],
    used_slots: Sequence[int],
    peak_caps: Mapping[int, int],
) -> list[float]:
    return [
        slot_weight(
            slot,
            weights_base[offset],
            rule=rule,
            item_id=item_id,
            occupant=occupants[slot],
            used_slots=used_slots,
            peak_caps=peak_caps,
        )
        for offset, slot in enumerate(window.slots())
    ]


def relaxed_weights(
    window: SlotWindow,
    *,
    item_id: Hashable,
    occupants: Sequence[Hashable | None],
) -> list[float]:
    """Uniform weights that only keep the single-occupant rule.

    Distance and peak constraints are dropped together.
    """
    return [0.0 if occupied_by_other(occupants[slot], item_id) else 1.0 for slot in window.slots()]
