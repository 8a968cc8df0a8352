from __future__ import annotations

from collections.abc import Hashable, Iterator
from dataclasses import dataclass, field
from typing import Any

PLAN_OUTCOME_PLACED = "placed"
PLAN_OUTCOME_PARTIAL = "partial"
PLAN_OUTCOME_MISSING_ITEM = "skipped_missing_item"
PLAN_OUTCOME_NON_POSITIVE_QUANTITY = "skipped_non_positive_quantity"
PLAN_OUTCOME_EMPTY_WINDOW = "skipped_empty_window"
SKIPPED_PLAN_OUTCOMES = {
    PLAN_OUTCOME_MISSING_ITEM,
    PLAN_OUTCOME_NON_POSITIVE_QUANTITY,
    PLAN_OUTCOME_EMPTY_WINDOW,
}


@dataclass(frozen=True)
class RewardDistributionRule:
    """Placement rule for one reward plan.

    ``latest_index <= 0`` means "last slot". ``kappa == 0`` disables shaping,
    either peak field at 0 disables peaks, and ``min_distance_between_same ==
    0`` disables spacing.
    """

    earliest_index: int = 0
    latest_index: int = 0
    mean: float = 0.0
    kappa: float = 0.0
    peak_boost: float = 0.0
    peak_max_per_point: int = 0
    min_distance_between_same: int = 0

    @property
    def peaks_enabled(self) -> bool:
        return self.peak_boost > 0.0 and self.peak_max_per_point > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "earliest_index": self.earliest_index,
            "latest_index": self.latest_index,
            "mean": self.mean,
            "kappa": self.kappa,
            "peak_boost": self.peak_boost,
            "peak_max_per_point": self.peak_max_per_point,
            "min_distance_between_same": self.min_distance_between_same,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RewardDistributionRule":
        return cls(
            earliest_index=int(data.get("earliest_index", 0)),
            latest_index=int(data.get("latest_index", 0)),
            mean=float(data.get("mean", 0.0)),
            kappa=float(data.get("kappa", 0.0)),
            peak_boost=float(data.get("peak_boost", 0.0)),
            peak_max_per_point=int(data.get("peak_max_per_point", 0)),
            min_distance_between_same=int(data.get("min_distance_between_same", 0)),
        )


@dataclass(frozen=True)
class RewardPlanItem:
    item_id: Hashable | None
    quantity: int
    rule: RewardDistributionRule = field(default_factory=RewardDistributionRule)


@dataclass(frozen=True)
class SlotReward:
    item_id: Hashable | None = None
    quantity: int = 0

    @property
    def is_empty(self) -> bool:
        return self.item_id is None or self.quantity <= 0

    def to_dict(self) -> dict[str, Any] | None:
        if self.is_empty:
            return None
        return {"item_id": self.item_id, "quantity": self.quantity}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "SlotReward":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError("slot reward must be an object or null")
        item_id = data.get("item_id")
        quantity = data.get("quantity")
        if item_id is None:
            raise ValueError("slot reward item_id must be present")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValueError("slot reward quantity must be integer > 0")
        return cls(item_id=item_id, quantity=quantity)


@dataclass(frozen=True)
class PlanOutcome:
    plan_index: int
    item_id: Hashable | None
    requested: int
    placed: int
    relaxed_draws: int
    outcome: str

    @property
    def skipped(self) -> bool:
        return self.outcome in SKIPPED_PLAN_OUTCOMES

    @property
    def undelivered(self) -> int:
        return max(0, self.requested - self.placed)

    def to_dict(self) -> dict[str, Any]:
        return {
            "plan_index": self.plan_index,
            "item_id": self.item_id,
            "requested": self.requested,
            "placed": self.placed,
            "relaxed_draws": self.relaxed_draws,
            "outcome": self.outcome,
        }


@dataclass(frozen=True)
class Schedule:
    """Fixed-length per-slot reward assignment produced once per location."""

    slots: tuple[SlotReward, ...] = ()
    outcomes: tuple[PlanOutcome, ...] = ()

    def __len__(self) -> int:
        return len(self.slots)

    def __getitem__(self, index: int) -> SlotReward:
        return self.slots[index]

    def __iter__(self) -> Iterator[SlotReward]:
        return iter(self.slots)

    def quantity_of(self, item_id: Hashable) -> int:
        return sum(slot.quantity for slot in self.slots if slot.item_id == item_id)

    def slot_indices_of(self, item_id: Hashable) -> list[int]:
        return [index for index, slot in enumerate(self.slots) if not slot.is_empty and slot.item_id == item_id]

    def to_dict(self) -> list[dict[str, Any] | None]:
        return [slot.to_dict() for slot in self.slots]

    @classmethod
    def from_dict(cls, data: list[Any]) -> "Schedule":
        if not isinstance(data, list):
            raise ValueError("schedule must be a list")
        return cls(slots=tuple(SlotReward.from_dict(row) for row in data))
