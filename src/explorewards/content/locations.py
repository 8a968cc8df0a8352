from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from explorewards.content.items import ItemRegistry
from explorewards.sim.rewards import RewardDistributionRule, RewardPlanItem

LOCATIONS_SCHEMA_VERSION = 1
DEFAULT_LOCATIONS_PATH = "content/locations/locations.json"
DEFAULT_TOTAL_EXPLORATIONS = 18


@dataclass(frozen=True)
class RewardPlanDef:
    reward_id: str
    plan: RewardPlanItem


@dataclass(frozen=True)
class LocationDef:
    location_id: str
    name: str
    total_explorations: int
    rewards: tuple[RewardPlanItem, ...]
    reward_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class LocationRegistry:
    schema_version: int
    reward_plans: tuple[RewardPlanDef, ...]
    locations: tuple[LocationDef, ...]

    def by_id(self) -> dict[str, LocationDef]:
        return {location.location_id: location for location in self.locations}

    def get(self, location_id: str) -> LocationDef:
        location = self.by_id().get(location_id)
        if location is None:
            raise ValueError(f"unknown location_id: {location_id}")
        return location


def load_locations_json(path: str | Path, *, items: ItemRegistry | None = None) -> LocationRegistry:
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    return _registry_from_payload(payload, known_item_ids=items.item_ids() if items is not None else None)


def _require_int(value: Any, *, field_name: str, minimum: int | None = 0) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{field_name} must be an integer")
    if minimum is not None and value < minimum:
        raise ValueError(f"{field_name} must be >= {minimum}")
    return value


def _require_number(value: Any, *, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{field_name} must be numeric")
    return float(value)


def _rule_from_payload(payload: Any, *, field_name: str) -> RewardDistributionRule:
    if payload is None:
        return RewardDistributionRule()
    if not isinstance(payload, dict):
        raise ValueError(f"{field_name} must be an object when present")

    mean = _require_number(payload.get("mean", 0.0), field_name=f"{field_name}.mean")
    if not -1.0 <= mean <= 1.0:
        raise ValueError(f"{field_name}.mean must be within [-1, 1]")
    kappa = _require_number(payload.get("kappa", 0.0), field_name=f"{field_name}.kappa")
    if kappa < 0.0:
        raise ValueError(f"{field_name}.kappa must be >= 0")
    peak_boost = _require_number(payload.get("peak_boost", 0.0), field_name=f"{field_name}.peak_boost")
    if peak_boost < 0.0:
        raise ValueError(f"{field_name}.peak_boost must be >= 0")

    return RewardDistributionRule(
        earliest_index=_require_int(payload.get("earliest_index", 0), field_name=f"{field_name}.earliest_index"),
        latest_index=_require_int(payload.get("latest_index", 0), field_name=f"{field_name}.latest_index"),
        mean=mean,
        kappa=kappa,
        peak_boost=peak_boost,
        peak_max_per_point=_require_int(
            payload.get("peak_max_per_point", 0), field_name=f"{field_name}.peak_max_per_point"
        ),
        min_distance_between_same=_require_int(
            payload.get("min_distance_between_same", 0), field_name=f"{field_name}.min_distance_between_same"
        ),
    )


def _reward_plans_from_payload(rows: Any, *, known_item_ids: set[str] | None) -> list[RewardPlanDef]:
    if not isinstance(rows, list):
        raise ValueError("location registry must contain list field: reward_plans")

    plans: list[RewardPlanDef] = []
    seen_reward_ids: set[str] = set()
    for index, row in enumerate(rows):
        field_name = f"reward_plans[{index}]"
        if not isinstance(row, dict):
            raise ValueError(f"{field_name} must be an object")

        reward_id = row.get("reward_id")
        if not isinstance(reward_id, str) or not reward_id:
            raise ValueError(f"{field_name}.reward_id must be a non-empty string")
        if reward_id in seen_reward_ids:
            raise ValueError(f"duplicate reward_id: {reward_id}")
        seen_reward_ids.add(reward_id)

        item_id = row.get("item_id")
        if not isinstance(item_id, str) or not item_id:
            raise ValueError(f"{field_name}.item_id must be a non-empty string")
        if known_item_ids is not None and item_id not in known_item_ids:
            raise ValueError(f"{field_name} references unknown item_id: {item_id}")

        quantity = _require_int(row.get("quantity"), field_name=f"{field_name}.quantity", minimum=1)
        rule = _rule_from_payload(row.get("rule"), field_name=f"{field_name}.rule")
        plans.append(RewardPlanDef(reward_id=reward_id, plan=RewardPlanItem(item_id=item_id, quantity=quantity, rule=rule)))
    return plans


def _registry_from_payload(payload: dict[str, Any], *, known_item_ids: set[str] | None = None) -> LocationRegistry:
    if not isinstance(payload, dict):
        raise ValueError("location registry payload must be an object")

    schema_version = payload.get("schema_version")
    if not isinstance(schema_version, int):
        raise ValueError("location registry must contain integer field: schema_version")
    if schema_version != LOCATIONS_SCHEMA_VERSION:
        raise ValueError(f"unsupported location registry schema_version: {schema_version}")

    reward_plans = _reward_plans_from_payload(payload.get("reward_plans", []), known_item_ids=known_item_ids)
    plans_by_id = {definition.reward_id: definition.plan for definition in reward_plans}

    rows = payload.get("locations")
    if not isinstance(rows, list):
        raise ValueError("location registry must contain list field: locations")

    locations: list[LocationDef] = []
    seen_location_ids: set[str] = set()
    for index, row in enumerate(rows):
        field_name = f"locations[{index}]"
        if not isinstance(row, dict):
            raise ValueError(f"{field_name} must be an object")

        location_id = row.get("location_id")
        if not isinstance(location_id, str) or not location_id:
            raise ValueError(f"{field_name}.location_id must be a non-empty string")
        if location_id in seen_location_ids:
            raise ValueError(f"duplicate location_id: {location_id}")
        seen_location_ids.add(location_id)

        name = row.get("name", location_id)
        if not isinstance(name, str) or not name:
            raise ValueError(f"{field_name}.name must be a non-empty string")

        total_explorations = _require_int(
            row.get("total_explorations", DEFAULT_TOTAL_EXPLORATIONS),
            field_name=f"{field_name}.total_explorations",
        )

        reward_refs = row.get("rewards", [])
        if not isinstance(reward_refs, list):
            raise ValueError(f"{field_name}.rewards must be a list when present")
        rewards: list[RewardPlanItem] = []
        for ref_index, reward_id in enumerate(reward_refs):
            if not isinstance(reward_id, str) or not reward_id:
                raise ValueError(f"{field_name}.rewards[{ref_index}] must be a non-empty string")
            template = plans_by_id.get(reward_id)
            if template is None:
                raise ValueError(f"{field_name} references unknown reward_id: {reward_id}")
            rewards.append(template)

        locations.append(
            LocationDef(
                location_id=location_id,
                name=name,
                total_explorations=total_explorations,
                rewards=tuple(rewards),
                reward_ids=tuple(reward_refs),
            )
        )

    locations.sort(key=lambda location: location.location_id)
    return LocationRegistry(
        schema_version=schema_version,
        reward_plans=tuple(reward_plans),
        locations=tuple(locations),
    )
