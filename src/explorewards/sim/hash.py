from __future__ import annotations

import hashlib
import json
from typing import Any

from explorewards.sim.location import LocationStates
from explorewards.sim.rewards import Schedule


def _digest(payload: Any) -> str:
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()


def schedule_hash(schedule: Schedule) -> str:
    return _digest(schedule.to_dict())


def location_states_hash(states: LocationStates) -> str:
    return _digest(states.to_dict())


def save_hash(payload: dict[str, Any]) -> str:
    hash_payload = {
        "schema_version": payload["schema_version"],
        "location_states": payload["location_states"],
    }
    return _digest(hash_payload)
