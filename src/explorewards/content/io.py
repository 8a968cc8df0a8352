from __future__ import annotations

import json
import os
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

from explorewards.sim.hash import save_hash
from explorewards.sim.location import LocationStates

SCHEMA_VERSION = 1
CANONICAL_JSON_INDENT = 2
CANONICAL_JSON_SEPARATORS = (",", ": ")


def _build_save_payload(states: LocationStates) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "schema_version": SCHEMA_VERSION,
        "location_states": states.to_dict(),
    }
    payload["save_hash"] = save_hash(payload)
    return payload


def _validate_save_payload(payload: Any) -> None:
    if not isinstance(payload, dict):
        raise ValueError("save payload must be an object")
    schema_version = payload.get("schema_version")
    if not isinstance(schema_version, int):
        raise ValueError("save payload must contain integer field: schema_version")
    if schema_version != SCHEMA_VERSION:
        raise ValueError(f"unsupported save schema_version: {schema_version}")
    if not isinstance(payload.get("location_states"), dict):
        raise ValueError("save payload must contain object field: location_states")
    if not isinstance(payload.get("save_hash"), str):
        raise ValueError("save payload must contain string field: save_hash")


def _canonical_json(payload: dict[str, Any]) -> str:
    return json.dumps(
        payload,
        indent=CANONICAL_JSON_INDENT,
        separators=CANONICAL_JSON_SEPARATORS,
        sort_keys=True,
    )


def _write_atomic_json(path: str | Path, payload: dict[str, Any]) -> None:
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    serialized = _canonical_json(payload)

    temp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=destination.parent,
            delete=False,
            suffix=".tmp",
        ) as temp_file:
            temp_path = Path(temp_file.name)
            temp_file.write(serialized)
            temp_file.flush()
            os.fsync(temp_file.fileno())
        os.replace(temp_path, destination)
    except Exception:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        raise


def save_location_states_json(path: str | Path, states: LocationStates) -> None:
    payload = _build_save_payload(states)
    _validate_save_payload(payload)
    _write_atomic_json(path, payload)


def load_location_states_json(path: str | Path) -> LocationStates:
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    _validate_save_payload(payload)

    expected_hash = payload["save_hash"]
    actual_hash = save_hash(payload)
    if expected_hash != actual_hash:
        raise ValueError(
            f"save_hash mismatch while loading save (stored={expected_hash}, recomputed={actual_hash})"
        )
    return LocationStates.from_dict(payload["location_states"])
