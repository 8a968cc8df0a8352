from __future__ import annotations

import hashlib
import time

LOCATION_STREAM_PREFIX = "location"


def derive_stream_seed(master_seed: int, stream_name: str) -> int:
    """Derive a deterministic child RNG seed from (master_seed, stream_name)."""
    digest = hashlib.sha256(f"{master_seed}:{stream_name}".encode("utf-8")).digest()
    return int.from_bytes(digest[:8], byteorder="big", signed=False)


def derive_location_seed(master_seed: int, location_id: str) -> int:
    return derive_stream_seed(master_seed=master_seed, stream_name=f"{LOCATION_STREAM_PREFIX}:{location_id}")


def time_seed() -> int:
    """Seed taken from the wall clock, for callers that do not supply one."""
    return time.time_ns() & 0x7FFFFFFF
