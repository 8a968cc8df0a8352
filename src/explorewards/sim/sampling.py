from __future__ import annotations

from typing import Protocol, Sequence


class RandomSource(Protocol):
    def random(self) -> float: ...


def pick_index(weights: Sequence[float], total: float, rng: RandomSource) -> int:
    """Draw one index with probability proportional to its weight.

    Zero-weight entries are never returned while ``total`` is positive. With a
    non-positive total, or if round-off leaves the draw past the running sum,
    the last positive-weight index (else the last index) is returned.
    """
    if not weights:
        raise ValueError("weights must be non-empty")

    if total > 0.0:
        r = rng.random() * total
        acc = 0.0
        for index, weight in enumerate(weights):
            acc += weight
            if weight > 0.0 and r < acc:
                return index

    for index in range(len(weights) - 1, -1, -1):
        if weights[index] > 0.0:
            return index
    return len(weights) - 1


def pick_k_distinct(weights: Sequence[float], k: int, rng: RandomSource) -> list[int]:
    """Weighted sampling of up to ``k`` distinct indices without replacement."""
    remaining = list(weights)
    k = max(0, min(k, len(remaining)))
    picks: list[int] = []
    for _ in range(k):
        total = sum(remaining)
        if total <= 0.0:
            break
        index = pick_index(remaining, total, rng)
        picks.append(index)
        remaining[index] = 0.0
    return picks
