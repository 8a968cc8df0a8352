from __future__ import annotations

SHAPE_EDGE_CLAMP = 1e-4


def shape_weight(p: float, mean: float, kappa: float) -> float:
    """Relative unimodal density at normalized position ``p``.

    ``mean`` in [-1, 1] moves the mode from the window start (-1) to the end
    (+1); ``kappa`` >= 0 sets concentration and 0 means uniform. The shape is
    a Beta(a, b) kernel with a, b >= 1, so it never turns into a U. Only
    relative values matter, so the normalizing constant is omitted.
    """
    if kappa <= 0.0:
        return 1.0

    m = 0.5 * (mean + 1.0)
    nu = kappa + 2.0
    a = m * (nu - 2.0) + 1.0
    b = (1.0 - m) * (nu - 2.0) + 1.0

    pp = min(max(p, SHAPE_EDGE_CLAMP), 1.0 - SHAPE_EDGE_CLAMP)
    return pp ** (a - 1.0) * (1.0 - pp) ** (b - 1.0)


def normalized_position(offset: int, window_count: int) -> float:
    if window_count <= 1:
        return 0.5
    return offset / (window_count - 1)
