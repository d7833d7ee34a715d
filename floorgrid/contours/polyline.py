import math

from shapely.geometry import LineString, MultiLineString

DEFAULT_EPSILON = 0.8  # grid units
DEFAULT_ITERATIONS = 2


def perpendicular_distance(p, a, b) -> float:
    """Distance from p to the infinite line through a and b; 0 if a == b."""
    den = math.hypot(b[0] - a[0], b[1] - a[1])
    if den == 0:
        return 0.0
    num = abs((b[1] - a[1]) * p[0] - (b[0] - a[0]) * p[1] + b[0] * a[1] - b[1] * a[0])
    return num / den


def rdp(points, epsilon: float = DEFAULT_EPSILON):
    """
    Ramer-Douglas-Peucker simplification.

    Walks an explicit stack of (start, end) index ranges instead of recursing,
    so long traced boundaries cannot hit the recursion limit. A range whose
    farthest interior point is within epsilon of its chord collapses to its
    endpoints; otherwise it splits at that point (first one on ties).
    """
    if epsilon < 0:
        raise ValueError(f"epsilon must be >= 0, got {epsilon}")
    pts = list(points)
    if len(pts) <= 2:
        return pts

    keep = [False] * len(pts)
    keep[0] = keep[-1] = True
    stack = [(0, len(pts) - 1)]

    while stack:
        start, end = stack.pop()
        a, b = pts[start], pts[end]
        dmax = 0.0
        split = start
        for i in range(start + 1, end):
            d = perpendicular_distance(pts[i], a, b)
            if d > dmax:
                dmax = d
                split = i
        if dmax > epsilon:
            keep[split] = True
            stack.append((start, split))
            stack.append((split, end))

    return [p for p, k in zip(pts, keep) if k]


def chaikin(points, iterations: int = DEFAULT_ITERATIONS):
    """
    Chaikin corner cutting, open-chain form.

    Each pass replaces every segment (p, q) with its 1/4 and 3/4 points and
    drops the original vertices, so n points become 2*(n-1). Fewer than 3
    points are returned unchanged.
    """
    if iterations < 0:
        raise ValueError(f"iterations must be >= 0, got {iterations}")
    out = [(float(x), float(y)) for (x, y) in points]
    if len(out) < 3:
        return out

    for _ in range(iterations):
        nxt = []
        for (px, py), (qx, qy) in zip(out[:-1], out[1:]):
            nxt.append((0.75 * px + 0.25 * qx, 0.75 * py + 0.25 * qy))
            nxt.append((0.25 * px + 0.75 * qx, 0.25 * py + 0.75 * qy))
        out = nxt
    return out


def polyline_length(points) -> float:
    if len(points) < 2:
        return 0.0
    return float(LineString(points).length)


def polylines_bounds(polylines):
    """(minx, miny, maxx, maxy) over all polylines with 2+ points, or None."""
    lines = [p for p in polylines if len(p) >= 2]
    if not lines:
        return None
    return tuple(float(v) for v in MultiLineString(lines).bounds)
