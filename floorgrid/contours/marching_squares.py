"""
Wall boundary extraction from a binary occupancy image.

Blocks are the 2x2 sample windows with top-left sample (x, y). Block code:
    TL*1 + TR*2 + BR*4 + BL*8
Block edges:
    0 top, 1 right, 2 bottom, 3 left
Edge midpoints, relative to the block's top-left sample:
    (0.5, 0.0), (1.0, 0.5), (0.5, 1.0), (0.0, 0.5)

Two turning rules are available:
  - "lookup": full 16-case segment table. Saddles (codes 5 and 10) join the
    diagonal wall samples, matching the 8-neighbour closing run beforehand.
  - "fixed":  the legacy walk. Step by the edge's cell offset, rotate the edge
    index by +1, stop on a revisited (cell, edge) key. It ignores the grid once
    a walk has started, so it mis-traces saddles and can drift outside the grid
    until the step cap ends it. Kept for reproducing maps traced with it.
"""
from __future__ import annotations

import numpy as np

MAX_TRACE_STEPS = 10000

EDGE_MID_X = (0.5, 1.0, 0.5, 0.0)
EDGE_MID_Y = (0.0, 0.5, 1.0, 0.5)

# Legacy walk: cell step taken after emitting an edge.
FIXED_STEP_X = (0, 1, 0, -1)
FIXED_STEP_Y = (0, 0, 1, 0)

# Block crossed when leaving through an edge.
CROSS_X = (0, 1, 0, -1)
CROSS_Y = (-1, 0, 1, 0)

# Boundary segments per block code, as (edge, edge) pairs.
SEGMENTS = {
    0: (),
    1: ((3, 0),),
    2: ((0, 1),),
    3: ((3, 1),),
    4: ((1, 2),),
    5: ((0, 1), (2, 3)),
    6: ((0, 2),),
    7: ((2, 3),),
    8: ((2, 3),),
    9: ((0, 2),),
    10: ((3, 0), (1, 2)),
    11: ((1, 2),),
    12: ((3, 1),),
    13: ((0, 1),),
    14: ((3, 0),),
    15: (),
}

# code -> {entry edge: exit edge}
EXITS = {
    code: {e: o for a, b in segs for e, o in ((a, b), (b, a))}
    for code, segs in SEGMENTS.items()
}


def block_code(rows, x: int, y: int) -> int:
    return (rows[y][x]
            | rows[y][x + 1] << 1
            | rows[y + 1][x + 1] << 2
            | rows[y + 1][x] << 3)


def edge_key(x: int, y: int, e: int) -> tuple[int, int, int]:
    """Canonical key for a block edge; neighbouring blocks share it."""
    if e == 2:
        return (x, y + 1, 0)
    if e == 1:
        return (x + 1, y, 3)
    return (x, y, e)


def edge_midpoint(x: int, y: int, e: int) -> tuple[float, float]:
    return (x + EDGE_MID_X[e], y + EDGE_MID_Y[e])


def _rows_of(binary) -> list[list[int]]:
    arr = np.asarray(binary)
    return (arr != 0).astype(np.uint8).tolist()


def trace_contours(binary, turning: str = "lookup", max_steps: int = MAX_TRACE_STEPS):
    """
    Trace wall boundaries in a (height, width) binary image (1 = wall).

    Returns a list of polylines in grid units. Closed loops are not closed
    explicitly (last point != first point). Paths with 2 or fewer vertices are
    dropped. Grids narrower than 2 cells in either direction yield [].
    """
    if turning == "lookup":
        return _trace_lookup(binary, max_steps)
    if turning == "fixed":
        return _trace_fixed(binary, max_steps)
    raise ValueError(f"unknown turning rule: {turning!r}")


def _follow(rows, w, h, x, y, e, visited, max_steps):
    """
    Leave block (x, y) through edge e and keep walking.
    Returns (points, closed). closed is True when the walk met a visited edge.
    """
    pts = []
    for _ in range(max_steps):
        x += CROSS_X[e]
        y += CROSS_Y[e]
        if x < 0 or y < 0 or x > w - 2 or y > h - 2:
            return pts, False
        e = EXITS[block_code(rows, x, y)][(e + 2) % 4]
        key = edge_key(x, y, e)
        if key in visited:
            return pts, True
        visited.add(key)
        pts.append(edge_midpoint(x, y, e))
    return pts, False


def _trace_lookup(binary, max_steps):
    rows = _rows_of(binary)
    h = len(rows)
    w = len(rows[0]) if h else 0
    if w < 2 or h < 2:
        return []

    paths = []
    visited = set()

    for y in range(h - 1):
        for x in range(w - 1):
            code = block_code(rows, x, y)
            if code == 0 or code == 15:
                continue

            for a, b in SEGMENTS[code]:
                if edge_key(x, y, a) in visited:
                    continue
                visited.add(edge_key(x, y, a))
                visited.add(edge_key(x, y, b))

                ahead, closed = _follow(rows, w, h, x, y, b, visited, max_steps)
                poly = [edge_midpoint(x, y, a), edge_midpoint(x, y, b)] + ahead
                if not closed:
                    behind, _ = _follow(rows, w, h, x, y, a, visited, max_steps)
                    poly = behind[::-1] + poly

                if len(poly) > 2:
                    paths.append(poly)
    return paths


def _trace_fixed(binary, max_steps):
    rows = _rows_of(binary)
    h = len(rows)
    w = len(rows[0]) if h else 0
    if w < 2 or h < 2:
        return []

    paths = []
    visited = set()

    for y in range(h - 1):
        for x in range(w - 1):
            code = block_code(rows, x, y)
            if code == 0 or code == 15:
                continue

            for start in range(4):
                if (x, y, start) in visited:
                    continue
                cx, cy, e = x, y, start
                poly = []
                for _ in range(max_steps):
                    poly.append(edge_midpoint(cx, cy, e))
                    cx += FIXED_STEP_X[e]
                    cy += FIXED_STEP_Y[e]
                    e = (e + 1) % 4
                    key = (cx, cy, e)
                    if key in visited:
                        break
                    visited.add(key)
                if len(poly) > 2:
                    paths.append(poly)
    return paths
