from collections import deque

import numpy as np

from floorgrid.grid.model import Cell, DistanceField, FloorMap

# 4-connected steps
NEIGHBORS_4 = ((-1, 0), (1, 0), (0, -1), (0, 1))


def compute_distance_field(fmap: FloorMap) -> DistanceField:
    """
    Distance from every cell to the nearest wall, in meters.

    Multi-source breadth-first traversal seeded with all wall cells at 0.
    Every step costs one `resolution`, so FIFO order is shortest-path order
    and the result is 4-connected (taxicab) hop count * resolution, not a
    Euclidean distance. A variable step cost would need a priority queue.

    Cells no wall can reach stay NaN. A grid without walls is all NaN.
    """
    w, h = fmap.width, fmap.height
    grid = fmap.grid
    res = np.float32(fmap.spec.resolution)

    out = np.full(w * h, np.nan, dtype=np.float32)
    queue = deque()
    for i in np.flatnonzero(grid == Cell.WALL):
        i = int(i)
        out[i] = 0.0
        queue.append((i % w, i // w))

    while queue:
        cx, cy = queue.popleft()
        cd = out[cy * w + cx]
        for dx, dy in NEIGHBORS_4:
            nx, ny = cx + dx, cy + dy
            if nx < 0 or ny < 0 or nx >= w or ny >= h:
                continue
            j = ny * w + nx
            if grid[j] != Cell.FREE:
                continue
            nd = cd + res
            if not (nd >= out[j]):  # NaN compares false
                out[j] = nd
                queue.append((nx, ny))

    return DistanceField(width=w, height=h, meters=out)
