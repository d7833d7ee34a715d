import numpy as np

from floorgrid.grid.model import Beacon, Cell, Doorway, FloorMap
from floorgrid.grid.transform import world_to_cell

WALL_NORMAL_MAX_Y = 0.35  # |n_y| below this => vertical surface
MIN_DOORWAY_WIDTH_M = 0.4
DEFAULT_DOORWAY_WIDTH_M = 0.9


def rasterize_wall_vertices(fmap: FloorMap, vertices, normals,
                            max_normal_y: float = WALL_NORMAL_MAX_Y) -> int:
    """
    Mark the cells under vertical mesh surfaces as walls.

    vertices: (N,3) world-space positions (x, y up, z)
    normals:  (N,3) world-space unit normals
    Returns the number of cells that went FREE -> WALL.
    """
    v = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
    n = np.asarray(normals, dtype=np.float64).reshape(-1, 3)
    if v.shape != n.shape:
        raise ValueError("vertices and normals must have the same shape")

    spec = fmap.spec
    ox, oz = spec.origin_world_xz
    gx = np.floor((v[:, 0] - ox) / spec.resolution).astype(np.int64)
    gy = np.floor((v[:, 2] - oz) / spec.resolution).astype(np.int64)
    # same flooring as world_to_cell

    keep = np.abs(n[:, 1]) < max_normal_y
    keep &= (gx >= 0) & (gy >= 0) & (gx < spec.width) & (gy < spec.height)

    idx = np.unique(gy[keep] * spec.width + gx[keep])
    fresh = idx[fmap.grid[idx] != Cell.WALL]
    fmap.grid[fresh] = Cell.WALL
    return int(fresh.size)


def add_beacon(fmap: FloorMap, position, name: str) -> Beacon:
    b = Beacon(position=(float(position[0]), float(position[1])), name=name)
    fmap.beacons.append(b)
    return b


def add_doorway(fmap: FloorMap, a, b, width: float = DEFAULT_DOORWAY_WIDTH_M) -> Doorway:
    """
    Record a doorway between two wall points and carve a free corridor through it.
    """
    d = Doorway(
        a=(float(a[0]), float(a[1])),
        b=(float(b[0]), float(b[1])),
        width=max(MIN_DOORWAY_WIDTH_M, float(width)),
    )
    fmap.doorways.append(d)
    carve_corridor(fmap, d)
    return d


def carve_corridor(fmap: FloorMap, doorway: Doorway) -> None:
    """
    Bresenham walk from a to b, clearing a disk of cells at every step.
    Disk radius is the doorway width in cells (at least 1).
    """
    ax, ay = world_to_cell(fmap.spec, *doorway.a)
    bx, by = world_to_cell(fmap.spec, *doorway.b)
    r = max(1, int(round(doorway.width / fmap.spec.resolution)))

    disk = [(ox, oy)
            for oy in range(-r, r + 1)
            for ox in range(-r, r + 1)
            if ox * ox + oy * oy <= r * r]

    dx, sx = abs(bx - ax), (1 if ax < bx else -1)
    dy, sy = -abs(by - ay), (1 if ay < by else -1)
    err = dx + dy
    x, y = ax, ay
    while True:
        for ox, oy in disk:
            fmap.set_cell(x + ox, y + oy, Cell.FREE)
        if x == bx and y == by:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x += sx
        if e2 <= dx:
            err += dx
            y += sy
