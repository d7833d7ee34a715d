import math

from floorgrid.grid.model import GridSpec


def world_to_cell(spec: GridSpec, x: float, z: float) -> tuple[int, int]:
    """
    World (x, z) meters -> integer cell (gx, gy).

    Floors, so points in (-resolution, 0) of the origin map to -1 and are
    dropped by bounds-checked writes. Truncating toward zero would fold them
    into cell 0 instead.
    """
    ox, oz = spec.origin_world_xz
    gx = math.floor((x - ox) / spec.resolution)
    gy = math.floor((z - oz) / spec.resolution)
    return int(gx), int(gy)


def cell_to_world(spec: GridSpec, gx: float, gy: float) -> tuple[float, float]:
    """Grid-unit point (may be fractional) -> world (x, z) meters."""
    ox, oz = spec.origin_world_xz
    return float(ox + gx * spec.resolution), float(oz + gy * spec.resolution)


def polyline_to_world(spec: GridSpec, points):
    return [cell_to_world(spec, x, y) for (x, y) in points]
