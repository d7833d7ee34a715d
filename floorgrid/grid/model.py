from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import IntEnum

import numpy as np


class Cell(IntEnum):
    FREE = 0
    WALL = 1


@dataclass(frozen=True)
class GridSpec:
    """
    Grid metadata.

    resolution: meters per cell
    width, height: cell counts
    origin_world_xz: world-space (x, z) of cell (0,0)'s corner, meters
    """
    resolution: float
    width: int
    height: int
    origin_world_xz: tuple[float, float] = (0.0, 0.0)

    def __post_init__(self):
        if not self.resolution > 0:
            raise ValueError(f"resolution must be > 0, got {self.resolution}")
        if self.width < 1 or self.height < 1:
            raise ValueError(f"width/height must be >= 1, got {self.width}x{self.height}")

    @property
    def cell_count(self) -> int:
        return self.width * self.height


@dataclass
class Doorway:
    a: tuple[float, float]  # world (x, z)
    b: tuple[float, float]
    width: float
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass
class Beacon:
    position: tuple[float, float]  # world (x, z)
    name: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass(eq=False)
class DistanceField:
    """
    Per-cell distance to the nearest wall, meters (float32, row-major).
    Walls are 0; cells no wall can reach hold NaN.
    """
    width: int
    height: int
    meters: np.ndarray

    def __post_init__(self):
        self.meters = np.asarray(self.meters, dtype=np.float32).ravel()
        if self.meters.size != self.width * self.height:
            raise ValueError(
                f"meters has {self.meters.size} values, expected {self.width * self.height}"
            )

    def at(self, x: int, y: int) -> float | None:
        if x < 0 or y < 0 or x >= self.width or y >= self.height:
            return None
        return float(self.meters[y * self.width + x])

    def as_2d(self) -> np.ndarray:
        return self.meters.reshape(self.height, self.width)


class FloorMap:
    """
    Occupancy grid plus the annotations stored alongside it.

    Grid layout:
      - flat uint8 array of Cell values, length width*height
      - row-major: index(x, y) = y * width + x
      - x grows along world +X, y along world +Z

    Writes outside the grid are silently dropped; reads outside return None.
    """

    def __init__(self, title: str, spec: GridSpec, grid=None, map_id: uuid.UUID | None = None):
        self.id = map_id or uuid.uuid4()
        self.title = title
        self.spec = spec

        if grid is None:
            self.grid = np.full(spec.cell_count, Cell.FREE, dtype=np.uint8)
        else:
            self.grid = np.asarray(grid, dtype=np.uint8).ravel().copy()
            if self.grid.size != spec.cell_count:
                raise ValueError(
                    f"grid has {self.grid.size} cells, expected {spec.width}x{spec.height}"
                )

        self.doorways: list[Doorway] = []
        self.beacons: list[Beacon] = []
        self.distance_field: DistanceField | None = None

    @property
    def width(self) -> int:
        return self.spec.width

    @property
    def height(self) -> int:
        return self.spec.height

    def idx(self, x: int, y: int) -> int:
        return y * self.spec.width + x

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.spec.width and 0 <= y < self.spec.height

    def cell_at(self, x: int, y: int) -> Cell | None:
        if not self.in_bounds(x, y):
            return None
        return Cell(int(self.grid[self.idx(x, y)]))

    def set_cell(self, x: int, y: int, value: Cell) -> None:
        if not self.in_bounds(x, y):
            return
        self.grid[self.idx(x, y)] = int(value)

    def wall_count(self) -> int:
        return int(np.count_nonzero(self.grid == Cell.WALL))

    def as_2d(self) -> np.ndarray:
        """(height, width) view of the grid. Shares memory with self.grid."""
        return self.grid.reshape(self.spec.height, self.spec.width)

    def copy(self) -> "FloorMap":
        """Independent snapshot; later edits to either map do not affect the other."""
        out = FloorMap(self.title, self.spec, grid=self.grid, map_id=self.id)
        out.doorways = [Doorway(a=d.a, b=d.b, width=d.width, id=d.id) for d in self.doorways]
        out.beacons = [Beacon(position=b.position, name=b.name, id=b.id) for b in self.beacons]
        if self.distance_field is not None:
            df = self.distance_field
            out.distance_field = DistanceField(df.width, df.height, df.meters.copy())
        return out
