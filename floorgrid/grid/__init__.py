"""
Grid model: occupancy cells, grid metadata, world<->cell transforms and editing.
"""
from .model import Beacon, Cell, DistanceField, Doorway, FloorMap, GridSpec
from .transform import cell_to_world, polyline_to_world, world_to_cell
from .editing import add_beacon, add_doorway, carve_corridor, rasterize_wall_vertices

__all__ = [
    "Beacon",
    "Cell",
    "DistanceField",
    "Doorway",
    "FloorMap",
    "GridSpec",
    "cell_to_world",
    "polyline_to_world",
    "world_to_cell",
    "add_beacon",
    "add_doorway",
    "carve_corridor",
    "rasterize_wall_vertices",
]
