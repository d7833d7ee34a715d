"""
Distance-to-wall fields over occupancy grids.
"""
from .field import NEIGHBORS_4, compute_distance_field

__all__ = [
    "NEIGHBORS_4",
    "compute_distance_field",
]
