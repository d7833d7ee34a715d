"""
Contours: gap closing, boundary tracing, simplification and smoothing.
"""
from .morphology import binarize, close_gaps, close_map, dilate, erode
from .marching_squares import MAX_TRACE_STEPS, trace_contours
from .polyline import (
    DEFAULT_EPSILON,
    DEFAULT_ITERATIONS,
    chaikin,
    perpendicular_distance,
    polyline_length,
    polylines_bounds,
    rdp,
)
from .pipeline import smooth_contours

__all__ = [
    "binarize",
    "close_gaps",
    "close_map",
    "dilate",
    "erode",
    "MAX_TRACE_STEPS",
    "trace_contours",
    "DEFAULT_EPSILON",
    "DEFAULT_ITERATIONS",
    "chaikin",
    "perpendicular_distance",
    "polyline_length",
    "polylines_bounds",
    "rdp",
    "smooth_contours",
]
