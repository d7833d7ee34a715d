from floorgrid.contours.marching_squares import trace_contours
from floorgrid.contours.morphology import close_map
from floorgrid.contours.polyline import DEFAULT_EPSILON, DEFAULT_ITERATIONS, chaikin, rdp
from floorgrid.grid.model import FloorMap
from floorgrid.log import get_logger

logger = get_logger(__name__)


def smooth_contours(fmap: FloorMap, epsilon: float = DEFAULT_EPSILON,
                    iterations: int = DEFAULT_ITERATIONS):
    """
    Occupancy grid -> smooth wall outlines, in grid-cell units.

      1) close 1-cell gaps (dilate + erode)
      2) trace boundaries on the closed image
      3) per boundary: RDP simplify, then Chaikin smooth

    Pure: the map is only read.
    """
    if fmap.width < 2 or fmap.height < 2:
        return []

    binary = close_map(fmap)
    raw = trace_contours(binary)
    out = [chaikin(rdp(poly, epsilon), iterations) for poly in raw]

    logger.debug(
        "Traced %d contours (%d raw vertices -> %d smoothed)",
        len(out), sum(len(p) for p in raw), sum(len(p) for p in out),
        extra={"map_id": str(fmap.id), "width": fmap.width, "height": fmap.height},
    )
    return out
