import numpy as np
from scipy import ndimage

from floorgrid.grid.model import Cell, FloorMap


def binarize(fmap: FloorMap) -> np.ndarray:
    """(height, width) uint8 image: 1 where WALL, else 0. Fresh array."""
    return (fmap.as_2d() == Cell.WALL).astype(np.uint8)


def _interior_only(src: np.ndarray, filtered: np.ndarray) -> np.ndarray:
    # The one-cell border is copied through from the pass input.
    out = src.copy()
    if src.shape[0] >= 3 and src.shape[1] >= 3:
        out[1:-1, 1:-1] = filtered[1:-1, 1:-1]
    return out


def dilate(src: np.ndarray) -> np.ndarray:
    """3x3 dilation: an interior cell becomes 1 if any of its 9 neighbours is 1."""
    src = np.asarray(src, dtype=np.uint8)
    return _interior_only(src, ndimage.maximum_filter(src, size=3, mode="nearest"))


def erode(src: np.ndarray) -> np.ndarray:
    """3x3 erosion: an interior cell stays 1 only if all 9 neighbours are 1."""
    src = np.asarray(src, dtype=np.uint8)
    return _interior_only(src, ndimage.minimum_filter(src, size=3, mode="nearest"))


def close_gaps(binary: np.ndarray) -> np.ndarray:
    """
    Morphological closing (dilate, then erode) of a binary wall image.

    Fills single-cell holes in rasterized walls so the contour tracer does not
    leak through them. Must run before tracing.
    """
    return erode(dilate(binary))


def close_map(fmap: FloorMap) -> np.ndarray:
    return close_gaps(binarize(fmap))
