from __future__ import annotations

import numpy as np
import pytest
from shapely.geometry import Polygon

from floorgrid.contours import MAX_TRACE_STEPS, binarize, trace_contours
from floorgrid.contours.marching_squares import block_code, edge_key

from utils_grid import make_map, rect_cells


def _image(width, height, walls):
    img = np.zeros((height, width), dtype=np.uint8)
    for x, y in walls:
        img[y, x] = 1
    return img


def test_block_code_bit_order():
    rows = [[1, 0], [0, 0]]
    assert block_code(rows, 0, 0) == 1
    rows = [[0, 1], [0, 0]]
    assert block_code(rows, 0, 0) == 2
    rows = [[0, 0], [0, 1]]
    assert block_code(rows, 0, 0) == 4
    rows = [[0, 0], [1, 0]]
    assert block_code(rows, 0, 0) == 8


def test_shared_edges_share_a_key():
    assert edge_key(3, 4, 2) == edge_key(3, 5, 0)
    assert edge_key(3, 4, 1) == edge_key(4, 4, 3)


@pytest.mark.parametrize("turning", ["lookup", "fixed"])
def test_uniform_grids_have_no_contours(turning):
    assert trace_contours(np.zeros((6, 6), dtype=np.uint8), turning=turning) == []
    assert trace_contours(np.ones((6, 6), dtype=np.uint8), turning=turning) == []


@pytest.mark.parametrize("shape", [(1, 5), (5, 1), (1, 1), (0, 0)])
def test_degenerate_grids_have_no_contours(shape):
    assert trace_contours(np.ones(shape, dtype=np.uint8)) == []


def test_rectangle_traces_one_loop_on_its_boundary():
    img = _image(10, 8, rect_cells(3, 2, 6, 4))
    paths = trace_contours(img)
    assert len(paths) == 1
    loop = paths[0]
    assert len(loop) > 2
    assert loop[0] != loop[-1]
    assert len(set(loop)) == len(loop)

    for x, y in loop:
        assert 2.5 <= x <= 6.5
        assert 1.5 <= y <= 4.5
        on_side = x in (2.5, 6.5) or y in (1.5, 4.5)
        on_corner_cut = (x in (3.0, 6.0)) or (y in (2.0, 4.0))
        assert on_side or on_corner_cut

    # full rectangle [2.5,6.5]x[1.5,4.5] minus four 0.5x0.5 corner triangles
    assert Polygon(loop).area == pytest.approx(12.0 - 4 * 0.125)


def test_rectangle_trace_from_map():
    fmap = make_map(10, 8, walls=rect_cells(3, 2, 6, 4))
    assert trace_contours(binarize(fmap)) == trace_contours(_image(10, 8, rect_cells(3, 2, 6, 4)))


def test_hole_gives_outer_and_inner_loops():
    walls = [c for c in rect_cells(1, 1, 6, 6) if not (3 <= c[0] <= 4 and 3 <= c[1] <= 4)]
    paths = trace_contours(_image(8, 8, walls))
    assert len(paths) == 2
    areas = sorted(Polygon(p).area for p in paths)
    assert areas[0] < areas[1]


@pytest.mark.parametrize("walls", [[(1, 1), (2, 2)], [(2, 1), (1, 2)]])
def test_saddles_join_diagonal_walls(walls):
    paths = trace_contours(_image(4, 4, walls))
    assert len(paths) == 1
    assert len(paths[0]) == 8


def test_saddle_loop_order():
    paths = trace_contours(_image(4, 4, [(1, 1), (2, 2)]))
    assert paths[0] == [
        (1.0, 0.5), (0.5, 1.0), (1.0, 1.5), (1.5, 2.0),
        (2.0, 2.5), (2.5, 2.0), (2.0, 1.5), (1.5, 1.0),
    ]


def test_boundary_touching_grid_edge_is_open():
    walls = [(0, y) for y in range(4)]
    paths = trace_contours(_image(5, 4, walls))
    assert paths == [[(0.5, 0.0), (0.5, 1.0), (0.5, 2.0), (0.5, 3.0)]]


def test_open_boundary_is_traced_in_both_directions():
    # wall block in the bottom-right corner; tracing starts mid-boundary
    walls = rect_cells(3, 2, 5, 4)
    paths = trace_contours(_image(6, 5, walls))
    assert paths == [[
        (5.0, 1.5), (4.0, 1.5), (3.0, 1.5),
        (2.5, 2.0), (2.5, 3.0), (2.5, 4.0),
    ]]


def test_tracing_is_reentrant():
    img = _image(10, 8, rect_cells(3, 2, 6, 4))
    assert trace_contours(img) == trace_contours(img)


def test_unknown_turning_rule():
    with pytest.raises(ValueError):
        trace_contours(np.zeros((3, 3)), turning="spiral")


# ---------------------------------------------------------------------------
# legacy fixed-rotation walk
# ---------------------------------------------------------------------------

def test_fixed_walk_reproduces_legacy_paths():
    img = np.array([[1, 0], [0, 0]], dtype=np.uint8)
    paths = trace_contours(img, turning="fixed")

    # the walk ignores the grid after starting and drifts until the step cap
    assert [len(p) for p in paths] == [MAX_TRACE_STEPS, MAX_TRACE_STEPS, 4]
    assert paths[0][:5] == [(0.5, 0.0), (1.0, 0.5), (1.5, 1.0), (1.0, 1.5), (0.5, 1.0)]
    assert paths[1][0] == (0.5, 1.0)
    assert paths[2] == [(0.0, 0.5), (-0.5, 0.0), (0.0, 0.5), (0.5, 1.0)]


def test_fixed_walk_honours_step_cap():
    img = np.array([[1, 0], [0, 0]], dtype=np.uint8)
    paths = trace_contours(img, turning="fixed", max_steps=50)
    assert len(paths[0]) == 50
