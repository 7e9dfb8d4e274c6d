"""Tests for contours.tracer module."""

import pytest

from contours.tracer import (
    case_index,
    cell_edge_pairs,
    edge_crossing,
    trace_segments,
)
from domain.models import GeoBounds
from scalar_field.grid import ScalarGrid, build_scalar_grid
from scalar_field.sampler import HarmonicFieldSampler
from shared.constants import SaddleMode

CELL = 0.01
ONE_CELL = GeoBounds(lon_min=0.0, lon_max=CELL, lat_min=0.0, lat_max=CELL)

EXPECTED_COUNTS = {
    0: 0, 1: 1, 2: 1, 3: 1, 4: 1, 5: 2, 6: 1, 7: 1,
    8: 1, 9: 1, 10: 2, 11: 1, 12: 1, 13: 1, 14: 1, 15: 0,
}


def _single_cell(v00, v10, v11, v01):
    """Grid with one cell and the given BL, BR, TR, TL corner values."""
    return ScalarGrid.from_values(ONE_CELL, CELL, [[v00, v10], [v01, v11]])


def _case_values(idx):
    return tuple(0.9 if idx & (1 << k) else 0.1 for k in range(4))


def _edge_of(point):
    lon, lat = point
    if lat == pytest.approx(0.0, abs=1e-12):
        return 0
    if lon == pytest.approx(CELL, abs=1e-12):
        return 1
    if lat == pytest.approx(CELL, abs=1e-12):
        return 2
    if lon == pytest.approx(0.0, abs=1e-12):
        return 3
    raise AssertionError(f'{point} is not on the cell boundary')


def _edge_sets(segments):
    return sorted(tuple(sorted((_edge_of(a), _edge_of(b)))) for a, b in segments)


class TestCaseIndex:
    """Tests for case_index()."""

    @pytest.mark.parametrize('idx', range(16))
    def test_bits(self, idx):
        assert case_index(*_case_values(idx), 0.5) == idx

    def test_equal_counts_as_above(self):
        assert case_index(0.5, 0.5, 0.5, 0.5, 0.5) == 15


class TestEdgeCrossing:
    """Tests for edge_crossing()."""

    def test_midpoint(self):
        p = edge_crossing((0.0, 0.0), (CELL, 0.0), 0.0, 1.0, 0.5)
        assert p == pytest.approx((0.005, 0.0))

    def test_linear(self):
        p = edge_crossing((0.0, 0.0), (0.0, 1.0), 0.2, 0.6, 0.3)
        assert p == pytest.approx((0.0, 0.25))

    def test_degenerate_edge_uses_midpoint(self):
        p = edge_crossing((0.0, 0.0), (2.0, 0.0), 0.5, 0.5 + 1e-12, 0.5)
        assert p == pytest.approx((1.0, 0.0))


class TestTraceSegments:
    """Tests for trace_segments()."""

    @pytest.mark.parametrize('idx', range(16))
    def test_case_table_counts(self, idx):
        """Every case yields 0, 1 or 2 segments as listed in the table."""
        segs = trace_segments(_single_cell(*_case_values(idx)), 0.5)
        assert len(segs) == EXPECTED_COUNTS[idx]

    @pytest.mark.parametrize(
        ('idx', 'edges'),
        [
            (1, [(0, 3)]),
            (14, [(0, 3)]),
            (2, [(0, 1)]),
            (13, [(0, 1)]),
            (4, [(1, 2)]),
            (11, [(1, 2)]),
            (8, [(2, 3)]),
            (7, [(2, 3)]),
            (3, [(1, 3)]),
            (12, [(1, 3)]),
            (6, [(0, 2)]),
            (9, [(0, 2)]),
            (5, [(0, 1), (2, 3)]),
            (10, [(0, 3), (1, 2)]),
        ],
    )
    def test_case_table_edges(self, idx, edges):
        segs = trace_segments(_single_cell(*_case_values(idx)), 0.5)
        assert _edge_sets(segs) == edges

    def test_interpolation_midpoint(self):
        """v00=0, v10=1 at level 0.5 crosses the bottom edge in its middle."""
        segs = trace_segments(_single_cell(0.0, 1.0, 1.0, 0.0), 0.5)
        assert len(segs) == 1
        bottom = [p for p in segs[0] if _edge_of(p) == 0]
        assert bottom[0] == pytest.approx((0.005, 0.0))

    def test_single_cell_scenario(self):
        """idx 6: one segment across the cell at lon 0.005."""
        grid = _single_cell(0.1, 0.9, 0.9, 0.1)
        assert case_index(0.1, 0.9, 0.9, 0.1, 0.5) == 6
        segs = trace_segments(grid, 0.5)
        assert len(segs) == 1
        a, b = segs[0]
        assert a == pytest.approx((0.005, 0.0))
        assert b == pytest.approx((0.005, 0.01))

    def test_level_outside_range(self):
        values = [[0.3, 0.7, 0.5], [0.6, 0.4, 0.3], [0.7, 0.5, 0.6]]
        bounds = GeoBounds(lon_min=0.0, lon_max=0.02, lat_min=0.0, lat_max=0.02)
        grid = ScalarGrid.from_values(bounds, CELL, values)
        assert trace_segments(grid, 0.2) == []
        assert trace_segments(grid, 0.8) == []
        assert trace_segments(grid, 0.5) != []

    def test_endpoints_on_cell_boundaries(self):
        bounds = GeoBounds(lon_min=10.0, lon_max=10.2, lat_min=40.0, lat_max=40.2)
        grid = build_scalar_grid(
            bounds, CELL, HarmonicFieldSampler.for_grid(bounds, CELL)
        )
        segs = trace_segments(grid, 0.55)
        assert segs
        for seg in segs:
            for lon, lat in seg:
                fi = (lon - bounds.lon_min) / CELL
                fj = (lat - bounds.lat_min) / CELL
                on_vertical = abs(fi - round(fi)) < 1e-6
                on_horizontal = abs(fj - round(fj)) < 1e-6
                assert on_vertical or on_horizontal

    def test_degenerate_segment_is_emitted(self):
        """A crossing exactly at a shared corner gives a zero-length segment."""
        grid = _single_cell(0.5, 0.1, 0.1, 0.1)
        segs = trace_segments(grid, 0.5)
        assert len(segs) == 1
        a, b = segs[0]
        assert a == pytest.approx(b)


class TestSaddleResolution:
    """Saddle cases with and without center disambiguation."""

    def test_naive_ignores_center(self):
        # idx 5 with a low center: naive pairing stays (0,1), (2,3)
        grid = _single_cell(0.9, 0.1, 0.9, 0.1)
        segs = trace_segments(grid, 0.55, saddle_mode=SaddleMode.NAIVE)
        assert _edge_sets(segs) == [(0, 1), (2, 3)]

    def test_center_mode_low_center_flips(self):
        grid = _single_cell(0.9, 0.1, 0.9, 0.1)
        segs = trace_segments(grid, 0.55, saddle_mode=SaddleMode.CENTER)
        assert _edge_sets(segs) == [(0, 3), (1, 2)]

    def test_center_mode_high_center_keeps_naive(self):
        grid = _single_cell(0.1, 0.9, 0.1, 0.9)
        segs = trace_segments(grid, 0.45, saddle_mode=SaddleMode.CENTER)
        assert _edge_sets(segs) == [(0, 3), (1, 2)]

    def test_cell_edge_pairs_without_center(self):
        assert cell_edge_pairs(10) == ((0, 3), (1, 2))
        assert cell_edge_pairs(10, center=0.2, level=0.5) == ((0, 1), (2, 3))
