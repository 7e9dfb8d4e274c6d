"""
Marching squares over a ScalarGrid.

Corners are numbered counter-clockwise from the bottom-left one
(0 = BL, 1 = BR, 2 = TR, 3 = TL); edge ``k`` runs from corner ``k`` to corner
``(k + 1) % 4``, i.e. 0 = bottom, 1 = right, 2 = top, 3 = left.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from shared.constants import (
    MARCHING_SQUARES_CENTER_WEIGHT,
    MS_AMBIGUOUS_CASES,
    MS_CASE_EDGES,
    MS_DEGENERATE_EDGE_EPS,
    MS_NO_CONTOUR_CASES,
    MS_SADDLE_LOW_CENTER_EDGES,
    SaddleMode,
)

if TYPE_CHECKING:
    from domain.models import Point, Segment
    from scalar_field.grid import ScalarGrid

logger = logging.getLogger(__name__)


def case_index(v00: float, v10: float, v11: float, v01: float, level: float) -> int:
    """4-bit case: bit k is set when corner k is at or above the level."""
    return (
        (1 if v00 >= level else 0)
        | ((1 if v10 >= level else 0) << 1)
        | ((1 if v11 >= level else 0) << 2)
        | ((1 if v01 >= level else 0) << 3)
    )


def edge_crossing(a: Point, b: Point, va: float, vb: float, level: float) -> Point:
    """Linear crossing point on edge a -> b; the midpoint when va ~ vb."""
    if abs(vb - va) < MS_DEGENERATE_EDGE_EPS:
        t = 0.5
    else:
        t = (level - va) / (vb - va)
    return (a[0] + t * (b[0] - a[0]), a[1] + t * (b[1] - a[1]))


def cell_edge_pairs(
    idx: int,
    center: float | None = None,
    level: float | None = None,
) -> tuple[tuple[int, int], ...]:
    """
    Edge pairs to connect for case ``idx``.

    Saddles use the naive pairing unless both ``center`` and ``level`` are
    given and the center lies below the level.
    """
    if (
        idx in MS_AMBIGUOUS_CASES
        and center is not None
        and level is not None
        and center < level
    ):
        return MS_SADDLE_LOW_CENTER_EDGES[idx]
    return MS_CASE_EDGES[idx]


def cell_segments(
    corners: tuple[Point, Point, Point, Point],
    values: tuple[float, float, float, float],
    level: float,
    *,
    saddle_mode: SaddleMode = SaddleMode.NAIVE,
) -> list[Segment]:
    """Segments of one cell; ``corners`` and ``values`` in BL, BR, TR, TL order."""
    v00, v10, v11, v01 = values
    idx = case_index(v00, v10, v11, v01, level)
    if idx in MS_NO_CONTOUR_CASES:
        return []
    center = None
    if saddle_mode is SaddleMode.CENTER and idx in MS_AMBIGUOUS_CASES:
        center = (v00 + v10 + v11 + v01) * MARCHING_SQUARES_CENTER_WEIGHT
    pairs = cell_edge_pairs(idx, center, level)

    def point_on(edge: int) -> Point:
        nxt = (edge + 1) % 4
        return edge_crossing(
            corners[edge], corners[nxt], values[edge], values[nxt], level
        )

    return [(point_on(e0), point_on(e1)) for e0, e1 in pairs]


def trace_segments(
    grid: ScalarGrid,
    level: float,
    *,
    saddle_mode: SaddleMode = SaddleMode.NAIVE,
) -> list[Segment]:
    """
    Approximate the level set of ``grid`` at ``level`` by cell segments.

    The returned list is an unordered collection; zero-length segments are
    kept, deduplication is left to the stitcher.
    """
    vals = grid.values
    segs: list[Segment] = []
    # Уровень вне диапазона значений - изолиний нет
    if level < grid.min_value or level > grid.max_value:
        return segs
    for j in range(grid.nj):
        row0 = vals[j]
        row1 = vals[j + 1]
        for i in range(grid.ni):
            values = (
                float(row0[i]),
                float(row0[i + 1]),
                float(row1[i + 1]),
                float(row1[i]),
            )
            idx = case_index(*values, level)
            if idx in MS_NO_CONTOUR_CASES:
                continue
            corners = (
                grid.corner(i, j),
                grid.corner(i + 1, j),
                grid.corner(i + 1, j + 1),
                grid.corner(i, j + 1),
            )
            segs.extend(
                cell_segments(corners, values, level, saddle_mode=saddle_mode)
            )
    logger.debug('Level %.3f: %d segments', level, len(segs))
    return segs
