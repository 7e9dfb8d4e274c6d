"""Reconstruct continuous polylines from an unordered set of segments."""

from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import Sequence
from typing import TYPE_CHECKING

from shared.constants import MIN_POINTS_FOR_LINE, STITCH_TOLERANCE_DEG

if TYPE_CHECKING:
    from domain.models import Point, Polyline, Segment


def points_match(p: Point, q: Point, tolerance: float = STITCH_TOLERANCE_DEG) -> bool:
    return abs(p[0] - q[0]) < tolerance and abs(p[1] - q[1]) < tolerance


class _LinearMatcher:
    """First unused segment in input order with an endpoint at ``p``."""

    def __init__(self, segs: Sequence[Segment], tolerance: float) -> None:
        self._segs = segs
        self._tol = tolerance

    def find(self, p: Point, used: list[bool]) -> tuple[int, Point] | None:
        for idx, (a, b) in enumerate(self._segs):
            if used[idx]:
                continue
            if points_match(p, a, self._tol):
                return idx, b
            if points_match(p, b, self._tol):
                return idx, a
        return None


class _BucketMatcher:
    """
    Same answers as _LinearMatcher through a spatial hash.

    Keys are ``floor(coord / (2 * tolerance))``; two points closer than the
    tolerance differ by at most one in each key component, so a 3x3
    neighbourhood holds every candidate. The lowest matching index wins, as in
    the linear scan.
    """

    def __init__(self, segs: Sequence[Segment], tolerance: float) -> None:
        self._segs = segs
        self._tol = tolerance
        self._cell = 2.0 * tolerance
        self._buckets: dict[tuple[int, int], list[int]] = defaultdict(list)
        for idx, (a, b) in enumerate(segs):
            self._buckets[self._key(a)].append(idx)
            kb = self._key(b)
            if kb != self._key(a):
                self._buckets[kb].append(idx)

    def _key(self, p: Point) -> tuple[int, int]:
        return math.floor(p[0] / self._cell), math.floor(p[1] / self._cell)

    def find(self, p: Point, used: list[bool]) -> tuple[int, Point] | None:
        kx, ky = self._key(p)
        best: int | None = None
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                for idx in self._buckets.get((kx + dx, ky + dy), ()):
                    if used[idx] or (best is not None and idx >= best):
                        continue
                    a, b = self._segs[idx]
                    if points_match(p, a, self._tol) or points_match(
                        p, b, self._tol
                    ):
                        best = idx
        if best is None:
            return None
        a, b = self._segs[best]
        return best, (b if points_match(p, a, self._tol) else a)


def _extend(
    start: Point,
    matcher: _LinearMatcher | _BucketMatcher,
    used: list[bool],
) -> list[Point]:
    out: list[Point] = []
    cur = start
    while True:
        hit = matcher.find(cur, used)
        if hit is None:
            return out
        idx, nxt = hit
        used[idx] = True
        out.append(nxt)
        cur = nxt


def stitch_segments(
    segments: Sequence[Segment],
    *,
    tolerance: float = STITCH_TOLERANCE_DEG,
    use_index: bool = True,
) -> list[Polyline]:
    """
    Chain segments sharing endpoints into maximal polylines.

    Every segment is consumed exactly once. A segment with no neighbours gives
    a 2-point polyline, unless it has zero length, in which case it is dropped.
    ``use_index=False`` runs the O(S^2) linear scan; both modes return the
    same polylines.
    """
    segs = list(segments)
    used = [False] * len(segs)
    matcher = (
        _BucketMatcher(segs, tolerance)
        if use_index
        else _LinearMatcher(segs, tolerance)
    )
    polylines: list[Polyline] = []
    for si, (a, b) in enumerate(segs):
        if used[si]:
            continue
        used[si] = True
        forward = _extend(b, matcher, used)
        backward = _extend(a, matcher, used)
        if not forward and not backward and points_match(a, b, tolerance):
            continue
        poly = [*reversed(backward), a, b, *forward]
        if len(poly) >= MIN_POINTS_FOR_LINE:
            polylines.append(poly)
    return polylines
