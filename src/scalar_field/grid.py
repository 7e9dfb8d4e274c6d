from __future__ import annotations

import logging
import math
from collections.abc import Iterator
from typing import TYPE_CHECKING

import numpy as np

from domain.models import GeoBounds, InvalidBoundsError, Point

if TYPE_CHECKING:
    from scalar_field.sampler import FieldSampler

logger = logging.getLogger(__name__)


def _cell_count(span: float, cell_size: float) -> int:
    return max(1, math.ceil(span / cell_size))


def validate_geometry(bounds: GeoBounds, cell_size: float) -> tuple[int, int]:
    """
    Check bounds and cell size, return the cell counts (ni, nj).

    Raises InvalidBoundsError for degenerate bounds or a non-positive cell size.
    """
    if not (math.isfinite(cell_size) and cell_size > 0):
        msg = f'Шаг сетки должен быть положительным: {cell_size!r}'
        raise InvalidBoundsError(msg)
    if bounds.is_degenerate():
        msg = (
            'Вырожденная область: '
            f'lon [{bounds.lon_min}, {bounds.lon_max}], '
            f'lat [{bounds.lat_min}, {bounds.lat_max}]'
        )
        raise InvalidBoundsError(msg)
    return _cell_count(bounds.lon_span, cell_size), _cell_count(
        bounds.lat_span, cell_size
    )


class ScalarGrid:
    """
    Samples on the corners of a regular lon/lat grid.

    ``values[j, i]`` belongs to the corner ``(lon_min + i * cell, lat_min + j * cell)``;
    the array has ``nj + 1`` rows and ``ni + 1`` columns and is read-only.
    """

    def __init__(
        self, bounds: GeoBounds, cell_size: float, values: np.ndarray
    ) -> None:
        ni, nj = validate_geometry(bounds, cell_size)
        arr = np.array(values, dtype=np.float64)
        if arr.shape != (nj + 1, ni + 1):
            msg = (
                f'Размер массива {arr.shape} не соответствует сетке '
                f'{(nj + 1, ni + 1)}'
            )
            raise ValueError(msg)
        if arr.size and (
            not np.isfinite(arr).all() or arr.min() < 0.0 or arr.max() > 1.0
        ):
            msg = 'Значения поля должны лежать в диапазоне [0.0, 1.0]'
            raise ValueError(msg)
        arr.setflags(write=False)
        self._bounds = bounds
        self._cell_size = float(cell_size)
        self._ni = ni
        self._nj = nj
        self._values = arr

    @classmethod
    def from_values(
        cls,
        bounds: GeoBounds,
        cell_size: float,
        values: np.ndarray | list[list[float]],
    ) -> ScalarGrid:
        return cls(bounds, cell_size, np.asarray(values, dtype=np.float64))

    @property
    def bounds(self) -> GeoBounds:
        return self._bounds

    @property
    def cell_size(self) -> float:
        return self._cell_size

    @property
    def ni(self) -> int:
        return self._ni

    @property
    def nj(self) -> int:
        return self._nj

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def min_value(self) -> float:
        return float(self._values.min())

    @property
    def max_value(self) -> float:
        return float(self._values.max())

    def value(self, i: int, j: int) -> float:
        return float(self._values[j, i])

    def corner(self, i: int, j: int) -> Point:
        b = self._bounds
        return (b.lon_min + i * self._cell_size, b.lat_min + j * self._cell_size)

    def cells(self) -> Iterator[tuple[int, int]]:
        for j in range(self._nj):
            for i in range(self._ni):
                yield i, j

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScalarGrid):
            return NotImplemented
        return (
            self._bounds == other._bounds
            and self._cell_size == other._cell_size
            and np.array_equal(self._values, other._values)
        )

    __hash__ = None  # type: ignore[assignment]


def build_scalar_grid(
    bounds: GeoBounds, cell_size: float, sampler: FieldSampler
) -> ScalarGrid:
    """
    Sample ``sampler`` on every corner ``0 <= i <= ni``, ``0 <= j <= nj``.

    The whole grid is realized up front; memory is O(ni * nj).
    """
    ni, nj = validate_geometry(bounds, cell_size)
    values = np.empty((nj + 1, ni + 1), dtype=np.float64)
    for j in range(nj + 1):
        row = values[j]
        for i in range(ni + 1):
            row[i] = sampler.sample(i, j)
    logger.debug(
        'Scalar grid built: %dx%d cells, cell=%.6f deg', ni, nj, cell_size
    )
    return ScalarGrid(bounds, cell_size, values)
