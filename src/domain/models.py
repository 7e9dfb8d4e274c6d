from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

from shared.constants import (
    CORRIDOR_BRIDGE_LAT,
    CORRIDOR_CENTER_LAT,
    CORRIDOR_CENTER_LON,
    CONTOUR_PARALLEL_WORKERS,
    DEFAULT_CONTOUR_CELL_DEG,
    DEFAULT_FILL_CELL_DEG,
    DEFAULT_ISO_ALPHA,
    DEFAULT_ISO_COLORS,
    DEFAULT_ISO_THRESHOLDS,
    DEFAULT_ISO_WIDTH,
    DEFAULT_LAT_MAX,
    DEFAULT_LAT_MIN,
    DEFAULT_LON_MAX,
    DEFAULT_LON_MIN,
    HARMONIC_BUMP_AMPLITUDE,
    HARMONIC_GRADIENT_WEIGHT,
    HARMONIC_STEP,
    STITCH_TOLERANCE_DEG,
    SaddleMode,
    SamplerKind,
    default_saddle_mode,
    default_sampler_kind,
)

# (lon, lat) в градусах
Point = tuple[float, float]
Segment = tuple[Point, Point]
Polyline = list[Point]

_HEX_COLOR_RE = re.compile(r'^#[0-9a-fA-F]{6}$')


class InvalidBoundsError(ValueError):
    """Вырожденная область или неположительный шаг сетки."""


@dataclass(frozen=True)
class GeoBounds:
    lon_min: float
    lon_max: float
    lat_min: float
    lat_max: float

    @property
    def lon_span(self) -> float:
        return self.lon_max - self.lon_min

    @property
    def lat_span(self) -> float:
        return self.lat_max - self.lat_min

    def is_degenerate(self) -> bool:
        coords = (self.lon_min, self.lon_max, self.lat_min, self.lat_max)
        if not all(math.isfinite(c) for c in coords):
            return True
        return self.lon_min >= self.lon_max or self.lat_min >= self.lat_max


class LineStyle(BaseModel):
    """Display attributes handed to the rendering collaborator as-is."""

    model_config = {'frozen': True}

    color: str
    alpha: float = 1.0
    width: float = 2.0

    @field_validator('color')
    @classmethod
    def validate_color(cls, v: str) -> str:
        if not _HEX_COLOR_RE.match(v):
            msg = f'Цвет должен быть в формате #rrggbb: {v!r}'
            raise ValueError(msg)
        return v.lower()

    @field_validator('alpha')
    @classmethod
    def validate_alpha(cls, v: float | str) -> float:
        v = float(v)
        if not (0.0 <= v <= 1.0):
            msg = 'Значение должно быть в диапазоне [0.0, 1.0]'
            raise ValueError(msg)
        return v

    @field_validator('width')
    @classmethod
    def validate_width(cls, v: float | str) -> float:
        v = float(v)
        if v <= 0:
            msg = 'Толщина линии должна быть положительной'
            raise ValueError(msg)
        return v


class IsoLevel(BaseModel):
    """Threshold of one isoline plus its display style."""

    model_config = {'frozen': True}

    threshold: float
    style: LineStyle

    @field_validator('threshold')
    @classmethod
    def validate_threshold(cls, v: float | str) -> float:
        v = float(v)
        if not (0.0 < v < 1.0):
            msg = 'Уровень изолинии должен лежать в интервале (0.0, 1.0)'
            raise ValueError(msg)
        return v


class RoadWay(BaseModel):
    """Внешняя дорога: геометрия, класс (тег highway) и нагрузка."""

    model_config = {'frozen': True}

    points: tuple[Point, ...]
    classification: str = ''
    load: float = 0.0
    way_id: int | None = None


class OverlaySource(str, Enum):
    SYNTHETIC = 'synthetic'
    EXTERNAL = 'external'


@dataclass(frozen=True)
class OverlayFeature:
    style: LineStyle
    polyline: Polyline
    level: float | None = None
    source: OverlaySource = OverlaySource.SYNTHETIC


@dataclass
class OverlayResult:
    """Flat list of styled polylines; treat the order as insignificant."""

    source: OverlaySource
    features: list[OverlayFeature] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.features)

    def __iter__(self):
        return iter(self.features)

    def polylines(self) -> list[Polyline]:
        return [f.polyline for f in self.features]


@dataclass(frozen=True)
class CellFeature:
    """Одна залитая ячейка: замкнутое кольцо из пяти точек."""

    ring: tuple[Point, ...]
    value: float
    bucket: int
    style: LineStyle


def default_iso_levels() -> list[IsoLevel]:
    return [
        IsoLevel(
            threshold=t,
            style=LineStyle(color=c, alpha=DEFAULT_ISO_ALPHA, width=DEFAULT_ISO_WIDTH),
        )
        for t, c in zip(DEFAULT_ISO_THRESHOLDS, DEFAULT_ISO_COLORS, strict=True)
    ]


class OverlaySettings(BaseModel):
    """
    Все параметры построения оверлея собраны в одну плоскую модель.

    The TOML profile groups them into sections, see domain.toml_sections.
    """

    model_config = {
        'extra': 'ignore',  # игнорировать лишние поля из профилей
    }

    # Область (градусы WGS84)
    lon_min: float = DEFAULT_LON_MIN
    lon_max: float = DEFAULT_LON_MAX
    lat_min: float = DEFAULT_LAT_MIN
    lat_max: float = DEFAULT_LAT_MAX
    # Шаг сетки изолиний (градусы)
    cell_size: float = DEFAULT_CONTOUR_CELL_DEG

    # Уровни изолиний и их стили
    iso_levels: list[IsoLevel] = Field(default_factory=default_iso_levels)

    # Генератор поля
    sampler: SamplerKind = default_sampler_kind()
    harmonic_step: float = HARMONIC_STEP
    gradient_weight: float = HARMONIC_GRADIENT_WEIGHT
    bump_amplitude: float = HARMONIC_BUMP_AMPLITUDE
    center_lon: float = CORRIDOR_CENTER_LON
    center_lat: float = CORRIDOR_CENTER_LAT
    bridge_lat: float = CORRIDOR_BRIDGE_LAT

    # Трассировка и сшивка
    saddle_mode: SaddleMode = default_saddle_mode()
    stitch_tolerance: float = STITCH_TOLERANCE_DEG
    max_workers: int = CONTOUR_PARALLEL_WORKERS

    # Заливка ячеек
    cell_fill_size: float = DEFAULT_FILL_CELL_DEG

    @field_validator('cell_size', 'cell_fill_size', 'harmonic_step', 'stitch_tolerance')
    @classmethod
    def validate_positive(cls, v: float | str) -> float:
        v = float(v)
        if not (v > 0 and math.isfinite(v)):
            msg = 'Значение должно быть положительным'
            raise ValueError(msg)
        return v

    @field_validator('max_workers')
    @classmethod
    def validate_workers(cls, v: int | str) -> int:
        return max(1, int(v))

    @model_validator(mode='after')
    def validate_bounds(self) -> OverlaySettings:
        if self.bounds.is_degenerate():
            msg = (
                'Некорректная область: '
                f'lon [{self.lon_min}, {self.lon_max}], '
                f'lat [{self.lat_min}, {self.lat_max}]'
            )
            raise ValueError(msg)
        return self

    @property
    def bounds(self) -> GeoBounds:
        return GeoBounds(
            lon_min=self.lon_min,
            lon_max=self.lon_max,
            lat_min=self.lat_min,
            lat_max=self.lat_max,
        )

    @property
    def center(self) -> Point:
        return (self.center_lon, self.center_lat)
