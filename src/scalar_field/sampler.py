"""
Deterministic procedural scalar fields over grid indices.

Both samplers are pure functions of ``(i, j)`` and a frozen config: no time,
no randomness, the only branch is the final clamp to [0, 1].
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Protocol

from shared.constants import (
    CORRIDOR_BRIDGE_AMPLITUDE,
    CORRIDOR_BRIDGE_LAT,
    CORRIDOR_BRIDGE_WIDTH_SQ,
    CORRIDOR_CENTER_LAT,
    CORRIDOR_CENTER_LON,
    CORRIDOR_CENTER_RADIUS_DEG,
    HARMONIC_BUMP_AMPLITUDE,
    HARMONIC_GRADIENT_WEIGHT,
    HARMONIC_NORM,
    HARMONIC_OFFSET,
    HARMONIC_SCALE,
    HARMONIC_STEP,
    HARMONIC_WEIGHTS,
)

if TYPE_CHECKING:
    from domain.models import GeoBounds

HARMONIC_COUNT = 6


class FieldSampler(Protocol):
    def sample(self, i: int, j: int) -> float: ...


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


@dataclass(frozen=True)
class HarmonicFieldConfig:
    step: float = HARMONIC_STEP
    weights: tuple[float, ...] = HARMONIC_WEIGHTS
    norm: float = HARMONIC_NORM
    gradient_weight: float = HARMONIC_GRADIENT_WEIGHT
    # Число строк сетки на всю широту (lat_span / cell_size)
    gradient_rows: float = 1.0
    offset: float = HARMONIC_OFFSET
    scale: float = HARMONIC_SCALE
    bump_amplitude: float = HARMONIC_BUMP_AMPLITUDE

    def __post_init__(self) -> None:
        if len(self.weights) != HARMONIC_COUNT:
            msg = f'Ожидается {HARMONIC_COUNT} весов гармоник, получено {len(self.weights)}'
            raise ValueError(msg)
        if self.gradient_rows <= 0:
            msg = 'gradient_rows должен быть положительным'
            raise ValueError(msg)


class HarmonicFieldSampler:
    """
    Weighted sum of six harmonics plus a latitude gradient and a local bump.

    The raw harmonic mean lies in [-1, 1]; ``offset + scale * n`` maps it into
    the unit interval before the gradient and bump are added and the sum is
    clamped.
    """

    def __init__(self, config: HarmonicFieldConfig | None = None) -> None:
        self.config = config or HarmonicFieldConfig()

    @classmethod
    def for_grid(
        cls,
        bounds: GeoBounds,
        cell_size: float,
        config: HarmonicFieldConfig | None = None,
    ) -> HarmonicFieldSampler:
        base = config or HarmonicFieldConfig()
        rows = bounds.lat_span / cell_size
        return cls(replace(base, gradient_rows=rows))

    def harmonics(self, i: int, j: int) -> float:
        cfg = self.config
        x = i * cfg.step
        y = j * cfg.step
        w = cfg.weights
        total = (
            w[0] * math.sin(x) * math.cos(y * 1.7)
            + w[1] * math.sin((x + 11) * 2.3) * math.cos((y + 7) * 1.1)
            + w[2] * math.sin((x * 0.4 + y * 0.6) * 3.1)
            + w[3] * math.cos((x * 1.3 - y * 0.9) * 2.7)
            + w[4] * math.sin(x * 5.2 + y * 4.1)
            + w[5] * math.cos((i * 0.15 + j * 0.22) * math.pi)
        )
        return total / cfg.norm

    def bump(self, i: int, j: int) -> float:
        return (
            self.config.bump_amplitude
            * math.sin(i * 0.2 + j * 0.17)
            * math.cos((i - j) * 0.1)
        )

    def gradient(self, j: int) -> float:
        # Доля широты центра строки j
        return (j + 0.5) / self.config.gradient_rows

    def sample(self, i: int, j: int) -> float:
        cfg = self.config
        raw = (
            cfg.gradient_weight * self.gradient(j)
            + cfg.offset
            + cfg.scale * self.harmonics(i, j)
            + self.bump(i, j)
        )
        return _clamp01(raw)

    __call__ = sample


@dataclass(frozen=True)
class CorridorFieldConfig:
    lon_origin: float
    lat_origin: float
    cell_size: float
    center_lon: float = CORRIDOR_CENTER_LON
    center_lat: float = CORRIDOR_CENTER_LAT
    center_radius: float = CORRIDOR_CENTER_RADIUS_DEG
    bridge_lat: float = CORRIDOR_BRIDGE_LAT
    bridge_amplitude: float = CORRIDOR_BRIDGE_AMPLITUDE
    bridge_width_sq: float = CORRIDOR_BRIDGE_WIDTH_SQ


class CorridorFieldSampler:
    """Radial falloff from a city centre plus a bridge corridor and light noise."""

    def __init__(self, config: CorridorFieldConfig) -> None:
        self.config = config

    @classmethod
    def for_grid(
        cls,
        bounds: GeoBounds,
        cell_size: float,
        *,
        center: tuple[float, float] = (CORRIDOR_CENTER_LON, CORRIDOR_CENTER_LAT),
        bridge_lat: float = CORRIDOR_BRIDGE_LAT,
    ) -> CorridorFieldSampler:
        return cls(
            CorridorFieldConfig(
                lon_origin=bounds.lon_min,
                lat_origin=bounds.lat_min,
                cell_size=cell_size,
                center_lon=center[0],
                center_lat=center[1],
                bridge_lat=bridge_lat,
            )
        )

    def sample(self, i: int, j: int) -> float:
        cfg = self.config
        lon = cfg.lon_origin + i * cfg.cell_size
        lat = cfg.lat_origin + j * cfg.cell_size
        dist = math.hypot(lon - cfg.center_lon, lat - cfg.center_lat)
        center_factor = max(0.0, 1.0 - dist / cfg.center_radius)
        bridge_factor = cfg.bridge_amplitude * math.exp(
            -((lat - cfg.bridge_lat) ** 2) / cfg.bridge_width_sq
        )
        noise = (
            0.08 * math.sin(i * 0.04) * math.cos(j * 0.04)
            + 0.11 * math.sin((i + 7) * 0.09) * math.cos((j + 3) * 0.07)
            + 0.06 * math.cos(i * 0.15 + j * 0.12)
        )
        return _clamp01(center_factor + bridge_factor + noise)

    __call__ = sample
