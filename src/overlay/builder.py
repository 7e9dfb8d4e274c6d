"""
Overlay orchestration: road-source choice, grid, per-level contours, styling.

A build is synchronous and all-or-nothing: it either returns a complete
OverlayResult or raises (InvalidBoundsError, CancelledError).
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING

from contours.stitcher import stitch_segments
from contours.tracer import trace_segments
from domain.models import (
    CellFeature,
    GeoBounds,
    IsoLevel,
    OverlayFeature,
    OverlayResult,
    OverlaySource,
    RoadWay,
)
from overlay.roads import road_style
from scalar_field.classifier import AIR_QUALITY_CLASSIFIER, BucketClassifier
from scalar_field.grid import ScalarGrid, build_scalar_grid, validate_geometry
from scalar_field.sampler import (
    CorridorFieldSampler,
    FieldSampler,
    HarmonicFieldConfig,
    HarmonicFieldSampler,
)
from shared.constants import (
    CONTOUR_PARALLEL_WORKERS,
    MIN_POINTS_FOR_LINE,
    STITCH_TOLERANCE_DEG,
    SaddleMode,
    SamplerKind,
)
from shared.progress import ConsoleProgress, check_cancelled

if TYPE_CHECKING:
    from domain.models import OverlaySettings
    from shared.progress import CancelToken

logger = logging.getLogger(__name__)

SamplerFactory = Callable[[GeoBounds, float], FieldSampler]


@dataclass(frozen=True)
class ExternalRoads:
    roads: tuple[RoadWay, ...]


@dataclass(frozen=True)
class SyntheticRoads:
    pass


RoadSource = ExternalRoads | SyntheticRoads


def resolve_road_source(external_roads: Sequence[RoadWay] | None) -> RoadSource:
    """Usable external roads win; otherwise fall back to synthetic contours."""
    if not external_roads:
        return SyntheticRoads()
    usable = tuple(r for r in external_roads if len(r.points) >= MIN_POINTS_FOR_LINE)
    dropped = len(external_roads) - len(usable)
    if dropped:
        logger.warning('Ignoring %d external roads with fewer than 2 points', dropped)
    if not usable:
        return SyntheticRoads()
    return ExternalRoads(usable)


def default_sampler_factory(bounds: GeoBounds, cell_size: float) -> FieldSampler:
    return HarmonicFieldSampler.for_grid(bounds, cell_size)


class OverlayBuilder:
    """
    Builds the traffic overlay for one request.

    Holds configuration only; every build creates its own grid, so one builder
    may serve consecutive requests.
    """

    def __init__(
        self,
        *,
        sampler_factory: SamplerFactory | None = None,
        saddle_mode: SaddleMode = SaddleMode.NAIVE,
        tolerance: float = STITCH_TOLERANCE_DEG,
        max_workers: int = CONTOUR_PARALLEL_WORKERS,
        cancel: CancelToken | None = None,
    ) -> None:
        self.sampler_factory = sampler_factory or default_sampler_factory
        self.saddle_mode = saddle_mode
        self.tolerance = tolerance
        self.max_workers = max(1, int(max_workers))
        self.cancel = cancel
        self.logger = logging.getLogger(self.__class__.__name__)

    def build(
        self,
        bounds: GeoBounds,
        cell_size: float,
        levels: Sequence[IsoLevel],
        external_roads: Sequence[RoadWay] | None = None,
    ) -> OverlayResult:
        validate_geometry(bounds, cell_size)
        source = resolve_road_source(external_roads)
        if isinstance(source, ExternalRoads):
            self.logger.info(
                'Using %d external roads, synthetic contours skipped',
                len(source.roads),
            )
            return self._build_external(source.roads)
        return self._build_synthetic(bounds, cell_size, levels)

    def _build_external(self, roads: Sequence[RoadWay]) -> OverlayResult:
        features = [
            OverlayFeature(
                style=road_style(road),
                polyline=list(road.points),
                source=OverlaySource.EXTERNAL,
            )
            for road in roads
        ]
        return OverlayResult(source=OverlaySource.EXTERNAL, features=features)

    def _build_synthetic(
        self,
        bounds: GeoBounds,
        cell_size: float,
        levels: Sequence[IsoLevel],
    ) -> OverlayResult:
        started = time.perf_counter()
        check_cancelled(self.cancel)
        grid = build_scalar_grid(bounds, cell_size, self.sampler_factory(bounds, cell_size))
        ordered = sorted(levels, key=lambda lv: lv.threshold)
        progress = ConsoleProgress(total=len(ordered), label='Изолинии')

        def process_level(level: IsoLevel) -> list[OverlayFeature]:
            check_cancelled(self.cancel)
            feats = self.level_features(grid, level)
            progress.step_sync(1)
            return feats

        per_level: list[list[OverlayFeature]]
        workers = min(self.max_workers, len(ordered))
        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                per_level = list(executor.map(process_level, ordered))
        else:
            per_level = [process_level(level) for level in ordered]
        check_cancelled(self.cancel)

        features = [f for feats in per_level for f in feats]
        self.logger.info(
            'Synthetic overlay: %dx%d grid, %d levels, %d polylines in %.3fs',
            grid.ni,
            grid.nj,
            len(ordered),
            len(features),
            time.perf_counter() - started,
        )
        return OverlayResult(source=OverlaySource.SYNTHETIC, features=features)

    def level_features(self, grid: ScalarGrid, level: IsoLevel) -> list[OverlayFeature]:
        segments = trace_segments(grid, level.threshold, saddle_mode=self.saddle_mode)
        polylines = stitch_segments(segments, tolerance=self.tolerance)
        self.logger.debug(
            'Level %.3f: %d segments -> %d polylines',
            level.threshold,
            len(segments),
            len(polylines),
        )
        return [
            OverlayFeature(style=level.style, polyline=poly, level=level.threshold)
            for poly in polylines
        ]

    def build_cells(
        self,
        bounds: GeoBounds,
        cell_size: float,
        classifier: BucketClassifier = AIR_QUALITY_CLASSIFIER,
    ) -> list[CellFeature]:
        """Filled-cell overlay: one closed ring per cell, styled by its corner sample."""
        check_cancelled(self.cancel)
        grid = build_scalar_grid(bounds, cell_size, self.sampler_factory(bounds, cell_size))
        cells: list[CellFeature] = []
        for i, j in grid.cells():
            x0, y0 = grid.corner(i, j)
            x1, y1 = grid.corner(i + 1, j + 1)
            value = grid.value(i, j)
            bucket = classifier.classify(value)
            cells.append(
                CellFeature(
                    ring=((x0, y0), (x1, y0), (x1, y1), (x0, y1), (x0, y0)),
                    value=value,
                    bucket=bucket,
                    style=classifier.styles[bucket],
                )
            )
        self.logger.info('Cell overlay: %d cells', len(cells))
        return cells


def sampler_factory_from_settings(settings: OverlaySettings) -> SamplerFactory:
    if settings.sampler is SamplerKind.CORRIDOR:

        def corridor(bounds: GeoBounds, cell_size: float) -> FieldSampler:
            return CorridorFieldSampler.for_grid(
                bounds,
                cell_size,
                center=settings.center,
                bridge_lat=settings.bridge_lat,
            )

        return corridor

    config = HarmonicFieldConfig(
        step=settings.harmonic_step,
        gradient_weight=settings.gradient_weight,
        bump_amplitude=settings.bump_amplitude,
    )

    def harmonic(bounds: GeoBounds, cell_size: float) -> FieldSampler:
        return HarmonicFieldSampler.for_grid(bounds, cell_size, config)

    return harmonic


def builder_from_settings(
    settings: OverlaySettings, cancel: CancelToken | None = None
) -> OverlayBuilder:
    return OverlayBuilder(
        sampler_factory=sampler_factory_from_settings(settings),
        saddle_mode=settings.saddle_mode,
        tolerance=settings.stitch_tolerance,
        max_workers=settings.max_workers,
        cancel=cancel,
    )


def build_overlay(
    settings: OverlaySettings,
    external_roads: Sequence[RoadWay] | None = None,
    cancel: CancelToken | None = None,
) -> OverlayResult:
    """Build the traffic overlay described by ``settings``."""
    builder = builder_from_settings(settings, cancel)
    return builder.build(
        settings.bounds, settings.cell_size, settings.iso_levels, external_roads
    )


def build_cell_overlay(
    settings: OverlaySettings,
    classifier: BucketClassifier = AIR_QUALITY_CLASSIFIER,
    cancel: CancelToken | None = None,
) -> list[CellFeature]:
    """Build the filled-cell (air quality) overlay described by ``settings``."""
    builder = builder_from_settings(settings, cancel)
    return builder.build_cells(settings.bounds, settings.cell_fill_size, classifier)
