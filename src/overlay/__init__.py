"""Overlay assembly: synthetic contours or external roads."""
from overlay.builder import (
    OverlayBuilder,
    build_cell_overlay,
    build_overlay,
    resolve_road_source,
)
from overlay.roads import RoadPayloadError, parse_overpass_ways

__all__ = [
    'OverlayBuilder',
    'RoadPayloadError',
    'build_cell_overlay',
    'build_overlay',
    'parse_overpass_ways',
    'resolve_road_source',
]
