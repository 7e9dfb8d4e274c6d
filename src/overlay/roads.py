"""
Decoding of an Overpass ``out geom`` road payload into RoadWay values.

Fetching the payload is the caller's business (a time-bounded request made
before the overlay build); any failure there, or a RoadPayloadError here,
means "no external roads" and the synthetic contours are drawn instead.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from domain.models import LineStyle, RoadWay
from scalar_field.classifier import TRAFFIC_LOAD_CLASSIFIER
from shared.constants import (
    CORRIDOR_CENTER_LAT,
    CORRIDOR_CENTER_LON,
    MIN_POINTS_FOR_LINE,
    OVERPASS_TIMEOUT_S,
    ROAD_CLASS_LOAD_BONUS,
    ROAD_CLASS_WIDTH,
    ROAD_DEFAULT_WIDTH,
    ROAD_LOAD_RADIUS_DEG,
)

if TYPE_CHECKING:
    from domain.models import GeoBounds, Point

logger = logging.getLogger(__name__)


class RoadPayloadError(ValueError):
    """Ответ источника дорог не удалось разобрать."""


def build_overpass_query(bounds: GeoBounds, timeout_s: int = OVERPASS_TIMEOUT_S) -> str:
    """Overpass QL for every highway way inside ``bounds`` with inline geometry."""
    return (
        f'[out:json][timeout:{int(timeout_s)}];\n'
        f'(way["highway"]({bounds.lat_min},{bounds.lon_min},'
        f'{bounds.lat_max},{bounds.lon_max}););\n'
        'out geom;'
    )


def estimate_road_load(
    way_id: int,
    points: Sequence[Point],
    classification: str,
    center: Point = (CORRIDOR_CENTER_LON, CORRIDOR_CENTER_LAT),
) -> float:
    """
    Synthetic load in [0, 1] for a road without live traffic data.

    Falls off with the distance of the way centroid from the city centre,
    rises with the road class and gets a deterministic per-way wobble.
    """
    n = len(points)
    avg_lon = sum(p[0] for p in points) / n
    avg_lat = sum(p[1] for p in points) / n
    dist = math.hypot(avg_lon - center[0], avg_lat - center[1])
    bonus = ROAD_CLASS_LOAD_BONUS.get(classification.lower(), 0.0)
    # Число координат в плоском массиве lon, lat, lon, lat, ...
    flat_len = 2 * n
    bump = (
        0.18 * math.sin(way_id * 0.7)
        + 0.12 * math.cos(avg_lon * 80) * math.sin(avg_lat * 60)
        + 0.08 * math.sin(flat_len * 0.3 + way_id * 0.2)
    )
    return max(0.0, min(1.0, 1.0 - dist / ROAD_LOAD_RADIUS_DEG + bonus + bump))


def road_width(classification: str) -> float:
    return ROAD_CLASS_WIDTH.get(classification.lower(), ROAD_DEFAULT_WIDTH)


def road_style(road: RoadWay) -> LineStyle:
    """Color from the load bucket, width from the road class."""
    base = TRAFFIC_LOAD_CLASSIFIER.style_for(road.load)
    return LineStyle(
        color=base.color, alpha=base.alpha, width=road_width(road.classification)
    )


def _way_points(geometry: Any) -> list[Point]:
    points: list[Point] = []
    for node in geometry:
        try:
            lon = float(node['lon'])
            lat = float(node['lat'])
        except (KeyError, TypeError, ValueError) as e:
            msg = f'Некорректная точка геометрии: {node!r}'
            raise RoadPayloadError(msg) from e
        points.append((lon, lat))
    return points


def parse_overpass_ways(
    payload: Mapping[str, Any],
    *,
    center: Point = (CORRIDOR_CENTER_LON, CORRIDOR_CENTER_LAT),
) -> list[RoadWay]:
    """
    Convert the ``elements`` of an Overpass JSON response into RoadWay values.

    Non-way elements and ways with fewer than two geometry points are skipped.
    """
    if not isinstance(payload, Mapping):
        msg = f'Ожидался JSON-объект, получено {type(payload).__name__}'
        raise RoadPayloadError(msg)
    elements = payload.get('elements') or []
    if not isinstance(elements, list):
        msg = 'Поле elements должно быть списком'
        raise RoadPayloadError(msg)

    roads: list[RoadWay] = []
    skipped = 0
    for el in elements:
        if not isinstance(el, Mapping) or el.get('type') != 'way':
            continue
        geometry = el.get('geometry') or []
        if not isinstance(geometry, list):
            msg = f'Геометрия дороги должна быть списком: {geometry!r}'
            raise RoadPayloadError(msg)
        if len(geometry) < MIN_POINTS_FOR_LINE:
            skipped += 1
            continue
        points = _way_points(geometry)
        tags = el.get('tags') or {}
        if not isinstance(tags, Mapping):
            msg = f'Теги дороги должны быть объектом: {tags!r}'
            raise RoadPayloadError(msg)
        classification = str(tags.get('highway', '')).lower()
        try:
            way_id = int(el.get('id') or 0)
        except (TypeError, ValueError) as e:
            msg = f'Некорректный идентификатор дороги: {el.get("id")!r}'
            raise RoadPayloadError(msg) from e
        roads.append(
            RoadWay(
                points=tuple(points),
                classification=classification,
                load=estimate_road_load(way_id, points, classification, center),
                way_id=way_id,
            )
        )
    if skipped:
        logger.warning('Skipped %d ways without usable geometry', skipped)
    logger.info('Decoded %d road ways', len(roads))
    return roads
