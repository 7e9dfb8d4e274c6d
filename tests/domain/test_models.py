"""Tests for domain.models module."""

import math

import pytest
from pydantic import ValidationError

from domain.models import (
    GeoBounds,
    IsoLevel,
    LineStyle,
    OverlayFeature,
    OverlayResult,
    OverlaySettings,
    OverlaySource,
    RoadWay,
    default_iso_levels,
)
from shared.constants import SaddleMode, SamplerKind


class TestGeoBounds:
    """Tests for GeoBounds."""

    def test_spans(self):
        b = GeoBounds(lon_min=82.5, lon_max=82.7, lat_min=49.9, lat_max=50.0)
        assert b.lon_span == pytest.approx(0.2)
        assert b.lat_span == pytest.approx(0.1)
        assert not b.is_degenerate()

    @pytest.mark.parametrize(
        'coords',
        [
            (1.0, 1.0, 0.0, 1.0),
            (0.0, 1.0, 2.0, 1.0),
            (math.nan, 1.0, 0.0, 1.0),
            (0.0, math.inf, 0.0, 1.0),
        ],
    )
    def test_degenerate(self, coords):
        assert GeoBounds(*coords).is_degenerate()


class TestLineStyle:
    """Tests for LineStyle validation."""

    def test_color_lowercased(self):
        assert LineStyle(color='#EF4444').color == '#ef4444'

    @pytest.mark.parametrize('color', ['red', '#fff', '#12345g', ''])
    def test_bad_color(self, color):
        with pytest.raises(ValidationError):
            LineStyle(color=color)

    def test_alpha_range(self):
        with pytest.raises(ValidationError):
            LineStyle(color='#000000', alpha=1.5)

    def test_width_positive(self):
        with pytest.raises(ValidationError):
            LineStyle(color='#000000', width=0)

    def test_frozen(self):
        style = LineStyle(color='#000000')
        with pytest.raises(ValidationError):
            style.width = 3.0


class TestIsoLevel:
    """Tests for IsoLevel."""

    @pytest.mark.parametrize('threshold', [0.0, 1.0, -0.2, 1.3])
    def test_threshold_open_interval(self, threshold):
        with pytest.raises(ValidationError):
            IsoLevel(threshold=threshold, style=LineStyle(color='#000000'))

    def test_default_levels(self):
        levels = default_iso_levels()
        assert [lv.threshold for lv in levels] == [0.25, 0.5, 0.75]
        assert [lv.style.color for lv in levels] == ['#22c55e', '#eab308', '#ef4444']
        assert all(lv.style.width == 2.5 for lv in levels)
        assert all(lv.style.alpha == 0.9 for lv in levels)


class TestOverlayResult:
    """Tests for OverlayResult helpers."""

    def test_len_iter_polylines(self):
        style = LineStyle(color='#000000')
        features = [
            OverlayFeature(style=style, polyline=[(0.0, 0.0), (1.0, 1.0)], level=0.5),
            OverlayFeature(style=style, polyline=[(2.0, 2.0), (3.0, 3.0)], level=0.5),
        ]
        result = OverlayResult(source=OverlaySource.SYNTHETIC, features=features)
        assert len(result) == 2
        assert list(result) == features
        assert result.polylines() == [f.polyline for f in features]

    def test_road_way_points_coerced(self):
        road = RoadWay(points=[[82.6, 49.9], [82.61, 49.91]])
        assert road.points == ((82.6, 49.9), (82.61, 49.91))


class TestOverlaySettings:
    """Tests for OverlaySettings."""

    def test_defaults(self):
        s = OverlaySettings()
        assert s.bounds == GeoBounds(
            lon_min=82.52, lon_max=82.72, lat_min=49.88, lat_max=50.02
        )
        assert s.cell_size == 0.002
        assert s.cell_fill_size == 0.00115
        assert s.sampler is SamplerKind.HARMONIC
        assert s.saddle_mode is SaddleMode.NAIVE
        assert s.max_workers == 1
        assert len(s.iso_levels) == 3

    def test_default_levels_not_shared(self):
        a = OverlaySettings()
        b = OverlaySettings()
        assert a.iso_levels is not b.iso_levels

    def test_degenerate_bounds_rejected(self):
        with pytest.raises(ValidationError):
            OverlaySettings(lon_min=82.7, lon_max=82.5)

    @pytest.mark.parametrize('field', ['cell_size', 'cell_fill_size', 'stitch_tolerance'])
    def test_positive_fields(self, field):
        with pytest.raises(ValidationError):
            OverlaySettings(**{field: 0})

    def test_workers_clamped(self):
        assert OverlaySettings(max_workers=0).max_workers == 1

    def test_extra_fields_ignored(self):
        s = OverlaySettings(unknown_option=123)
        assert not hasattr(s, 'unknown_option')

    def test_enum_from_string(self):
        s = OverlaySettings(sampler='corridor', saddle_mode='center')
        assert s.sampler is SamplerKind.CORRIDOR
        assert s.saddle_mode is SaddleMode.CENTER

    def test_center(self):
        s = OverlaySettings(center_lon=82.6, center_lat=49.95)
        assert s.center == (82.6, 49.95)
