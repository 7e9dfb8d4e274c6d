from __future__ import annotations

from bisect import bisect_right
from collections.abc import Sequence

from domain.models import LineStyle
from shared.constants import (
    AIR_QUALITY_ALPHA,
    AIR_QUALITY_COLORS,
    AIR_QUALITY_FINE_ALPHA,
    AIR_QUALITY_FINE_COLORS,
    AIR_QUALITY_FINE_THRESHOLDS,
    AIR_QUALITY_THRESHOLDS,
    COLOR_GREEN,
    TRAFFIC_LOAD_ALPHA,
    TRAFFIC_LOAD_COLORS,
    TRAFFIC_LOAD_THRESHOLDS,
    TRAFFIC_WIDTH_THRESHOLDS,
    TRAFFIC_WIDTHS,
)


class BucketClassifier:
    """
    Map a value in [0, 1] onto an ordered set of display buckets.

    Bucket ``k`` holds values in ``[thresholds[k-1], thresholds[k])``; values are
    clamped first, so the mapping is monotonic over the whole real line.
    """

    def __init__(
        self, thresholds: Sequence[float], styles: Sequence[LineStyle]
    ) -> None:
        ts = tuple(float(t) for t in thresholds)
        if any(not (0.0 <= t <= 1.0) for t in ts):
            msg = 'Пороги должны лежать в диапазоне [0.0, 1.0]'
            raise ValueError(msg)
        if any(b <= a for a, b in zip(ts, ts[1:])):
            msg = 'Пороги должны строго возрастать'
            raise ValueError(msg)
        if len(styles) != len(ts) + 1:
            msg = f'Нужно {len(ts) + 1} стилей для {len(ts)} порогов'
            raise ValueError(msg)
        self.thresholds = ts
        self.styles = tuple(styles)

    @property
    def bucket_count(self) -> int:
        return len(self.styles)

    def classify(self, value: float) -> int:
        v = max(0.0, min(1.0, float(value)))
        return bisect_right(self.thresholds, v)

    def style_for(self, value: float) -> LineStyle:
        return self.styles[self.classify(value)]


def _palette(colors: Sequence[str], alpha: float) -> list[LineStyle]:
    return [LineStyle(color=c, alpha=alpha) for c in colors]


AIR_QUALITY_CLASSIFIER = BucketClassifier(
    AIR_QUALITY_THRESHOLDS, _palette(AIR_QUALITY_COLORS, AIR_QUALITY_ALPHA)
)
AIR_QUALITY_FINE_CLASSIFIER = BucketClassifier(
    AIR_QUALITY_FINE_THRESHOLDS,
    _palette(AIR_QUALITY_FINE_COLORS, AIR_QUALITY_FINE_ALPHA),
)
TRAFFIC_LOAD_CLASSIFIER = BucketClassifier(
    TRAFFIC_LOAD_THRESHOLDS, _palette(TRAFFIC_LOAD_COLORS, TRAFFIC_LOAD_ALPHA)
)
# Цвет не важен - используется только толщина
TRAFFIC_WIDTH_CLASSIFIER = BucketClassifier(
    TRAFFIC_WIDTH_THRESHOLDS,
    [LineStyle(color=COLOR_GREEN, width=w) for w in TRAFFIC_WIDTHS],
)
