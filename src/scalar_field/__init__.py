from __future__ import annotations

from .classifier import AIR_QUALITY_CLASSIFIER as AIR_QUALITY_CLASSIFIER
from .classifier import BucketClassifier as BucketClassifier
from .classifier import TRAFFIC_LOAD_CLASSIFIER as TRAFFIC_LOAD_CLASSIFIER
from .grid import ScalarGrid as ScalarGrid
from .grid import build_scalar_grid as build_scalar_grid
from .sampler import CorridorFieldSampler as CorridorFieldSampler
from .sampler import HarmonicFieldSampler as HarmonicFieldSampler
