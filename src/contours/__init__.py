"""
Package initializer for contours.
Re-exports the marching-squares tracer and the segment stitcher.
"""

from __future__ import annotations

from .stitcher import stitch_segments as stitch_segments
from .tracer import trace_segments as trace_segments
