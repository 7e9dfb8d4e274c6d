"""Domain layer - value types, settings and profiles."""
from domain.models import (
    GeoBounds,
    InvalidBoundsError,
    IsoLevel,
    LineStyle,
    OverlayFeature,
    OverlayResult,
    OverlaySettings,
    OverlaySource,
    RoadWay,
)
from domain.profiles import (
    delete_profile,
    ensure_profiles_dir,
    list_profiles,
    load_profile,
    save_profile,
)

__all__ = [
    'GeoBounds',
    'InvalidBoundsError',
    'IsoLevel',
    'LineStyle',
    'OverlayFeature',
    'OverlayResult',
    'OverlaySettings',
    'OverlaySource',
    'RoadWay',
    'delete_profile',
    'ensure_profiles_dir',
    'list_profiles',
    'load_profile',
    'save_profile',
]
