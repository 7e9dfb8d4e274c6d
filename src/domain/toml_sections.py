"""Mapping layer between flat OverlaySettings fields and sectioned TOML format.

OverlaySettings remains a flat Pydantic model. This module provides two functions:
- flat_to_sectioned(): flat dict → sectioned dict (for TOML save)
- sectioned_to_flat(): sectioned dict → flat dict (for TOML load)
"""

from __future__ import annotations

# {section_name: {flat_field_name: short_name_in_toml}}
SECTION_MAP: dict[str, dict[str, str]] = {
    'bounds': {
        'lon_min': 'lon_min',
        'lon_max': 'lon_max',
        'lat_min': 'lat_min',
        'lat_max': 'lat_max',
    },
    'field': {
        'sampler': 'sampler',
        'harmonic_step': 'step',
        'gradient_weight': 'gradient_weight',
        'bump_amplitude': 'bump_amplitude',
        'center_lon': 'center_lon',
        'center_lat': 'center_lat',
        'bridge_lat': 'bridge_lat',
    },
    'contours': {
        'cell_size': 'cell_size',
        'iso_levels': 'levels',
        'saddle_mode': 'saddle_mode',
        'stitch_tolerance': 'tolerance',
        'max_workers': 'max_workers',
    },
    'cells': {
        'cell_fill_size': 'cell_size',
    },
}

# Reverse index: flat_field → (section, short_name)
_FLAT_TO_SECTION: dict[str, tuple[str, str]] = {}
for _section, _fields in SECTION_MAP.items():
    for _flat, _short in _fields.items():
        _FLAT_TO_SECTION[_flat] = (_section, _short)

# Reverse index: (section, short_name) → flat_field
_SECTION_TO_FLAT: dict[str, dict[str, str]] = {}
for _section, _fields in SECTION_MAP.items():
    _SECTION_TO_FLAT[_section] = {v: k for k, v in _fields.items()}


def flat_to_sectioned(flat: dict) -> dict:
    """Convert flat OverlaySettings dict to sectioned dict for TOML output."""
    result: dict = {}
    for key, value in flat.items():
        if key in _FLAT_TO_SECTION:
            section, short_name = _FLAT_TO_SECTION[key]
            if section not in result:
                result[section] = {}
            result[section][short_name] = value
        else:
            result.setdefault('common', {})[key] = value
    return result


def sectioned_to_flat(data: dict) -> dict:
    """Convert sectioned TOML dict to flat dict for OverlaySettings validation."""
    flat: dict = {}
    for key, value in data.items():
        if isinstance(value, dict) and key in _SECTION_TO_FLAT:
            # Known section - expand short names to flat names
            mapping = _SECTION_TO_FLAT[key]
            for short_name, field_value in value.items():
                flat_name = mapping.get(short_name, short_name)
                flat[flat_name] = field_value
        elif isinstance(value, dict):
            # Common or unknown section - pass through keys as-is
            flat.update(value)
        else:
            # Top-level key (flat TOML)
            flat[key] = value
    return flat
