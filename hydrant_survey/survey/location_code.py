"""Compact location fingerprint for captured coordinates.

This is not an Open Location Code. It scales both axes, XORs them and keeps
six hex digits, so distinct coordinates can collide. The arithmetic must stay
exactly as is: previously issued codes were computed the same way.
"""

from __future__ import annotations

import math

from hydrant_survey.survey.models import Coordinate

LATITUDE_MAX = 90
LONGITUDE_MAX = 180
BOUNDARY_EPSILON = 1e-8
GRID_FACTOR = 8000
SCALE_CONSTANT = 3.14159


def _clamp(value: float, limit: float) -> float:
    return min(max(value, -limit), limit)


def encode(coordinate: Coordinate) -> str:
    lat = _clamp(coordinate.latitude, LATITUDE_MAX)
    lng = _clamp(coordinate.longitude, LONGITUDE_MAX)

    if lat == LATITUDE_MAX:
        lat -= BOUNDARY_EPSILON
    if lng == LONGITUDE_MAX:
        lng -= BOUNDARY_EPSILON

    lat += LATITUDE_MAX
    lng += LONGITUDE_MAX

    lat_val = math.floor(lat * GRID_FACTOR * SCALE_CONSTANT)
    lng_val = math.floor(lng * GRID_FACTOR * SCALE_CONSTANT)

    combined = format(lat_val ^ lng_val, "08X")
    segment1 = combined[:4]
    segment2 = combined[4:8]
    return f"{segment1}+{segment2[:2]}"


def compose_display_code(code: str, area_label: str, locality: str, region: str, country: str) -> str:
    return f"{code}, {area_label}, {locality}, {region}, {country}"
