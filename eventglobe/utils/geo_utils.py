"""Geographic utility functions for the GDELT Event Globe.

Pure geographic computations — no I/O, no external calls.
"""

from __future__ import annotations

import math
from typing import List, Tuple

from config.defaults import JITTER_DIVISOR, JITTER_LAT_STEP, JITTER_LNG_STEP


def _central_angle(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    return 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def spiral_jitter(lat: float, lng: float, occurrence: int) -> Tuple[float, float]:
    """Displace the n-th marker at a coordinate along a deterministic spiral.

    lat' = lat + sin(n)·0.2·n/3 and lng' = lng + cos(n)·0.4·n/3, where n is the
    1-based occurrence count at that exact coordinate.

    Args:
        lat: Base latitude.
        lng: Base longitude.
        occurrence: 1-based occurrence count at (lat, lng).

    Returns:
        (lat', lng') tuple.
    """
    n = occurrence
    return (
        lat + math.sin(n) * JITTER_LAT_STEP * n / JITTER_DIVISOR,
        lng + math.cos(n) * JITTER_LNG_STEP * n / JITTER_DIVISOR,
    )


def great_circle_points(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    segments: int = 32,
) -> List[Tuple[float, float]]:
    """Interpolate points along the great circle between two coordinates.

    Used by flat-map renderers to draw arcs that follow the globe's curvature.

    Args:
        lat1: Start latitude.
        lon1: Start longitude.
        lat2: End latitude.
        lon2: End longitude.
        segments: Number of segments (the result has segments + 1 points).

    Returns:
        List of (lat, lon) tuples including both endpoints.
    """
    delta = _central_angle(lat1, lon1, lat2, lon2)
    sin_delta = math.sin(delta)
    # Coincident or antipodal endpoints have no unique great circle
    if segments < 1 or abs(sin_delta) < 1e-12:
        return [(lat1, lon1), (lat2, lon2)]

    phi1, lam1 = math.radians(lat1), math.radians(lon1)
    phi2, lam2 = math.radians(lat2), math.radians(lon2)

    points: List[Tuple[float, float]] = []
    for i in range(segments + 1):
        f = i / segments
        a = math.sin((1 - f) * delta) / sin_delta
        b = math.sin(f * delta) / sin_delta
        x = a * math.cos(phi1) * math.cos(lam1) + b * math.cos(phi2) * math.cos(lam2)
        y = a * math.cos(phi1) * math.sin(lam1) + b * math.cos(phi2) * math.sin(lam2)
        z = a * math.sin(phi1) + b * math.sin(phi2)
        points.append(
            (math.degrees(math.atan2(z, math.sqrt(x * x + y * y))), math.degrees(math.atan2(y, x)))
        )
    return points
