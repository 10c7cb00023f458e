"""
Catmull-Rom smoothing of the drawn flight path.

Only the line drawn between waypoints changes; waypoint metadata is never
touched.
"""

import numpy as np

from models import LatLng

SEGMENTS_PER_SPAN = 15


def _catmull_rom_weights(segments):
    t = np.arange(1, segments + 1) / segments
    t2 = t * t
    t3 = t2 * t
    return np.column_stack([
        -0.5 * t3 + t2 - 0.5 * t,
        1.5 * t3 - 2.5 * t2 + 1,
        -1.5 * t3 + 2.0 * t2 + 0.5 * t,
        0.5 * t3 - 0.5 * t2,
    ])


def create_smooth_path(points, segments=SEGMENTS_PER_SPAN):
    """Interpolate a Catmull-Rom spline through points.

    The end points act as their own outer neighbours. The first point is kept
    and every span contributes `segments` points, the last of which is the
    span's end point.
    """
    if len(points) < 2:
        return points
    if len(points) == 2:
        return [points[0], points[1]]

    coords = np.array([[p.lat, p.lng] for p in points])
    padded = np.vstack([coords[:1], coords, coords[-1:]])
    weights = _catmull_rom_weights(segments)

    smoothed = [points[0]]
    for i in range(len(points) - 1):
        span = weights @ padded[i:i + 4]
        smoothed.extend(LatLng(float(lat), float(lng)) for lat, lng in span)
    return smoothed


def display_path(waypoints, path_type="straight"):
    """The polyline a map would draw for the mission."""
    if len(waypoints) < 2:
        return []
    points = [wp.latlng for wp in waypoints]
    if path_type == "curved":
        return create_smooth_path(points)
    return points
