"""
Spherical geodesy helpers.

The Earth is treated as a sphere of radius 6,371,000 m for every distance and
bearing computation. For mission areas of a few kilometres the error against
the WGS84 ellipsoid is well below GPS accuracy.
"""

import numpy as np

from models import LatLng

R_EARTH = 6371000  # meters


def to_rad(degrees):
    return degrees * np.pi / 180


def to_deg(radians):
    return radians * 180 / np.pi


def normalize_longitude(lng):
    """Wrap a longitude into (-180, 180]."""
    wrapped = ((lng + 180) % 360) - 180
    return 180.0 if wrapped == -180 else float(wrapped)


def haversine_distance(p1, p2):
    """
    Calculate the great circle distance in meters between two points
    on the earth (specified in decimal degrees)
    """
    lat1, lon1, lat2, lon2 = map(np.radians, [p1.lat, p1.lng, p2.lat, p2.lng])

    dlon = lon2 - lon1
    dlat = lat2 - lat1
    a = np.sin(dlat / 2)**2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon / 2)**2
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return float(R_EARTH * c)


def haversine_distances(points):
    """Leg lengths in meters along an ordered sequence of points."""
    if len(points) < 2:
        return np.zeros(0)
    lats = np.radians([p.lat for p in points])
    lngs = np.radians([p.lng for p in points])

    dlat = np.diff(lats)
    dlon = np.diff(lngs)
    a = np.sin(dlat / 2)**2 + np.cos(lats[:-1]) * np.cos(lats[1:]) * np.sin(dlon / 2)**2
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return R_EARTH * c


def calculate_bearing(p1, p2):
    """Initial great-circle bearing from p1 to p2, in degrees within [0, 360).

    The direction is undefined when both points coincide; callers must guard.
    """
    lat1, lon1, lat2, lon2 = map(np.radians, [p1.lat, p1.lng, p2.lat, p2.lng])
    dlon = lon2 - lon1

    y = np.sin(dlon) * np.cos(lat2)
    x = np.cos(lat1) * np.sin(lat2) - np.sin(lat1) * np.cos(lat2) * np.cos(dlon)
    bearing = (np.degrees(np.arctan2(y, x)) + 360) % 360
    # (-tiny + 360) % 360 can round up to exactly 360.0
    return 0.0 if bearing >= 360 else float(bearing)


def destination_point(start, bearing_deg, distance_m):
    """Point reached from start after distance_m meters along bearing_deg."""
    lat1 = np.radians(start.lat)
    lon1 = np.radians(start.lng)
    theta = np.radians(bearing_deg)
    delta = distance_m / R_EARTH

    lat2 = np.arcsin(np.sin(lat1) * np.cos(delta) +
                     np.cos(lat1) * np.sin(delta) * np.cos(theta))
    lon2 = lon1 + np.arctan2(np.sin(theta) * np.sin(delta) * np.cos(lat1),
                             np.cos(delta) - np.sin(lat1) * np.sin(lat2))

    return LatLng(float(np.degrees(lat2)), normalize_longitude(float(np.degrees(lon2))))


def interpolate(p1, p2, fraction):
    """Linear interpolation in lat/lng space; adequate along a short facade line."""
    return LatLng(p1.lat + (p2.lat - p1.lat) * fraction,
                  p1.lng + (p2.lng - p1.lng) * fraction)
