"""
Terrain-aware altitude handling.

Elevations come from an external provider: any callable taking a list of
LatLng and returning one value per point, in order, with None for points it
could not resolve. Nothing here performs network I/O.
"""

import logging
from dataclasses import replace

from geodesy import calculate_bearing
from models import ElevationLookupError, HeadingControl

logger = logging.getLogger(__name__)

MAX_ELEVATION_BATCH = 100


def resolve_elevations(points, provider, batch_size=MAX_ELEVATION_BATCH):
    """Look up elevations for points in provider-sized batches.

    Returns a list aligned with points. Unresolved entries stay None, which is
    distinct from a real 0 m elevation.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    elevations = []
    for start in range(0, len(points), batch_size):
        batch = points[start:start + batch_size]
        answer = list(provider(batch))
        if len(answer) != len(batch):
            raise ElevationLookupError(
                f"Elevation provider returned {len(answer)} values for {len(batch)} points")
        elevations.extend(None if value is None else float(value) for value in answer)

    unresolved = sum(1 for value in elevations if value is None)
    if unresolved:
        logger.warning(f"{unresolved} of {len(points)} elevations could not be resolved")
    return elevations


def poi_with_elevation(poi, elevation):
    return replace(poi, terrain_elevation_msl=elevation)


def waypoints_with_elevations(waypoints, elevations):
    if len(waypoints) != len(elevations):
        raise ValueError("Need exactly one elevation per waypoint")
    return [replace(wp, terrain_elevation_msl=elevation)
            for wp, elevation in zip(waypoints, elevations)]


def home_elevation_from_first_waypoint(waypoints, provider=None):
    """Terrain elevation under the first waypoint, for use as the home elevation.

    Looks the point up through provider when the waypoint has no terrain
    elevation yet. None when there are no waypoints or it stays unresolved.
    """
    if not waypoints:
        return None
    elevation = waypoints[0].terrain_elevation_msl
    if elevation is None and provider is not None:
        elevation = resolve_elevations([waypoints[0].latlng], provider)[0]
    if elevation is None:
        logger.warning("Home elevation unavailable: first waypoint has no terrain elevation")
    return elevation


def waypoint_amsl(waypoint, home_elevation):
    return home_elevation + waypoint.altitude


def waypoint_agl(waypoint, home_elevation):
    """Height above the terrain under the waypoint, None when terrain is unknown."""
    if waypoint.terrain_elevation_msl is None:
        return None
    return waypoint_amsl(waypoint, home_elevation) - waypoint.terrain_elevation_msl


def adapt_to_agl(waypoints, desired_agl, home_elevation):
    """Hold a constant height above terrain.

    Returns (adapted waypoints, indexes skipped for lack of terrain data).
    Skipped waypoints keep their altitude.
    """
    adapted = []
    skipped = []
    for index, wp in enumerate(waypoints):
        if wp.terrain_elevation_msl is None:
            skipped.append(index)
            adapted.append(replace(wp))
            continue
        altitude = wp.terrain_elevation_msl + desired_agl - home_elevation
        adapted.append(replace(wp, altitude=altitude))

    if skipped:
        logger.warning(f"AGL adaptation skipped {len(skipped)} waypoint(s) without terrain elevation")
    return adapted, skipped


def adapt_to_amsl(waypoints, desired_amsl, home_elevation):
    """Hold a constant absolute altitude; terrain data is not needed."""
    return [replace(wp, altitude=desired_amsl - home_elevation) for wp in waypoints]


def effective_heading(index, waypoints, pois):
    """Heading in degrees the drone will hold at waypoints[index], or None.

    Auto heading faces the next waypoint, or continues the previous leg at
    the last one. A lone auto waypoint or a tracked POI that no longer exists
    has no heading.
    """
    wp = waypoints[index]
    if wp.heading_control == HeadingControl.FIXED:
        return wp.fixed_heading
    if wp.heading_control == HeadingControl.POI_TRACK:
        target = next((poi for poi in pois if poi.id == wp.target_poi_id), None)
        if target is None:
            return None
        return calculate_bearing(wp.latlng, target.latlng)
    if index < len(waypoints) - 1:
        return calculate_bearing(wp.latlng, waypoints[index + 1].latlng)
    if index > 0:
        return calculate_bearing(waypoints[index - 1].latlng, wp.latlng)
    return None
