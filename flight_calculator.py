import logging
import math

from drone_specs import DEFAULT_CAMERA
from geodesy import (
    R_EARTH,
    calculate_bearing,
    destination_point,
    haversine_distance,
    interpolate,
    to_rad,
)
from models import (
    CameraAction,
    HeadingControl,
    InvalidParameterError,
    LatLng,
    Waypoint,
    WaypointType,
)
from photogrammetry import calculate_footprint, calculate_required_gimbal_pitch, round_half_up

logger = logging.getLogger(__name__)

MIN_POLYGON_POINTS = 3
MIN_ORBIT_POINTS = 3
FACADE_SIDES = ("left", "right")


def rotate_lat_lng(point, center, angle_rad):
    """Rotate point about center in a local equirectangular frame.

    The longitude offset is scaled by cos(center latitude) before rotating and
    unscaled afterwards, which keeps angles true for areas up to a few km.
    """
    cos_angle = math.cos(angle_rad)
    sin_angle = math.sin(angle_rad)
    lat_scale = math.cos(to_rad(center.lat))
    d_lng_scaled = (point.lng - center.lng) * lat_scale
    d_lat = point.lat - center.lat

    rotated_d_lng_scaled = d_lng_scaled * cos_angle - d_lat * sin_angle
    rotated_d_lat = d_lng_scaled * sin_angle + d_lat * cos_angle

    return LatLng(center.lat + rotated_d_lat, center.lng + rotated_d_lng_scaled / lat_scale)


def is_point_in_polygon(point, vertices):
    """Even-odd ray casting test with lng as x and lat as y."""
    if len(vertices) < MIN_POLYGON_POINTS:
        return False
    inside = False
    x, y = point.lng, point.lat
    j = len(vertices) - 1
    for i in range(len(vertices)):
        xi, yi = vertices[i].lng, vertices[i].lat
        xj, yj = vertices[j].lng, vertices[j].lat
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside


def _scan_line(lng, min_lat, max_lat, step, ascending):
    points = []
    if ascending:
        lat = min_lat
        while lat <= max_lat:
            points.append(LatLng(lat, lng))
            lat += step
    else:
        lat = max_lat
        while lat >= min_lat:
            points.append(LatLng(lat, lng))
            lat -= step
    return points


def generate_survey_grid(polygon, params, camera=DEFAULT_CAMERA):
    """Lay a lawnmower pattern of nadir photo waypoints over a polygon.

    Scan lines run along the grid angle; consecutive lines alternate
    direction. Returns an empty list when nothing can be generated.
    """
    if not polygon or len(polygon) < MIN_POLYGON_POINTS:
        logger.warning(f"Survey polygon needs at least {MIN_POLYGON_POINTS} points")
        return []

    footprint = calculate_footprint(params.altitude, camera)
    if footprint.width == 0 or footprint.height == 0:
        logger.warning(f"Degenerate camera footprint at {params.altitude} m")
        return []

    line_spacing = footprint.width * (1 - params.sidelap / 100)
    photo_spacing = footprint.height * (1 - params.frontlap / 100)
    if line_spacing <= 0 or photo_spacing <= 0:
        logger.warning(f"Overlap leaves no spacing (sidelap={params.sidelap}, frontlap={params.frontlap})")
        return []

    center = polygon[0]
    angle_rad = to_rad(-params.angle)
    rotated = [rotate_lat_lng(p, center, -angle_rad) for p in polygon]

    min_lat = min(p.lat for p in rotated)
    max_lat = max(p.lat for p in rotated)
    min_lng = min(p.lng for p in rotated)
    max_lng = max(p.lng for p in rotated)

    line_spacing_lng = math.degrees(line_spacing / (R_EARTH * math.cos(to_rad(center.lat))))
    photo_spacing_lat = math.degrees(photo_spacing / R_EARTH)
    fixed_heading = round_half_up(params.angle)

    waypoints = []
    seen = set()
    current_lng = min_lng
    ascending = True
    while current_lng <= max_lng + line_spacing_lng * 0.5:
        for rotated_point in _scan_line(current_lng, min_lat, max_lat, photo_spacing_lat, ascending):
            point = rotate_lat_lng(rotated_point, center, angle_rad)
            if not is_point_in_polygon(point, polygon):
                continue
            key = f"{point.lat:.7f},{point.lng:.7f}"
            if key in seen:
                continue
            seen.add(key)
            waypoints.append(Waypoint(
                latlng=point,
                altitude=params.altitude,
                heading_control=HeadingControl.FIXED,
                fixed_heading=fixed_heading,
                gimbal_pitch=-90,
                camera_action=CameraAction.TAKE_PHOTO,
                waypoint_type=WaypointType.GRID,
            ))
        current_lng += line_spacing_lng
        ascending = not ascending

    logger.info(f"Generated {len(waypoints)} survey grid waypoints "
                f"(line spacing {line_spacing:.1f} m, photo spacing {photo_spacing:.1f} m)")
    return waypoints


def generate_facade_scan(line_start, line_end, params, camera=DEFAULT_CAMERA):
    """Raster photo positions at a fixed standoff in front of a facade line.

    Rows go bottom to top and alternate direction. The side is taken relative
    to travelling from line_start to line_end.
    """
    if params.side not in FACADE_SIDES:
        raise InvalidParameterError(f"Facade side must be one of {FACADE_SIDES}, got {params.side!r}")

    facade_length = haversine_distance(line_start, line_end)
    if facade_length <= 0:
        logger.warning("Facade line has no length")
        return []

    facade_bearing = calculate_bearing(line_start, line_end)
    if params.side == "left":
        offset_bearing = (facade_bearing - 90) % 360
        drone_heading = (facade_bearing + 90) % 360
    else:
        offset_bearing = (facade_bearing + 90) % 360
        drone_heading = (facade_bearing - 90) % 360

    footprint = calculate_footprint(params.distance, camera)
    horizontal_step = footprint.width * (1 - params.horizontal_overlap / 100)
    vertical_step = footprint.height * (1 - params.vertical_overlap / 100)
    if horizontal_step <= 0:
        logger.warning(f"No horizontal spacing at {params.distance} m standoff")
        return []

    num_samples = max(1, math.floor(facade_length / horizontal_step) + 1)
    if params.max_height <= params.min_height:
        num_rows = 1
    elif vertical_step <= 0:
        logger.warning(f"No vertical spacing at {params.distance} m standoff")
        return []
    else:
        num_rows = max(1, math.floor((params.max_height - params.min_height) / vertical_step) + 1)

    flight_positions = []
    for index in range(num_samples):
        fraction = 0.0 if num_samples == 1 else min(1.0, index * horizontal_step / facade_length)
        on_facade = interpolate(line_start, line_end, fraction)
        flight_positions.append(destination_point(on_facade, offset_bearing, params.distance))

    waypoints = []
    for row in range(num_rows):
        height = min(params.max_height, params.min_height + row * vertical_step)
        row_positions = flight_positions if row % 2 == 0 else flight_positions[::-1]
        for position in row_positions:
            waypoints.append(Waypoint(
                latlng=position,
                altitude=height,
                heading_control=HeadingControl.FIXED,
                fixed_heading=drone_heading,
                gimbal_pitch=params.gimbal_pitch,
                camera_action=CameraAction.TAKE_PHOTO,
                waypoint_type=WaypointType.FACADE,
            ))

    logger.info(f"Generated {len(waypoints)} facade waypoints in {num_rows} rows of {num_samples}")
    return waypoints


def generate_orbit(params, flight_altitude, home_elevation=0.0):
    """Evenly spaced waypoints on a circle around a POI, all tracking it.

    Every point is equidistant from the POI so they share one gimbal pitch,
    solved from the absolute flight altitude against the POI's altitude.
    """
    poi, radius, num_points = params.poi, params.radius, params.num_points
    if num_points < MIN_ORBIT_POINTS:
        raise InvalidParameterError(f"Orbit needs at least {MIN_ORBIT_POINTS} points, got {num_points}")
    if radius <= 0:
        raise InvalidParameterError(f"Orbit radius must be positive, got {radius}")

    gimbal_pitch = calculate_required_gimbal_pitch(home_elevation + flight_altitude, poi.altitude, radius)

    waypoints = []
    for i in range(num_points):
        angle = (i / num_points) * 2 * math.pi
        waypoints.append(Waypoint(
            latlng=destination_point(poi.latlng, math.degrees(angle), radius),
            altitude=flight_altitude,
            heading_control=HeadingControl.POI_TRACK,
            gimbal_pitch=gimbal_pitch,
            target_poi_id=poi.id,
            waypoint_type=WaypointType.ORBIT,
        ))

    logger.info(f"Generated {num_points} orbit waypoints around POI {poi.id} "
                f"at {radius:.1f} m, gimbal {gimbal_pitch} deg")
    return waypoints
