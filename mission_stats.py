"""
Mission-level aggregation: distance, duration, statistics and export checks.
"""

import logging
import math
from dataclasses import asdict, is_dataclass

import pandas as pd

from geodesy import haversine_distances
from models import FlightStatistics, HeadingControl, SurveyMission

logger = logging.getLogger(__name__)

MIN_EXPORT_WAYPOINTS = 2

WAYPOINT_COLUMNS = [
    "id", "latitude", "longitude", "altitude", "hover_time", "gimbal_pitch",
    "heading_control", "fixed_heading", "camera_action", "target_poi_id",
    "terrain_elevation_msl", "waypoint_type",
]


def total_distance(waypoints):
    """Sum of great-circle legs along the waypoint order, in meters."""
    if len(waypoints) < 2:
        return 0.0
    return float(haversine_distances([wp.latlng for wp in waypoints]).sum())


def total_duration(waypoints, speed):
    """Seconds to fly the path at speed m/s plus all hover times."""
    if speed <= 0:
        speed = 1
    hover = sum(wp.hover_time for wp in waypoints)
    return total_distance(waypoints) / speed + hover


def calculate_flight_statistics(waypoints, pois, settings):
    """Totals for the mission as flown by the configured drone."""
    flight_time = total_duration(waypoints, settings.flight_speed)
    return FlightStatistics(
        total_distance=total_distance(waypoints),
        flight_time=flight_time,
        waypoint_count=len(waypoints),
        poi_count=len(pois),
        battery_count=estimate_batteries(flight_time, settings.drone_specs),
    )


def format_duration(total_seconds):
    mins = math.floor(total_seconds / 60)
    secs = math.floor(total_seconds % 60 + 0.5)
    return f"{mins} min {secs} s"


def estimate_batteries(total_seconds, drone_specs):
    battery_time = drone_specs.get("battery_minutes", 20)
    return max(1, math.ceil(total_seconds / 60 / battery_time))


def validate_parameters(altitude, speed, drone_specs):
    """Check a flight altitude and speed against the drone's limits."""
    problems = []
    max_altitude = drone_specs.get("max_altitude", 120)
    min_altitude = drone_specs.get("min_altitude", 2)
    max_speed = drone_specs.get("max_speed", 15)
    if altitude > max_altitude:
        problems.append(f"Altitude {altitude} m is above the {max_altitude} m limit.")
    if altitude < min_altitude:
        problems.append(f"Altitude {altitude} m is below the {min_altitude} m minimum.")
    if speed > max_speed:
        problems.append(f"Speed {speed} m/s is above the {max_speed} m/s limit.")
    return problems


def validate_settings(settings):
    return validate_parameters(settings.default_altitude, settings.flight_speed, settings.drone_specs)


def validate_for_export(waypoints, pois):
    """List the problems that block exporting the mission; empty when ready."""
    problems = []
    if len(waypoints) < MIN_EXPORT_WAYPOINTS:
        problems.append(f"Mission has fewer than {MIN_EXPORT_WAYPOINTS} waypoints.")

    poi_ids = {poi.id for poi in pois}
    for index, wp in enumerate(waypoints, start=1):
        if wp.heading_control != HeadingControl.POI_TRACK:
            continue
        if wp.target_poi_id is None:
            problems.append(f"Waypoint {index} tracks a POI but has no target.")
        elif wp.target_poi_id not in poi_ids:
            problems.append(f"Waypoint {index} targets an unknown POI ({wp.target_poi_id}).")

    if problems:
        logger.warning(f"Mission not ready for export: {len(problems)} problem(s)")
    return problems


def assign_ids(waypoints, start_id=1):
    """Number waypoints in place, consecutively from start_id; returns the ids."""
    ids = []
    for offset, wp in enumerate(waypoints):
        wp.id = start_id + offset
        ids.append(wp.id)
    return ids


def create_survey_mission(mission_id, name, mission_type, waypoints, parameters, polygon=None, line=None):
    if any(wp.id is None for wp in waypoints):
        raise ValueError("Waypoints need ids before they can be grouped into a mission")
    return SurveyMission(
        id=mission_id,
        name=name,
        type=mission_type,
        waypoint_ids=[wp.id for wp in waypoints],
        parameters=asdict(parameters) if is_dataclass(parameters) else dict(parameters),
        polygon=list(polygon) if polygon is not None else None,
        line=line,
    )


def waypoints_to_dataframe(waypoints):
    """Tabular view of the waypoints, one row each, in flight order."""
    rows = []
    for wp in waypoints:
        rows.append({
            "id": wp.id,
            "latitude": wp.latlng.lat,
            "longitude": wp.latlng.lng,
            "altitude": wp.altitude,
            "hover_time": wp.hover_time,
            "gimbal_pitch": wp.gimbal_pitch,
            "heading_control": wp.heading_control.value,
            "fixed_heading": wp.fixed_heading,
            "camera_action": wp.camera_action.value,
            "target_poi_id": wp.target_poi_id,
            "terrain_elevation_msl": wp.terrain_elevation_msl,
            "waypoint_type": wp.waypoint_type.value,
        })
    return pd.DataFrame(rows, columns=WAYPOINT_COLUMNS)
