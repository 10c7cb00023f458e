"""
Camera footprint and gimbal aiming.
"""

import math
from typing import NamedTuple

from drone_specs import DEFAULT_CAMERA
from models import MAX_GIMBAL_PITCH, MIN_GIMBAL_PITCH, clamp_gimbal_pitch

NEAR_VERTICAL_DISTANCE = 0.1  # meters


class Footprint(NamedTuple):
    width: float
    height: float


def calculate_footprint(altitude_agl, camera=DEFAULT_CAMERA):
    """Ground area in meters covered by one frame taken at altitude_agl."""
    if not camera.focal_length_mm:
        return Footprint(0.0, 0.0)
    width = (camera.sensor_width_mm / camera.focal_length_mm) * altitude_agl
    height = (camera.sensor_height_mm / camera.focal_length_mm) * altitude_agl
    return Footprint(width, height)


def calculate_required_gimbal_pitch(observer_amsl, target_amsl, horizontal_distance):
    """Whole-degree pitch aiming the camera from observer at target.

    Both altitudes are absolute. A target almost straight above or below
    snaps to the gimbal limits instead of going through atan2.
    """
    if horizontal_distance <= NEAR_VERTICAL_DISTANCE:
        if target_amsl < observer_amsl:
            return MIN_GIMBAL_PITCH
        if target_amsl > observer_amsl:
            return MAX_GIMBAL_PITCH
        return 0

    delta_altitude = target_amsl - observer_amsl
    pitch = math.degrees(math.atan2(delta_altitude, horizontal_distance))
    return round_half_up(clamp_gimbal_pitch(pitch))


def round_half_up(value):
    # round() is banker's rounding; -45.5 must become -45, not -46
    return int(math.floor(value + 0.5))
