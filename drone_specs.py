"""
Drone and camera specifications used by the mission generators
"""

from dataclasses import dataclass

DEFAULT_DRONE = "DJI Mini 4 Pro"

DRONE_SPECS = {
    "DJI Mini 4 Pro": {
        "max_speed": 16.0,  # m/s
        "min_altitude": 2,  # meters
        "max_altitude": 120,  # meters
        "battery_minutes": 34,
        "sensor_width_mm": 8.976,
        "sensor_height_mm": 6.716,
        "focal_length_mm": 6.88
    },
    "DJI Mini 3 Pro": {
        "max_speed": 16.0,
        "min_altitude": 2,
        "max_altitude": 120,
        "battery_minutes": 34,
        "sensor_width_mm": 8.976,
        "sensor_height_mm": 6.716,
        "focal_length_mm": 6.88
    },
    "DJI Air 3": {
        "max_speed": 19.0,
        "min_altitude": 2,
        "max_altitude": 120,
        "battery_minutes": 46,
        "sensor_width_mm": 9.6,
        "sensor_height_mm": 7.2,
        "focal_length_mm": 6.72
    },
    "DJI Mavic 3 Pro": {
        "max_speed": 21.0,
        "min_altitude": 2,
        "max_altitude": 120,
        "battery_minutes": 43,
        "sensor_width_mm": 17.3,
        "sensor_height_mm": 13.0,
        "focal_length_mm": 12.29
    }
}


@dataclass(frozen=True)
class CameraSpec:
    """Pinhole camera geometry: sensor size and focal length in millimetres."""
    sensor_width_mm: float
    sensor_height_mm: float
    focal_length_mm: float

    @classmethod
    def for_drone(cls, model):
        specs = DRONE_SPECS[model]
        return cls(
            sensor_width_mm=specs["sensor_width_mm"],
            sensor_height_mm=specs["sensor_height_mm"],
            focal_length_mm=specs["focal_length_mm"],
        )


DEFAULT_CAMERA = CameraSpec.for_drone(DEFAULT_DRONE)
