"""
Core data models for the flight-plan engine.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

MIN_GIMBAL_PITCH = -90
MAX_GIMBAL_PITCH = 60


class InvalidParameterError(ValueError):
    """Raised when a generator is called with parameters it cannot honour."""


class ElevationLookupError(RuntimeError):
    """Raised when an elevation provider answers with a malformed batch."""


class HeadingControl(str, Enum):
    AUTO = "auto"
    FIXED = "fixed"
    POI_TRACK = "poi_track"


class CameraAction(str, Enum):
    NONE = "none"
    TAKE_PHOTO = "takePhoto"
    START_RECORD = "startRecord"
    STOP_RECORD = "stopRecord"


class WaypointType(str, Enum):
    GENERIC = "generic"
    ORBIT = "orbit"
    GRID = "grid"
    FACADE = "facade"


def clamp_gimbal_pitch(pitch: float) -> float:
    return max(MIN_GIMBAL_PITCH, min(MAX_GIMBAL_PITCH, pitch))


@dataclass(frozen=True)
class LatLng:
    """A geographic point in decimal degrees."""
    lat: float
    lng: float

    def __repr__(self) -> str:
        return f"LatLng({self.lat:.7f}, {self.lng:.7f})"


@dataclass
class Waypoint:
    """One step of a mission.

    Altitude is relative to the home (takeoff) elevation. Gimbal pitch is
    clamped into [-90, 60] on construction, -90 being straight down.
    """
    latlng: LatLng
    altitude: float
    heading_control: HeadingControl = HeadingControl.AUTO
    fixed_heading: float = 0.0
    gimbal_pitch: float = 0.0
    camera_action: CameraAction = CameraAction.NONE
    target_poi_id: Optional[int] = None
    waypoint_type: WaypointType = WaypointType.GENERIC
    hover_time: float = 0.0
    terrain_elevation_msl: Optional[float] = None
    id: Optional[int] = None

    def __post_init__(self):
        self.gimbal_pitch = clamp_gimbal_pitch(self.gimbal_pitch)

    def __repr__(self) -> str:
        return (f"Waypoint(id={self.id}, at={self.latlng}, alt={self.altitude:.1f}, "
                f"type={self.waypoint_type.value})")


@dataclass
class POI:
    """A point of interest the drone can orbit or track."""
    id: int
    name: str
    latlng: LatLng
    object_height_above_ground: float = 0.0
    terrain_elevation_msl: Optional[float] = None

    @property
    def altitude(self) -> float:
        """Absolute (AMSL) altitude of the object's top; unresolved terrain counts as 0."""
        return (self.terrain_elevation_msl or 0.0) + self.object_height_above_ground


@dataclass
class SurveyGridParams:
    altitude: float
    sidelap: float
    frontlap: float
    angle: float = 0.0


@dataclass
class FacadeScanParams:
    side: str
    distance: float
    min_height: float
    max_height: float
    horizontal_overlap: float
    vertical_overlap: float
    gimbal_pitch: float = 0.0


@dataclass
class OrbitParams:
    poi: POI
    radius: float
    num_points: int


@dataclass
class SurveyMission:
    """Bookkeeping record tying generated waypoints back to their generator."""
    id: int
    name: str
    type: str
    waypoint_ids: List[int]
    parameters: Dict[str, Any] = field(default_factory=dict)
    polygon: Optional[List[LatLng]] = None
    line: Optional[Dict[str, LatLng]] = None

    def __repr__(self) -> str:
        return f"SurveyMission(id={self.id}, type={self.type}, waypoints={len(self.waypoint_ids)})"


@dataclass
class FlightStatistics:
    total_distance: float
    flight_time: float
    waypoint_count: int
    poi_count: int
    battery_count: int = 1

    def get_summary(self) -> Dict[str, Any]:
        return {
            "total_distance_m": round(self.total_distance),
            "flight_time_s": self.flight_time,
            "waypoint_count": self.waypoint_count,
            "poi_count": self.poi_count,
            "battery_count": self.battery_count,
        }
