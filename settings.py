"""
Flight-plan settings and their environment-driven defaults.

Values are read from ``FLIGHTPLAN_*`` environment variables, optionally
populated from a ``.env`` file, and fall back to the planner defaults below.
"""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from drone_specs import DEFAULT_DRONE, DRONE_SPECS, CameraSpec

logger = logging.getLogger(__name__)

PATH_TYPES = ("straight", "curved")
ADAPTATION_MODES = ("relative", "agl", "amsl")


@dataclass
class FlightPlanSettings:
    default_altitude: float = 50.0
    flight_speed: float = 8.0
    path_type: str = "straight"
    home_elevation_msl: float = 0.0
    desired_agl: float = 50.0
    desired_amsl: float = 100.0
    altitude_adaptation_mode: str = "relative"
    drone_model: str = DEFAULT_DRONE

    @property
    def drone_specs(self):
        return DRONE_SPECS[self.drone_model]

    @property
    def camera(self):
        return CameraSpec.for_drone(self.drone_model)


def _env_float(name, default):
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {name}={raw!r}, using {default}")
        return default


def _env_choice(name, choices, default):
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    if raw not in choices:
        logger.warning(f"Ignoring {name}={raw!r}, expected one of {list(choices)}")
        return default
    return raw


def load_settings(dotenv_path=None):
    """Build settings from the environment, loading a .env file first."""
    load_dotenv(dotenv_path)
    defaults = FlightPlanSettings()
    settings = FlightPlanSettings(
        default_altitude=_env_float("FLIGHTPLAN_DEFAULT_ALTITUDE", defaults.default_altitude),
        flight_speed=_env_float("FLIGHTPLAN_FLIGHT_SPEED", defaults.flight_speed),
        path_type=_env_choice("FLIGHTPLAN_PATH_TYPE", PATH_TYPES, defaults.path_type),
        home_elevation_msl=_env_float("FLIGHTPLAN_HOME_ELEVATION", defaults.home_elevation_msl),
        desired_agl=_env_float("FLIGHTPLAN_DESIRED_AGL", defaults.desired_agl),
        desired_amsl=_env_float("FLIGHTPLAN_DESIRED_AMSL", defaults.desired_amsl),
        altitude_adaptation_mode=_env_choice(
            "FLIGHTPLAN_ADAPTATION_MODE", ADAPTATION_MODES, defaults.altitude_adaptation_mode),
        drone_model=_env_choice("FLIGHTPLAN_DRONE_MODEL", tuple(DRONE_SPECS), defaults.drone_model),
    )
    logger.info(f"Loaded flight plan settings: {settings}")
    return settings


def configure_logging(level=logging.INFO):
    logging.basicConfig(level=level)
