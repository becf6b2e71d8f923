"""TelemetryParser — converts one data-logger CSV row to a TelemetryFrame."""

from __future__ import annotations

import math
import re

from ghost_replay.telemetry.models import TelemetryFrame

# Data-logger column label → TelemetryFrame field.
_FIELD_MAP: tuple[tuple[str, str], ...] = (
    # column label                      frame field
    ("Elapsed time (s)",                "time"),
    ("Speed (km/h)",                    "speed"),
    ("Engine Speed (rpm)",              "rpm"),
    ("Throttle Position (%)",           "throttle"),
    ("Brake Position (%)",              "brake"),
    ("Steering Angle (Degrees)",        "steering"),
    ("Lateral acceleration (g)",        "g_force_lat"),
    ("Longitudinal acceleration (g)",   "g_force_lon"),
    ("Battery Voltage (V)",             "battery_voltage"),
    ("Coolant Temperature (°C)",        "coolant_temp"),
    ("Oil Pressure (bar)",              "oil_pressure"),
    ("Oil Temperature (°C)",            "oil_temp"),
    ("Height (m)",                      "altitude"),
    ("Gradient (%)",                    "gradient"),
    ("Fuel Level (%)",                  "fuel_level"),
    ("Brake Pressure (bar)",            "brake_pressure"),
    ("Exhaust Temperature (°C)",        "exhaust_temp"),
    ("ComboAcc (g)",                    "combo_g"),
    ("Vertical velocity (km/h)",        "vertical_velocity"),
    ("Radius of turn (m)",              "radius_of_turn"),
)

_GEAR_COLUMN = "Gear ((null))"
_LAT_COLUMN = "Latitude"
_LON_COLUMN = "Longitude"

# "35°29.340126 N" — whole degrees, decimal minutes, hemisphere.
_COORD_RE = re.compile(r"(\d+)°([\d.]+)\s*([NSEW])")


def parse_coordinate(value: object) -> float:
    """Convert a degrees/minutes/hemisphere string to signed decimal degrees.

    Plain numbers are taken as decimal degrees already.  Anything unparseable
    yields 0.0.
    """
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0.0

    text = str(value).strip()
    if not text:
        return 0.0
    match = _COORD_RE.search(text)
    if match is None:
        return _to_float(text)

    degrees = float(match.group(1))
    minutes = float(match.group(2))
    decimal = degrees + minutes / 60
    if match.group(3) in ("S", "W"):
        decimal = -decimal
    return decimal


def _to_float(value: object) -> float:
    """Return *value* as a finite float; blanks, junk and NaN/Inf become 0.0."""
    if value is None:
        return 0.0
    try:
        result = float(str(value).strip())
    except ValueError:
        return 0.0
    return result if math.isfinite(result) else 0.0


class TelemetryParser:
    """Parses a CSV row dict (keyed by column label) into a :class:`TelemetryFrame`.

    Missing or non-numeric cells become 0.  Rows without a position cannot be
    placed on track and are rejected.
    """

    def parse(self, row: dict) -> TelemetryFrame | None:
        """Return a frame for *row*, or ``None`` if latitude/longitude is missing."""
        lat_raw = row.get(_LAT_COLUMN)
        lon_raw = row.get(_LON_COLUMN)
        if not lat_raw or not lon_raw:
            return None

        kwargs: dict = {
            frame_field: _to_float(row.get(label)) for label, frame_field in _FIELD_MAP
        }
        kwargs["gear"] = int(_to_float(row.get(_GEAR_COLUMN)))
        kwargs["latitude"] = parse_coordinate(lat_raw)
        kwargs["longitude"] = parse_coordinate(lon_raw)
        return TelemetryFrame(**kwargs)
