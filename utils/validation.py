"""
Input validation utilities for the IPMA District Safety service
"""

import re
import math
from typing import Optional, Tuple
import logging

from constants import (
    ERROR_INVALID_COORDINATES,
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
)

logger = logging.getLogger(__name__)

# Warning area codes are short alphanumeric codes such as "LSB"
AREA_ID_PATTERN = re.compile(r"^[A-Za-z0-9]{2,10}$")

# Forecast ids are numeric, except Vila Real's "VRL1171400"
FORECAST_AREA_ID_PATTERN = re.compile(r"^[A-Za-z0-9]{1,20}$")


def parse_coordinate(value) -> Optional[float]:
    """Convert a raw coordinate to a finite float, or None"""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (ValueError, TypeError):
        return None
    if not math.isfinite(number):
        return None
    return number


def validate_coordinates(lat, lon) -> Tuple[bool, str]:
    """Validate a latitude/longitude pair"""
    lat_value = parse_coordinate(lat)
    lon_value = parse_coordinate(lon)

    if lat_value is None or lon_value is None:
        return False, ERROR_INVALID_COORDINATES

    if not MIN_LATITUDE <= lat_value <= MAX_LATITUDE:
        return False, f"Latitude out of range: {lat_value}"

    if not MIN_LONGITUDE <= lon_value <= MAX_LONGITUDE:
        return False, f"Longitude out of range: {lon_value}"

    return True, "Valid"


def validate_area_id(area_id) -> bool:
    """Validate a warning area code"""
    if not area_id or not isinstance(area_id, str):
        return False
    return bool(AREA_ID_PATTERN.match(area_id.strip()))


def validate_forecast_area_id(forecast_area_id) -> bool:
    """Validate a forecast area identifier"""
    if not forecast_area_id or not isinstance(forecast_area_id, str):
        return False
    return bool(FORECAST_AREA_ID_PATTERN.match(forecast_area_id.strip()))


def validate_location_payload(data) -> Tuple[bool, str]:
    """Validate a pushed location fix"""
    if not isinstance(data, dict):
        return False, "Invalid request data format"

    return validate_coordinates(data.get("latitude"), data.get("longitude"))


def validate_location_error_payload(data) -> Tuple[bool, str]:
    """Validate a pushed location-provider error"""
    if not isinstance(data, dict):
        return False, "Invalid request data format"

    message = data.get("errorMessage")
    if not message or not isinstance(message, str):
        return False, "errorMessage is required"

    code = data.get("errorCode")
    if code is not None and (isinstance(code, bool) or not isinstance(code, int)):
        return False, f"Invalid errorCode: {code}"

    return True, "Valid"
