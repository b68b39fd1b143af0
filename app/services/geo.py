"""
Coordinate helpers: privacy truncation and great-circle distance.
"""

import math
from decimal import Decimal, ROUND_DOWN

from app.core.presence_config import COORDINATE_PRECISION, EARTH_RADIUS_KM

_QUANTUM = Decimal(1).scaleb(-COORDINATE_PRECISION)  # 0.0001


def truncate_coordinate(coord: float) -> float:
    """
    Truncate toward zero to 4 decimal places (~11 m).

    Works on the shortest decimal repr of the float, so values that already
    have 4 decimals come back unchanged instead of losing a digit to binary
    representation error (0.1234 * 10000 == 1233.9999...).
    """
    if not math.isfinite(coord):
        return coord
    truncated = Decimal(repr(coord)).quantize(_QUANTUM, rounding=ROUND_DOWN)
    return float(truncated)


def is_valid_coordinate(lat: float, lon: float) -> bool:
    return (
        math.isfinite(lat)
        and math.isfinite(lon)
        and -90.0 <= lat <= 90.0
        and -180.0 <= lon <= 180.0
    )


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = (
        math.sin(dphi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def round_half_up(value: float, places: int = 2) -> float:
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor
