"""
Nearby discovery.

A user is "nearby" when they are online (heartbeat within the read window),
not in a blocked pair with the requester, have a location fix within the
freshness window, and that fix is within the requested radius.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Optional, Sequence

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import InvalidArgument, ServerError
from app.core.presence_config import (
    LOCATION_WINDOW_SECONDS,
    MAX_NEARBY_RESULTS,
    MAX_RADIUS_KM,
    ONLINE_WINDOW_SECONDS,
)
from app.models.location import LocationFix
from app.models.user import User
from app.services import locations, presence, visibility
from app.services.geo import haversine_km, round_half_up


@dataclass(frozen=True)
class NearbyQuery:
    lat: float
    lon: float
    radius_km: float


@dataclass(frozen=True)
class NearbyUser:
    id: str
    name: str
    profile_image_url: Optional[str]
    distance_km: float


def _parse_number(raw) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InvalidArgument("Invalid lat, lon, or radius")
    if not math.isfinite(value):
        raise InvalidArgument("Invalid lat, lon, or radius")
    return value


def parse_query(lat, lon, radius, max_radius_km: float = MAX_RADIUS_KM) -> NearbyQuery:
    """Validate raw query params. Order matters: presence, numbers, radius range."""
    if lat is None or lon is None or radius is None or "" in (lat, lon, radius):
        raise InvalidArgument("Missing required query params: lat, lon, radius")

    latitude = _parse_number(lat)
    longitude = _parse_number(lon)
    radius_km = _parse_number(radius)

    if radius_km < 0 or radius_km > max_radius_km:
        raise InvalidArgument(f"Radius must be between 0 and {max_radius_km:g} km")

    if not (-90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0):
        raise InvalidArgument("Latitude must be within [-90, 90] and longitude within [-180, 180]")

    return NearbyQuery(lat=latitude, lon=longitude, radius_km=radius_km)


def rank_candidates(
    lat: float,
    lon: float,
    radius_km: float,
    candidates: Sequence[User],
    fixes: Mapping[str, LocationFix],
    limit: int = MAX_NEARBY_RESULTS,
) -> list[NearbyUser]:
    """
    Distance-filter, round, sort and cap. Candidates without a fix are skipped.

    Ties on the rounded distance are ordered by user id so the result is
    deterministic.
    """
    in_radius: list[NearbyUser] = []

    for user in candidates:
        fix = fixes.get(user.id)
        if fix is None:
            logger.debug(f"User has no recent location | user={user.id}")
            continue

        distance = haversine_km(lat, lon, fix.latitude, fix.longitude)
        if distance > radius_km:
            continue

        in_radius.append(
            NearbyUser(
                id=user.id,
                name=user.display_name,
                profile_image_url=user.profile_image_url,
                distance_km=round_half_up(distance, 2),
            )
        )

    in_radius.sort(key=lambda u: (u.distance_km, u.id))
    return in_radius[:limit]


def find_nearby(
    db: Session,
    requester_id: str,
    query: NearbyQuery,
    now: datetime,
) -> list[NearbyUser]:
    logger.info(
        f"Nearby users request | user={requester_id} lat={query.lat} "
        f"lon={query.lon} radius_km={query.radius_km}"
    )

    try:
        online = presence.list_online_within_window(
            db, requester_id, now, ONLINE_WINDOW_SECONDS
        )
        if not online:
            logger.debug("No online users found")
            return []

        visible = visibility.filter_blocked(db, requester_id, online)
        if not visible:
            logger.debug("All online users are blocked")
            return []

        fixes = locations.latest_within_window(
            db, [u.id for u in visible], now, LOCATION_WINDOW_SECONDS
        )
    except SQLAlchemyError:
        logger.exception(f"Error loading nearby candidates | user={requester_id}")
        raise ServerError("Failed to fetch users")

    result = rank_candidates(query.lat, query.lon, query.radius_km, visible, fixes)

    logger.info(
        f"Nearby users result | online={len(online)} visible={len(visible)} "
        f"located={len(fixes)} returned={len(result)}"
    )
    return result
