from __future__ import annotations

import math

from camp_engine.models import Camp, GeoPoint

EARTH_RADIUS_KM = 6371.0


def great_circle_km(start: GeoPoint, end: GeoPoint) -> float:
    start_lat = math.radians(start.lat)
    end_lat = math.radians(end.lat)
    delta_lat = math.radians(end.lat - start.lat)
    delta_lng = math.radians(end.lng - start.lng)

    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(start_lat) * math.cos(end_lat) * math.sin(delta_lng / 2) ** 2
    )
    # Rounding can push a just past 1 for antipodal points.
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def format_distance_km(distance_km: float) -> str:
    return f"{distance_km:.2f} km"


def haversine_distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> str:
    return format_distance_km(great_circle_km(GeoPoint(lat=lat1, lng=lon1), GeoPoint(lat=lat2, lng=lon2)))


def distance_to_camp(origin: GeoPoint, camp: Camp) -> str | None:
    target = camp.coordinates
    if target is None:
        return None
    return format_distance_km(great_circle_km(origin, target))
