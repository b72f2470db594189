"""
Great-circle helpers for the nearby-restaurants search.

The public API is latitude first ("lat,lng" path values, named ``lat`` and
``lng`` query params). Stored points are GeoJSON, longitude first. The swap
happens only in ``center_sphere_filter``.
"""
import math
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from core.exceptions import BadRequestError

EARTH_RADIUS_KM = 6378.1


def _parse_number(raw: Any, label: str) -> float:
    try:
        value = float(str(raw).strip())
    except (TypeError, ValueError):
        raise BadRequestError(f"{label} doit être un nombre")
    if math.isnan(value) or math.isinf(value):
        raise BadRequestError(f"{label} doit être un nombre")
    return value


def parse_latitude(raw: Any) -> float:
    lat = _parse_number(raw, "La latitude")
    if not -90 <= lat <= 90:
        raise BadRequestError("La latitude doit être comprise entre -90 et 90")
    return lat


def parse_longitude(raw: Any) -> float:
    lng = _parse_number(raw, "La longitude")
    if not -180 <= lng <= 180:
        raise BadRequestError("La longitude doit être comprise entre -180 et 180")
    return lng


def parse_distance(raw: Any) -> float:
    distance = _parse_number(raw, "La distance")
    if distance < 0:
        raise BadRequestError("La distance doit être positive")
    return distance


def parse_coordinate_pair(raw: str) -> Tuple[float, float]:
    """Parse a ``"lat,lng"`` path value into ``(lat, lng)``."""
    parts = str(raw).split(",")
    if len(parts) != 2:
        raise BadRequestError("Les coordonnées doivent être au format 'latitude,longitude'")
    return parse_latitude(parts[0]), parse_longitude(parts[1])


def km_to_radians(radius_km: float) -> float:
    return radius_km / EARTH_RADIUS_KM


def center_sphere_filter(lat: float, lng: float, radius_km: float, field: str = "location") -> Dict[str, Any]:
    return {
        field: {
            "$geoWithin": {
                "$centerSphere": [[lng, lat], km_to_radians(radius_km)]
            }
        }
    }


def proximity_from_params(params: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Build the ``$centerSphere`` filter from ``lat``, ``lng`` and
    ``maxDistance`` (km). Returns None unless all three are given.
    """
    lat, lng, max_distance = params.get("lat"), params.get("lng"), params.get("maxDistance")
    if lat is None or lng is None or max_distance is None:
        return None
    return center_sphere_filter(parse_latitude(lat), parse_longitude(lng), parse_distance(max_distance))


def distance_km(lat: float, lng: float, point: Sequence[float]) -> float:
    """Haversine distance from (lat, lng) to a GeoJSON ``[lng, lat]`` point, same sphere as the store."""
    p_lng, p_lat = point[0], point[1]
    phi1, phi2 = math.radians(lat), math.radians(p_lat)
    d_phi = math.radians(p_lat - lat)
    d_lambda = math.radians(p_lng - lng)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(a)))
