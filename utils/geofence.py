# app/utils/geofence.py

from math import atan2, cos, isfinite, radians, sin, sqrt

from pydantic import BaseModel

from models.geofence import Geofence, GeofencePoint
from utils.errors import InvalidCoordinate

EARTH_RADIUS_METERS = 6371000

# Absorbs float error for points computed to sit exactly on the radius
BOUNDARY_TOLERANCE_METERS = 1e-6


class GeofenceEvaluation(BaseModel):
    inside: bool
    distance_meters: float


def validate_coordinate(lat: float, lng: float) -> None:
    """Raise InvalidCoordinate unless lat/lng is a finite point on the globe."""
    if lat is None or lng is None:
        raise InvalidCoordinate("Latitude and longitude are both required.")
    if not isfinite(lat) or not -90.0 <= lat <= 90.0:
        raise InvalidCoordinate(f"Latitude {lat} is outside [-90, 90].")
    if not isfinite(lng) or not -180.0 <= lng <= 180.0:
        raise InvalidCoordinate(f"Longitude {lng} is outside [-180, 180].")


def haversine_dist(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    validate_coordinate(lat1, lng1)
    validate_coordinate(lat2, lng2)

    R = EARTH_RADIUS_METERS
    φ1, φ2 = radians(lat1), radians(lat2)
    Δφ = radians(lat2 - lat1)
    Δλ = radians(lng2 - lng1)

    a = sin(Δφ/2)**2 + cos(φ1) * cos(φ2) * sin(Δλ/2)**2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return R * c


def distance(a: GeofencePoint, b: GeofencePoint) -> float:
    """Great-circle distance in meters between two points."""
    return haversine_dist(a.latitude, a.longitude, b.latitude, b.longitude)


def is_within_radius(
    lat: float,
    lng: float,
    center_lat: float,
    center_lng: float,
    radius_m: float
) -> bool:

    return haversine_dist(lat, lng, center_lat, center_lng) <= radius_m + BOUNDARY_TOLERANCE_METERS


def is_inside(point: GeofencePoint, fence: Geofence) -> bool:
    # Boundary is inclusive: a point exactly on the radius is inside
    return is_within_radius(
        point.latitude,
        point.longitude,
        fence.center_lat,
        fence.center_lng,
        fence.radius_meters,
    )


def evaluate(point: GeofencePoint, fence: Geofence) -> GeofenceEvaluation:
    dist = distance(point, fence.center)
    return GeofenceEvaluation(
        inside=dist <= fence.radius_meters + BOUNDARY_TOLERANCE_METERS,
        distance_meters=dist,
    )
