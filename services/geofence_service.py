import logging
from typing import Optional

from sqlmodel import Session, select

from core.config import MIN_GEOFENCE_RADIUS_METERS
from models.geofence import Geofence, GeofencePoint
from utils.errors import GeofenceNotConfigured, InvalidGeofence
from utils.geofence import GeofenceEvaluation, evaluate, validate_coordinate

logger = logging.getLogger(__name__)


class GeofenceService:

    @staticmethod
    def get_geofence(session: Session) -> Geofence:
        """The active geofence; the proof-of-concept deployment has exactly one."""
        geofence = session.exec(
            select(Geofence).order_by(Geofence.created_at)
        ).first()

        if geofence is None:
            raise GeofenceNotConfigured("Geofence not found")
        return geofence

    @staticmethod
    def create_geofence(
        session: Session,
        request_id: str,
        name: str,
        center_lat: float,
        center_lng: float,
        radius_meters: int,
        min_radius_meters: Optional[int] = None,
    ) -> Geofence:
        validate_coordinate(center_lat, center_lng)

        min_radius = MIN_GEOFENCE_RADIUS_METERS if min_radius_meters is None else min_radius_meters
        if radius_meters <= 0:
            raise InvalidGeofence("Geofence radius must be positive.")
        if radius_meters < min_radius:
            raise InvalidGeofence(
                f"Geofence radius {radius_meters}m is below the {min_radius}m minimum."
            )

        geofence = Geofence(
            request_id=request_id,
            name=name,
            center_lat=center_lat,
            center_lng=center_lng,
            radius_meters=radius_meters,
        )
        session.add(geofence)
        session.commit()
        session.refresh(geofence)

        logger.info("Created geofence %s (%s) radius=%dm", geofence.geofence_id, name, radius_meters)
        return geofence

    @staticmethod
    def evaluate_point(session: Session, latitude: float, longitude: float) -> tuple[Geofence, GeofenceEvaluation]:
        validate_coordinate(latitude, longitude)
        geofence = GeofenceService.get_geofence(session)
        return geofence, evaluate(GeofencePoint(latitude=latitude, longitude=longitude), geofence)
