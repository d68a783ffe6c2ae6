# Insert the Proof-of-Concept Geofence
import logging

from sqlmodel import Session, SQLModel, select

import models.schedule_event  # Ensure the schedule table exists alongside geofences
from db.session import engine
from models.geofence import Geofence
from services.geofence_service import GeofenceService

logger = logging.getLogger(__name__)

MEDIA_PA_REQUEST_ID = "media-pa-office"


def seed_geofence(session: Session) -> Geofence:
    # Check if the geofence already exists to avoid duplicates
    existing = session.exec(
        select(Geofence).where(Geofence.request_id == MEDIA_PA_REQUEST_ID)
    ).first()
    if existing:
        logger.info("Geofence %s already exists", MEDIA_PA_REQUEST_ID)
        return existing

    return GeofenceService.create_geofence(
        session,
        request_id=MEDIA_PA_REQUEST_ID,
        name="Media, PA Office",
        center_lat=39.9187,
        center_lng=-75.3876,
        radius_meters=100,  # 100 m radius
    )


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        seed_geofence(session)
