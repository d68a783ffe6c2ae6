import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlmodel import Session, select

from models.geofence import GeofencePoint
from models.schedule_event import EventKind, ScheduleEvent
from services import event_ledger
from services.geofence_service import GeofenceService
from utils.errors import InvalidCoordinate
from utils.geofence import validate_coordinate

logger = logging.getLogger(__name__)


def _optional_point(latitude: Optional[float], longitude: Optional[float]) -> Optional[GeofencePoint]:
    if latitude is None and longitude is None:
        return None
    if latitude is None or longitude is None:
        raise InvalidCoordinate("Latitude and longitude must be supplied together.")
    validate_coordinate(latitude, longitude)
    return GeofencePoint(latitude=latitude, longitude=longitude)


class ScheduleService:
    """Loads history snapshots, runs the ledger, and appends the result.

    Duration uses whatever clock-in was committed when the history was read;
    concurrent requests for one employee are not serialized.
    """

    @staticmethod
    def _save(session: Session, event: ScheduleEvent) -> ScheduleEvent:
        session.add(event)
        session.commit()
        session.refresh(event)
        logger.info(
            "Recorded %s %s for employee %s", event.event_type.value, event.event_id, event.employee_id
        )
        return event

    @staticmethod
    def clock_in(
        employee_id: str,
        latitude: Optional[float],
        longitude: Optional[float],
        session: Session,
        at: Optional[datetime] = None,
    ) -> ScheduleEvent:
        location = _optional_point(latitude, longitude)
        geofence = GeofenceService.get_geofence(session)

        event = event_ledger.record_clock_in(
            employee_id,
            at or datetime.now(timezone.utc),
            location,
            geofence_id=geofence.geofence_id,
        )
        return ScheduleService._save(session, event)

    @staticmethod
    def clock_out(
        employee_id: str,
        latitude: Optional[float],
        longitude: Optional[float],
        session: Session,
        at: Optional[datetime] = None,
    ) -> ScheduleEvent:
        location = _optional_point(latitude, longitude)
        geofence = GeofenceService.get_geofence(session)

        # Only the latest clock-in matters; ascending id keeps insertion order for ties
        last_clock_in = session.exec(
            select(ScheduleEvent)
            .where(ScheduleEvent.employee_id == employee_id)
            .where(ScheduleEvent.event_type == EventKind.CLOCK_IN)
            .order_by(ScheduleEvent.event_time.desc(), ScheduleEvent.id.desc())
            .limit(1)
        ).all()

        event = event_ledger.record_clock_out(
            employee_id,
            at or datetime.now(timezone.utc),
            location,
            history=last_clock_in,
            geofence_id=geofence.geofence_id,
        )
        return ScheduleService._save(session, event)

    @staticmethod
    def record_exit(
        employee_id: str,
        latitude: float,
        longitude: float,
        distance_from_geofence: Optional[float],
        session: Session,
        at: Optional[datetime] = None,
    ) -> ScheduleEvent:
        location = _optional_point(latitude, longitude)
        geofence = GeofenceService.get_geofence(session)

        event = event_ledger.record_exit(
            employee_id,
            at or datetime.now(timezone.utc),
            location,
            geofence,
            supplied_distance=distance_from_geofence,
        )
        return ScheduleService._save(session, event)

    @staticmethod
    def get_recent_schedule(
        employee_id: str,
        session: Session,
        now: Optional[datetime] = None,
    ) -> List[ScheduleEvent]:
        since = event_ledger.recent_window_start(now or datetime.now(timezone.utc))

        history = session.exec(
            select(ScheduleEvent)
            .where(ScheduleEvent.employee_id == employee_id)
            .where(ScheduleEvent.event_time >= since)
            .order_by(ScheduleEvent.id)
        ).all()

        return event_ledger.list_recent_events(employee_id, since, history)
