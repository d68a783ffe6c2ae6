"""Pure event-ledger accounting for clock-in, clock-out and geofence exits.

Every function here works on an explicit history snapshot supplied by the
caller and returns a new, unsaved ``ScheduleEvent``. Persisting the result is
the caller's job (see ``services.schedule_service``). Duration lookups are
only as fresh as the snapshot: two concurrent requests for the same employee
may each see the other's write or not, and nothing here serializes them.

Transitions are intentionally not enforced. Consecutive clock-ins, or a
clock-out with no clock-in before it, are recorded as-is.
"""

import logging
from datetime import datetime, timedelta
from math import isfinite
from typing import Iterable, List, Optional

from core.config import RECENT_WINDOW_DAYS
from models.geofence import Geofence, GeofencePoint
from models.schedule_event import EventKind, ScheduleEvent
from utils.datetime_helpers import ensure_utc
from utils.errors import ClockOutBeforeClockIn, InvalidCoordinate, InvalidDistance
from utils.geofence import distance, validate_coordinate

logger = logging.getLogger(__name__)


def _new_event(
    employee_id: str,
    kind: EventKind,
    at: datetime,
    location: Optional[GeofencePoint],
    geofence_id: Optional[str],
    duration_minutes: Optional[int] = None,
    distance_from_geofence: Optional[float] = None,
) -> ScheduleEvent:
    if location is not None:
        validate_coordinate(location.latitude, location.longitude)

    return ScheduleEvent(
        employee_id=employee_id,
        geofence_id=geofence_id,
        event_type=kind,
        event_time=ensure_utc(at),
        latitude=location.latitude if location else None,
        longitude=location.longitude if location else None,
        duration_minutes=duration_minutes,
        distance_from_geofence=distance_from_geofence,
    )


def record_clock_in(
    employee_id: str,
    at: datetime,
    location: Optional[GeofencePoint] = None,
    geofence_id: Optional[str] = None,
) -> ScheduleEvent:
    return _new_event(employee_id, EventKind.CLOCK_IN, at, location, geofence_id)


def find_last_clock_in(
    employee_id: str, history: Iterable[ScheduleEvent]
) -> Optional[ScheduleEvent]:
    """Most recent CLOCK_IN for the employee.

    Equal event times resolve to whichever event appears later in ``history``,
    i.e. the one inserted last.
    """
    last: Optional[ScheduleEvent] = None
    for event in history:
        if event.employee_id != employee_id or event.event_type != EventKind.CLOCK_IN:
            continue
        if last is None or ensure_utc(event.event_time) >= ensure_utc(last.event_time):
            last = event
    return last


def record_clock_out(
    employee_id: str,
    at: datetime,
    location: Optional[GeofencePoint] = None,
    history: Iterable[ScheduleEvent] = (),
    geofence_id: Optional[str] = None,
) -> ScheduleEvent:
    """Build a CLOCK_OUT event, deriving the shift length from the last clock-in.

    ``duration_minutes`` is whole minutes rounded down. It stays None when the
    employee has no clock-in at all. A clock-out stamped before the clock-in it
    would pair with raises ClockOutBeforeClockIn rather than storing a
    negative duration.
    """
    at = ensure_utc(at)
    duration_minutes = None

    last_clock_in = find_last_clock_in(employee_id, history)
    if last_clock_in is None:
        logger.info("No prior clock-in for employee %s; duration left unset", employee_id)
    else:
        clock_in_time = ensure_utc(last_clock_in.event_time)
        if at < clock_in_time:
            raise ClockOutBeforeClockIn(
                f"Clock-out at {at.isoformat()} precedes clock-in at {clock_in_time.isoformat()}."
            )
        duration_minutes = int((at - clock_in_time) // timedelta(minutes=1))

    return _new_event(
        employee_id,
        EventKind.CLOCK_OUT,
        at,
        location,
        geofence_id,
        duration_minutes=duration_minutes,
    )


def record_exit(
    employee_id: str,
    at: datetime,
    location: GeofencePoint,
    fence: Geofence,
    supplied_distance: Optional[float] = None,
) -> ScheduleEvent:
    if location is None:
        raise InvalidCoordinate("Location is required to record a geofence exit.")
    validate_coordinate(location.latitude, location.longitude)

    if supplied_distance is None:
        distance_from_geofence = distance(location, fence.center)
    else:
        # Negative distances are rejected, never clamped
        if not isfinite(supplied_distance) or supplied_distance < 0:
            raise InvalidDistance("Distance must be positive")
        distance_from_geofence = float(supplied_distance)

    return _new_event(
        employee_id,
        EventKind.EXIT,
        at,
        location,
        fence.geofence_id,
        distance_from_geofence=distance_from_geofence,
    )


def recent_window_start(now: datetime, days: int = RECENT_WINDOW_DAYS) -> datetime:
    return ensure_utc(now) - timedelta(days=days)


def list_recent_events(
    employee_id: str, since: datetime, history: Iterable[ScheduleEvent]
) -> List[ScheduleEvent]:
    """Employee's events at or after ``since``, newest first.

    Events sharing a timestamp come out in reverse insertion order.
    """
    since = ensure_utc(since)
    indexed = [
        (position, event)
        for position, event in enumerate(history)
        if event.employee_id == employee_id and ensure_utc(event.event_time) >= since
    ]
    indexed.sort(key=lambda pair: (ensure_utc(pair[1].event_time), pair[0]), reverse=True)
    return [event for _, event in indexed]
