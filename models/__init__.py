from .geofence import Geofence, GeofencePoint, GeofenceResponse
from .schedule_event import EventKind, ExitEventRequest, PunchRequest, ScheduleEvent
