from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel
from sqlalchemy import DateTime
from sqlmodel import Field, Index, SQLModel

from models.geofence import GeofencePoint
from utils.datetime_helpers import format_utc_datetime


# Defines the Structure of Data for Clock In / Clock Out Calls
class PunchRequest(BaseModel):
    latitude: float | None = None
    longitude: float | None = None


# Defines the Structure of Data for a Geofence Exit Call
class ExitEventRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    latitude: float
    longitude: float
    # Computed from the geofence center when the client omits it
    distance_from_geofence: float | None = None


# Enum Limiting Event Type to the Three Ledger Kinds
class EventKind(str, Enum):
    CLOCK_IN = "CLOCK_IN"
    CLOCK_OUT = "CLOCK_OUT"
    EXIT = "EXIT"

    @property
    def code(self) -> int:
        """Numeric event_type used by the legacy SQL schema (1, 2, 3)."""
        return _KIND_CODES[self]

    @classmethod
    def from_code(cls, code: int) -> Optional["EventKind"]:
        for kind, kind_code in _KIND_CODES.items():
            if kind_code == code:
                return kind
        return None


_KIND_CODES = {EventKind.CLOCK_IN: 1, EventKind.CLOCK_OUT: 2, EventKind.EXIT: 3}


# Defines a Table "schedule" Holding the Append-Only Event Ledger
class ScheduleEvent(SQLModel, table=True):
    __tablename__ = "schedule"

    __table_args__ = (
        # Most recent clock-in / recent history lookups are always per employee
        Index("ix_schedule_employee_id_event_time", "employee_id", "event_time"),
        Index("ix_schedule_event_type", "event_type"),
    )

    # Autoincrement id doubles as insertion order for equal event_time
    id: Optional[int] = Field(default=None, primary_key=True)
    event_id: str = Field(default_factory=lambda: str(uuid4()), unique=True)
    employee_id: str
    geofence_id: Optional[str] = Field(default=None, foreign_key="geofences.geofence_id")
    event_type: EventKind
    event_time: datetime = Field(sa_type=DateTime(timezone=True))
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    duration_minutes: Optional[int] = None
    distance_from_geofence: Optional[float] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def location(self) -> Optional[GeofencePoint]:
        if self.latitude is None or self.longitude is None:
            return None
        return GeofencePoint(latitude=self.latitude, longitude=self.longitude)


# --- API Responses ---


class ScheduleEventResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    event_id: str
    event_type: EventKind
    event_time: datetime
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    duration_minutes: Optional[int] = None  # CLOCK_OUT only
    distance_from_geofence: Optional[float] = None  # EXIT only

    @field_serializer("event_time")
    def serialize_event_time(self, dt: datetime) -> str:
        """Ensure event_time is formatted as UTC with Z suffix"""
        result = format_utc_datetime(dt)
        return result if result is not None else dt.isoformat()

    @classmethod
    def from_event(cls, event: ScheduleEvent) -> "ScheduleEventResponse":
        return cls(
            event_id=event.event_id,
            event_type=event.event_type,
            event_time=event.event_time,
            latitude=event.latitude,
            longitude=event.longitude,
            duration_minutes=event.duration_minutes,
            distance_from_geofence=event.distance_from_geofence,
        )


class ScheduleResponse(BaseModel):
    events: List[ScheduleEventResponse]


class EventRecordedResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str
    event_id: str
    duration_minutes: Optional[int] = None
    distance_from_geofence: Optional[float] = None
