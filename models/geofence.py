from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlmodel import Field, SQLModel


# Immutable Lat/Lng Pair Reported By The Mobile Client
class GeofencePoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float


# Circular Geofence Employees Clock In/Out Against
class Geofence(SQLModel, table=True):
    __tablename__ = "geofences"

    geofence_id: str = Field(
        default_factory=lambda: str(uuid4()),
        primary_key=True,
        description="Unique geofence identifier",
    )
    request_id: str = Field(
        unique=True, description="Identifier registered with the mobile geofencing API"
    )
    name: str = Field(..., description="Human-friendly geofence name")
    center_lat: float = Field(..., description="Latitude of geofence center")
    center_lng: float = Field(..., description="Longitude of geofence center")
    radius_meters: int = Field(..., description="Geofence radius in meters")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def center(self) -> GeofencePoint:
        return GeofencePoint(latitude=self.center_lat, longitude=self.center_lng)


# --- API Payloads ---


class GeofenceResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    geofence_id: str
    request_id: str
    name: str
    latitude: float
    longitude: float
    radius: int

    @classmethod
    def from_geofence(cls, fence: Geofence) -> "GeofenceResponse":
        return cls(
            geofence_id=fence.geofence_id,
            request_id=fence.request_id,
            name=fence.name,
            latitude=fence.center_lat,
            longitude=fence.center_lng,
            radius=fence.radius_meters,
        )


class EvaluateRequest(BaseModel):
    latitude: float
    longitude: float


class EvaluateResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    geofence_id: str
    inside: bool
    distance_meters: float
