from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from core.deps import get_current_user
from db.session import get_session
from models.schedule_event import (
    EventRecordedResponse,
    ExitEventRequest,
    PunchRequest,
    ScheduleEventResponse,
    ScheduleResponse,
)
from services.schedule_service import ScheduleService

# Defines API Endpoints
router = APIRouter()


# Clock In Endpoint
@router.post(
    "/clock-in",
    response_model=EventRecordedResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def clock_in(
    data: PunchRequest,
    session: Session = Depends(get_session),
    user: dict = Depends(get_current_user),
):
    event = ScheduleService.clock_in(
        employee_id=user["uid"],
        latitude=data.latitude,
        longitude=data.longitude,
        session=session,
    )
    return EventRecordedResponse(message="Clock-in recorded", event_id=event.event_id)


# Clock Out Endpoint
@router.post(
    "/clock-out",
    response_model=EventRecordedResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def clock_out(
    data: PunchRequest,
    session: Session = Depends(get_session),
    user: dict = Depends(get_current_user),
):
    event = ScheduleService.clock_out(
        employee_id=user["uid"],
        latitude=data.latitude,
        longitude=data.longitude,
        session=session,
    )
    return EventRecordedResponse(
        message="Clock-out recorded",
        event_id=event.event_id,
        duration_minutes=event.duration_minutes,
    )


# Geofence Exit Endpoint (sent by the app while the employee is clocked in)
@router.post(
    "/exit",
    response_model=EventRecordedResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def record_exit(
    data: ExitEventRequest,
    session: Session = Depends(get_session),
    user: dict = Depends(get_current_user),
):
    event = ScheduleService.record_exit(
        employee_id=user["uid"],
        latitude=data.latitude,
        longitude=data.longitude,
        distance_from_geofence=data.distance_from_geofence,
        session=session,
    )
    return EventRecordedResponse(
        message="Exit recorded",
        event_id=event.event_id,
        distance_from_geofence=event.distance_from_geofence,
    )


# Get Last 7 Days Of Events, Newest First
@router.get("", response_model=ScheduleResponse)
def get_schedule(
    session: Session = Depends(get_session),
    user: dict = Depends(get_current_user),
):
    events = ScheduleService.get_recent_schedule(user["uid"], session)
    return ScheduleResponse(events=[ScheduleEventResponse.from_event(e) for e in events])
