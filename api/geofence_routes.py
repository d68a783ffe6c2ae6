from fastapi import APIRouter, Depends
from sqlmodel import Session

from core.deps import get_current_user
from db.session import get_session
from models.geofence import EvaluateRequest, EvaluateResponse, GeofenceResponse
from services.geofence_service import GeofenceService

router = APIRouter()


@router.get("/geofence", response_model=GeofenceResponse)
def get_geofence(
    session: Session = Depends(get_session),
    user: dict = Depends(get_current_user),
):
    """
    Retrieve the geofence (center and radius) the mobile app registers for monitoring.
    """
    return GeofenceResponse.from_geofence(GeofenceService.get_geofence(session))


# Point-In-Fence Check For The Reported Location
@router.post("/geofence/evaluate", response_model=EvaluateResponse)
def evaluate_location(
    data: EvaluateRequest,
    session: Session = Depends(get_session),
    user: dict = Depends(get_current_user),
):
    geofence, result = GeofenceService.evaluate_point(session, data.latitude, data.longitude)
    return EvaluateResponse(
        geofence_id=geofence.geofence_id,
        inside=result.inside,
        distance_meters=result.distance_meters,
    )
