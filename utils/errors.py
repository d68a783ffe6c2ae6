# Domain errors raised by the geofence evaluator and the event ledger.
# main.py maps these onto HTTP responses; nothing here knows about FastAPI.


class GeofenceDomainError(Exception):
    """Base class for local validation failures in the time clock core."""

    error_code = "bad_request"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidCoordinate(GeofenceDomainError):
    pass


class InvalidDistance(GeofenceDomainError):
    pass


class ClockOutBeforeClockIn(GeofenceDomainError):
    pass


class InvalidGeofence(GeofenceDomainError):
    pass


class GeofenceNotConfigured(GeofenceDomainError):
    error_code = "not_found"
