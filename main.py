import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import SQLModel
from starlette.exceptions import HTTPException as StarletteHTTPException

import models.geofence
import models.schedule_event  # Ensure these models are known by SQLModel for table creation
from api.employee_routes import router as employee_router
from api.geofence_routes import router as geofence_router
from api.schedule_routes import router as schedule_router
from core import config
from db.session import engine
from utils.errors import GeofenceDomainError

# This file is the control center of the whole application

# Configure logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

# Construct the list of allowed origins
allowed_origins_list = [
    config.DEV_DOMAIN,
    config.PRODUCTION_DOMAIN,
    "http://localhost:3000",
    "http://127.0.0.1:5173",
]

# Remove any None values and duplicates
allowed_origins_list = list(set([origin for origin in allowed_origins_list if origin]))

logger.info("CORS: Allowing origins: %s", allowed_origins_list)

_ERROR_CODES = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
}


# When We Start, Create the DB Tables if they don't exist
@asynccontextmanager
async def lifespan(app: FastAPI):

    SQLModel.metadata.create_all(engine)

    yield


# Starts Fast API Up; Init
app = FastAPI(title="GeoFence Time Clock", lifespan=lifespan)

# Allow requests from the web dashboard
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Domain validation failures become {"error", "message"} bodies
@app.exception_handler(GeofenceDomainError)
async def domain_error_handler(request: Request, exc: GeofenceDomainError):
    status_code = 404 if exc.error_code == "not_found" else 400
    logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.error_code, "message": exc.message},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": _ERROR_CODES.get(exc.status_code, "server_error"), "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "bad_request", "message": str(exc.errors())},
    )


@app.get("/health")
def health():
    return {"status": "ok"}


# Connects Routes (clock-in / out, geofence, employee profile) to main app
app.include_router(employee_router, prefix="/api", tags=["Employee"])
app.include_router(geofence_router, prefix="/api", tags=["Geofence"])
app.include_router(schedule_router, prefix="/api/schedule", tags=["Schedule"])
