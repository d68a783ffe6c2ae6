import os

from dotenv import load_dotenv

# Load environment variables from .env file, if it exists
load_dotenv()

# Database
DATABASE_URL = os.getenv("DATABASE_URL")
DB_HOST = os.getenv("DB_HOST")
DB_PORT = os.getenv("DB_PORT", "5432")  # Default PostgreSQL port
DB_NAME = os.getenv("DB_NAME")
DB_USER = os.getenv("DB_USER")
DB_PASSWORD = os.getenv("DB_PASSWORD")
INSTANCE_CONNECTION_NAME = os.getenv("INSTANCE_CONNECTION_NAME")  # For Cloud SQL Proxy

# Geofence / schedule rules
MIN_GEOFENCE_RADIUS_METERS = int(os.getenv("MIN_GEOFENCE_RADIUS_METERS", "100"))
RECENT_WINDOW_DAYS = int(os.getenv("RECENT_WINDOW_DAYS", "7"))

# CORS
DEV_DOMAIN = os.getenv("DEV_DOMAIN", "http://localhost:5173")
PRODUCTION_DOMAIN = os.getenv("PRODUCTION_DOMAIN")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
