from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from core import config

# Connects app to PostgreSQL database (or SQLite when DATABASE_URL says so)

required_vars_for_tcp = ["DB_HOST", "DB_NAME", "DB_USER", "DB_PASSWORD"]
required_vars_for_socket = ["DB_NAME", "DB_USER", "DB_PASSWORD", "INSTANCE_CONNECTION_NAME"]


def build_database_url() -> str:
    # An explicit DATABASE_URL wins over the individual DB_* variables
    if config.DATABASE_URL:
        return config.DATABASE_URL

    if config.INSTANCE_CONNECTION_NAME:
        missing_vars = [var for var in required_vars_for_socket if not getattr(config, var)]
        if missing_vars:
            raise ValueError(f"Missing required environment variables for Cloud SQL (socket): {', '.join(missing_vars)}")
        # Construct PostgreSQL connection URL for Cloud SQL (Unix socket)
        return f"postgresql+psycopg2://{config.DB_USER}:{config.DB_PASSWORD}@/{config.DB_NAME}?host=/cloudsql/{config.INSTANCE_CONNECTION_NAME}"

    missing_vars = [var for var in required_vars_for_tcp if not getattr(config, var)]
    if missing_vars:
        raise ValueError(f"Missing required environment variables for TCP: {', '.join(missing_vars)}")
    # Construct PostgreSQL connection URL for TCP (e.g., local development)
    return f"postgresql+psycopg2://{config.DB_USER}:{config.DB_PASSWORD}@{config.DB_HOST}:{config.DB_PORT}/{config.DB_NAME}"


DATABASE_URL = build_database_url()

# The Wire / Link That Lets Us Pass Data from App -> db
if DATABASE_URL.startswith("sqlite"):
    # One shared connection so an in-memory database survives across sessions
    engine = create_engine(
        DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    engine = create_engine(DATABASE_URL, echo=False, pool_pre_ping=True)


# Getter for this Wire, modified for FastAPI dependency injection
def get_session():
    with Session(engine) as session:
        yield session
