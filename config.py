# config.py
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Database configuration - PostgreSQL when DB_HOST is set, SQLite otherwise
DB_USER = os.getenv("DB_USER", "postgres")
DB_PASSWORD = os.getenv("DB_PASSWORD")
DB_HOST = os.getenv("DB_HOST")
DB_PORT = os.getenv("DB_PORT", "5432")
DB_NAME = os.getenv("DB_NAME", "hr_dashboard")

# Build the database URI
if DB_HOST and DB_PASSWORD:
    SQLALCHEMY_DATABASE_URI = f"postgresql+psycopg://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
else:
    # Fallback to DATABASE_URL if provided (for deployment platforms), then a local file
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///hr_dashboard.sqlite")

SQLALCHEMY_TRACK_MODIFICATIONS = False

# Connection pool: requests wait up to DB_POOL_TIMEOUT whole seconds for a
# free connection instead of opening extra ones
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "10"))
DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))


def engine_options(database_uri: str, pool_size: int = DB_POOL_SIZE, pool_timeout: int = DB_POOL_TIMEOUT) -> dict:
    """SQLAlchemy engine options for the given URI.

    In-memory SQLite runs on a single static connection, so pool sizing
    does not apply there.
    """
    if database_uri.startswith("sqlite") and (":memory:" in database_uri or database_uri.rstrip("/") == "sqlite:"):
        return {}
    return {
        "pool_size": pool_size,
        "max_overflow": 0,
        "pool_timeout": int(pool_timeout),
        "pool_pre_ping": True,
    }


# Application configuration
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-in-production")
FLASK_ENV = os.getenv("FLASK_ENV", "development")
EXPOSE_ERROR_DETAILS = os.getenv("EXPOSE_ERROR_DETAILS", str(FLASK_ENV != "production")).lower() in ("1", "true", "yes")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Uploads
UPLOADS_DIR = os.getenv("UPLOADS_DIR", "uploads")
MAX_UPLOAD_SIZE = 5 * 1024 * 1024  # 5 MiB per file
MAX_CONTENT_LENGTH = 10 * 1024 * 1024  # 10 MB per request

# Employee write policy: "reject" refuses a second active employee with the
# same name in the same department, "allow" stores it
DUPLICATE_EMPLOYEE_POLICY = os.getenv("DUPLICATE_EMPLOYEE_POLICY", "reject").lower()

# Statistics
STATS_PARALLEL_QUERIES = os.getenv("STATS_PARALLEL_QUERIES", "false").lower() in ("1", "true", "yes")

# Seeding
SEED_EMPLOYEE_COUNT = int(os.getenv("SEED_EMPLOYEE_COUNT", "100"))
SEED_ON_STARTUP = os.getenv("SEED_ON_STARTUP", "false").lower() == "true"

# CORS
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]
