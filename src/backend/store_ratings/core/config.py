# src/backend/store_ratings/core/config.py
import os
from dotenv import load_dotenv

# Load .env from the project root (the folder you run uvicorn from)
load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    APP_NAME: str = os.getenv("APP_NAME", "Store Ratings API")
    APP_VERSION: str = os.getenv("APP_VERSION", "1.0.0")

    # sqlite for local work, postgresql+asyncpg://... in deployment
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./store_ratings.db")
    SQL_ECHO: bool = _flag("SQL_ECHO", "false")
    CREATE_TABLES: bool = _flag("CREATE_TABLES", "true")

    # Auth/JWT. No default secret: a missing one is a configuration fault.
    JWT_SECRET_KEY: str | None = os.getenv("JWT_SECRET_KEY") or None
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # Store images
    UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", "storage/uploads")
    MAX_IMAGE_BYTES: int = int(os.getenv("MAX_IMAGE_BYTES", str(5 * 1024 * 1024)))

    CORS_ORIGINS: list[str] = [
        o.strip()
        for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
        if o.strip()
    ]

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
