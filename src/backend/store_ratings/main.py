import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from store_ratings.core.config import settings
from store_ratings.core.errors import AppError, ConfigurationError, InternalError, ValidationError
from store_ratings.core.log import setup_logging
from store_ratings.db.session import create_tables, engine, get_session
from store_ratings.routers import auth, reviews, stores
from store_ratings.schemas.common import ErrorResponse
from store_ratings.services.store_service import UPLOAD_URL_PREFIX

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting %s %s", settings.APP_NAME, settings.APP_VERSION)
    if not settings.JWT_SECRET_KEY:
        # reported once here; every sign/verify answers 500 until it is set
        logger.error("JWT_SECRET_KEY is not set; authentication requests will fail")
    Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
    if settings.CREATE_TABLES:
        await create_tables()
        logger.info("Database tables ready")
    yield
    await engine.dispose()
    logger.info("Database connections closed")


app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, message: str, errors=None, headers=None) -> JSONResponse:
    body = ErrorResponse(message=message, errors=errors).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body, headers=headers)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    # a missing secret was already reported at startup
    if exc.status_code >= 500 and not isinstance(exc, ConfigurationError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _error(exc.status_code, exc.message, exc.errors, exc.headers)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = {}
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path", "form")]
        errors[".".join(loc) or "request"] = err.get("msg", "Invalid value")
    return _error(ValidationError.status_code, ValidationError.default_message, errors)


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Storage error on %s %s", request.method, request.url.path)
    return _error(InternalError.status_code, InternalError.default_message)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(InternalError.status_code, InternalError.default_message)


@app.get("/health")
async def health():
    return {"ok": True}


@app.get("/health/db")
async def db_health(session: AsyncSession = Depends(get_session)):
    try:
        await session.execute(text("SELECT 1"))
        return {"db": "ok"}
    except SQLAlchemyError:
        raise InternalError("db not ok")


app.include_router(auth.router)
app.include_router(stores.router)
app.include_router(reviews.router)
app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="uploads")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("store_ratings.main:app", host="0.0.0.0", port=8000, log_level=settings.LOG_LEVEL.lower())
