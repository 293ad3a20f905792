import os
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from dotenv import load_dotenv
from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import Session
from starlette.exceptions import HTTPException
from starlette.staticfiles import StaticFiles

# Load environment variables as early as possible
load_dotenv()

from .config import settings
from .database import create_db_and_tables, get_session
from .exceptions import (
    BookingError,
    booking_exception_handler,
    create_error_response,
    http_exception_handler,
    request_validation_handler,
)
from .infrastructure.persistence.sqlalchemy.repositories.doctor_repository_sql import SqlDoctorRepository
from .middleware import (
    ErrorHandlingMiddleware,
    LoggingMiddleware,
    RateLimitMiddleware,
    RequestSizeLimitMiddleware,
    SecurityMiddleware,
)
from .routers import appointments_router, doctors_router, video_router
from .schemas.common.common import DatabaseCheckResponse, HealthResponse

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format=settings.LOG_FORMAT
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Hospital Booking System...")
    create_db_and_tables()
    if not settings.video_provider_configured:
        logger.warning("Stream.io credentials not found. Video calling will use fallback link.")
    logger.info(f"Environment: {'development' if settings.DEBUG else 'production'}")
    yield
    logger.info("Shutting down Hospital Booking System...")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
    docs_url=("/docs" if settings.DOCS_ENABLED else None),
    redoc_url=("/redoc" if settings.DOCS_ENABLED else None),
    openapi_url=("/openapi.json" if settings.DOCS_ENABLED else None)
)

app.add_exception_handler(BookingError, booking_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)

app.add_middleware(ErrorHandlingMiddleware)
app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityMiddleware)
app.add_middleware(RequestSizeLimitMiddleware)
app.add_middleware(RateLimitMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=False,
    allow_methods=settings.allowed_methods_list,
    allow_headers=settings.allowed_headers_list,
)

# Stored audio recordings
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

app.include_router(doctors_router.router)
app.include_router(appointments_router.router)
app.include_router(video_router.router)


@app.get("/api/health", response_model=HealthResponse)
def health_check():
    return HealthResponse(
        status="OK",
        message="Hospital Booking System is running",
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@app.get("/api/test-db", response_model=DatabaseCheckResponse)
def check_database(session: Session = Depends(get_session)):
    try:
        has_data = SqlDoctorRepository(session).has_any()
    except BookingError as e:
        logger.error(f"Database test error: {e.message}")
        return JSONResponse(status_code=500, content=create_error_response("Database connection failed"))
    return DatabaseCheckResponse(success=True, message="Database connection successful", hasData=has_data)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)
