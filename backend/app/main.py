from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import logging

from app.config import settings
from app.database import init_db, AsyncSessionLocal
from app.routers import sleep, ai, mock
from app.utils.mock_data import seed_sleep_records


# Configure logging
logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    # Startup
    await init_db()
    logger.info("Database initialized")
    
    if settings.SEED_DUMMY_DATA:
        async with AsyncSessionLocal() as db:
            await seed_sleep_records(db)
            await db.commit()
    
    yield
    
    # Shutdown
    logger.info("Shutting down")


app = FastAPI(
    title=settings.APP_NAME,
    description="Personal sleep tracker - nightly records, statistics, badges and AI sleep advice",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==================== Error Envelope ====================

def error_response(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


def describe_validation_error(exc: RequestValidationError) -> str:
    """First validation error as a readable sentence"""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query"))
    message = str(first.get("msg", "Invalid value"))
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return f"{field}: {message}" if field else message


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_response(status.HTTP_400_BAD_REQUEST, describe_validation_error(exc))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return error_response(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# Include routers
app.include_router(sleep.router, prefix=f"{settings.API_V1_PREFIX}/sleep-records", tags=["Sleep Records"])
app.include_router(ai.router, prefix=f"{settings.API_V1_PREFIX}/ai", tags=["AI"])
app.include_router(mock.router, prefix=f"{settings.API_V1_PREFIX}/mock", tags=["Mock Data"])


@app.get("/")
async def root():
    return {
        "app": settings.APP_NAME,
        "version": "1.0.0",
        "status": "healthy",
        "docs": "/docs",
    }


@app.get(f"{settings.API_V1_PREFIX}/health")
async def health_check():
    return {"status": "healthy"}
