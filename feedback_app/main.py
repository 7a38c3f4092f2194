from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import time
import traceback
from typing import Callable, Optional
import uvicorn
from redis.asyncio import Redis
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from feedback_app.db.session import engine, SessionLocal
from feedback_app.db.init_db import init_db
from feedback_app.routers import auth, forms
from feedback_app.core.config.settings import get_settings
from feedback_app.core.config.logging_config import setup_logging

settings = get_settings()
logger = setup_logging()
error_logger = logging.getLogger("feedback_app.errors")

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    docs_url=f"{settings.API_PREFIX}/docs",
    redoc_url=f"{settings.API_PREFIX}/redoc",
)

RATE_LIMIT_WINDOW_SECONDS = 60

# Set on startup when REDIS_URL is configured and reachable
redis: Optional[Redis] = None


def error_response(status_code: int, message: str, headers: Optional[dict] = None, **extra) -> JSONResponse:
    """Every error leaves the API as ``{"success": false, "error": message}``"""
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message, **extra},
        headers=headers,
    )


@app.on_event("startup")
async def on_startup():
    global redis
    if settings.REDIS_URL:
        client = Redis.from_url(settings.REDIS_URL, encoding="utf-8", decode_responses=True)
        try:
            await client.ping()
        except Exception as e:
            logger.error(f"Redis unavailable at startup, requests will not be rate limited: {e}")
        else:
            redis = client
            logger.info("Rate limiting backed by Redis")

    init_db(engine)
    logger.info(f"{settings.PROJECT_NAME} started in {settings.ENVIRONMENT} mode")


@app.on_event("shutdown")
async def on_shutdown():
    global redis
    if redis is not None:
        await redis.close()
        redis = None


@app.middleware("http")
async def log_requests(request: Request, call_next: Callable):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} "
        f"({elapsed_ms:.1f}ms)"
    )
    return response


@app.middleware("http")
async def rate_limit(request: Request, call_next: Callable):
    """Fixed window request count per client address"""
    if redis is None or request.client is None:
        return await call_next(request)

    key = f"feedback_app:rate:{request.client.host}"
    hits = await redis.incr(key)
    if hits == 1:
        await redis.expire(key, RATE_LIMIT_WINDOW_SECONDS)

    if hits > settings.RATE_LIMIT_PER_MINUTE:
        retry_after = await redis.ttl(key)
        logger.warning(f"Rate limit exceeded for {request.client.host}")
        return error_response(
            status.HTTP_429_TOO_MANY_REQUESTS,
            "Too many requests",
            headers={"Retry-After": str(max(retry_after, 1))},
        )
    return await call_next(request)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router, prefix=settings.API_PREFIX)
app.include_router(forms.router, prefix=settings.API_PREFIX)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail
    # Starlette's own 404 for an unmatched path
    if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
        message = "Route not found"
    if exc.status_code >= 500:
        error_logger.error(f"{request.method} {request.url.path} failed: {message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected with {exc.status_code}: {message}")
    return error_response(exc.status_code, str(message), headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if any(error.get("loc", ("",))[0] == "body" for error in errors):
        message = "Invalid request body"
    else:
        message = "Invalid request parameters"
    logger.info(f"{request.method} {request.url.path}: {message} {errors}")
    return error_response(status.HTTP_400_BAD_REQUEST, message)


# SQLSTATE for unique_violation; SQLite only reports it in the message
UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    if getattr(exc.orig, "pgcode", None) == UNIQUE_VIOLATION:
        return True
    return "unique constraint" in str(exc.orig).lower()


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    if not is_unique_violation(exc):
        return await unhandled_exception_handler(request, exc)
    logger.warning(f"Integrity error on {request.url.path}: {exc.orig}")
    return error_response(status.HTTP_409_CONFLICT, "Duplicate field value entered")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    error_logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    current = get_settings()
    if current.is_production:
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    message = str(exc) or "Server Error"
    if current.ENVIRONMENT == "development":
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message, stack=stack)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message)


def _database_status() -> str:
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return "connected"
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return "disconnected"
    finally:
        db.close()


async def _redis_status() -> str:
    if redis is None:
        return "not configured"
    try:
        await redis.ping()
        return "connected"
    except Exception as e:
        logger.error(f"Redis health check failed: {e}")
        return "disconnected"


@app.get("/health")
async def health_check():
    database = _database_status()
    cache = await _redis_status()
    healthy = database == "connected" and cache != "disconnected"
    return {
        "status": "healthy" if healthy else "unhealthy",
        "environment": settings.ENVIRONMENT,
        "timestamp": time.time(),
        "database": database,
        "redis": cache,
    }


if __name__ == "__main__":
    uvicorn.run(app, host="127.0.0.1", port=8000)
