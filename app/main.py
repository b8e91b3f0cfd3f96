from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from contextlib import asynccontextmanager
from slowapi.errors import RateLimitExceeded
import logging
import time
import uuid

from .config import settings
from .database import create_tables
from .exceptions import NomadHubError
from .utils.logging_config import setup_logging, set_request_context, clear_request_context, get_logger
from .utils.metrics import record_http_request
from .utils.rate_limiter import limiter

from .routers import auth, users, rooms, bookings, stats, health, metrics

logger = logging.getLogger(__name__)
request_logger = get_logger("app.requests")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    setup_logging(level=settings.log_level, json_format=settings.log_json)

    logger.info("Starting nomadhub-backend...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"CORS Origins: {settings.cors_origins}")
    if not settings.has_payment_config:
        logger.warning("STRIPE_SECRET_KEY not set: every booking will fail with AuthorizationFailed")

    create_tables()
    logger.info("Database ready")

    yield

    logger.info("Shutting down nomadhub-backend...")


app = FastAPI(
    title="NomadHub Backend API",
    description="Room listings, bookings and revenue dashboards",
    version="1.0.0",
    lifespan=lifespan
)

# Rate limiter state
app.state.limiter = limiter


# ================================
# CORS MIDDLEWARE - MUST BE FIRST!
# ================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)


# Security Headers Middleware
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


# Request ID + timing Middleware
class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4())[:8])
        request.state.request_id = request_id
        set_request_context(request_id)
        start = time.perf_counter()
        try:
            response = await call_next(request)
            duration = time.perf_counter() - start
            route = request.scope.get("route")
            path = route.path if route is not None else request.url.path
            record_http_request(request.method, path, response.status_code, duration)
            request_logger.api_request(request.method, path, response.status_code, round(duration * 1000, 2))
        finally:
            clear_request_context()
        response.headers["X-Request-ID"] = request_id
        return response


# Add other middleware AFTER CORS
app.add_middleware(RequestIdMiddleware)
app.add_middleware(SecurityHeadersMiddleware)


@app.exception_handler(NomadHubError)
async def booking_error_handler(request: Request, exc: NomadHubError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code}
    )


# Rate limit handler
@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={"detail": "Too many requests, try again later"}
    )


# Include routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(rooms.router)
app.include_router(bookings.router)
app.include_router(stats.router)
app.include_router(health.router)
app.include_router(metrics.router)


@app.get("/")
async def root():
    return {
        "message": "Nomad Hub Published",
        "version": "1.0.0",
        "docs": "/docs",
        "status": "running"
    }
