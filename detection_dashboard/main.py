# detection_dashboard/main.py
"""
FastAPI application entry point.
Includes security middleware, global error handlers, and all routers.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from detection_dashboard.routers import dashboard, detections, events, health
from detection_dashboard.dependencies import get_dashboard_service
from detection_dashboard.config import settings
from detection_dashboard.utils.logger import get_logger
import time

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Detection dashboard starting up...")
    service = get_dashboard_service()
    logger.info(f"🗃️  Telemetry logs ready (capacity {service.detections.capacity} per log, in-memory only)")
    logger.info(f"🌐 Listening on http://{settings.BACKEND_HOST}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")
    yield
    logger.info("🛑 Detection dashboard shutting down...")


app = FastAPI(
    title="Object Detection Dashboard API",
    description="In-memory detection telemetry: metrics, charts, history and statistics.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# ── CORS (dashboard frontend) ────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional lightweight API key auth for read endpoints.
    Ingestion webhooks (/api/events/*) and health checks stay open.
    Set API_KEY in .env. Leave empty to disable auth.
    """
    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        open_paths = {"/api/health", "/api/detect/health", "/docs", "/redoc", "/openapi.json"}
        if path in open_paths or path.startswith("/api/events/") or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Invalid or missing API key"},
            )
        return await call_next(request)


if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(events.router,     prefix="/api", tags=["📡 Ingestion"])
app.include_router(dashboard.router,  prefix="/api", tags=["📊 Dashboard"])
app.include_router(detections.router, prefix="/api", tags=["🔍 Detections"])
app.include_router(health.router,     prefix="/api", tags=["💚 Health"])
