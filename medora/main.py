"""
Medora Health Record API - FastAPI Application

Entry point wiring the in-memory store, prediction and notification
services, and the routers for:
- Severity classification
- Medical records, reminders, notifications, family members
- Dashboard
- Superadmin console

Run with:
    uvicorn medora.main:app --reload
"""
import time
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from medora import config
from medora.api.routes import ALL_ROUTERS
from medora.models.schemas import HealthResponse
from medora.services import (
    ExpoPushClient,
    InMemoryStore,
    Notifier,
    PredictionService,
    ensure_superadmin,
    seed_wellness_tips,
)
from medora.utils import MedoraError, get_logger, setup_logging

setup_logging(config.LOG_LEVEL, config.LOG_FILE or None)
logger = get_logger(__name__)


# ---- Application Lifespan ----

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{config.API_TITLE} v{config.API_VERSION} ready to accept requests")
    yield
    logger.info(f"{config.API_TITLE} shut down.")


def create_app(
    store: Optional[InMemoryStore] = None,
    push: Optional[ExpoPushClient] = None,
) -> FastAPI:
    """
    Build the application.

    Services live on ``app.state`` so tests can pass their own store or push
    client. A fresh store is seeded with the default wellness tips and the
    bootstrap superadmin.
    """
    app = FastAPI(
        title=config.API_TITLE,
        description="Personal health records with metric severity classification",
        version=config.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if not config.JWT_SECRET_FROM_ENV:
        logger.warning("JWT_SECRET is not set; using a random per-process key. Tokens will not survive a restart.")

    if store is None:
        store = InMemoryStore()
        seed_wellness_tips(store)
        ensure_superadmin(store)

    notifier = Notifier(store, push or ExpoPushClient())
    app.state.store = store
    app.state.notifier = notifier
    app.state.prediction_service = PredictionService(store, notifier)
    app.state.started_at = datetime.now()

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            f"{request.method} {request.url.path}",
            extra={
                "status": response.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 1),
            },
        )
        return response

    @app.exception_handler(MedoraError)
    async def medora_error_handler(request: Request, exc: MedoraError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}", extra={"code": exc.code})
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)

    def _health() -> HealthResponse:
        return HealthResponse(
            status="healthy",
            version=config.API_VERSION,
            timestamp=datetime.now().isoformat(),
            uptime_seconds=(datetime.now() - app.state.started_at).total_seconds(),
        )

    @app.get("/", response_model=HealthResponse, tags=["Health"])
    async def root():
        """API root - health check."""
        return _health()

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check():
        return _health()

    for router in ALL_ROUTERS:
        app.include_router(router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("medora.main:app", host=config.HOST, port=config.PORT)
