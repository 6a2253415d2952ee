import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.dental_center.api.v1.routes_system import router as system_router_v1
from src.dental_center.api.v1.routes_auth import router as auth_router_v1
from src.dental_center.api.v1.routes_patients import router as patients_router_v1
from src.dental_center.api.v1.routes_incidents import router as incidents_router_v1
from src.dental_center.api.v1.routes_calendar import router as calendar_router_v1
from src.dental_center.api.v1.routes_dashboard import router as dashboard_router_v1
from src.dental_center.api.v1.routes_me import router as me_router_v1
from src.dental_center.config import settings
from src.dental_center.dependencies import init_store
from src.dental_center.infra.bootstrap import build_store

logger = logging.getLogger(__name__)

app = FastAPI(title="Dental Center API")


@app.on_event("startup")
async def on_startup() -> None:
    """Application startup hook.

    Builds the single store for this process from the configured key/value
    medium and hydrates it (persisted snapshot, then session) before any
    request is served.
    """

    store = init_store(build_store())
    logger.info(
        "Store ready: %d patients, %d incidents, session=%s",
        len(store.select_state().patients),
        len(store.select_state().incidents),
        "active" if store.select_state().current_user else "none",
    )

# CORS configuration – permissive by default for development. Tighten via
# CORS_ALLOW_ORIGINS in production deployments.
allow_origins = [origin.strip() for origin in settings.cors_allow_origins.split(",") if origin.strip()] or ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["system"])
async def health_check() -> dict:
    """Basic liveness probe for the API root."""
    return {"status": "ok"}


# Versioned API routers
app.include_router(system_router_v1, prefix="/api/v1")
app.include_router(auth_router_v1, prefix="/api/v1")
app.include_router(patients_router_v1, prefix="/api/v1")
app.include_router(incidents_router_v1, prefix="/api/v1")
app.include_router(calendar_router_v1, prefix="/api/v1")
app.include_router(dashboard_router_v1, prefix="/api/v1")
app.include_router(me_router_v1, prefix="/api/v1")
