import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tablepos.core.config import CORS_ORIGINS, DATABASE_URL, ENV, SEED_DEFAULTS
from tablepos.core.database import Base, SessionLocal, engine
from tablepos.core.logging_setup import configure_logging
from tablepos.core.startup_checks import ensure_schema_present, validate_database_environment
from tablepos.middleware.observability import ObservabilityMiddleware
import tablepos.models  # models must be registered before create_all
import tablepos.services.event_handlers  # subscribes the event bus handlers

from tablepos.routers.geofence import router as geofence_router
from tablepos.routers.menu import router as menu_router
from tablepos.routers.orders import router as orders_router
from tablepos.routers.reports import router as reports_router
from tablepos.routers.settings import router as settings_router
from tablepos.routers.state import router as state_router
from tablepos.routers.tables import router as tables_router
from tablepos.services.bootstrap import BOOTSTRAP_PREFIX, seed_defaults

configure_logging()

logger = logging.getLogger(__name__)


def _seed_defaults_if_enabled() -> None:
    if not SEED_DEFAULTS:
        logger.info("%s default data disabled", BOOTSTRAP_PREFIX)
        return

    db = SessionLocal()
    try:
        seed_defaults(db)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("%s seeding failed", BOOTSTRAP_PREFIX)
        raise
    finally:
        db.close()


def _startup_tasks() -> None:
    try:
        validate_database_environment()
        Base.metadata.create_all(bind=engine)
        ensure_schema_present(engine=engine)
        _seed_defaults_if_enabled()
        logger.info("%s ready env=%s database=%s", BOOTSTRAP_PREFIX, ENV, DATABASE_URL.split("://", 1)[0])
    except Exception:
        logger.exception("%s ERROR startup failed", BOOTSTRAP_PREFIX)
        raise


@asynccontextmanager
async def lifespan(_: FastAPI):
    _startup_tasks()
    yield


app = FastAPI(
    title="Table POS API",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(ObservabilityMiddleware)

# Routers
app.include_router(orders_router)
app.include_router(tables_router)
app.include_router(menu_router)
app.include_router(settings_router)
app.include_router(reports_router)
app.include_router(geofence_router)
app.include_router(state_router)


@app.get("/")
def health():
    return {"status": "ok"}
