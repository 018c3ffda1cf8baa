"""
Ward Dashboard Backend
CSV ingestion from object storage into the ward database, plus the nurse
dashboard API for beds, wards, patients and admissions.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .core.request_logging import RequestLoggingMiddleware
from .models import Base
from .models.base import engine
from .api import admissions, beds, health, ingestion, patients, wards

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # NOTE: In production the schema comes from Alembic migrations; create_all is a no-op there
    Base.metadata.create_all(bind=engine)
    logger.info("%s %s ready (database dialect: %s)", settings.APP_NAME, settings.VERSION, engine.dialect.name)
    yield
    engine.dispose()
    logger.info("%s stopped", settings.APP_NAME)


app = FastAPI(
    title="Ward Dashboard API",
    description=(
        "Ingests ward, bed, patient and admission CSV exports from object storage "
        "and serves the nurse dashboard."
    ),
    version=settings.VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)

app.include_router(ingestion.router)
app.include_router(beds.router)
app.include_router(wards.router)
app.include_router(patients.router)
app.include_router(admissions.router)
app.include_router(health.router)
