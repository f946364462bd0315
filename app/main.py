import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api import diagnose, health
from app.config import get_settings, setup_logging
from app.services.ml_client import MLClient

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    if not settings.ml_api_url:
        logger.warning("ML_API_URL is not configured; diagnosis requests will fail")
    app.state.ml_client = MLClient(timeout=settings.ml_api_timeout)
    yield
    await app.state.ml_client.aclose()


app = FastAPI(title="RHU Diagnosis API", lifespan=lifespan)

app.include_router(health.router)
app.include_router(diagnose.router)
