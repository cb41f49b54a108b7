import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from backend import config
from backend.dataset import get_loader
from backend.routers import buildings, models, render

logger = logging.getLogger(__name__)


async def _background_load() -> None:
    try:
        await get_loader().load()
    except Exception as exc:
        logger.error(f"Startup load failed: {exc}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if config.LOAD_ON_STARTUP:
        app.state.load_task = asyncio.create_task(_background_load())
    yield


app = FastAPI(
    lifespan=lifespan,
    title="buildingmap API",
    description="Building footprints with period-styled extrusion from Parquet attribute data",
    version="0.1.0",
)

# ---------------------------------------------------------------------------
# CORS -- allow the map front-end dev server
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(buildings.router)
app.include_router(render.router)
app.include_router(models.router)

# ---------------------------------------------------------------------------
# Static files -- serve rendered GLB assets
# ---------------------------------------------------------------------------
config.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
app.mount("/output", StaticFiles(directory=str(config.OUTPUT_DIR)), name="output")


@app.get("/")
async def root():
    return {"status": "ok", "service": "buildingmap API"}
