from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import logging
from pathlib import Path
import os
from contextlib import asynccontextmanager
from datetime import datetime
import asyncio

from core.config import settings
from core.logging_config import setup_logging
from core.scheduler import Scheduler

# Feature routes
from features.conditions.routes.conditions_routes import router as conditions_router
from features.weather.routes.weather_routes import router as weather_router
from features.stations.routes.station_routes import router as station_router

# Services and clients
from features.weather.services.open_meteo_client import OpenMeteoClient
from features.tides.services.tide_service import TideService
from features.gauges.services.usgs_service import UsgsGaugeService
from features.stations.services.station_store import StationStore, InMemoryStationStore, JsonFileStationStore
from features.stations.services.station_cache_refresher import StationCacheRefresher
from features.stations.services.station_service import StationService
from features.conditions.services.conditions_service import ConditionsService

setup_logging()
logger = logging.getLogger(__name__)

def build_station_store() -> StationStore:
    """Create the station store, file-backed when a cache file is configured."""
    if settings.station_cache_file:
        logger.info(f"📁 Using station cache file {settings.station_cache_file}")
        return JsonFileStationStore(Path(settings.station_cache_file))
    return InMemoryStationStore()

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("🚀 Starting Coastal Conditions API...")

    weather_client = OpenMeteoClient()
    tide_service = TideService()
    gauge_service = UsgsGaugeService()

    store = build_station_store()
    refresher = StationCacheRefresher(store, [tide_service, gauge_service])
    station_service = StationService(store, refresher)

    app.state.weather_client = weather_client
    app.state.station_service = station_service
    app.state.conditions_service = ConditionsService(
        weather_provider=weather_client,
        detail_providers=[tide_service, gauge_service],
        station_service=station_service
    )

    scheduler = Scheduler(refresher)
    scheduler.start()
    app.state.scheduler = scheduler

    warm_task = None
    if settings.warm_station_cache_on_startup:
        # Fill empty catalogs in the background so startup isn't blocked
        warm_task = asyncio.create_task(refresher.ensure_all())

    logger.info("✨ API startup complete - ready to serve requests")
    try:
        yield
    finally:
        logger.info("🔄 Shutting down API...")
        scheduler.shutdown()
        if warm_task and not warm_task.done():
            warm_task.cancel()
            try:
                await warm_task
            except asyncio.CancelledError:
                pass
        for client in (weather_client, tide_service, gauge_service):
            await client.close()
        logger.info("👋 API shutdown complete")

app = FastAPI(
    title="Coastal Conditions API",
    description="Weather forecasts with nearby tide predictions and river gauge levels",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(conditions_router)
app.include_router(weather_router)
app.include_router(station_router)

@app.get("/health")
async def health_check(request: Request):
    """Health check endpoint"""
    return {
        "status": "healthy",
        "time": datetime.now().isoformat(),
        "next_catalog_refresh": request.app.state.scheduler.get_next_run_time("catalog_refresh")
    }

if __name__ == "__main__":
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", 5010))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        log_level="info",
        workers=1
    )
