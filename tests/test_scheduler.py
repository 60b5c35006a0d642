import asyncio

from core.scheduler import Scheduler
from features.common.models.station_types import StationTag
from features.stations.services.station_cache_refresher import StationCacheRefresher
from features.stations.services.station_store import InMemoryStationStore

from conftest import FakeCatalog

async def test_scheduler_registers_catalog_jobs():
    refresher = StationCacheRefresher(InMemoryStationStore(), [FakeCatalog(StationTag.TIDE, [])])
    scheduler = Scheduler(refresher)

    scheduler.start()
    try:
        assert scheduler.get_next_run_time("catalog_refresh") is not None
        assert scheduler.get_next_run_time("catalog_retry") is not None
        assert scheduler.get_next_run_time("missing") is None
    finally:
        scheduler.shutdown()

    # AsyncIOScheduler stops on the next loop iteration
    await asyncio.sleep(0.01)
    assert not scheduler.scheduler.running
