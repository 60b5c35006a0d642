import logging
from typing import Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from features.stations.services.station_cache_refresher import StationCacheRefresher
from core.config import settings

logger = logging.getLogger(__name__)

class Scheduler:
    """Background jobs keeping the station catalogs fresh."""

    def __init__(self, refresher: StationCacheRefresher):
        self.scheduler = AsyncIOScheduler()
        self.refresher = refresher

    def start(self):
        """Start the scheduler with configured jobs."""
        logger.info("Starting scheduler")

        # Full catalog renewal; the registries change rarely
        self.scheduler.add_job(
            self.refresher.refresh_all,
            IntervalTrigger(hours=settings.catalog_refresh_hours),
            id="catalog_refresh",
            name="catalog_refresh"
        )

        # Retry tags left empty by a failed fetch; no I/O when populated
        self.scheduler.add_job(
            self.refresher.ensure_all,
            IntervalTrigger(hours=1),
            id="catalog_retry",
            name="catalog_retry"
        )

        self.scheduler.start()
        logger.info("Scheduler started successfully")

    def get_next_run_time(self, job_id: str) -> Optional[str]:
        """Get the next run time for a scheduled job."""
        job = self.scheduler.get_job(job_id)
        if job and job.next_run_time:
            return job.next_run_time.isoformat()
        return None

    def shutdown(self):
        """Shutdown the scheduler."""
        if self.scheduler.running:
            logger.info("Shutting down scheduler")
            self.scheduler.shutdown(wait=False)
            logger.info("Scheduler shutdown complete")
