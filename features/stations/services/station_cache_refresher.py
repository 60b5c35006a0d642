import asyncio
import logging
from datetime import datetime, timezone
from typing import Dict, Iterable

from features.common.models.station_types import StationTag
from features.common.services.providers import StationCatalogProvider
from features.stations.services.station_store import StationStore

logger = logging.getLogger(__name__)

class StationCacheRefresher:
    """Keeps each tag's station registry present in the store.

    ``ensure_populated`` is safe to call before every request: a populated
    tag returns immediately without I/O. Catalog failures are logged and
    leave the tag empty, so the next call retries.
    """

    def __init__(self, store: StationStore, catalogs: Iterable[StationCatalogProvider]):
        self.store = store
        self.catalogs: Dict[StationTag, StationCatalogProvider] = {
            catalog.tag: catalog for catalog in catalogs
        }
        self._locks = {tag: asyncio.Lock() for tag in self.catalogs}

    async def ensure_populated(self, tag: StationTag) -> bool:
        """Fetch the tag's catalog if nothing is cached. Returns whether the tag is populated."""
        if await self.store.has_any(tag):
            return True

        async with self._locks[tag]:
            # Another request may have filled it while we waited
            if await self.store.has_any(tag):
                return True
            return await self._fetch_and_replace(tag)

    async def ensure_all(self) -> Dict[StationTag, bool]:
        """Ensure every tag concurrently."""
        tags = list(self.catalogs)
        results = await asyncio.gather(*(self.ensure_populated(tag) for tag in tags))
        return dict(zip(tags, results))

    async def refresh(self, tag: StationTag) -> bool:
        """Re-fetch the tag's catalog even if it is already cached."""
        async with self._locks[tag]:
            return await self._fetch_and_replace(tag)

    async def refresh_all(self) -> Dict[StationTag, bool]:
        tags = list(self.catalogs)
        results = await asyncio.gather(*(self.refresh(tag) for tag in tags))
        return dict(zip(tags, results))

    async def _fetch_and_replace(self, tag: StationTag) -> bool:
        start_time = datetime.now(timezone.utc)
        try:
            logger.info(f"🔄 Fetching {tag.value} station catalog")
            stations = await self.catalogs[tag].fetch_all_stations()
        except Exception as e:
            logger.error(f"❌ Error fetching {tag.value} station catalog: {str(e)}")
            return False

        if not stations:
            logger.warning(f"⚠️ {tag.value} station catalog was empty, keeping existing cache")
            return await self.store.has_any(tag)

        try:
            await self.store.replace_all(tag, stations)
        except Exception as e:
            logger.error(f"❌ Error caching {tag.value} station catalog: {str(e)}")
            return False

        duration = (datetime.now(timezone.utc) - start_time).total_seconds()
        logger.info(f"✅ Cached {len(stations)} {tag.value} stations in {duration:.2f}s")
        return True
