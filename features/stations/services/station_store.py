import asyncio
import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List, Tuple
from pydantic import ValidationError

from features.common.models.geo_types import BoundingBox
from features.common.models.station_types import StationRecord, StationTag

logger = logging.getLogger(__name__)

class StationStore(ABC):
    """Local registry of cached stations, partitioned by provider tag."""

    @abstractmethod
    async def has_any(self, tag: StationTag) -> bool:
        """Whether any stations are cached for the tag."""

    @abstractmethod
    async def replace_all(self, tag: StationTag, records: Iterable[StationRecord]) -> None:
        """Replace every station of the tag; readers see the old or new set, never a mix."""

    @abstractmethod
    async def query_in_bounds(self, tag: StationTag, box: BoundingBox) -> List[StationRecord]:
        """Stations of the tag inside the box, bounds inclusive, in no particular order."""

    @abstractmethod
    async def all_stations(self, tag: StationTag) -> List[StationRecord]:
        """Every cached station of the tag."""

    async def count(self, tag: StationTag) -> int:
        return len(await self.all_stations(tag))

class InMemoryStationStore(StationStore):
    """Station store held in process memory.

    Each tag maps to an immutable tuple. Writers build the replacement
    tuple completely and then swap the mapping reference, so readers
    never need a lock.
    """

    def __init__(self):
        self._stations: Dict[StationTag, Tuple[StationRecord, ...]] = {}
        self._write_locks = {tag: asyncio.Lock() for tag in StationTag}

    async def has_any(self, tag: StationTag) -> bool:
        return bool(self._stations.get(tag))

    async def replace_all(self, tag: StationTag, records: Iterable[StationRecord]) -> None:
        by_id: Dict[str, StationRecord] = {}
        for record in records:
            if record.tag != tag:
                raise ValueError(f"Station {record.id} has tag {record.tag.value}, expected {tag.value}")
            by_id[record.id] = record
        snapshot = tuple(by_id.values())

        async with self._write_locks[tag]:
            await self._commit(tag, snapshot)
        logger.info(f"Replaced {tag.value} stations: {len(snapshot)} cached")

    async def _commit(self, tag: StationTag, snapshot: Tuple[StationRecord, ...]) -> None:
        self._stations = {**self._stations, tag: snapshot}

    async def query_in_bounds(self, tag: StationTag, box: BoundingBox) -> List[StationRecord]:
        snapshot = self._stations.get(tag, ())
        return [
            station for station in snapshot
            if box.min_lat <= station.coordinates.latitude <= box.max_lat
            and box.min_lon <= station.coordinates.longitude <= box.max_lon
        ]

    async def all_stations(self, tag: StationTag) -> List[StationRecord]:
        return list(self._stations.get(tag, ()))

    async def count(self, tag: StationTag) -> int:
        return len(self._stations.get(tag, ()))

class JsonFileStationStore(InMemoryStationStore):
    """In-memory store mirrored to a JSON file so the cache survives restarts.

    The file is rewritten through a temporary file and ``os.replace``; an
    unreadable file is treated as an empty cache.
    """

    def __init__(self, path: Path):
        super().__init__()
        self.path = Path(path)
        self._file_lock = asyncio.Lock()
        self._stations = self._load()

    def _load(self) -> Dict[StationTag, Tuple[StationRecord, ...]]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path) as f:
                data = json.load(f)
            stations = {
                StationTag(tag): tuple(StationRecord.model_validate(record) for record in records)
                for tag, records in data.items()
            }
            for tag, records in stations.items():
                logger.info(f"Loaded {len(records)} cached {tag.value} stations from {self.path}")
            return stations
        except (OSError, ValueError, AttributeError, ValidationError) as e:
            logger.error(f"❌ Ignoring unreadable station cache {self.path}: {str(e)}")
            return {}

    def _write(self, stations: Dict[StationTag, Tuple[StationRecord, ...]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w") as f:
            json.dump(
                {
                    tag.value: [record.model_dump(mode="json") for record in records]
                    for tag, records in stations.items()
                },
                f
            )
        os.replace(tmp_path, self.path)

    async def _commit(self, tag: StationTag, snapshot: Tuple[StationRecord, ...]) -> None:
        # Serialized so concurrent tag refreshes don't drop each other's writes
        async with self._file_lock:
            stations = {**self._stations, tag: snapshot}
            try:
                await asyncio.to_thread(self._write, stations)
            except OSError as e:
                # Keep serving the new set; the file catches up on the next write
                logger.error(f"❌ Could not write station cache {self.path}: {str(e)}")
            self._stations = stations
