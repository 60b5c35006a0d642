import logging
import json
from datetime import datetime
from pathlib import Path
from typing import List, Dict, Any, Optional
from pydantic import ValidationError

from features.common.models.geo_types import GeoPoint
from features.common.models.station_types import StationRecord, StationTag
from features.common.services.http_client import HttpProviderClient
from features.common.services.providers import StationCatalogProvider, StationDetailProvider
from features.common.exceptions.provider_exceptions import ParseError, ProviderError
from features.tides.models.tide_types import TidePrediction, TideResult, TideType
from core.config import settings

logger = logging.getLogger(__name__)

NO_PREDICTIONS_MESSAGE = "No Predictions data was found"

def parse_tide_stations(data: Any) -> List[StationRecord]:
    """Build station records from a CO-OPS station listing.

    Accepts the metadata API shape (``{"stations": [{"id", "name", "lat",
    "lng"}]}``) as well as a bare list using ``station_id``/``latitude``/
    ``longitude`` keys. Entries without usable coordinates are skipped.
    """
    try:
        stations = data["stations"] if isinstance(data, dict) else data
        records = []
        skipped = 0
        for station in stations:
            station_id = station.get("id") or station.get("station_id")
            try:
                records.append(StationRecord(
                    id=str(station_id),
                    name=station["name"],
                    coordinates=GeoPoint(
                        latitude=station["lat"] if "lat" in station else station["latitude"],
                        longitude=station["lng"] if "lng" in station else station["longitude"]
                    ),
                    tag=StationTag.TIDE
                ))
            except ValidationError:
                skipped += 1
        if skipped:
            logger.warning(f"Skipped {skipped} tide stations with invalid coordinates")
        return records
    except (KeyError, TypeError, AttributeError) as e:
        raise ParseError(f"Unexpected tide station listing: {str(e)}") from e

def parse_predictions(data: Dict[str, Any]) -> List[TidePrediction]:
    """Parse CO-OPS hi/lo predictions into time-ordered predictions."""
    try:
        predictions = [
            TidePrediction(
                time=datetime.strptime(p["t"], "%Y-%m-%d %H:%M"),
                type=TideType(p["type"]),
                height=float(p["v"])
            )
            for p in data.get("predictions") or []
        ]
    except (KeyError, TypeError, ValueError) as e:
        raise ParseError(f"Unexpected tide prediction response: {str(e)}") from e
    return sorted(predictions, key=lambda p: p.time)

class TideService(HttpProviderClient, StationCatalogProvider, StationDetailProvider):
    """Service for interacting with NOAA CO-OPS tide data API."""
    tag = StationTag.TIDE

    def __init__(
        self,
        stations_file: Optional[Path] = None,
        session=None,
        timeout: Optional[float] = None
    ) -> None:
        """Initialize TideService.

        Args:
            stations_file: Bundled station catalog; when None the catalog is
                fetched from the CO-OPS metadata API
            session: Optional aiohttp session to use instead of an owned one
            timeout: Per-request timeout in seconds
        """
        super().__init__(session=session, timeout=timeout)
        self.metadata_url = settings.coops_metadata_url
        self.data_url = settings.coops_base_url
        if stations_file is None and settings.tide_stations_file:
            stations_file = Path(settings.tide_stations_file)
        self.stations_file = stations_file

    async def fetch_all_stations(self) -> List[StationRecord]:
        """Get list of all tide prediction stations."""
        if self.stations_file is not None:
            data = self._get_stations_from_file()
        else:
            data = await self._get_json(self.metadata_url, {"type": "tidepredictions"})

        stations = parse_tide_stations(data)
        logger.info(f"Loaded {len(stations)} tide stations")
        return stations

    async def fetch_detail(self, station: StationRecord) -> Optional[TideResult]:
        """Get today's high/low predictions for a station.

        Returns None for stations without prediction data.
        """
        params = dict(settings.coops_params)
        params["station"] = station.id

        data = await self._get_json(self.data_url, params)
        if not isinstance(data, dict):
            raise ParseError(f"Unexpected tide prediction response for station {station.id}")

        if "error" in data:
            message = (data.get("error") or {}).get("message", "")
            if NO_PREDICTIONS_MESSAGE in message:
                logger.debug(f"No predictions for tide station {station.id}")
                return None
            raise ProviderError(message or "Unknown error from NOAA API")

        predictions = parse_predictions(data)
        if not predictions:
            return None

        return TideResult(
            station_id=station.id,
            station_name=station.name,
            coordinates=station.coordinates,
            predictions=predictions
        )

    def _get_stations_from_file(self) -> Any:
        """Read the bundled tide station catalog."""
        try:
            with open(self.stations_file, 'r') as f:
                return json.load(f)
        except OSError as e:
            raise ProviderError(f"Error reading tide stations from {self.stations_file}: {str(e)}") from e
        except ValueError as e:
            raise ParseError(f"Invalid tide station file {self.stations_file}: {str(e)}") from e
