import asyncio
import logging
import aiohttp
from typing import Any, Dict, List, Optional
from pydantic import ValidationError

from features.common.models.geo_types import GeoPoint
from features.common.models.station_types import StationRecord, StationTag
from features.common.services.http_client import HttpProviderClient
from features.common.services.providers import StationCatalogProvider, StationDetailProvider
from features.common.exceptions.provider_exceptions import ParseError
from features.gauges.models.gauge_types import GaugeResult
from core.config import settings

logger = logging.getLogger(__name__)

def _time_series(data: Any) -> List[Dict[str, Any]]:
    return data["value"]["timeSeries"] or []

def _site_code(source_info: Dict[str, Any]) -> str:
    return str(source_info["siteCode"][0]["value"])

def _site_location(source_info: Dict[str, Any]) -> GeoPoint:
    geog = source_info["geoLocation"]["geogLocation"]
    return GeoPoint(latitude=geog["latitude"], longitude=geog["longitude"])

def parse_sites(data: Any) -> List[StationRecord]:
    """Extract unique gauge sites from a USGS instantaneous-values response."""
    try:
        sites: Dict[str, StationRecord] = {}
        for series in _time_series(data):
            source_info = series["sourceInfo"]
            site_id = _site_code(source_info)
            if site_id in sites:
                continue
            try:
                sites[site_id] = StationRecord(
                    id=site_id,
                    name=source_info["siteName"],
                    coordinates=_site_location(source_info),
                    tag=StationTag.GAUGE
                )
            except ValidationError:
                logger.debug(f"Skipping USGS site {site_id} with invalid coordinates")
        return list(sites.values())
    except (KeyError, IndexError, TypeError) as e:
        raise ParseError(f"Unexpected USGS site response: {str(e)}") from e

def parse_latest_reading(data: Any) -> Optional[GaugeResult]:
    """Latest value of the first time series, or None when there is none."""
    try:
        series_list = _time_series(data)
        if not series_list:
            return None

        series = series_list[0]
        source_info = series["sourceInfo"]
        variable = series["variable"]
        values = series["values"][0]["value"] if series.get("values") else []
        if not values:
            return None

        latest = values[-1]
        value = float(latest["value"])
        no_data = variable.get("noDataValue")
        if no_data is not None and value == float(no_data):
            return None

        return GaugeResult(
            site_id=_site_code(source_info),
            site_name=source_info["siteName"],
            coordinates=_site_location(source_info),
            variable_name=variable["variableName"],
            value=value,
            unit=variable["unit"]["unitCode"],
            observed_at=latest.get("dateTime")
        )
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise ParseError(f"Unexpected USGS reading response: {str(e)}") from e

class UsgsGaugeService(HttpProviderClient, StationCatalogProvider, StationDetailProvider):
    """Service for USGS Water Services river and lake gauges."""
    tag = StationTag.GAUGE

    def __init__(
        self,
        state_codes: Optional[List[str]] = None,
        session=None,
        timeout: Optional[float] = None
    ):
        super().__init__(session=session, timeout=timeout)
        self.base_url = settings.usgs_base_url
        self.parameter_code = settings.usgs_parameter_code
        self.state_codes = state_codes or settings.usgs_state_codes
        self.catalog_timeout = aiohttp.ClientTimeout(total=settings.catalog_request_timeout)
        self._semaphore = asyncio.Semaphore(settings.usgs_concurrency)

    async def _fetch_state_sites(self, state_code: str) -> List[StationRecord]:
        async with self._semaphore:
            data = await self._get_json(
                self.base_url,
                {
                    "format": "json",
                    "stateCd": state_code,
                    "parameterCd": self.parameter_code,
                    "siteStatus": "active"
                },
                timeout=self.catalog_timeout
            )
        sites = parse_sites(data)
        logger.debug(f"Found {len(sites)} active USGS sites in {state_code.upper()}")
        return sites

    async def fetch_all_stations(self) -> List[StationRecord]:
        """Get every active gauge site, one request per state.

        Any failing state fails the whole catalog so a partial registry is
        never cached.
        """
        logger.info(f"🔄 Fetching USGS active sites for {len(self.state_codes)} states")
        tasks = [asyncio.ensure_future(self._fetch_state_sites(code)) for code in self.state_codes]
        try:
            results = await asyncio.gather(*tasks)
        except Exception:
            for task in tasks:
                task.cancel()
            # Collect the cancelled requests so none are left running
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        sites: Dict[str, StationRecord] = {}
        for state_sites in results:
            for site in state_sites:
                sites.setdefault(site.id, site)

        logger.info(f"Loaded {len(sites)} USGS gauge sites")
        return list(sites.values())

    async def fetch_detail(self, station: StationRecord) -> Optional[GaugeResult]:
        """Get the latest reading for a site, or None if it has none."""
        data = await self._get_json(self.base_url, {
            "format": "json",
            "sites": station.id,
            "parameterCd": self.parameter_code,
            "siteStatus": "active"
        })
        return parse_latest_reading(data)
