import asyncio
import logging
import aiohttp
from typing import Any, Dict, Optional

from features.common.exceptions.provider_exceptions import NetworkError, ParseError
from core.config import settings

logger = logging.getLogger(__name__)

class HttpProviderClient:
    """aiohttp session handling shared by the remote provider clients.

    Each client owns its own session so providers never share connection
    state.
    """

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: Optional[float] = None
    ):
        self._session = session
        self._owns_session = session is None
        self.timeout = aiohttp.ClientTimeout(total=timeout or settings.request_timeout)

    async def _init_session(self) -> aiohttp.ClientSession:
        if not self._session:
            self._session = aiohttp.ClientSession(
                headers={"Accept": "application/json"}
            )
        return self._session

    async def close(self):
        if self._session and self._owns_session:
            await self._session.close()
        self._session = None

    async def _get_json(
        self,
        url: str,
        params: Optional[Dict[str, str]] = None,
        timeout: Optional[aiohttp.ClientTimeout] = None
    ) -> Any:
        """GET a JSON document, mapping failures onto provider errors."""
        session = await self._init_session()
        logger.debug(f"Requesting {url} with {params}")
        try:
            async with session.get(url, params=params, timeout=timeout or self.timeout) as response:
                response.raise_for_status()
                return await response.json(content_type=None)
        except asyncio.TimeoutError as e:
            raise NetworkError(f"Timed out requesting {url}") from e
        except aiohttp.ClientResponseError as e:
            raise NetworkError(f"{url} returned HTTP {e.status}: {e.message}") from e
        except aiohttp.ClientError as e:
            raise NetworkError(f"Error requesting {url}: {str(e)}") from e
        except ValueError as e:
            raise ParseError(f"Invalid JSON from {url}: {str(e)}") from e
