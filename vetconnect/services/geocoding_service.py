"""Geocoding through a Nominatim-compatible service.

Both directions make a single attempt per call. Reverse lookups fall back to
a formatted coordinate string; forward lookups return None. Neither raises
for service trouble.

NOTE:
Nominatim usage policy requires a valid User-Agent with contact info and reasonable rate limits.
"""
import json
import logging
from typing import Optional

import httpx

from vetconnect.cache.cache_service import RedisCache, redis_cache
from vetconnect.core.config import settings
from vetconnect.schemas.clinic import GeocodeResult
from vetconnect.utils.coordinates import format_coordinates
from vetconnect.utils.errors import GeocodingUnavailableError

logger = logging.getLogger(__name__)


class GeocodingService:
    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        base_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        cache: Optional[RedisCache] = None,
        cache_seconds: Optional[int] = None,
    ):
        self.base_url = (base_url or settings.NOMINATIM_BASE_URL).rstrip("/")
        self.user_agent = user_agent or settings.NOMINATIM_USER_AGENT
        self._client = client
        self.cache = cache
        self.cache_seconds = cache_seconds or settings.GEOCODING_CACHE_SECONDS

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=settings.GEOCODING_TIMEOUT_SECONDS)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(self, path: str, params: dict):
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        try:
            resp = await self.client.get(f"{self.base_url}{path}", params=params, headers=headers)
            if resp.status_code >= 400:
                raise GeocodingUnavailableError(f"Nominatim error {resp.status_code}: {resp.text[:200]}")
            return resp.json()
        except httpx.HTTPError as e:
            raise GeocodingUnavailableError(f"Nominatim request failed: {e}") from e
        except ValueError as e:
            raise GeocodingUnavailableError(f"Nominatim returned invalid JSON: {e}") from e

    async def _cached(self, key: str) -> Optional[str]:
        if self.cache is None:
            return None
        return await self.cache.get(key)

    async def _remember(self, key: str, value: str) -> None:
        if self.cache is not None:
            await self.cache.set(key, value, ttl=self.cache_seconds)

    async def reverse_geocode(self, lat: float, lng: float) -> str:
        fallback = format_coordinates(lat, lng)
        cache_key = f"geo:reverse:{lat:.6f}:{lng:.6f}"

        cached = await self._cached(cache_key)
        if cached:
            return cached

        try:
            data = await self._request("/reverse", {"format": "json", "lat": lat, "lon": lng})
        except GeocodingUnavailableError as e:
            logger.warning(f"Reverse geocoding failed, using coordinates as address: {e.detail}")
            return fallback

        address = data.get("display_name") if isinstance(data, dict) else None
        if not address:
            return fallback

        await self._remember(cache_key, address)
        return address

    async def forward_geocode(self, query: str) -> Optional[GeocodeResult]:
        query = (query or "").strip()
        if not query:
            return None

        cache_key = f"geo:search:{query.lower()}"
        cached = await self._cached(cache_key)
        if cached:
            return GeocodeResult(**json.loads(cached))

        try:
            data = await self._request("/search", {"format": "json", "q": query, "limit": 1})
        except GeocodingUnavailableError as e:
            logger.warning(f"Forward geocoding failed for {query!r}: {e.detail}")
            return None

        if not isinstance(data, list) or not data:
            return None

        hit = data[0]
        try:
            result = GeocodeResult(
                lat=float(hit["lat"]),
                lng=float(hit["lon"]),
                address=hit.get("display_name") or query,
            )
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Unusable geocoding result for {query!r}: {e}")
            return None

        await self._remember(cache_key, result.model_dump_json())
        return result


_geocoding_service: Optional[GeocodingService] = None


def get_geocoding_service() -> GeocodingService:
    global _geocoding_service
    if _geocoding_service is None:
        cache = redis_cache if settings.GEOCODING_CACHE_ENABLED else None
        _geocoding_service = GeocodingService(cache=cache)
    return _geocoding_service


async def close_geocoding_service() -> None:
    global _geocoding_service
    if _geocoding_service is not None:
        await _geocoding_service.aclose()
        _geocoding_service = None
