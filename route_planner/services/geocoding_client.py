# path: route_planner/services/geocoding_client.py

from __future__ import annotations

from typing import List, Optional
import logging

import httpx

from route_planner.config import settings
from route_planner.models.route_models import GeocodeCandidate


logger = logging.getLogger(__name__)


class LookupFailed(Exception):
    """Geocoding lookup could not be completed."""


class GeocodingClient:
    """
    Resolves free-text queries to coordinates via a Nominatim-style /search endpoint.

    Never retries; failures surface as LookupFailed for the caller to show.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        limit: Optional[int] = None,
        min_query_length: Optional[int] = None,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or settings.geocoder_url
        self.timeout = timeout if timeout is not None else settings.geocoder_timeout_s
        self.limit = limit if limit is not None else settings.search_result_limit
        self.min_query_length = (
            min_query_length if min_query_length is not None else settings.search_min_query_length
        )
        self.user_agent = user_agent or settings.geocoder_user_agent
        self.transport = transport  # injected in tests

        if not self.base_url:
            raise ValueError("Geocoder URL is required")

    async def search(self, query: str) -> List[GeocodeCandidate]:
        query = (query or "").strip()
        if len(query) < self.min_query_length:
            return []

        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.get(
                    self.base_url,
                    params={"q": query, "format": "json", "limit": self.limit},
                    headers={"User-Agent": self.user_agent},
                    timeout=self.timeout,
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise LookupFailed(f"Geocoder returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise LookupFailed(f"Geocoder request failed: {e}") from e
        except ValueError as e:
            raise LookupFailed("Geocoder returned invalid JSON") from e

        candidates = self._parse_candidates(data)
        logger.info("Geocoded %r -> %d candidate(s)", query, len(candidates))
        return candidates

    def _parse_candidates(self, data) -> List[GeocodeCandidate]:
        if not isinstance(data, list):
            raise LookupFailed("Unexpected geocoder payload")

        out = []
        for item in data:
            try:
                out.append(
                    GeocodeCandidate(
                        lat=float(item["lat"]),
                        lon=float(item["lon"]),
                        display_name=str(item.get("display_name", "")),
                    )
                )
            except (KeyError, TypeError, ValueError) as e:
                raise LookupFailed(f"Malformed geocoder result: {item!r}") from e
        return out
