"""Open-Meteo forecast API client with retry and rate limit handling."""

import asyncio
import logging
from datetime import date

import httpx

from zonecast.models.geo import Coordinate

logger = logging.getLogger(__name__)

OPEN_METEO_BASE_URL = "https://api.open-meteo.com/v1/forecast"
DEFAULT_USER_AGENT = "zonecast/0.1.0"
DEFAULT_HOURLY_FIELDS = (
    "temperature_2m",
    "relative_humidity_2m",
    "wind_speed_10m",
    "surface_pressure",
    "precipitation",
)


class OpenMeteoClient:
    def __init__(
        self,
        base_url: str = OPEN_METEO_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 10.0,
        max_retries: int = 1,
        retry_base_delay: float = 1.0,
        hourly_fields: tuple[str, ...] | list[str] = DEFAULT_HOURLY_FIELDS,
        timezone: str = "auto",
    ):
        self.base_url = base_url
        self.user_agent = user_agent
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay
        self.hourly_fields = tuple(hourly_fields)
        self.timezone = timezone

    def build_params(self, coordinate: Coordinate, start_date: date, end_date: date) -> dict:
        return {
            "latitude": f"{coordinate.lat:.4f}",
            "longitude": f"{coordinate.lng:.4f}",
            "start_date": start_date.isoformat(),
            "end_date": end_date.isoformat(),
            "hourly": ",".join(self.hourly_fields),
            "timezone": self.timezone,
        }

    async def get_hourly(self, coordinate: Coordinate, start_date: date, end_date: date) -> dict:
        """Fetch the raw hourly forecast document for a point and date span.

        Retries on 503/429 and transport errors with exponential backoff.
        Raises httpx.HTTPError once retries are exhausted.
        """
        params = self.build_params(coordinate, start_date, end_date)
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}

        async with httpx.AsyncClient(timeout=self.timeout, headers=headers) as client:
            for attempt in range(self.max_retries + 1):
                try:
                    resp = await client.get(self.base_url, params=params)
                    if resp.status_code in (503, 429) and attempt < self.max_retries:
                        delay = self.retry_base_delay * (2**attempt)
                        logger.warning(
                            "Open-Meteo returned %d, retrying in %.1fs (attempt %d/%d)",
                            resp.status_code, delay, attempt + 1, self.max_retries,
                        )
                        await asyncio.sleep(delay)
                        continue
                    resp.raise_for_status()
                    return resp.json()
                except httpx.RequestError as e:
                    if attempt < self.max_retries:
                        delay = self.retry_base_delay * (2**attempt)
                        logger.warning(
                            "Open-Meteo request error, retrying in %.1fs: %s", delay, e
                        )
                        await asyncio.sleep(delay)
                        continue
                    raise

        raise RuntimeError("unreachable: retry loop exited without result")
