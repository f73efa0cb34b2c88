import logging
from typing import Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .config import Settings

logger = logging.getLogger("nws_weather.nws")

T = TypeVar("T", bound=BaseModel)


class FetchError(Exception):
    """Base error for a failed request to the NWS API."""

    def __init__(self, url: str, message: str):
        super().__init__(f"{message} ({url})")
        self.url = url
        self.message = message


class TransportError(FetchError):
    pass


class StatusError(FetchError):
    def __init__(self, url: str, status_code: int):
        super().__init__(url, f"Request failed with status: {status_code}")
        self.status_code = status_code


class DecodeError(FetchError):
    pass


class NWSClient:
    """Issues single GET requests against the NWS API and decodes the JSON body.

    The client holds configuration only. Every call opens its own
    `httpx.AsyncClient`, so one instance can serve any number of concurrent
    tool calls.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.headers = {"User-Agent": settings.user_agent, "Accept": "application/geo+json"}
        self._transport = transport

    @property
    def api_base(self) -> str:
        return self.settings.api_base

    async def fetch(self, url: str, model: Type[T]) -> T:
        """GET `url` and decode the body into `model`, raising `FetchError` on any failure."""
        logger.info(f"Making request to: {url}")
        try:
            async with httpx.AsyncClient(
                headers=self.headers,
                follow_redirects=True,
                timeout=self.settings.timeout,
                transport=self._transport,
            ) as client:
                response = await client.get(url)
        except (httpx.RequestError, httpx.InvalidURL) as e:
            raise TransportError(url, f"Request failed: {e!r}") from e

        logger.info(f"Received response: {response.status_code} from {url}")

        if not response.is_success:
            raise StatusError(url, response.status_code)

        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise DecodeError(url, f"Failed to parse response: {e}") from e
