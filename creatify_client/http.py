import asyncio
import json
from typing import Any, Optional, Protocol

import aiohttp
from loguru import logger

from creatify_client.config import ClientOptions
from creatify_client.exceptions import (
    ApiError,
    AuthenticationError,
    NotFoundError,
    RateLimitError,
    ResponseParseError,
    TransportError,
)

DEFAULT_ERROR_MESSAGE = "An error occurred with the API request"


class ApiClient(Protocol):
    """What the resource façades need from a transport."""

    async def get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any: ...

    async def post(self, path: str, json: Optional[dict[str, Any]] = None) -> Any: ...

    async def put(self, path: str, json: Optional[dict[str, Any]] = None) -> Any: ...

    async def delete(self, path: str, params: Optional[dict[str, Any]] = None) -> Any: ...


def _clean_params(params: Optional[dict[str, Any]]) -> Optional[dict[str, str]]:
    if not params:
        return None
    cleaned = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        cleaned[key] = str(value)
    return cleaned or None


class HttpClient:
    def __init__(self, options: ClientOptions):
        self.options = options
        self.base_url = options.base_url
        self.logger = logger
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "X-API-ID": self.options.api_id,
            "X-API-KEY": self.options.api_key,
        }

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers=self.headers,
                timeout=aiohttp.ClientTimeout(total=self.options.timeout),
            )
        return self._session

    async def get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        return await self._request("GET", path, params=params)

    async def post(self, path: str, json: Optional[dict[str, Any]] = None) -> Any:
        return await self._request("POST", path, json=json)

    async def put(self, path: str, json: Optional[dict[str, Any]] = None) -> Any:
        return await self._request("PUT", path, json=json)

    async def delete(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        return await self._request("DELETE", path, params=params)

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        session = self._get_session()
        self.logger.debug(f"{method} {url} params={params} body={json}")

        try:
            async with session.request(
                method, url, params=_clean_params(params), json=json
            ) as response:
                body = await response.text()
                status = response.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self.logger.error(f"No response from {method} {url}: {e!r}")
            raise TransportError(
                f"No response received from the API server ({e.__class__.__name__})"
            ) from e

        self.logger.debug(f"<- {status} {method} {url}")
        data = self._parse_body(status, body)

        if not 200 <= status < 300:
            raise self._api_error(status, data)
        return data

    @staticmethod
    def _parse_body(status: int, body: str) -> Any:
        if not body.strip():
            return None
        try:
            return json.loads(body)
        except ValueError as e:
            if 200 <= status < 300:
                raise ResponseParseError(status, body) from e
            # error pages are often HTML; keep the raw text as the payload
            return body

    @staticmethod
    def _api_error(status: int, data: Any) -> ApiError:
        message = None
        if isinstance(data, dict):
            message = data.get("message") or data.get("detail")
        message = str(message) if message else DEFAULT_ERROR_MESSAGE

        if status in (401, 403):
            return AuthenticationError(status, message, data)
        if status == 404:
            return NotFoundError(status, message, data)
        if status == 429:
            return RateLimitError(status, message, data)
        return ApiError(status, message, data)

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()
