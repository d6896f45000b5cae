import logging
import os
from typing import Any, Dict, Optional

import backoff
import httpx
from dotenv import load_dotenv, find_dotenv
from pydantic import BaseModel

# Load .env file (walks up directories to find it)
load_dotenv(find_dotenv())

logger = logging.getLogger(__name__)

# Hosted backend config
HOSTED_BACKEND_URL = os.environ.get("HOSTED_BACKEND_URL", "")
HOSTED_BACKEND_KEY = os.environ.get("HOSTED_BACKEND_KEY", "")
HOSTED_BACKEND_TIMEOUT = float(os.environ.get("HOSTED_BACKEND_TIMEOUT", "10"))


class BackendResult(BaseModel):
    """Outcome of a hosted backend call: either data or an error message."""
    data: Optional[Any] = None
    error: Optional[str] = None
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class HostedBackendClient:
    """
    Client for the hosted REST data backend.
    Treated as an opaque store of named collections: rows are inserted and
    selected, nothing else. Failures are logged and returned, never raised.
    """

    def __init__(
        self,
        base_url: str = None,
        api_key: str = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = None,
    ):
        self.base_url = (base_url or HOSTED_BACKEND_URL).rstrip("/")
        self.api_key = api_key or HOSTED_BACKEND_KEY
        self._client = client or httpx.AsyncClient(timeout=timeout or HOSTED_BACKEND_TIMEOUT)

    @property
    def configured(self) -> bool:
        return bool(self.base_url)

    def _url(self, collection: str) -> str:
        return f"{self.base_url}/rest/v1/{collection}"

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }

    @backoff.on_exception(
        backoff.expo,
        (httpx.RequestError, httpx.HTTPStatusError),
        max_tries=2,
        giveup=lambda e: isinstance(e, httpx.HTTPStatusError) and e.response.status_code < 500
    )
    async def _request(self, method: str, collection: str, **kwargs) -> httpx.Response:
        response = await self._client.request(
            method, self._url(collection), headers=self._headers(), **kwargs
        )
        response.raise_for_status()
        return response

    async def insert(self, collection: str, record: Dict[str, Any]) -> BackendResult:
        """Insert one row into a collection."""
        logger.info("Inserting into hosted backend", extra={"collection": collection})
        return await self._call("POST", collection, json=record)

    async def select(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        order: Optional[str] = None,
        descending: bool = True,
        limit: Optional[int] = None,
    ) -> BackendResult:
        """Select rows from a collection with equality filters."""
        params: Dict[str, Any] = {"select": "*"}
        for column, value in (filters or {}).items():
            params[column] = f"eq.{value}"
        if order:
            params["order"] = f"{order}.{'desc' if descending else 'asc'}"
        if limit is not None:
            params["limit"] = limit

        logger.info("Selecting from hosted backend", extra={"collection": collection})
        return await self._call("GET", collection, params=params)

    async def _call(self, method: str, collection: str, **kwargs) -> BackendResult:
        if not self.configured:
            return BackendResult(error="Hosted backend is not configured")

        try:
            response = await self._request(method, collection, **kwargs)
        except httpx.HTTPStatusError as e:
            logger.error(f"Hosted backend rejected {method} {collection}: {e.response.status_code}")
            return BackendResult(
                error=f"HTTP {e.response.status_code}: {e.response.text}",
                status_code=e.response.status_code,
            )
        except httpx.RequestError as e:
            logger.error(f"Error communicating with hosted backend: {str(e)}")
            return BackendResult(error=str(e))

        try:
            data = response.json() if response.content else None
        except ValueError:
            logger.error(f"Hosted backend returned a non-JSON body for {method} {collection}")
            return BackendResult(
                error=f"Invalid JSON response: {response.text[:200]}",
                status_code=response.status_code,
            )

        return BackendResult(data=data, status_code=response.status_code)

    async def aclose(self):
        await self._client.aclose()


_client_instance: Optional[HostedBackendClient] = None


def get_backend_client() -> Optional[HostedBackendClient]:
    """Shared client, or None when no hosted backend is configured."""
    global _client_instance
    if not HOSTED_BACKEND_URL:
        return None
    if _client_instance is None:
        _client_instance = HostedBackendClient()
    return _client_instance


async def close_backend_client():
    """Close the shared client so the next request builds a fresh one."""
    global _client_instance
    if _client_instance is not None:
        await _client_instance.aclose()
        _client_instance = None
