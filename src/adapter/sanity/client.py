"""Sanity HTTP API client.

Reads go through the query endpoint (API CDN by default); writes go through
the mutate and asset endpoints with the write token. Every call is attempted
exactly once.
"""

import json
import logging
from typing import Any

import httpx

from domain.model.errors import ContentStoreError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class SanityClient:
    """Minimal async client for the Sanity content store."""

    def __init__(
        self,
        project_id: str,
        dataset: str,
        api_version: str = '2024-01-01',
        token: str = '',
        use_cdn: bool = True,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.project_id = project_id
        self.dataset = dataset
        self.api_version = api_version
        self._token = token
        self._use_cdn = use_cdn
        self._timeout = timeout
        self._transport = transport

    @property
    def api_base_url(self) -> str:
        return f"https://{self.project_id}.api.sanity.io/v{self.api_version}"

    @property
    def query_base_url(self) -> str:
        host = 'apicdn' if self._use_cdn else 'api'
        return f"https://{self.project_id}.{host}.sanity.io/v{self.api_version}"

    async def fetch(self, query: str, params: dict[str, Any] | None = None) -> Any:
        """Run a GROQ query and return its `result` member.

        Query parameters are passed as `$name` with JSON-encoded values.
        """
        query_params = {'query': query}
        for key, value in (params or {}).items():
            query_params[f"${key}"] = json.dumps(value)

        response = await self._send(
            'GET',
            f"{self.query_base_url}/data/query/{self.dataset}",
            action='query content store',
            params=query_params,
        )
        body = _decode_object(response, 'query content store')
        return body.get('result')

    async def mutate(self, mutations: list[dict[str, Any]], action: str = 'mutate document') -> dict[str, Any]:
        response = await self._send(
            'POST',
            f"{self.api_base_url}/data/mutate/{self.dataset}",
            action=action,
            headers=self._auth_headers(),
            json={'mutations': mutations},
        )
        return _decode_object(response, action)

    async def upload_image(self, data: bytes, filename: str, content_type: str) -> dict[str, Any]:
        response = await self._send(
            'POST',
            f"{self.api_base_url}/assets/images/{self.dataset}",
            action='upload image',
            headers={**self._auth_headers(), 'Content-Type': content_type},
            params={'filename': filename},
            content=data,
        )
        return _decode_object(response, 'upload image')

    def _auth_headers(self) -> dict[str, str]:
        return {'Authorization': f"Bearer {self._token}"}

    async def _send(self, method: str, url: str, action: str, **kwargs) -> httpx.Response:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            logger.warning(
                "Sanity request error",
                extra={"action": action, "error_type": type(e).__name__},
            )
            raise ContentStoreError(f"Failed to {action}: {type(e).__name__}: {e}") from e

        if response.is_error:
            text = response.text
            logger.warning(
                "Sanity HTTP error",
                extra={"action": action, "status_code": response.status_code},
            )
            raise ContentStoreError(
                f"Failed to {action}: {response.status_code} {text}",
                status_code=response.status_code,
                body=text,
            )
        return response


def _decode_object(response: httpx.Response, action: str) -> dict[str, Any]:
    """JSON object body of a 2xx response, or ContentStoreError."""
    try:
        body = response.json()
    except ValueError as e:
        logger.warning(
            "Sanity returned a non-JSON body",
            extra={"action": action, "status_code": response.status_code},
        )
        raise ContentStoreError(
            f"Failed to {action}: invalid JSON in {response.status_code} response",
            status_code=response.status_code,
            body=response.text,
        ) from e

    if not isinstance(body, dict):
        raise ContentStoreError(
            f"Failed to {action}: expected a JSON object, got {type(body).__name__}",
            status_code=response.status_code,
            body=response.text,
        )
    return body
