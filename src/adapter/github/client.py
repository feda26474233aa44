"""GitHub REST and GraphQL client."""

import logging
from typing import Any

import httpx

from domain.model.errors import CodeHostError

logger = logging.getLogger(__name__)

GITHUB_API_BASE_URL = "https://api.github.com"
GITHUB_GRAPHQL_URL = f"{GITHUB_API_BASE_URL}/graphql"
GITHUB_API_VERSION = "2022-11-28"
USER_AGENT = "webcomic-api"
DEFAULT_TIMEOUT_SECONDS = 30.0


class GitHubClient:
    """Thin async wrapper over the GitHub APIs. Calls are never retried."""

    def __init__(
        self,
        token: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._token = token
        self._timeout = timeout
        self._transport = transport

    async def rest(
        self,
        method: str,
        endpoint: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        headers = {
            'Authorization': f"Bearer {self._token}",
            'Accept': 'application/vnd.github+json',
            'X-GitHub-Api-Version': GITHUB_API_VERSION,
            'User-Agent': USER_AGENT,
        }
        response = await self._send(
            method, f"{GITHUB_API_BASE_URL}{endpoint}", 'GitHub API error',
            headers=headers, json=json, params=params,
        )
        if not response.content:
            return None
        return _decode_json(response, 'GitHub API error')

    async def graphql(self, query: str, variables: dict[str, Any] | None = None) -> Any:
        """Run a GraphQL document; the first reported error is raised."""
        headers = {
            'Authorization': f"Bearer {self._token}",
            'User-Agent': USER_AGENT,
        }
        response = await self._send(
            'POST', GITHUB_GRAPHQL_URL, 'GitHub GraphQL error',
            headers=headers, json={'query': query, 'variables': variables or {}},
        )
        result = _decode_json(response, 'GitHub GraphQL error')
        if not isinstance(result, dict):
            raise CodeHostError(f"GitHub GraphQL error: expected an object, got {type(result).__name__}")

        errors = result.get('errors')
        if errors:
            first = errors[0] if isinstance(errors, list) else errors
            message = first.get('message') if isinstance(first, dict) else first
            raise CodeHostError(f"GitHub GraphQL error: {message}")
        return result.get('data')

    async def _send(self, method: str, url: str, error_prefix: str, **kwargs) -> httpx.Response:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            logger.warning("GitHub request error", extra={"url": url, "error_type": type(e).__name__})
            raise CodeHostError(f"{error_prefix}: {type(e).__name__}: {e}") from e

        if response.is_error:
            text = response.text
            logger.warning("GitHub HTTP error", extra={"url": url, "status_code": response.status_code})
            raise CodeHostError(
                f"{error_prefix}: {response.status_code} {text}",
                status_code=response.status_code,
                body=text,
            )
        return response


def _decode_json(response: httpx.Response, error_prefix: str) -> Any:
    """Body of a 2xx response as JSON; a non-JSON body is a CodeHostError."""
    try:
        return response.json()
    except ValueError as e:
        logger.warning(
            "GitHub returned a non-JSON body",
            extra={"url": str(response.request.url), "status_code": response.status_code},
        )
        raise CodeHostError(
            f"{error_prefix}: invalid JSON in {response.status_code} response",
            status_code=response.status_code,
            body=response.text,
        ) from e
