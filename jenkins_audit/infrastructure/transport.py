from __future__ import annotations

import logging

import httpx

from jenkins_audit.domain.errors import TransportError, TransportTimeout

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


class HttpTransport:
    """
    Issues single GET requests against the Jenkins server.

    The httpx.AsyncClient is injected; the caller owns its lifecycle. No
    retries and no backoff: a failed request is reported to the caller
    immediately.
    """

    def __init__(self, client: httpx.AsyncClient, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._client  = client
        self._timeout = timeout

    async def get(self, url: str) -> bytes:
        log.debug("Fetch: %s", url)
        try:
            response = await self._client.get(url, timeout=self._timeout)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise TransportTimeout(f"Timed out after {self._timeout}s fetching {url}", url=url) from exc
        except httpx.HTTPStatusError as exc:
            raise TransportError(f"HTTP {exc.response.status_code} fetching {url}", url=url) from exc
        except httpx.RequestError as exc:
            raise TransportError(f"Request to {url} failed: {exc}", url=url) from exc

        return response.content
