"""HTTP transport to the PayWay checkout API."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import httpx

from ..exceptions import GatewayTimeout, NetworkError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GatewayResponse:
    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""


class GatewayTransport:
    """Posts JSON to the gateway with a bounded timeout.

    Non-2xx answers are returned as-is; only connection-level problems
    raise.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 15.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def post(self, payload: Dict[str, Any]) -> GatewayResponse:
        client = self._get_client()
        try:
            response = await client.post(
                self.url,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except httpx.TimeoutException as exc:
            logger.error("PayWay request to %s timed out after %ss", self.url, self.timeout)
            raise GatewayTimeout(f"Gateway timed out after {self.timeout}s") from exc
        except httpx.RequestError as exc:
            logger.error("Failed to call PayWay API: %s", exc)
            raise NetworkError(f"Could not connect to the payment gateway: {exc}") from exc

        return GatewayResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.content,
        )

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
