"""
Health Proxy HTTP Client
Performs outbound health probes on behalf of the browser

A single shared AsyncClient is started with the application lifespan and
stopped on shutdown. Only the target's status code is ever used.
"""

from typing import Optional

import httpx
import structlog

logger = structlog.get_logger(__name__)


class HealthProxyClient:
    """
    HTTP client for health probes against arbitrary target URLs.

    Lifecycle:
        - Call start() during app startup (FastAPI lifespan)
        - Call stop() during app shutdown
        - If not started, probe() falls back to a per-request client
    """

    MAX_KEEPALIVE = 20

    def __init__(
        self,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            limits=httpx.Limits(
                max_connections=None,
                max_keepalive_connections=self.MAX_KEEPALIVE,
            ),
            follow_redirects=True,
            transport=self._transport,
        )

    async def start(self):
        if self._client is not None:
            logger.warning("HealthProxyClient already started")
            return
        self._client = self._build_client()
        logger.info("HealthProxyClient started", timeout=self.timeout)

    async def stop(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("HealthProxyClient stopped")

    async def probe(self, url: str) -> int:
        """
        Issue a GET against url and return its status code

        Raises:
            httpx.HTTPError: on transport failures
            httpx.InvalidURL: when url cannot be parsed
        """
        if self._client is not None:
            response = await self._client.get(url)
        else:
            async with self._build_client() as client:
                response = await client.get(url)

        logger.debug("Health probe completed", url=url, status_code=response.status_code)
        return response.status_code
