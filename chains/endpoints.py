"""Ordered RPC endpoints with per-endpoint failure cooldown."""

import time
from typing import Awaitable, Callable, Iterable, TypeVar

import httpx

from core.log import get_logger
from .exceptions import EndpointsExhaustedError, RpcError

logger = get_logger(__name__)

T = TypeVar("T")


class EndpointPool:
    """Endpoints tried in configured order, skipping recently failed ones.

    A failed endpoint is skipped for ``cooldown`` seconds. When every
    endpoint is cooling down they are all tried again in order, so a pool
    never refuses to make a call.
    """

    def __init__(
        self,
        urls: Iterable[str],
        failover: bool = True,
        cooldown: float = 25.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        unique: list[str] = []
        for url in urls:
            if url and url not in unique:
                unique.append(url)
        if not unique:
            raise ValueError("EndpointPool needs at least one URL")

        self.urls = tuple(unique)
        self.failover = failover
        self.cooldown = cooldown
        self._clock = clock
        self._failed_at: dict[str, float] = {}

    @property
    def primary(self) -> str:
        return self.urls[0]

    def is_cooling(self, url: str) -> bool:
        failed_at = self._failed_at.get(url)
        return failed_at is not None and self._clock() - failed_at < self.cooldown

    def candidates(self) -> list[str]:
        """Endpoints to try for the next call, in order."""
        if not self.failover:
            return [self.primary]
        healthy = [url for url in self.urls if not self.is_cooling(url)]
        return healthy or list(self.urls)

    def record_success(self, url: str) -> None:
        self._failed_at.pop(url, None)

    def record_failure(self, url: str) -> None:
        self._failed_at[url] = self._clock()

    async def call(self, operation: Callable[[str], Awaitable[T]]) -> T:
        """Run ``operation(url)`` against the candidates until one succeeds.

        Raises:
            EndpointsExhaustedError: If every candidate failed
        """
        last_error: Exception | None = None
        for url in self.candidates():
            try:
                result = await operation(url)
            except (httpx.HTTPError, RpcError, ValueError) as e:
                self.record_failure(url)
                last_error = e
                logger.warning(f"RPC endpoint {url} failed: {e}")
                continue
            self.record_success(url)
            return result

        raise EndpointsExhaustedError(
            f"All RPC endpoints failed. Last error: {last_error}"
        ) from last_error

    def snapshot(self) -> dict[str, bool]:
        """Endpoint -> whether it is currently usable."""
        return {url: not self.is_cooling(url) for url in self.urls}
