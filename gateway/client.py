from __future__ import annotations

import itertools
import logging
import threading
from typing import Iterable, Optional

import httpx

logger = logging.getLogger("gateway")


class LoadBalancedClient:
    """Round-robin HTTP client over the known files-service instances."""

    def __init__(self, base_urls: Iterable[str], transport: Optional[httpx.BaseTransport] = None) -> None:
        self.base_urls = list(base_urls)
        if not self.base_urls:
            raise ValueError("At least one files-service URL is required")
        self._cycle = itertools.cycle(self.base_urls)
        self._lock = threading.Lock()
        self._client = httpx.Client(transport=transport)

    def _next_base_url(self) -> str:
        with self._lock:
            return next(self._cycle)

    def get(self, path: str) -> httpx.Response:
        base_url = self._next_base_url()
        logger.info("event=forward method=GET target=%s%s", base_url, path)
        return self._client.get(f"{base_url}{path}")

    def close(self) -> None:
        self._client.close()
