"""Fetches workshop definitions and lab documents from URLs or local paths."""
import os
import time
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urljoin, urlparse

import anyio.to_thread
import httpx

logger = logging.getLogger(__name__)


def is_remote(location: str) -> bool:
    return urlparse(location).scheme in ("http", "https")


class TTLCache:
    """Per-key cache whose entries expire after ttl_seconds (0 disables caching)."""

    def __init__(self, ttl_seconds: int = 300):
        self._ttl = ttl_seconds
        self._store: Dict[str, Tuple[float, Any]] = {}

    def get(self, key: str):
        if key in self._store:
            ts, data = self._store[key]
            if time.monotonic() - ts < self._ttl:
                return data
            del self._store[key]
        return None

    def set(self, key: str, value):
        if self._ttl <= 0:
            return
        self._store[key] = (time.monotonic(), value)

    def invalidate(self, key: Optional[str] = None):
        if key:
            self._store.pop(key, None)
        else:
            self._store.clear()


class ContentFetcher:
    def __init__(
        self,
        timeout: float = 10.0,
        cache_ttl_seconds: int = 300,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
        )
        self._cache = TTLCache(ttl_seconds=cache_ttl_seconds)

    async def fetch_text(self, location: str) -> str:
        """Return the text at location. Raises httpx.HTTPError, OSError or UnicodeDecodeError on failure."""
        cached = self._cache.get(location)
        if cached is not None:
            return cached

        if is_remote(location):
            response = await self._client.get(location)
            response.raise_for_status()
            text = response.text
            logger.debug(f"Fetched {location} ({len(text)} chars)")
        else:
            path = location[len("file://"):] if location.startswith("file://") else location
            text = await anyio.to_thread.run_sync(Path(path).read_text, "utf-8")
            logger.debug(f"Read {path} ({len(text)} chars)")

        self._cache.set(location, text)
        return text

    @staticmethod
    def resolve(base: Optional[str], ref: str) -> str:
        """
        Join a relative ref onto base; absolute URLs and paths pass through.
        Raises ValueError for a local path or file:// ref under an http(s) base.
        """
        local_ref = ref.startswith("file://") or os.path.isabs(ref)
        if local_ref and base and is_remote(base):
            raise ValueError(f"Local reference {ref} is not allowed under remote base {base}")
        if is_remote(ref) or local_ref or not base:
            return ref
        if is_remote(base):
            return urljoin(base if base.endswith("/") else base + "/", ref)
        if base.startswith("file://"):
            return "file://" + os.path.join(base[len("file://"):], ref)
        return os.path.join(base, ref)

    @staticmethod
    def parent(location: str) -> str:
        """Directory part of a URL or path, without trailing slash."""
        if is_remote(location):
            return location.rsplit("/", 1)[0]
        if location.startswith("file://"):
            return "file://" + os.path.dirname(location[len("file://"):])
        return os.path.dirname(location)

    def invalidate(self, location: Optional[str] = None):
        self._cache.invalidate(location)

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()
