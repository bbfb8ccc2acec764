"""Time-bounded cache of minimum-amount thresholds.

Holds a single entry for the client it was built with. A refetch builds a
new ``CacheEntry`` and swaps it in, so readers never see a partial entry.
Concurrent misses may both fetch; the last write wins.
"""

import logging
import time
from typing import Callable, Optional

from splitswap.errors import ServiceFetchError, ThresholdFetchError
from splitswap.routing.base import CacheEntry, ThresholdRecord
from splitswap.routing.client import ApiClient

logger = logging.getLogger(__name__)

CACHE_DURATION_SECONDS = 5 * 60
THRESHOLD_TIMEOUT_SECONDS = 5.0


class ThresholdCache:
    """Caches the threshold endpoint's answer for ``ttl_seconds``."""

    def __init__(
        self,
        client: ApiClient,
        ttl_seconds: float = CACHE_DURATION_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        timeout: Optional[float] = THRESHOLD_TIMEOUT_SECONDS,
    ):
        """Initialize the cache.

        Args:
            client: Quoting API client used for fetches
            ttl_seconds: Validity window of a fetched entry
            clock: Time source (injected by tests)
            timeout: Timeout for the threshold request
        """
        self.client = client
        self.ttl_seconds = ttl_seconds
        self.timeout = timeout
        self._clock = clock
        self._entry: Optional[CacheEntry] = None

    @property
    def entry(self) -> Optional[CacheEntry]:
        return self._entry

    async def get(self) -> list[ThresholdRecord]:
        """Return cached records, fetching when missing or expired.

        Raises:
            ThresholdFetchError: if a fetch is needed and fails
        """
        entry = self._entry
        if entry is not None and entry.is_live(self._clock()):
            logger.debug("Using cached minimum amounts data")
            return list(entry.records)

        logger.info("Fetching fresh minimum amounts data from API")
        try:
            records = await self.client.get_asset_minimum(timeout=self.timeout)
        except ServiceFetchError as e:
            raise ThresholdFetchError(
                f"Threshold fetch failed: {e.message}",
                status_code=e.status_code,
                url=e.url,
            ) from e

        now = self._clock()
        self._entry = CacheEntry(
            records=tuple(records),
            fetched_at=now,
            expires_at=now + self.ttl_seconds,
        )
        return list(records)

    def clear(self) -> None:
        """Drop the entry; the next ``get`` always refetches."""
        self._entry = None
        logger.info("Minimum amounts cache cleared")
