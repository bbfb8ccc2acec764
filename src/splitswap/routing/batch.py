"""Concurrent batch route fetching with per-item failure isolation."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, Optional, Union

from splitswap.config import RouteConfig
from splitswap.errors import format_error
from splitswap.routing.base import SwapRequest, SwapResult

logger = logging.getLogger(__name__)

RouteFetcher = Callable[[SwapRequest, Optional[RouteConfig]], Awaitable[SwapResult]]


@dataclass
class BatchItem:
    """One batch entry: a request plus optional per-item overrides."""

    request: SwapRequest
    config: Optional[RouteConfig] = None


@dataclass
class BatchResult:
    """Outcome of one batch entry."""

    success: bool
    data: Optional[SwapResult] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        if self.success:
            return {"success": True, "data": self.data.to_dict() if self.data else None}
        return {"success": False, "error": self.error}


BatchInput = Union[BatchItem, SwapRequest, tuple]


def _as_item(entry: BatchInput) -> BatchItem:
    if isinstance(entry, BatchItem):
        return entry
    if isinstance(entry, SwapRequest):
        return BatchItem(request=entry)
    request, config = entry
    return BatchItem(request=request, config=config)


class BatchCoordinator:
    """Runs many route fetches concurrently.

    Results are index-aligned with the input; a failing item becomes
    ``BatchResult(success=False)`` and never aborts its siblings.
    """

    def __init__(self, fetch: RouteFetcher):
        self._fetch = fetch

    async def _run_one(self, index: int, item: BatchItem) -> BatchResult:
        try:
            data = await self._fetch(item.request, item.config)
        except Exception as e:
            message = format_error(e)
            logger.warning(f"Batch item {index} failed: {type(e).__name__}: {message}")
            return BatchResult(success=False, error=message)
        return BatchResult(success=True, data=data)

    async def run_batch(self, entries: Iterable[BatchInput]) -> list[BatchResult]:
        """Fetch all entries concurrently.

        Args:
            entries: BatchItem, SwapRequest or (request, config) tuples

        Returns:
            One BatchResult per entry, in input order
        """
        items = [_as_item(entry) for entry in entries]
        if not items:
            return []

        logger.info(f"Running batch of {len(items)} route request(s)")
        results = await asyncio.gather(
            *(self._run_one(i, item) for i, item in enumerate(items))
        )
        failed = sum(1 for r in results if not r.success)
        if failed:
            logger.warning(f"Batch finished: {len(items) - failed} succeeded, {failed} failed")
        return list(results)
