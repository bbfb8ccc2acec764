"""Factory for route services plus one-shot convenience functions.

The convenience functions build a service from settings, run one call and
close it again; long-lived callers should hold a RouteService instead so
the threshold cache and connection pool are reused.
"""

import logging
from typing import Iterable, Optional

import httpx

from splitswap.config import RouteConfig, Settings, get_settings
from splitswap.routing.base import SwapRequest, SwapResult, Token
from splitswap.routing.batch import BatchInput, BatchResult
from splitswap.routing.service import RouteService

logger = logging.getLogger(__name__)


def create_route_service(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> RouteService:
    """Create a route service configured from settings.

    Args:
        settings: Settings to use (cached environment settings when None)
        transport: Optional httpx transport for the API clients
    """
    settings = settings or get_settings()
    service = RouteService(
        config=RouteConfig.from_settings(settings),
        cache_ttl=settings.threshold_cache_ttl,
        threshold_timeout=settings.threshold_timeout,
        transport=transport,
    )
    logger.info(
        f"Created route service for {settings.api_base_url} "
        f"(online partCount: {settings.online_part_count})"
    )
    return service


async def fetch_swap_route(
    request: SwapRequest,
    config: Optional[RouteConfig] = None,
) -> SwapResult:
    """Fetch one swap plan with a throwaway service."""
    async with create_route_service() as service:
        return await service.fetch_route(request, config)


async def fetch_swap_route_simple(
    request: SwapRequest,
    config: Optional[RouteConfig] = None,
) -> SwapResult:
    """Fetch one swap plan using the chain's default liquidity sources."""
    async with create_route_service() as service:
        return await service.fetch_route_simple(request, config)


async def fetch_batch_swap_routes(entries: Iterable[BatchInput]) -> list[BatchResult]:
    """Fetch many swap plans concurrently with a throwaway service."""
    async with create_route_service() as service:
        return await service.run_batch(entries)


async def get_swap_quote(
    src_token: Token,
    dst_token: Token,
    amount_in: str,
    chain_id: int,
    config: Optional[RouteConfig] = None,
) -> dict:
    """Return ``{"amount_out": str, "routes": int}`` for a swap."""
    async with create_route_service() as service:
        return await service.get_swap_quote(src_token, dst_token, amount_in, chain_id, config)
