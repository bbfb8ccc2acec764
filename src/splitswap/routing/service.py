"""Route service: the public entry point of the engine.

Owns the API client for its base configuration, that client's threshold
cache and the high-value registry, and wires them into resolvers and
assemblers. A per-call config that needs a different connection (base URL,
key, timeout or headers) gets a client and cache of its own that live only
for that call.
"""

import logging
import time
from contextlib import asynccontextmanager
from dataclasses import replace
from typing import AsyncIterator, Callable, Iterable, Optional

import httpx

from splitswap.chains import NetworkConfig, get_liquidity_sources, get_network_config, get_supported_networks
from splitswap.config import RouteConfig
from splitswap.routing.assembler import QuoteAssembler
from splitswap.routing.base import SwapRequest, SwapResult, Token
from splitswap.routing.batch import BatchCoordinator, BatchInput, BatchResult
from splitswap.routing.cache import CACHE_DURATION_SECONDS, THRESHOLD_TIMEOUT_SECONDS, ThresholdCache
from splitswap.routing.client import ApiClient
from splitswap.routing.part_count import (
    HighValueRegistry,
    PartCountDecision,
    PartCountMode,
    PartCountResolver,
    get_default_registry,
)

logger = logging.getLogger(__name__)

Connection = tuple[ApiClient, ThresholdCache]


class RouteService:
    """Fetches swap plans, single or batched.

    Example:
        async with RouteService(RouteConfig(api_key="...")) as service:
            result = await service.fetch_route(request)
    """

    def __init__(
        self,
        config: Optional[RouteConfig] = None,
        client: Optional[ApiClient] = None,
        registry: Optional[HighValueRegistry] = None,
        cache_ttl: float = CACHE_DURATION_SECONDS,
        threshold_timeout: float = THRESHOLD_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the service.

        Args:
            config: Base configuration; per-call configs override it
            client: Caller-held client for the base configuration
            registry: High-value token registry (shared default when None)
            cache_ttl: Threshold cache validity window in seconds
            threshold_timeout: Timeout for threshold fetches in seconds
            clock: Time source for the threshold caches
            transport: httpx transport for clients the service creates
        """
        self.config = config or RouteConfig()
        self.registry = registry or get_default_registry()
        self.cache_ttl = cache_ttl
        self.threshold_timeout = threshold_timeout
        self._clock = clock
        self._transport = transport
        self._connection: Optional[Connection] = None
        if client is not None:
            self._connection = (client, self._make_cache(client))

        self._batch = BatchCoordinator(self.fetch_route)

    def _make_cache(self, client: ApiClient) -> ThresholdCache:
        return ThresholdCache(
            client,
            ttl_seconds=self.cache_ttl,
            clock=self._clock,
            timeout=self.threshold_timeout,
        )

    def _effective(self, config: Optional[RouteConfig]) -> RouteConfig:
        return config.merged_with(self.config) if config is not None else self.config

    def _base_connection(self) -> Connection:
        if self._connection is None:
            client = ApiClient.from_config(self.config, transport=self._transport)
            self._connection = (client, self._make_cache(client))
            logger.debug(f"Created API client for {client.base_url}")
        return self._connection

    @asynccontextmanager
    async def _open(self, config: RouteConfig) -> AsyncIterator[Connection]:
        """Yield the connection ``config`` needs.

        The base connection is shared and stays open; any other one is
        created for this call and closed when it ends.
        """
        if config.connection_key() == self.config.connection_key():
            yield self._base_connection()
            return

        client = ApiClient.from_config(config, transport=self._transport)
        logger.debug(f"Opened call-scoped API client for {client.base_url}")
        try:
            yield client, self._make_cache(client)
        finally:
            await client.aclose()

    @staticmethod
    def _mode(config: RouteConfig) -> PartCountMode:
        return PartCountMode(
            online=bool(config.online_part_count),
            force_part_count=config.force_part_count,
            default_part_count=config.part_count_default,
        )

    def _assembler(self, config: RouteConfig, connection: Connection) -> QuoteAssembler:
        client, cache = connection
        return QuoteAssembler(
            client=client,
            resolver=PartCountResolver(registry=self.registry, cache=cache),
            mode=self._mode(config),
            types=config.types,
            enabled_sources=config.enabled_sources,
        )

    def assembler(self) -> QuoteAssembler:
        """Build an assembler on the base connection."""
        return self._assembler(self.config, self._base_connection())

    async def fetch_route(
        self,
        request: SwapRequest,
        config: Optional[RouteConfig] = None,
    ) -> SwapResult:
        """Fetch a swap plan. Errors propagate to the caller."""
        effective = self._effective(config)
        async with self._open(effective) as connection:
            return await self._assembler(effective, connection).fetch_route(request)

    async def fetch_route_simple(
        self,
        request: SwapRequest,
        config: Optional[RouteConfig] = None,
    ) -> SwapResult:
        """Fetch a swap plan with the chain's default liquidity sources.

        Liquidity filters on the request or config are replaced by the
        chain defaults; the part count comes from the configured mode.
        """
        sources = get_liquidity_sources(request.chain_id)
        request = replace(
            request,
            types=list(sources.types),
            enabled_sources=list(sources.enabled_sources),
        )
        return await self.fetch_route(request, config)

    async def get_swap_quote(
        self,
        src_token: Token,
        dst_token: Token,
        amount_in: str,
        chain_id: int,
        config: Optional[RouteConfig] = None,
    ) -> dict:
        """Return just the total output and the number of routes."""
        result = await self.fetch_route(
            SwapRequest(
                amount_in=amount_in,
                src_token=src_token,
                dst_token=dst_token,
                chain_id=chain_id,
            ),
            config,
        )
        return {
            "amount_out": format(result.amount_out_total, "f"),
            "routes": result.route_count,
        }

    async def run_batch(self, entries: Iterable[BatchInput]) -> list[BatchResult]:
        """Fetch many plans concurrently; see BatchCoordinator."""
        return await self._batch.run_batch(entries)

    async def decide_part_count(
        self,
        src_token: Optional[Token],
        dst_token: Optional[Token],
        chain_id: int,
        amount_in: str,
        mode: Optional[PartCountMode] = None,
        config: Optional[RouteConfig] = None,
    ) -> PartCountDecision:
        effective = self._effective(config)
        async with self._open(effective) as (_, cache):
            resolver = PartCountResolver(registry=self.registry, cache=cache)
            return await resolver.decide(
                src_token, dst_token, chain_id, amount_in, mode or self._mode(effective)
            )

    async def resolve_part_count(
        self,
        src_token: Optional[Token],
        dst_token: Optional[Token],
        chain_id: int,
        amount_in: str,
        mode: Optional[PartCountMode] = None,
        config: Optional[RouteConfig] = None,
    ) -> int:
        decision = await self.decide_part_count(
            src_token, dst_token, chain_id, amount_in, mode, config
        )
        return decision.value

    def clear_threshold_cache(self) -> None:
        """Drop the cached threshold entry of the base connection."""
        if self._connection is not None:
            self._connection[1].clear()

    def get_supported_networks(self) -> list[int]:
        return get_supported_networks()

    def get_network_config(self, chain_id: int) -> Optional[NetworkConfig]:
        return get_network_config(chain_id)

    async def aclose(self) -> None:
        if self._connection is not None:
            client, _ = self._connection
            self._connection = None
            await client.aclose()

    async def __aenter__(self) -> "RouteService":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
        return False
