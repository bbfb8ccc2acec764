"""Turns a swap request into a validated, amount-split SwapResult.

Flow:
1. Look up the network and validate the request
2. Short-circuit native <-> wrapped conversions (no routing, no I/O)
3. Resolve the part count unless the request carries one
4. Fetch the split route from the quoting service
5. Split amount_in across parts by the returned distribution
6. Flag degenerate answers with is_amount_out_error
"""

import logging
from decimal import Decimal
from typing import Optional

from splitswap.chains import NETWORKS, NetworkConfig, get_liquidity_sources, require_network_config
from splitswap.errors import ServiceFetchError
from splitswap.routing.base import SplitRouteQuote, SwapRequest, SwapResult, WrapKind
from splitswap.routing.client import ApiClient
from splitswap.routing.part_count import PartCountMode, PartCountResolver
from splitswap.routing.validation import is_native_token, is_wrapped_token, validate_request
from splitswap.utils.amounts import is_integral, parse_amount, split_amount

logger = logging.getLogger(__name__)


class QuoteAssembler:
    """Builds swap plans from the quoting service's split routes."""

    def __init__(
        self,
        client: ApiClient,
        resolver: Optional[PartCountResolver] = None,
        mode: Optional[PartCountMode] = None,
        types: Optional[list[int]] = None,
        enabled_sources: Optional[list[int]] = None,
        networks: Optional[dict[int, NetworkConfig]] = None,
    ):
        """Initialize the assembler.

        Args:
            client: Quoting API client
            resolver: Part-count resolver (offline-only when omitted)
            mode: Default part-count policy for requests
            types: Liquidity source types; chain default when None
            enabled_sources: Enabled liquidity sources; chain default when None
            networks: Network table (defaults to the built-in one)
        """
        self.client = client
        self.resolver = resolver or PartCountResolver()
        self.mode = mode or PartCountMode()
        self.types = types
        self.enabled_sources = enabled_sources
        self.networks = NETWORKS if networks is None else networks

    def get_network(self, chain_id: int) -> NetworkConfig:
        return require_network_config(chain_id, self.networks)

    @staticmethod
    def detect_wrap(request: SwapRequest, network: NetworkConfig) -> Optional[WrapKind]:
        """Native -> wrapped is a wrap, wrapped -> native an unwrap."""
        src, dst = request.src_token, request.dst_token
        if is_native_token(src, network.native_address) and is_wrapped_token(dst, network.wrapped_address):
            return WrapKind.WRAP
        if is_wrapped_token(src, network.wrapped_address) and is_native_token(dst, network.native_address):
            return WrapKind.UNWRAP
        return None

    def _request_mode(self, request: SwapRequest) -> PartCountMode:
        online = self.mode.online if request.online_part_count is None else request.online_part_count
        forced = self.mode.force_part_count if request.force_part_count is None else request.force_part_count
        return PartCountMode(
            online=online,
            force_part_count=forced,
            default_part_count=self.mode.default_part_count,
        )

    async def resolve_part_count(self, request: SwapRequest) -> int:
        if request.part_count is not None:
            return request.part_count
        return await self.resolver.resolve(
            request.src_token,
            request.dst_token,
            request.chain_id,
            request.amount_in,
            self._request_mode(request),
        )

    async def fetch_route(self, request: SwapRequest) -> SwapResult:
        """Fetch and assemble a swap plan.

        Raises:
            UnsupportedNetworkError: chain id has no address configuration
            ValidationError: missing/identical tokens or a bad amount
            ServiceFetchError: quoting service failed or answered garbage
        """
        network = self.get_network(request.chain_id)
        validate_request(request)
        amount_in = parse_amount(request.amount_in)

        wrap = self.detect_wrap(request, network)
        if wrap is not None:
            logger.info(f"{wrap.value} on chain {request.chain_id}: 1:1 conversion, no routing")
            return SwapResult.wrap(wrap, amount_in)

        part_count = await self.resolve_part_count(request)

        defaults = get_liquidity_sources(request.chain_id)
        types = request.types or self.types or defaults.types
        enabled_sources = request.enabled_sources or self.enabled_sources or defaults.enabled_sources

        quote = await self.client.get_split_route(
            src_address=request.src_token.address,
            dst_address=request.dst_token.address,
            amount_in=request.amount_in,
            part_count=part_count,
            chain_id=request.chain_id,
            types=types,
            enabled_sources=enabled_sources,
        )
        result = self.assemble(quote, amount_in, part_count)

        logger.info(
            f"Route {request.src_token.symbol or request.src_token.address} -> "
            f"{request.dst_token.symbol or request.dst_token.address}: "
            f"{result.route_count} route(s), amountOut={result.amount_out_total}, "
            f"error={result.is_amount_out_error}"
        )
        return result

    @staticmethod
    def assemble(quote: SplitRouteQuote, amount_in: Decimal, part_count: int) -> SwapResult:
        """Shape a raw split-route answer into a SwapResult."""
        n = len(quote.routes)
        if len(quote.distributions) != n or len(quote.amount_out_routes) != n:
            raise ServiceFetchError(
                f"Malformed route payload: {n} routes, "
                f"{len(quote.distributions)} distributions, "
                f"{len(quote.amount_out_routes)} outputs"
            )

        # Base-unit amounts stay integral; the last part absorbs rounding
        quantum = Decimal(1) if is_integral(amount_in) else None
        try:
            amount_in_parts = split_amount(amount_in, quote.distributions, quantum=quantum)
        except ValueError as e:
            raise ServiceFetchError(f"Malformed route payload: {e}") from e

        is_error = (
            n == 0
            or quote.amount_out <= 0
            or any(not route for route in quote.routes)
        )
        if is_error:
            logger.warning(
                f"No usable route: {n} route(s), amountOut={quote.amount_out}"
            )

        return SwapResult(
            routes=quote.routes,
            distributions=quote.distributions,
            amount_out_per_route=quote.amount_out_routes,
            amount_out_total=quote.amount_out,
            amount_in_per_part=amount_in_parts,
            is_amount_out_error=is_error,
            part_count=part_count,
        )
