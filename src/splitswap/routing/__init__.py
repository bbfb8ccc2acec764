"""Route resolution and part-count decision engine.

Components:
- ThresholdCache: time-bounded cache of per-token minimum amounts
- PartCountResolver: forced / online / offline part-count decision
- QuoteAssembler: quoting service answer -> validated, amount-split SwapResult
- BatchCoordinator: concurrent fetches with per-item failure isolation
- RouteService: wires the above together per configuration
"""

from splitswap.routing.assembler import QuoteAssembler
from splitswap.routing.base import (
    CacheEntry,
    RouteSegment,
    SwapRequest,
    SwapResult,
    ThresholdRecord,
    Token,
    WrapKind,
)
from splitswap.routing.batch import BatchCoordinator, BatchItem, BatchResult
from splitswap.routing.cache import ThresholdCache
from splitswap.routing.client import ApiClient
from splitswap.routing.factory import (
    create_route_service,
    fetch_batch_swap_routes,
    fetch_swap_route,
    fetch_swap_route_simple,
    get_swap_quote,
)
from splitswap.routing.part_count import (
    HIGH_VALUE_TOKENS,
    HighValueRegistry,
    PartCountDecision,
    PartCountMode,
    PartCountOutcome,
    PartCountResolver,
    calculate_part_count,
    calculate_price_impact,
    get_optimal_part_count,
    get_part_count_offline,
    get_part_count_with_fallback,
    is_high_value_token,
)
from splitswap.routing.service import RouteService

__all__ = [
    # Value objects
    "Token",
    "SwapRequest",
    "SwapResult",
    "RouteSegment",
    "ThresholdRecord",
    "CacheEntry",
    "WrapKind",
    "BatchItem",
    "BatchResult",
    # Components
    "ApiClient",
    "ThresholdCache",
    "PartCountResolver",
    "QuoteAssembler",
    "BatchCoordinator",
    "RouteService",
    # Part count
    "HIGH_VALUE_TOKENS",
    "HighValueRegistry",
    "PartCountDecision",
    "PartCountMode",
    "PartCountOutcome",
    "calculate_part_count",
    "calculate_price_impact",
    "get_optimal_part_count",
    "get_part_count_offline",
    "get_part_count_with_fallback",
    "is_high_value_token",
    # Factory functions
    "create_route_service",
    "fetch_swap_route",
    "fetch_swap_route_simple",
    "fetch_batch_swap_routes",
    "get_swap_quote",
]
