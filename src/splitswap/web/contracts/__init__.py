"""Request and response contracts for the web layer."""

from splitswap.web.contracts.routes import (
    BatchItemResponse,
    BatchRouteItem,
    BatchRouteRequest,
    BatchRouteResponse,
    NetworkInfo,
    NetworkListResponse,
    PartCountRequest,
    PartCountResponse,
    QuoteRequest,
    QuoteResponse,
    RouteConfigModel,
    RouteRequest,
    RouteResponse,
    RouteSegmentModel,
    TokenModel,
)

__all__ = [
    "TokenModel",
    "RouteConfigModel",
    "RouteRequest",
    "RouteSegmentModel",
    "RouteResponse",
    "BatchRouteItem",
    "BatchRouteRequest",
    "BatchItemResponse",
    "BatchRouteResponse",
    "QuoteRequest",
    "QuoteResponse",
    "PartCountRequest",
    "PartCountResponse",
    "NetworkInfo",
    "NetworkListResponse",
]
