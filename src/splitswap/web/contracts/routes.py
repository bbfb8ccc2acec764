"""Route request and response contracts."""

from typing import Optional

from pydantic import BaseModel, Field

from splitswap.config import RouteConfig
from splitswap.routing.base import RouteSegment, SwapRequest, SwapResult, Token
from splitswap.routing.part_count import PartCountDecision, PartCountMode


class TokenModel(BaseModel):
    """Token descriptor."""

    address: str = Field(..., description="Token contract address (or native marker)")
    symbol: str = Field(default="", description="Token symbol")
    name: str = Field(default="", description="Token name")
    decimals: int = Field(default=18, ge=0, description="Token decimals")
    chain_id: Optional[int] = Field(None, description="Chain the token lives on")

    def to_token(self) -> Token:
        return Token(
            address=self.address,
            symbol=self.symbol,
            name=self.name,
            decimals=self.decimals,
            chain_id=self.chain_id,
        )


class RouteConfigModel(BaseModel):
    """Per-request overrides of the server's routing configuration.

    The quoting host and extra headers are server settings and cannot be
    overridden per request; unknown fields are ignored.
    """

    api_key: Optional[str] = None
    timeout: Optional[float] = Field(None, gt=0)
    default_part_count: Optional[int] = Field(None, ge=1)
    force_part_count: Optional[int] = Field(None, ge=1)
    online_part_count: Optional[bool] = None
    types: Optional[list[int]] = None
    enabled_sources: Optional[list[int]] = None

    def to_route_config(self) -> RouteConfig:
        return RouteConfig(**self.model_dump())


class RouteRequest(BaseModel):
    """Request for a split swap route."""

    amount_in: str = Field(..., description="Input amount as a decimal string (base units)")
    src_token: TokenModel = Field(..., description="Token to sell")
    dst_token: TokenModel = Field(..., description="Token to buy")
    chain_id: int = Field(..., description="Chain id")
    part_count: Optional[int] = Field(None, description="Explicit part count (skips resolution)")
    force_part_count: Optional[int] = Field(None, description="Forced part count (offline mode)")
    online_part_count: Optional[bool] = Field(None, description="Use threshold-based part count")
    types: Optional[list[int]] = Field(None, description="Liquidity source types")
    enabled_sources: Optional[list[int]] = Field(None, description="Enabled liquidity sources")
    simple: bool = Field(default=False, description="Use the chain's default liquidity sources")

    def to_swap_request(self) -> SwapRequest:
        return SwapRequest(
            amount_in=self.amount_in,
            src_token=self.src_token.to_token(),
            dst_token=self.dst_token.to_token(),
            chain_id=self.chain_id,
            part_count=self.part_count,
            force_part_count=self.force_part_count,
            online_part_count=self.online_part_count,
            types=self.types,
            enabled_sources=self.enabled_sources,
        )


class RouteSegmentModel(BaseModel):
    """One hop of liquidity within a route."""

    router: str
    pool: str
    from_token: str
    to_token: str
    from_marker: str
    to_marker: str
    part_size: str
    amount_after_fee: str
    source_type: int
    router_funded: bool = False

    @classmethod
    def from_segment(cls, segment: RouteSegment) -> "RouteSegmentModel":
        return cls(
            router=segment.router,
            pool=segment.pool,
            from_token=segment.from_token,
            to_token=segment.to_token,
            from_marker=segment.from_marker,
            to_marker=segment.to_marker,
            part_size=segment.part_size,
            amount_after_fee=segment.amount_after_fee,
            source_type=segment.source_type,
            router_funded=segment.router_funded,
        )


class RouteResponse(BaseModel):
    """A multi-part swap plan. Amounts are decimal strings."""

    routes: list[list[RouteSegmentModel]] = Field(default_factory=list)
    distributions: list[int] = Field(default_factory=list)
    amount_out_per_route: list[str] = Field(default_factory=list)
    amount_out_total: str = Field(..., description="Total expected output")
    amount_in_per_part: list[str] = Field(default_factory=list)
    is_amount_out_error: bool = Field(default=False, description="No usable route was found")
    is_wrap: Optional[str] = Field(None, description="'wrap' or 'unwrap' for 1:1 conversions")
    part_count: Optional[int] = None

    @classmethod
    def from_result(cls, result: SwapResult) -> "RouteResponse":
        return cls(
            routes=[
                [RouteSegmentModel.from_segment(segment) for segment in route]
                for route in result.routes
            ],
            distributions=list(result.distributions),
            amount_out_per_route=[format(a, "f") for a in result.amount_out_per_route],
            amount_out_total=format(result.amount_out_total, "f"),
            amount_in_per_part=[format(a, "f") for a in result.amount_in_per_part],
            is_amount_out_error=result.is_amount_out_error,
            is_wrap=result.is_wrap.value if result.is_wrap else None,
            part_count=result.part_count,
        )


class BatchRouteItem(BaseModel):
    """One batch entry: a route request plus optional overrides."""

    request: RouteRequest
    config: Optional[RouteConfigModel] = None


class BatchRouteRequest(BaseModel):
    """Request for many routes at once."""

    items: list[BatchRouteItem] = Field(default_factory=list)


class BatchItemResponse(BaseModel):
    """Outcome of one batch entry."""

    success: bool
    data: Optional[RouteResponse] = None
    error: Optional[str] = None


class BatchRouteResponse(BaseModel):
    """Batch outcomes, index-aligned with the request items."""

    results: list[BatchItemResponse] = Field(default_factory=list)
    succeeded: int = 0
    failed: int = 0


class QuoteRequest(BaseModel):
    """Request for a summary quote."""

    amount_in: str = Field(..., description="Input amount as a decimal string")
    src_token: TokenModel
    dst_token: TokenModel
    chain_id: int


class QuoteResponse(BaseModel):
    """Total output and number of routes."""

    amount_out: str
    routes: int


class PartCountRequest(BaseModel):
    """Request for a part-count decision."""

    src_token: Optional[TokenModel] = None
    dst_token: Optional[TokenModel] = None
    chain_id: int
    amount_in: str = Field(default="0", description="Input amount (used by online mode)")
    online: bool = Field(default=False, description="Use threshold-based decision")
    force_part_count: Optional[int] = Field(None, ge=1)
    default_part_count: Optional[int] = Field(None, ge=1)

    def to_mode(self, default_part_count: int) -> PartCountMode:
        return PartCountMode(
            online=self.online,
            force_part_count=self.force_part_count,
            default_part_count=self.default_part_count or default_part_count,
        )


class PartCountResponse(BaseModel):
    """A part-count decision and the path that produced it."""

    part_count: int
    outcome: str
    reason: str = ""

    @classmethod
    def from_decision(cls, decision: PartCountDecision) -> "PartCountResponse":
        return cls(
            part_count=decision.value,
            outcome=decision.outcome.value,
            reason=decision.reason,
        )


class NetworkInfo(BaseModel):
    """Address configuration of a supported network."""

    chain_id: int
    name: str
    is_testnet: bool
    native_address: str
    wrapped_address: str
    router_address: Optional[str] = None
    query_address: Optional[str] = None


class NetworkListResponse(BaseModel):
    """Supported networks."""

    networks: list[NetworkInfo] = Field(default_factory=list)
