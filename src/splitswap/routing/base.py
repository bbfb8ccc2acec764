"""Value objects shared by the route resolution engine."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional

from splitswap.chains import ROUTER_TARGET, USER_TARGET


@dataclass(frozen=True, eq=False)
class Token:
    """An ERC-20 (or native marker) token descriptor.

    Addresses compare case-insensitively; identity is
    ``(address.lower(), chain_id)``.
    """

    address: str
    symbol: str = ""
    name: str = ""
    decimals: int = 18
    chain_id: Optional[int] = None

    @property
    def key(self) -> tuple[str, Optional[int]]:
        return (self.address.lower(), self.chain_id)

    def same_address(self, address: Optional[str]) -> bool:
        return bool(address) and self.address.lower() == address.lower()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    @classmethod
    def from_dict(cls, data: dict) -> "Token":
        return cls(
            address=data["address"],
            symbol=data.get("symbol", ""),
            name=data.get("name", ""),
            decimals=int(data.get("decimals", 18)),
            chain_id=data.get("chainId", data.get("chain_id")),
        )

    def to_dict(self) -> dict:
        return {
            "address": self.address,
            "symbol": self.symbol,
            "name": self.name,
            "decimals": self.decimals,
            "chainId": self.chain_id,
        }


@dataclass
class SwapRequest:
    """A request to plan a swap of ``amount_in`` src -> dst on ``chain_id``.

    ``amount_in`` is a decimal string (base units for on-chain use).
    ``part_count`` is an explicit part count that skips resolution;
    ``force_part_count`` and ``online_part_count`` feed the resolver.
    """

    amount_in: str
    src_token: Optional[Token]
    dst_token: Optional[Token]
    chain_id: int
    part_count: Optional[int] = None
    force_part_count: Optional[int] = None
    online_part_count: Optional[bool] = None
    types: Optional[list[int]] = None
    enabled_sources: Optional[list[int]] = None


@dataclass(frozen=True)
class RouteSegment:
    """One hop of liquidity within a route.

    ``from_marker``/``to_marker`` tell the aggregator whether the leg is
    funded by the caller or by the router; they are routing metadata only.
    """

    router: str
    pool: str
    from_token: str
    to_token: str
    from_marker: str
    to_marker: str
    part_size: str  # fixed-point
    amount_after_fee: str  # fixed-point
    source_type: int

    @property
    def caller_funded(self) -> bool:
        return self.from_marker.lower() == USER_TARGET

    @property
    def router_funded(self) -> bool:
        return self.from_marker.lower() == ROUTER_TARGET

    @classmethod
    def from_api(cls, data: dict) -> "RouteSegment":
        return cls(
            router=data["routerAddress"],
            pool=data["lpAddress"],
            from_token=data["fromToken"],
            to_token=data["toToken"],
            from_marker=data["from"],
            to_marker=data["to"],
            part_size=str(data["part"]),
            amount_after_fee=str(data["amountAfterFee"]),
            source_type=int(data["dexInterface"]),
        )

    def to_dict(self) -> dict:
        return {
            "routerAddress": self.router,
            "lpAddress": self.pool,
            "fromToken": self.from_token,
            "toToken": self.to_token,
            "from": self.from_marker,
            "to": self.to_marker,
            "part": self.part_size,
            "amountAfterFee": self.amount_after_fee,
            "dexInterface": self.source_type,
        }


Route = list[RouteSegment]


class WrapKind(str, Enum):
    """Native <-> wrapped 1:1 conversions that need no routing."""

    WRAP = "wrap"
    UNWRAP = "unwrap"


@dataclass
class SwapResult:
    """An executable multi-part swap plan.

    One entry per part in ``routes``, ``distributions``,
    ``amount_out_per_route`` and ``amount_in_per_part``; all empty when
    ``is_wrap`` is set.
    """

    routes: list[Route] = field(default_factory=list)
    distributions: list[int] = field(default_factory=list)
    amount_out_per_route: list[Decimal] = field(default_factory=list)
    amount_out_total: Decimal = Decimal("0")
    amount_in_per_part: list[Decimal] = field(default_factory=list)
    is_amount_out_error: bool = False
    is_wrap: Optional[WrapKind] = None
    part_count: Optional[int] = None

    @property
    def route_count(self) -> int:
        return len(self.routes)

    @classmethod
    def wrap(cls, kind: WrapKind, amount_in: Decimal) -> "SwapResult":
        return cls(amount_out_total=amount_in, is_wrap=kind)

    def to_dict(self) -> dict:
        """Convert to dictionary with decimals as strings."""
        return {
            "routes": [[segment.to_dict() for segment in route] for route in self.routes],
            "distributions": list(self.distributions),
            "amountOutRoutes": [str(a) for a in self.amount_out_per_route],
            "amountOut": str(self.amount_out_total),
            "amountInParts": [str(a) for a in self.amount_in_per_part],
            "isAmountOutError": self.is_amount_out_error,
            "isWrap": self.is_wrap.value if self.is_wrap else None,
            "partCount": self.part_count,
        }


@dataclass(frozen=True)
class ThresholdRecord:
    """Minimum swap amount for a token below which splitting is not worth it."""

    token_address: str
    minimum_amount: Decimal
    chain_id: Optional[int] = None

    def matches(self, address: str, chain_id: Optional[int] = None) -> bool:
        """Case-insensitive address match, scoped to the chain when both carry one."""
        if self.token_address.lower() != address.lower():
            return False
        return self.chain_id is None or chain_id is None or self.chain_id == chain_id


@dataclass(frozen=True)
class CacheEntry:
    """A complete threshold snapshot. Replaced whole, never edited."""

    records: tuple[ThresholdRecord, ...]
    fetched_at: float
    expires_at: float

    def is_live(self, now: float) -> bool:
        return now < self.expires_at


@dataclass
class SplitRouteQuote:
    """Raw split-route answer from the quoting service."""

    routes: list[Route]
    distributions: list[int]
    amount_out_routes: list[Decimal]
    amount_out: Decimal
