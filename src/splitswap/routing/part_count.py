"""Part-count decision logic.

Decides how many parallel parts a swap is split into:

- Forced: ``force_part_count`` when online mode is off
- Online: 5 parts when the amount meets the minimum threshold of both
  tokens, from the threshold endpoint (via ThresholdCache)
- Offline: ``default_part_count`` when both tokens are high-value on the
  chain, otherwise 1

Online failures of any kind degrade to the offline decision.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional

from splitswap.config import DEFAULT_PART_COUNT
from splitswap.routing.base import ThresholdRecord, Token
from splitswap.routing.cache import ThresholdCache
from splitswap.utils.amounts import to_decimal

logger = logging.getLogger(__name__)

ONLINE_PART_COUNT = 5
SINGLE_PART = 1

# High-value tokens per chain: deep, independent liquidity that benefits
# from route splitting
HIGH_VALUE_TOKENS: dict[int, list[str]] = {
    # Botanix Mainnet
    3637: [
        "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE",  # BTC native
        "0x0D2437F93Fed6EA64Ef01cCde385FB1263910C56",  # pBTC
        "0x29eE6138DD4C9815f46D34a4A1ed48F46758A402",  # USDC.e (Stargate)
        "0x9BC574a6f1170e90D80826D86a6126d59198A3Ef",  # rovBTC
        "0xA0b86a33E6441b8c4C8C0C4C0C4C0C4C0C4C0C4C",  # USDC
        "0xdAC17F958D2ee523a2206206994597C13D831ec7",  # USDT
    ],
    # Botanix Testnet
    3636: [
        "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE",  # BTC native
        "0x233631132FD56c8f86D1FC97F0b82420a8d20af3",  # WBTC
        "0xA0b86a33E6441b8c4C8C0C4C0C4C0C4C0C4C0C4C",  # USDC
        "0xdAC17F958D2ee523a2206206994597C13D831ec7",  # USDT
    ],
}


class HighValueRegistry:
    """Per-chain set of high-value token addresses.

    Read-only at request time; the host application may extend it with
    ``register`` before routing.
    """

    def __init__(self, tokens: Optional[dict[int, Iterable[str]]] = None):
        source = HIGH_VALUE_TOKENS if tokens is None else tokens
        self._tokens: dict[int, set[str]] = {
            chain_id: {address.lower() for address in addresses}
            for chain_id, addresses in source.items()
        }

    def register(self, chain_id: int, *addresses: str) -> None:
        """Add high-value token addresses for a chain."""
        self._tokens.setdefault(chain_id, set()).update(a.lower() for a in addresses)
        logger.info(f"Registered {len(addresses)} high-value token(s) on chain {chain_id}")

    def tokens_for(self, chain_id: int) -> frozenset[str]:
        return frozenset(self._tokens.get(chain_id, ()))

    def is_high_value(self, token: Optional[Token], chain_id: int) -> bool:
        if token is None or not token.address:
            return False
        return token.address.lower() in self._tokens.get(chain_id, ())


_default_registry = HighValueRegistry()


def get_default_registry() -> HighValueRegistry:
    return _default_registry


class PartCountOutcome(str, Enum):
    """Which path produced a part count."""

    ONLINE = "online"
    OFFLINE = "offline"
    OFFLINE_FALLBACK = "offline_fallback"
    FORCED_OVERRIDE = "forced_override"


@dataclass(frozen=True)
class PartCountDecision:
    outcome: PartCountOutcome
    value: int
    reason: str = ""


@dataclass(frozen=True)
class PartCountMode:
    """Caller's part-count policy.

    ``force_part_count`` only applies while ``online`` is False.
    """

    online: bool = False
    force_part_count: Optional[int] = None
    default_part_count: int = DEFAULT_PART_COUNT


class PartCountResolver:
    """Resolves the number of execution parts for a swap."""

    def __init__(
        self,
        registry: Optional[HighValueRegistry] = None,
        cache: Optional[ThresholdCache] = None,
    ):
        self.registry = registry or _default_registry
        self.cache = cache

    def offline(
        self,
        src_token: Optional[Token],
        dst_token: Optional[Token],
        chain_id: int,
        default_part_count: int = DEFAULT_PART_COUNT,
    ) -> int:
        """Address-based decision: split only when both tokens are high-value.

        This ignores actual pair liquidity; a high-value token paired in a
        thin pool still gets ``default_part_count``.
        """
        src_high = self.registry.is_high_value(src_token, chain_id)
        dst_high = self.registry.is_high_value(dst_token, chain_id)
        return default_part_count if src_high and dst_high else SINGLE_PART

    async def decide_online(
        self,
        src_token: Token,
        dst_token: Token,
        amount_in: str,
        chain_id: int,
        fallback_part_count: int = DEFAULT_PART_COUNT,
    ) -> PartCountDecision:
        """Threshold-based decision. Never raises.

        Returns ONLINE_PART_COUNT when ``amount_in`` meets the minimum
        amount of both tokens; otherwise the offline decision computed
        with ``fallback_part_count``.
        """

        def fallback(reason: str) -> PartCountDecision:
            value = self.offline(src_token, dst_token, chain_id, fallback_part_count)
            return PartCountDecision(PartCountOutcome.OFFLINE_FALLBACK, value, reason)

        if self.cache is None:
            logger.debug("No threshold cache configured, using offline partCount logic")
            return fallback("no threshold cache")

        try:
            records = await self.cache.get()
            amount = to_decimal(amount_in)
            src_min = _find_threshold(records, src_token, chain_id)
            dst_min = _find_threshold(records, dst_token, chain_id)
            if src_min is None or dst_min is None:
                logger.info("Missing minimum amount data, falling back to offline logic")
                return fallback("missing threshold record")
            threshold_met = amount >= src_min and amount >= dst_min
        except Exception as e:
            logger.warning(f"Failed to fetch online partCount data: {e}")
            return fallback(f"online data unavailable: {e}")

        if threshold_met:
            logger.info(f"Amount meets minimum threshold for both tokens, using partCount = {ONLINE_PART_COUNT}")
            return PartCountDecision(PartCountOutcome.ONLINE, ONLINE_PART_COUNT, "threshold met")

        logger.info("Amount below minimum threshold, falling back to offline logic")
        return fallback("amount below threshold")

    async def decide(
        self,
        src_token: Optional[Token],
        dst_token: Optional[Token],
        chain_id: int,
        amount_in: str,
        mode: Optional[PartCountMode] = None,
    ) -> PartCountDecision:
        """Resolve a part count and report which path produced it."""
        mode = mode or PartCountMode()

        if mode.online:
            if src_token is None or dst_token is None:
                value = self.offline(src_token, dst_token, chain_id, mode.default_part_count)
                decision = PartCountDecision(PartCountOutcome.OFFLINE_FALLBACK, value, "missing token")
            else:
                decision = await self.decide_online(
                    src_token, dst_token, amount_in, chain_id, mode.default_part_count
                )
        elif mode.force_part_count is not None:
            decision = PartCountDecision(
                PartCountOutcome.FORCED_OVERRIDE, mode.force_part_count, "forced by caller"
            )
        else:
            value = self.offline(src_token, dst_token, chain_id, mode.default_part_count)
            decision = PartCountDecision(PartCountOutcome.OFFLINE, value, "address heuristic")

        logger.debug(f"partCount={decision.value} via {decision.outcome.value} ({decision.reason})")
        return decision

    async def resolve(
        self,
        src_token: Optional[Token],
        dst_token: Optional[Token],
        chain_id: int,
        amount_in: str,
        mode: Optional[PartCountMode] = None,
    ) -> int:
        decision = await self.decide(src_token, dst_token, chain_id, amount_in, mode)
        return decision.value


def _find_threshold(
    records: Iterable[ThresholdRecord],
    token: Token,
    chain_id: int,
) -> Optional[Decimal]:
    for record in records:
        if record.matches(token.address, chain_id):
            return record.minimum_amount
    return None


# ======================
# Module-level helpers
# ======================

def is_high_value_token(token: Optional[Token], chain_id: int) -> bool:
    """Check a token against the default high-value registry."""
    return _default_registry.is_high_value(token, chain_id)


def get_part_count_offline(
    src_token: Optional[Token],
    dst_token: Optional[Token],
    chain_id: int,
    default_part_count: int = DEFAULT_PART_COUNT,
) -> int:
    """Offline decision against the default registry."""
    return PartCountResolver().offline(src_token, dst_token, chain_id, default_part_count)


async def get_part_count_with_fallback(
    resolver: PartCountResolver,
    src_token: Token,
    dst_token: Token,
    amount_in: str,
    chain_id: int,
    fallback_part_count: int = DEFAULT_PART_COUNT,
) -> int:
    """Online decision; returns ``fallback_part_count`` verbatim if it ever raises."""
    try:
        decision = await resolver.decide_online(
            src_token, dst_token, amount_in, chain_id, fallback_part_count
        )
    except Exception as e:
        logger.warning(f"Online partCount failed, using fallback {fallback_part_count}: {e}")
        return fallback_part_count
    return decision.value


def calculate_price_impact(
    swap_amount: Decimal,
    pair_liquidity: Decimal,
    part_count: int,
) -> Decimal:
    """Price impact per part, in percent.

    Args:
        swap_amount: Swap amount in USD
        pair_liquidity: Pair liquidity in USD
        part_count: Number of parts the swap is split into
    """
    if pair_liquidity == 0:
        return Decimal("Infinity")
    return Decimal(swap_amount) / part_count / Decimal(pair_liquidity) * 100


def get_optimal_part_count(
    swap_amount: Decimal,
    pair_liquidity: Decimal,
    max_impact_threshold: Decimal = Decimal("5"),
) -> int:
    """1 when a 5-part split still exceeds the impact threshold, else 5."""
    impact = calculate_price_impact(swap_amount, pair_liquidity, ONLINE_PART_COUNT)
    if impact > max_impact_threshold:
        return SINGLE_PART
    return ONLINE_PART_COUNT


def calculate_part_count(amount: str, price: Decimal, part_count: int = 10) -> int:
    """Single part for swaps worth less than 1 USD."""
    amount_usd = to_decimal(amount) * Decimal(price)
    return SINGLE_PART if amount_usd < 1 else part_count
