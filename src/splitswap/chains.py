"""Network and contract address tables for supported chains.

Supports Botanix Mainnet (3637) and Botanix Testnet (3636). The route
engine never calls these contracts; addresses are carried so callers can
settle the returned plan on-chain.
"""

from dataclasses import dataclass, field
from typing import Optional

from splitswap.errors import UnsupportedNetworkError

NATIVE_TOKEN_ADDRESS = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"

# Funding markers on route segments
USER_TARGET = "0x0000000000000000000000000000000000000000"  # caller-funded leg
ROUTER_TARGET = "0x0000000000000000000000000000000000000001"  # router-funded leg

# Liquidity source types
DEX_INTERFACE = {
    "V2": 1,
    "V3": 2,
}

# Liquidity sources
LIQUIDITY_SOURCE_IDS = {
    "BITZY": 1,
    "OTHER": 2,
}


@dataclass(frozen=True)
class NetworkConfig:
    """Contract addresses for a network."""

    chain_id: int
    name: str
    wrapped_address: str
    native_address: str = NATIVE_TOKEN_ADDRESS
    router_address: Optional[str] = None  # aggregator contract
    query_address: Optional[str] = None
    is_testnet: bool = False


@dataclass(frozen=True)
class LiquiditySources:
    """Liquidity source filter sent to the quoting API."""

    types: list[int] = field(default_factory=lambda: [DEX_INTERFACE["V2"], DEX_INTERFACE["V3"]])
    enabled_sources: list[int] = field(default_factory=lambda: [LIQUIDITY_SOURCE_IDS["BITZY"]])


# ======================
# Network Configurations
# ======================

NETWORKS: dict[int, NetworkConfig] = {
    3637: NetworkConfig(
        chain_id=3637,
        name="Botanix Mainnet",
        router_address="0xA5E0AE4e5103dc71cA290AA3654830442357A489",
        query_address="0x5b5079587501Bd85d3CDf5bFDf299f4eaAe98c23",
        wrapped_address="0x0D2437F93Fed6EA64Ef01cCde385FB1263910C56",  # pBTC
    ),
    3636: NetworkConfig(
        chain_id=3636,
        name="Botanix Testnet",
        wrapped_address="0x233631132FD56c8f86D1FC97F0b82420a8d20af3",  # WBTC
        is_testnet=True,
    ),
}

LIQUIDITY_SOURCES: dict[int, LiquiditySources] = {
    3637: LiquiditySources(types=[1, 2], enabled_sources=[1]),
    3636: LiquiditySources(types=[1, 2], enabled_sources=[1]),
}


# ======================
# Helper Functions
# ======================

def get_network_config(chain_id: int) -> Optional[NetworkConfig]:
    """Get network configuration by chain id."""
    return NETWORKS.get(chain_id)


def require_network_config(
    chain_id: int,
    networks: Optional[dict[int, NetworkConfig]] = None,
) -> NetworkConfig:
    """Get network configuration or raise UnsupportedNetworkError.

    Args:
        chain_id: Chain id to look up
        networks: Network table to search (the built-in one when None)
    """
    network = (NETWORKS if networks is None else networks).get(chain_id)
    if network is None:
        raise UnsupportedNetworkError(chain_id)
    return network


def get_supported_networks() -> list[int]:
    """Get all supported chain ids."""
    return sorted(NETWORKS)


def get_liquidity_sources(chain_id: int) -> LiquiditySources:
    """Get the default liquidity sources for a chain.

    Unknown chains get V2 + V3 types from the BITZY source.
    """
    return LIQUIDITY_SOURCES.get(chain_id) or LiquiditySources()
