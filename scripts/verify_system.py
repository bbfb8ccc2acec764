#!/usr/bin/env python3
"""Quick verification script to test all system components.

Runs offline checks by default; pass --live to also fetch a real route
and the threshold table from the configured quoting API.
"""

import argparse
import asyncio
import sys
from decimal import Decimal

# Colors for output
GREEN = "\033[92m"
RED = "\033[91m"
YELLOW = "\033[93m"
RESET = "\033[0m"
CHECK = "✓"
CROSS = "✗"
WARN = "⚠"

BTC = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"
PBTC = "0x0D2437F93Fed6EA64Ef01cCde385FB1263910C56"
USDC_E = "0x29eE6138DD4C9815f46D34a4A1ed48F46758A402"
UNKNOWN = "0x1111111111111111111111111111111111111111"


def print_status(name: str, success: bool, message: str = ""):
    """Print status with color."""
    if success:
        print(f"  {GREEN}{CHECK}{RESET} {name}" + (f" - {message}" if message else ""))
    else:
        print(f"  {RED}{CROSS}{RESET} {name}" + (f" - {message}" if message else ""))


def print_warning(name: str, message: str = ""):
    """Print warning."""
    print(f"  {YELLOW}{WARN}{RESET} {name}" + (f" - {message}" if message else ""))


def check_imports():
    """Test all critical imports."""
    print("\n📦 Testing Imports...")

    modules = [
        ("splitswap.config", "Configuration"),
        ("splitswap.chains", "Network tables"),
        ("splitswap.errors", "Error types"),
        ("splitswap.routing", "Routing engine"),
        ("splitswap.api.app", "HTTP API"),
    ]

    all_ok = True
    for module, name in modules:
        try:
            __import__(module)
            print_status(name, True)
        except Exception as e:
            print_status(name, False, str(e)[:50])
            all_ok = False

    return all_ok


def check_config():
    """Test configuration loading."""
    print("\n⚙️  Testing Configuration...")

    try:
        from splitswap.config import get_settings

        settings = get_settings()
        print_status("Settings loaded", True, f"env={settings.environment}")
        print_status("Quoting API", True, settings.api_base_url)
        if not settings.api_key:
            print_warning("API key", "not set - requests are anonymous")
        mode = "online" if settings.online_part_count else "offline"
        print_status("Part count policy", True, f"{mode}, default={settings.default_part_count}")
        return True
    except Exception as e:
        print_status("Configuration", False, str(e))
        return False


def check_networks():
    """Test network tables."""
    print("\n🌐 Testing Networks...")

    try:
        from splitswap.chains import get_network_config, get_supported_networks
        from splitswap.routing.part_count import get_default_registry

        registry = get_default_registry()
        for chain_id in get_supported_networks():
            network = get_network_config(chain_id)
            high_value = len(registry.tokens_for(chain_id))
            print_status(
                network.name,
                True,
                f"chain {chain_id}, wrapped {network.wrapped_address[:10]}..., {high_value} high-value token(s)",
            )
        return True
    except Exception as e:
        print_status("Networks", False, str(e))
        return False


async def check_offline_routing():
    """Test routing decisions that need no network access."""
    print("\n🔀 Testing Offline Routing...")

    try:
        from splitswap.errors import UnsupportedNetworkError
        from splitswap.routing import RouteService, SwapRequest, Token, get_part_count_offline

        btc = Token(BTC, "BTC")
        pbtc = Token(PBTC, "pBTC")
        usdc = Token(USDC_E, "USDC.e")
        unknown = Token(UNKNOWN, "MEME")

        parts = get_part_count_offline(btc, usdc, 3637)
        print_status("High-value pair", parts == 5, f"partCount={parts}")
        parts = get_part_count_offline(btc, unknown, 3637)
        print_status("Unknown token pair", parts == 1, f"partCount={parts}")

        async with RouteService() as service:
            result = await service.fetch_route(
                SwapRequest(amount_in="1000", src_token=btc, dst_token=pbtc, chain_id=3637)
            )
            print_status(
                "Wrap short-circuit",
                result.is_wrap is not None and result.amount_out_total == Decimal("1000"),
                f"isWrap={result.is_wrap.value if result.is_wrap else None}",
            )

            try:
                await service.fetch_route(
                    SwapRequest(amount_in="1000", src_token=btc, dst_token=usdc, chain_id=9999)
                )
                print_status("Unsupported network", False, "no error raised")
                return False
            except UnsupportedNetworkError as e:
                print_status("Unsupported network", True, str(e))

        return True
    except Exception as e:
        print_status("Offline routing", False, str(e))
        return False


async def check_live_routing():
    """Fetch thresholds and a real route from the quoting API."""
    print("\n📡 Testing Live Routing...")

    try:
        from splitswap.routing import SwapRequest, Token, create_route_service

        async with create_route_service() as service:
            assembler = service.assembler()
            records = await assembler.resolver.cache.get()
            print_status("Threshold table", True, f"{len(records)} record(s)")

            result = await service.fetch_route(
                SwapRequest(
                    amount_in=str(10**15),
                    src_token=Token(BTC, "BTC"),
                    dst_token=Token(USDC_E, "USDC.e", decimals=6),
                    chain_id=3637,
                )
            )
            if result.is_amount_out_error:
                print_warning("Route", "no usable route returned")
            else:
                print_status(
                    "Route",
                    True,
                    f"{result.route_count} route(s), amountOut={result.amount_out_total}",
                )
        return True
    except Exception as e:
        print_status("Live routing", False, str(e))
        return False


async def main(live: bool = False):
    """Run all verification checks."""
    print("=" * 60)
    print("     SPLITSWAP SYSTEM VERIFICATION")
    print("=" * 60)

    results = {}

    # Run checks
    results["imports"] = check_imports()
    results["config"] = check_config()
    results["networks"] = check_networks()
    results["offline_routing"] = await check_offline_routing()
    if live:
        results["live_routing"] = await check_live_routing()

    # Summary
    print("\n" + "=" * 60)
    print("     SUMMARY")
    print("=" * 60)

    passed = sum(1 for v in results.values() if v)
    total = len(results)

    for name, success in results.items():
        status = f"{GREEN}{CHECK}{RESET}" if success else f"{RED}{CROSS}{RESET}"
        print(f"  {status} {name.replace('_', ' ').title()}")

    print()
    if passed == total:
        print(f"  {GREEN}All {total} checks passed!{RESET}")
        return 0
    else:
        print(f"  {YELLOW}{passed}/{total} checks passed{RESET}")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Verify splitswap components")
    parser.add_argument("--live", action="store_true", help="Also call the quoting API")
    args = parser.parse_args()

    exit_code = asyncio.run(main(live=args.live))
    sys.exit(exit_code)
