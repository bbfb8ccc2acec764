"""Tests for quote assembly and the route service."""

from decimal import Decimal

import pytest

from conftest import (
    ASSET_MINIMUM,
    BTC,
    MEME,
    PBTC,
    SPLIT_ROUTE,
    USDC_E,
    WBTC_TESTNET,
    make_route_payload,
    make_segment,
)
from splitswap.config import RouteConfig
from splitswap.errors import ServiceFetchError, UnsupportedNetworkError, ValidationError
from splitswap.routing.assembler import QuoteAssembler
from splitswap.chains import ROUTER_TARGET
from splitswap.routing.base import RouteSegment, SplitRouteQuote, SwapRequest, Token, WrapKind


def request_for(src, dst, amount="1000", chain_id=3637, **kwargs) -> SwapRequest:
    return SwapRequest(amount_in=amount, src_token=src, dst_token=dst, chain_id=chain_id, **kwargs)


class TestWrapShortCircuit:
    """Native <-> wrapped conversions need no routing."""

    @pytest.mark.asyncio
    async def test_wrap(self, route_service, quoting_api, btc, pbtc):
        result = await route_service.fetch_route(request_for(btc, pbtc))

        assert result.is_wrap == WrapKind.WRAP
        assert result.amount_out_total == Decimal("1000")
        assert result.routes == []
        assert result.distributions == []
        assert result.is_amount_out_error is False
        assert quoting_api.requests == []

    @pytest.mark.asyncio
    async def test_unwrap(self, route_service, quoting_api, btc, pbtc):
        result = await route_service.fetch_route(request_for(pbtc, btc, amount="42"))

        assert result.is_wrap == WrapKind.UNWRAP
        assert result.amount_out_total == Decimal("42")
        assert quoting_api.requests == []

    @pytest.mark.asyncio
    async def test_testnet_wrap(self, route_service, btc):
        wbtc = Token(address=WBTC_TESTNET, symbol="WBTC")

        result = await route_service.fetch_route(request_for(btc, wbtc, chain_id=3636))
        assert result.is_wrap == WrapKind.WRAP

    @pytest.mark.asyncio
    async def test_case_insensitive(self, route_service):
        src = Token(address=PBTC.lower())
        dst = Token(address=BTC.upper().replace("0X", "0x"))

        result = await route_service.fetch_route(request_for(src, dst))
        assert result.is_wrap == WrapKind.UNWRAP

    @pytest.mark.asyncio
    async def test_wrapped_on_other_chain_is_routed(self, route_service, quoting_api, btc):
        """Testnet WBTC is not the mainnet wrapped token."""
        wbtc = Token(address=WBTC_TESTNET, symbol="WBTC")

        result = await route_service.fetch_route(request_for(btc, wbtc))

        assert result.is_wrap is None
        assert len(quoting_api.calls(SPLIT_ROUTE)) == 1


class TestRequestErrors:
    """Errors raised before any I/O."""

    @pytest.mark.asyncio
    async def test_unsupported_network(self, route_service, quoting_api, btc, usdc_e):
        with pytest.raises(UnsupportedNetworkError) as exc_info:
            await route_service.fetch_route(request_for(btc, usdc_e, chain_id=9999))

        assert "9999" in str(exc_info.value)
        assert exc_info.value.chain_id == 9999
        assert quoting_api.requests == []

    @pytest.mark.asyncio
    async def test_same_tokens(self, route_service, btc):
        with pytest.raises(ValidationError, match="must differ"):
            await route_service.fetch_route(request_for(btc, Token(address=BTC.lower())))

    @pytest.mark.asyncio
    async def test_missing_token(self, route_service, btc):
        with pytest.raises(ValidationError, match="Destination token"):
            await route_service.fetch_route(request_for(btc, None))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", ["0", "-1", "abc", ""])
    async def test_bad_amount(self, route_service, quoting_api, btc, usdc_e, amount):
        with pytest.raises(ValidationError):
            await route_service.fetch_route(request_for(btc, usdc_e, amount=amount))
        assert quoting_api.requests == []

    @pytest.mark.asyncio
    async def test_token_chain_mismatch(self, route_service, btc):
        dst = Token(address=USDC_E, chain_id=3636)

        with pytest.raises(ValidationError, match="does not match"):
            await route_service.fetch_route(request_for(btc, dst))

    @pytest.mark.asyncio
    async def test_bad_part_count(self, route_service, btc, usdc_e):
        with pytest.raises(ValidationError):
            await route_service.fetch_route(request_for(btc, usdc_e, part_count=0))


class TestRouteAssembly:
    """Tests for routed swaps."""

    @pytest.mark.asyncio
    async def test_split_route(self, route_service, quoting_api, btc, usdc_e):
        result = await route_service.fetch_route(request_for(btc, usdc_e))

        assert result.is_wrap is None
        assert result.is_amount_out_error is False
        assert result.route_count == 2
        assert result.distributions == [60, 40]
        assert result.amount_in_per_part == [Decimal("600"), Decimal("400")]
        assert sum(result.amount_in_per_part) == Decimal("1000")
        assert result.amount_out_per_route == [Decimal("1200"), Decimal("800")]
        assert result.amount_out_total == Decimal("2000")
        assert result.part_count == 5

        params = quoting_api.calls(SPLIT_ROUTE)[0].url.params
        assert params["partCount"] == "5"
        assert params["types"] == "1,2"
        assert params["enabledSources"] == "1"

    @pytest.mark.asyncio
    async def test_uneven_split_sums_exactly(self, route_service, quoting_api, btc, usdc_e):
        quoting_api.route = make_route_payload(
            distributions=(33, 33, 34),
            amount_out_routes=["1", "1", "1"],
            amount_out="3",
        )

        result = await route_service.fetch_route(request_for(btc, usdc_e, amount="1001"))

        assert result.amount_in_per_part == [Decimal("330"), Decimal("330"), Decimal("341")]
        assert sum(result.amount_in_per_part) == Decimal("1001")

    @pytest.mark.asyncio
    async def test_offline_single_part(self, route_service, quoting_api, btc, meme):
        await route_service.fetch_route(request_for(btc, meme))

        params = quoting_api.calls(SPLIT_ROUTE)[0].url.params
        assert params["partCount"] == "1"

    @pytest.mark.asyncio
    async def test_explicit_part_count(self, route_service, quoting_api, btc, meme):
        result = await route_service.fetch_route(request_for(btc, meme, part_count=3))

        assert result.part_count == 3
        assert quoting_api.calls(SPLIT_ROUTE)[0].url.params["partCount"] == "3"

    @pytest.mark.asyncio
    async def test_forced_part_count(self, route_service, quoting_api, btc, usdc_e):
        await route_service.fetch_route(
            request_for(btc, usdc_e), RouteConfig(force_part_count=2)
        )

        assert quoting_api.calls(SPLIT_ROUTE)[0].url.params["partCount"] == "2"

    @pytest.mark.asyncio
    async def test_request_liquidity_filters(self, route_service, quoting_api, btc, usdc_e):
        await route_service.fetch_route(request_for(btc, usdc_e, types=[2], enabled_sources=[1, 2]))

        params = quoting_api.calls(SPLIT_ROUTE)[0].url.params
        assert params["types"] == "2"
        assert params["enabledSources"] == "1,2"

    @pytest.mark.asyncio
    async def test_simple_uses_chain_defaults(self, route_service, quoting_api, btc, usdc_e):
        await route_service.fetch_route_simple(request_for(btc, usdc_e, types=[9], enabled_sources=[9]))

        params = quoting_api.calls(SPLIT_ROUTE)[0].url.params
        assert params["types"] == "1,2"
        assert params["enabledSources"] == "1"

    @pytest.mark.asyncio
    async def test_swap_quote(self, route_service, btc, usdc_e):
        quote = await route_service.get_swap_quote(btc, usdc_e, "1000", 3637)

        assert quote == {"amount_out": "2000", "routes": 2}

    @pytest.mark.asyncio
    async def test_to_dict(self, route_service, btc, usdc_e):
        data = (await route_service.fetch_route(request_for(btc, usdc_e))).to_dict()

        assert data["amountOut"] == "2000"
        assert data["amountInParts"] == ["600", "400"]
        assert data["routes"][0][0]["fromToken"] == BTC
        assert data["isWrap"] is None


class TestOnlinePartCount:
    """Online part count through the service."""

    @pytest.mark.asyncio
    async def test_threshold_met(self, route_service, quoting_api, btc, meme):
        quoting_api.thresholds = [
            {"token": BTC, "minimumAmount": "10"},
            {"token": MEME, "minimumAmount": "10"},
        ]

        await route_service.fetch_route(request_for(btc, meme, online_part_count=True))

        assert quoting_api.calls(SPLIT_ROUTE)[0].url.params["partCount"] == "5"

    @pytest.mark.asyncio
    async def test_threshold_failure_still_routes(self, route_service, quoting_api, btc, meme):
        """A failed threshold fetch degrades to the offline count."""
        quoting_api.status[ASSET_MINIMUM] = 500

        result = await route_service.fetch_route(
            request_for(btc, meme), RouteConfig(online_part_count=True)
        )

        assert result.is_amount_out_error is False
        assert quoting_api.calls(SPLIT_ROUTE)[0].url.params["partCount"] == "1"

    @pytest.mark.asyncio
    async def test_cache_shared_across_calls(self, route_service, quoting_api, btc, meme):
        config = RouteConfig(online_part_count=True)

        await route_service.fetch_route(request_for(btc, meme), config)
        await route_service.fetch_route(request_for(btc, meme), config)
        assert len(quoting_api.calls(ASSET_MINIMUM)) == 1

        route_service.clear_threshold_cache()
        await route_service.fetch_route(request_for(btc, meme), config)
        assert len(quoting_api.calls(ASSET_MINIMUM)) == 2


class TestDegenerateAnswers:
    """No usable route is flagged, not raised."""

    @pytest.mark.asyncio
    async def test_no_routes(self, route_service, quoting_api, btc, usdc_e):
        quoting_api.route = make_route_payload(
            distributions=(), amount_out_routes=[], amount_out="0", routes=[]
        )

        result = await route_service.fetch_route(request_for(btc, usdc_e))

        assert result.is_amount_out_error is True
        assert result.amount_in_per_part == []

    @pytest.mark.asyncio
    async def test_zero_output(self, route_service, quoting_api, btc, usdc_e):
        quoting_api.route = make_route_payload(amount_out="0")

        result = await route_service.fetch_route(request_for(btc, usdc_e))
        assert result.is_amount_out_error is True

    @pytest.mark.asyncio
    async def test_empty_route(self, route_service, quoting_api, btc, usdc_e):
        quoting_api.route = make_route_payload(routes=[[make_segment()], []])

        result = await route_service.fetch_route(request_for(btc, usdc_e))
        assert result.is_amount_out_error is True


class TestMalformedAnswers:
    """Inconsistent payloads are service errors."""

    @pytest.mark.asyncio
    async def test_distribution_total(self, route_service, quoting_api, btc, usdc_e):
        quoting_api.route = make_route_payload(distributions=(50, 40))

        with pytest.raises(ServiceFetchError, match="Malformed"):
            await route_service.fetch_route(request_for(btc, usdc_e))

    @pytest.mark.asyncio
    async def test_length_mismatch(self, route_service, quoting_api, btc, usdc_e):
        quoting_api.route = make_route_payload(amount_out_routes=["2000"])

        with pytest.raises(ServiceFetchError, match="Malformed"):
            await route_service.fetch_route(request_for(btc, usdc_e))

    @pytest.mark.asyncio
    async def test_non_finite_output(self, route_service, quoting_api, btc, usdc_e):
        quoting_api.route = make_route_payload(amount_out="NaN")

        with pytest.raises(ServiceFetchError, match="Malformed route payload"):
            await route_service.fetch_route(request_for(btc, usdc_e))

    @pytest.mark.asyncio
    async def test_upstream_error(self, route_service, quoting_api, btc, usdc_e):
        quoting_api.status[SPLIT_ROUTE] = 502

        with pytest.raises(ServiceFetchError):
            await route_service.fetch_route(request_for(btc, usdc_e))


class TestAssemble:
    """Direct tests for QuoteAssembler.assemble."""

    def test_fractional_amount(self):
        quote = SplitRouteQuote(
            routes=[[], []],
            distributions=[50, 50],
            amount_out_routes=[Decimal("1"), Decimal("1")],
            amount_out=Decimal("2"),
        )

        result = QuoteAssembler.assemble(quote, Decimal("0.3"), part_count=2)

        assert result.amount_in_per_part == [Decimal("0.15"), Decimal("0.15")]
        assert result.is_amount_out_error is True


class TestRouteSegment:
    """Tests for segment funding markers."""

    def test_caller_funded(self):
        segment = RouteSegment.from_api(make_segment())

        assert segment.caller_funded is True
        assert segment.router_funded is False

    def test_router_funded(self):
        segment = RouteSegment.from_api(make_segment(**{"from": ROUTER_TARGET}))

        assert segment.caller_funded is False
        assert segment.router_funded is True
        assert segment.to_dict()["from"] == ROUTER_TARGET
