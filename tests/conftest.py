"""Pytest configuration and fixtures."""

import os
from typing import Any, Callable, Optional

import httpx
import pytest
import pytest_asyncio

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "true"
os.environ.pop("API_KEY", None)

from splitswap.chains import USER_TARGET
from splitswap.config import RouteConfig
from splitswap.routing.base import Token
from splitswap.routing.client import API_ENDPOINTS, ApiClient
from splitswap.routing.service import RouteService

BASE_URL = "https://quote.test"
ASSET_MINIMUM = API_ENDPOINTS["ASSET_MINIMUM"]
SPLIT_ROUTE = API_ENDPOINTS["SPLIT_ROUTE"]

BTC = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"
PBTC = "0x0D2437F93Fed6EA64Ef01cCde385FB1263910C56"
WBTC_TESTNET = "0x233631132FD56c8f86D1FC97F0b82420a8d20af3"
USDC_E = "0x29eE6138DD4C9815f46D34a4A1ed48F46758A402"
MEME = "0x1111111111111111111111111111111111111111"
POOL = "0x2222222222222222222222222222222222222222"
ROUTER = "0xA5E0AE4e5103dc71cA290AA3654830442357A489"


def make_segment(src: str = BTC, dst: str = USDC_E, part: str = "100", **overrides) -> dict:
    """Build one route segment as the quoting API returns it."""
    segment = {
        "routerAddress": ROUTER,
        "lpAddress": POOL,
        "fromToken": src,
        "toToken": dst,
        "from": USER_TARGET,
        "to": USER_TARGET,
        "part": part,
        "amountAfterFee": part,
        "dexInterface": 2,
    }
    segment.update(overrides)
    return segment


def make_route_payload(
    distributions: tuple = (60, 40),
    amount_out_routes: Optional[list[str]] = None,
    amount_out: str = "2000",
    routes: Optional[list[list[dict]]] = None,
) -> dict:
    """Build the data object of a split-route answer."""
    if routes is None:
        routes = [[make_segment()] for _ in distributions]
    if amount_out_routes is None:
        amount_out_routes = ["1200", "800"][: len(distributions)]
    return {
        "routes": routes,
        "distributions": list(distributions),
        "amountOutRoutes": amount_out_routes,
        "amountOut": amount_out,
    }


class FakeQuotingApi:
    """In-process stand-in for the quoting service, served via httpx.MockTransport.

    Tests set ``thresholds``/``route`` for normal answers, ``status`` for
    error codes, ``errors`` for transport failures and ``bodies`` for raw
    (possibly malformed) response bodies. Every request is recorded.
    """

    def __init__(self):
        self.thresholds: list[dict] = []
        self.route: dict = make_route_payload()
        self.status: dict[str, int] = {}
        self.errors: dict[str, Callable[[httpx.Request], Exception]] = {}
        self.bodies: dict[str, Any] = {}
        self.requests: list[httpx.Request] = []

    def calls(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path in self.errors:
            raise self.errors[path](request)
        status = self.status.get(path, 200)
        if status != 200:
            return httpx.Response(status, json={"success": False, "error": "upstream failure"})
        if path in self.bodies:
            body = self.bodies[path]
            if isinstance(body, (bytes, str)):
                return httpx.Response(200, content=body)
            return httpx.Response(200, json=body)
        if path == ASSET_MINIMUM:
            return httpx.Response(200, json={"success": True, "data": self.thresholds})
        if path == SPLIT_ROUTE:
            return httpx.Response(200, json={"success": True, "data": self.route})
        return httpx.Response(404, json={"success": False, "error": "not found"})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def btc() -> Token:
    return Token(address=BTC, symbol="BTC", name="Bitcoin", decimals=18)


@pytest.fixture
def pbtc() -> Token:
    return Token(address=PBTC, symbol="pBTC", name="Pegged BTC", decimals=18)


@pytest.fixture
def usdc_e() -> Token:
    return Token(address=USDC_E, symbol="USDC.e", name="Bridged USDC", decimals=6)


@pytest.fixture
def meme() -> Token:
    return Token(address=MEME, symbol="MEME", name="Meme Token", decimals=18)


@pytest.fixture
def quoting_api() -> FakeQuotingApi:
    """Fake quoting service with a default two-route answer."""
    return FakeQuotingApi()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest_asyncio.fixture
async def api_client(quoting_api):
    """ApiClient talking to the fake quoting service."""
    client = ApiClient(
        base_url=BASE_URL,
        api_key="test-key",
        transport=quoting_api.transport(),
    )
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def route_service(quoting_api, clock):
    """RouteService whose clients all talk to the fake quoting service."""
    service = RouteService(
        config=RouteConfig(api_base_url=BASE_URL, api_key="test-key"),
        clock=clock,
        transport=quoting_api.transport(),
    )
    yield service
    await service.aclose()
