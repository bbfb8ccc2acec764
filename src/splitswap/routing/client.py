"""Client for the quoting API.

Wraps a single ``httpx.AsyncClient`` so one connection pool and header set
is shared by every caller that holds the client.

Endpoints:
- GET /api/sdk/asset/minimum      per-token minimum amounts (thresholds)
- GET /api/sdk/bestpath/split     split route for a given part count
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Sequence

import httpx

from splitswap.config import API_KEY_HEADER, DEFAULT_API_BASE_URL, DEFAULT_TIMEOUT, RouteConfig
from splitswap.errors import ServiceFetchError
from splitswap.routing.base import RouteSegment, SplitRouteQuote, ThresholdRecord

logger = logging.getLogger(__name__)

API_ENDPOINTS = {
    "ASSET_MINIMUM": "/api/sdk/asset/minimum",
    "SPLIT_ROUTE": "/api/sdk/bestpath/split",
}


class ApiClient:
    """Async client for the quoting service."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        api_key: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        headers: Optional[dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            base_url: API base URL
            api_key: Optional API key, sent as the authen-key header
            timeout: Default request timeout in seconds
            headers: Additional headers for every request
            transport: Optional httpx transport (tests use MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers=self._build_headers(headers),
            transport=transport,
        )

    @classmethod
    def from_config(
        cls,
        config: RouteConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "ApiClient":
        return cls(
            base_url=config.api_base_url or DEFAULT_API_BASE_URL,
            api_key=config.api_key,
            timeout=config.timeout or DEFAULT_TIMEOUT,
            headers=config.headers,
            transport=transport,
        )

    def _build_headers(self, extra: Optional[dict[str, str]]) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers[API_KEY_HEADER] = self.api_key
        if extra:
            headers.update(extra)
        return headers

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
        return False

    @property
    def is_closed(self) -> bool:
        return self._http.is_closed

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _get_json(
        self,
        path: str,
        params: Optional[dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """GET ``path`` and return the ``data`` field of a success envelope."""
        url = f"{self.base_url}{path}"
        try:
            response = await self._http.get(
                path,
                params=params,
                timeout=timeout if timeout is not None else self.timeout,
            )
        except httpx.TimeoutException as e:
            raise ServiceFetchError(f"Request timed out: {url}", url=url) from e
        except httpx.HTTPError as e:
            raise ServiceFetchError(f"Request failed: {type(e).__name__}: {e}", url=url) from e

        if response.status_code != 200:
            logger.warning(f"Quoting API error: {response.status_code} - {response.text[:200]}")
            raise ServiceFetchError(
                f"API request failed with status {response.status_code}",
                status_code=response.status_code,
                url=url,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise ServiceFetchError(f"Malformed JSON from {url}", url=url) from e

        if not isinstance(payload, dict):
            raise ServiceFetchError(f"Unexpected payload from {url}", url=url)
        if not payload.get("success", True):
            raise ServiceFetchError(
                f"API request failed: {payload.get('error') or 'Unknown error'}",
                status_code=response.status_code,
                url=url,
            )
        return payload.get("data")

    async def get_asset_minimum(
        self,
        chain_id: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> list[ThresholdRecord]:
        """Fetch per-token minimum amounts.

        A token missing from the answer has no known threshold; it is not
        treated as zero.
        """
        params = {"chainId": chain_id} if chain_id is not None else None
        data = await self._get_json(API_ENDPOINTS["ASSET_MINIMUM"], params=params, timeout=timeout)
        if data is None:
            return []
        if not isinstance(data, list):
            raise ServiceFetchError("Malformed threshold payload: expected a list")

        records = []
        for item in data:
            try:
                records.append(
                    ThresholdRecord(
                        token_address=str(item["token"]),
                        minimum_amount=_parse_decimal(item["minimumAmount"]),
                        chain_id=_parse_chain_id(item.get("chainId")),
                    )
                )
            except (KeyError, TypeError, ValueError, InvalidOperation) as e:
                raise ServiceFetchError(f"Malformed threshold record: {item!r}") from e
        logger.debug(f"Fetched {len(records)} threshold record(s)")
        return records

    async def get_split_route(
        self,
        src_address: str,
        dst_address: str,
        amount_in: str,
        part_count: int,
        chain_id: int,
        types: Sequence[int],
        enabled_sources: Sequence[int],
    ) -> SplitRouteQuote:
        """Fetch the best split route for ``part_count`` parts."""
        params = {
            "src": src_address,
            "dst": dst_address,
            "amountIn": amount_in,
            "partCount": part_count,
            "chainId": chain_id,
            "types": ",".join(str(t) for t in types),
            "enabledSources": ",".join(str(s) for s in enabled_sources),
        }
        logger.debug(
            f"Requesting split route {src_address} -> {dst_address} "
            f"amount={amount_in} parts={part_count} chain={chain_id}"
        )
        data = await self._get_json(API_ENDPOINTS["SPLIT_ROUTE"], params=params)
        if not isinstance(data, dict):
            raise ServiceFetchError("Malformed route payload: expected an object")

        try:
            routes = [
                [RouteSegment.from_api(segment) for segment in route]
                for route in data.get("routes") or []
            ]
            distributions = [int(d) for d in data.get("distributions") or []]
            amount_out_routes = [_parse_decimal(a) for a in data.get("amountOutRoutes") or []]
            amount_out = _parse_decimal(data.get("amountOut", "0"))
        except (KeyError, TypeError, ValueError, InvalidOperation) as e:
            raise ServiceFetchError(f"Malformed route payload: {e}") from e

        return SplitRouteQuote(
            routes=routes,
            distributions=distributions,
            amount_out_routes=amount_out_routes,
            amount_out=amount_out,
        )


def _parse_decimal(value: Any) -> Decimal:
    """Parse a service amount; NaN and infinities are malformed."""
    result = Decimal(str(value))
    if not result.is_finite():
        raise ValueError(f"non-finite amount {value!r}")
    return result


def _parse_chain_id(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)
