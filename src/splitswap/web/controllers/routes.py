"""Route API endpoints.

Engine errors map to HTTP statuses:
- ValidationError -> 422
- UnsupportedNetworkError -> 400
- ServiceFetchError -> 502

A degenerate route (no usable path) is still a 200 with
``is_amount_out_error`` set.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from splitswap.chains import get_network_config, get_supported_networks
from splitswap.errors import ServiceFetchError, SwapError, UnsupportedNetworkError, ValidationError
from splitswap.routing.batch import BatchItem
from splitswap.routing.factory import create_route_service
from splitswap.routing.service import RouteService
from splitswap.web.contracts.routes import (
    BatchItemResponse,
    BatchRouteRequest,
    BatchRouteResponse,
    NetworkInfo,
    NetworkListResponse,
    PartCountRequest,
    PartCountResponse,
    QuoteRequest,
    QuoteResponse,
    RouteRequest,
    RouteResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/routes", tags=["routes"])


def get_route_service(request: Request) -> RouteService:
    """Return the application's shared route service, creating it on first use."""
    service = getattr(request.app.state, "route_service", None)
    if service is None:
        service = create_route_service()
        request.app.state.route_service = service
    return service


def _http_error(error: SwapError) -> HTTPException:
    if isinstance(error, ValidationError):
        return HTTPException(status_code=422, detail=error.message)
    if isinstance(error, UnsupportedNetworkError):
        return HTTPException(status_code=400, detail=error.message)
    if isinstance(error, ServiceFetchError):
        logger.warning(f"Quoting service failure: {error.message}")
        return HTTPException(status_code=502, detail=error.message)
    return HTTPException(status_code=500, detail=error.message)


@router.post("", response_model=RouteResponse)
async def fetch_route(
    body: RouteRequest,
    service: RouteService = Depends(get_route_service),
) -> RouteResponse:
    """Fetch a split swap route.

    Set ``simple`` to ignore liquidity filters and use the chain's
    defaults. This is a READ-ONLY operation - nothing is executed.
    """
    request = body.to_swap_request()
    try:
        if body.simple:
            result = await service.fetch_route_simple(request)
        else:
            result = await service.fetch_route(request)
    except SwapError as e:
        raise _http_error(e) from e
    return RouteResponse.from_result(result)


@router.post("/batch", response_model=BatchRouteResponse)
async def fetch_batch(
    body: BatchRouteRequest,
    service: RouteService = Depends(get_route_service),
) -> BatchRouteResponse:
    """Fetch many routes concurrently.

    Always 200: each item reports its own success or error, in input order.
    """
    items = [
        BatchItem(
            request=item.request.to_swap_request(),
            config=item.config.to_route_config() if item.config else None,
        )
        for item in body.items
    ]
    results = await service.run_batch(items)

    responses = [
        BatchItemResponse(
            success=r.success,
            data=RouteResponse.from_result(r.data) if r.success and r.data else None,
            error=r.error,
        )
        for r in results
    ]
    succeeded = sum(1 for r in results if r.success)
    return BatchRouteResponse(
        results=responses,
        succeeded=succeeded,
        failed=len(results) - succeeded,
    )


@router.post("/quote", response_model=QuoteResponse)
async def get_quote(
    body: QuoteRequest,
    service: RouteService = Depends(get_route_service),
) -> QuoteResponse:
    """Get the total output and route count for a swap."""
    try:
        quote = await service.get_swap_quote(
            body.src_token.to_token(),
            body.dst_token.to_token(),
            body.amount_in,
            body.chain_id,
        )
    except SwapError as e:
        raise _http_error(e) from e
    return QuoteResponse(**quote)


@router.post("/part-count", response_model=PartCountResponse)
async def decide_part_count(
    body: PartCountRequest,
    service: RouteService = Depends(get_route_service),
) -> PartCountResponse:
    """Decide how many parts a swap would be split into.

    Online failures degrade to the offline decision; the response's
    ``outcome`` tells which path was taken.
    """
    decision = await service.decide_part_count(
        body.src_token.to_token() if body.src_token else None,
        body.dst_token.to_token() if body.dst_token else None,
        body.chain_id,
        body.amount_in,
        mode=body.to_mode(service.config.part_count_default),
    )
    return PartCountResponse.from_decision(decision)


@router.post("/cache/clear")
async def clear_cache(service: RouteService = Depends(get_route_service)) -> dict:
    """Drop cached minimum-amount thresholds."""
    service.clear_threshold_cache()
    return {"success": True}


@router.get("/networks", response_model=NetworkListResponse)
async def list_networks() -> NetworkListResponse:
    """List supported networks and their contract addresses."""
    networks = []
    for chain_id in get_supported_networks():
        config = get_network_config(chain_id)
        networks.append(
            NetworkInfo(
                chain_id=config.chain_id,
                name=config.name,
                is_testnet=config.is_testnet,
                native_address=config.native_address,
                wrapped_address=config.wrapped_address,
                router_address=config.router_address,
                query_address=config.query_address,
            )
        )
    return NetworkListResponse(networks=networks)
