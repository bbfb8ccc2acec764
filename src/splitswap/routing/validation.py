"""Token and request validation helpers."""

from typing import Optional

from splitswap.errors import ValidationError
from splitswap.routing.base import SwapRequest, Token
from splitswap.utils.amounts import parse_amount


def is_native_token(token: Token, native_address: str) -> bool:
    """Check if a token is the chain's native marker."""
    return token.same_address(native_address)


def is_wrapped_token(token: Token, wrapped_address: str) -> bool:
    """Check if a token is the chain's canonical wrapped token."""
    return token.same_address(wrapped_address)


def validate_tokens(src_token: Optional[Token], dst_token: Optional[Token]) -> bool:
    """Check that both tokens exist, differ, and sit on the same chain."""
    return bool(
        src_token
        and dst_token
        and src_token.address
        and dst_token.address
        and src_token.address.lower() != dst_token.address.lower()
        and src_token.chain_id == dst_token.chain_id
    )


def validate_amount(amount: Optional[str]) -> bool:
    """Check that an amount is a positive finite number."""
    try:
        parse_amount(amount)
    except ValidationError:
        return False
    return True


def validate_request(request: SwapRequest) -> None:
    """Raise ValidationError if the request cannot be routed.

    Token chain ids are optional; when present they must match the
    request's chain id.
    """
    src, dst = request.src_token, request.dst_token
    if src is None or not src.address:
        raise ValidationError("Source token is required")
    if dst is None or not dst.address:
        raise ValidationError("Destination token is required")
    if src.address.lower() == dst.address.lower():
        raise ValidationError(
            "Source and destination tokens must differ",
            {"address": src.address},
        )
    for label, token in (("Source", src), ("Destination", dst)):
        if token.chain_id is not None and token.chain_id != request.chain_id:
            raise ValidationError(
                f"{label} token chain {token.chain_id} does not match chain {request.chain_id}",
                {"token": token.address, "chain_id": request.chain_id},
            )
    for name in ("part_count", "force_part_count"):
        value = getattr(request, name)
        if value is not None and value < 1:
            raise ValidationError(f"{name} must be at least 1, got {value}")
    parse_amount(request.amount_in)
