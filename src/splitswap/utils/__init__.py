"""Utility modules for splitswap."""

from splitswap.utils.amounts import (
    from_token_amount,
    parse_amount,
    split_amount,
    to_token_amount,
)

__all__ = [
    "from_token_amount",
    "parse_amount",
    "split_amount",
    "to_token_amount",
]
