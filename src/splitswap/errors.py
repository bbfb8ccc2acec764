"""Error types raised by the route resolution engine.

Result quality problems (no usable route, zero output) are not errors:
they are reported through ``SwapResult.is_amount_out_error``.
"""

from typing import Any, Optional


class SwapError(Exception):
    """Base class for routing errors with a machine-readable code."""

    code = "SWAP_ERROR"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "details": self.details}


class ValidationError(SwapError):
    """Raised when a swap request is malformed. Not retried."""

    code = "VALIDATION_ERROR"


class UnsupportedNetworkError(SwapError):
    """Raised when a chain id has no contract/address configuration."""

    code = "UNSUPPORTED_NETWORK"

    def __init__(self, chain_id: int):
        super().__init__(f"Unsupported network: {chain_id}", {"chain_id": chain_id})
        self.chain_id = chain_id


class ServiceFetchError(SwapError):
    """Raised on timeout, transport failure, non-2xx or malformed payload."""

    code = "SERVICE_FETCH_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ):
        details: dict[str, Any] = {}
        if status_code is not None:
            details["status_code"] = status_code
        if url:
            details["url"] = url
        super().__init__(message, details)
        self.status_code = status_code
        self.url = url


class ThresholdFetchError(ServiceFetchError):
    """Raised when the minimum-amount thresholds cannot be fetched."""

    code = "THRESHOLD_FETCH_ERROR"


def format_error(error: Any) -> str:
    """Normalise an exception, string or error mapping into a message."""
    if isinstance(error, str):
        return error
    if isinstance(error, SwapError):
        return error.message
    if isinstance(error, dict):
        message = error.get("message") or error.get("error")
        if message:
            return str(message)
    elif isinstance(error, BaseException) and str(error):
        return str(error)
    return "Unknown error occurred"
