"""HTTP boundary layer for the route engine.

Contracts are Pydantic models for request/response bodies; controllers
translate them to engine calls and map engine errors to HTTP statuses.
All operations are read-only: plans are returned, never executed.
"""

__all__ = [
    "contracts",
    "controllers",
]
