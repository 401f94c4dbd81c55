"""Backend access layer for erpcl."""

from erpcl.api.base import ApiResponse, Backend, BinaryResponse
from erpcl.api.loader import LoadResult, LoadState, load

__all__ = [
    "ApiResponse",
    "Backend",
    "BinaryResponse",
    "LoadResult",
    "LoadState",
    "load",
]
