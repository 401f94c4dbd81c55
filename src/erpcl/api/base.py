"""Abstract backend interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class ApiResponse:
    """Successful response envelope ``{success, data, pagination?, message?}``."""

    status_code: int
    data: Any
    total: Optional[int] = None
    message: Optional[str] = None


@dataclass(frozen=True)
class BinaryResponse:
    """Raw response body of a document download."""

    status_code: int
    content_type: str
    content: bytes


class Backend(ABC):
    """Abstract interface to the ERP REST backend.

    ``request`` returns only successful envelopes. Implementations raise
    ``TransportError``/``RequestTimeout`` when no response arrives and
    ``ApiError`` for non-2xx statuses or ``success: false`` bodies.
    """

    @abstractmethod
    def request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json: Any = None,
        timeout: Optional[float] = None,
    ) -> ApiResponse:
        """Send a request and return the parsed envelope."""
        pass

    @abstractmethod
    def download(
        self,
        path: str,
        params: Optional[dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> BinaryResponse:
        """Fetch a binary document (PDF report, order sheet)."""
        pass

    def close(self) -> None:
        """Release any held connections."""
        pass

    def get(self, path: str, params: Optional[dict[str, Any]] = None, timeout: Optional[float] = None) -> ApiResponse:
        return self.request("GET", path, params=params, timeout=timeout)

    def post(self, path: str, json: Any = None, timeout: Optional[float] = None) -> ApiResponse:
        return self.request("POST", path, json=json, timeout=timeout)

    def put(self, path: str, json: Any = None, timeout: Optional[float] = None) -> ApiResponse:
        return self.request("PUT", path, json=json, timeout=timeout)

    def patch(self, path: str, json: Any = None, timeout: Optional[float] = None) -> ApiResponse:
        return self.request("PATCH", path, json=json, timeout=timeout)

    def delete(self, path: str, timeout: Optional[float] = None) -> ApiResponse:
        return self.request("DELETE", path, timeout=timeout)
