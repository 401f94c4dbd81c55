"""requests-based implementation of the Backend interface."""

import logging
from typing import Any, Optional

import requests

from erpcl.api.base import ApiResponse, Backend, BinaryResponse
from erpcl.api.errors import ApiError, MalformedResponse, RequestTimeout, TransportError
from erpcl.domain.session import Session

logger = logging.getLogger(__name__)


class HttpBackend(Backend):
    """Talks to the ERP REST API over HTTP."""

    def __init__(
        self,
        base_url: str,
        session: Session,
        timeout: float = 5.0,
        http: Optional[requests.Session] = None,
    ):
        """Initialize HTTP backend.

        Args:
            base_url: API root, e.g. 'http://localhost:5000/api'
            session: Session supplying the bearer token for every request
            timeout: Default timeout in seconds for every request
            http: Optional preconfigured requests session
        """
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.timeout = timeout
        self.http = http if http is not None else requests.Session()
        self.http.headers.update({"Content-Type": "application/json"})

    def url_for(self, path: str) -> str:
        """Build the absolute URL for an endpoint path."""
        if path.startswith(("http://", "https://")):
            return path
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.base_url}{path}"

    def _send(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]],
        json: Any,
        timeout: Optional[float],
    ) -> requests.Response:
        url = self.url_for(path)
        if params:
            params = {key: value for key, value in params.items() if value is not None}
        logger.debug("%s %s params=%s", method, url, params)
        try:
            return self.http.request(
                method,
                url,
                params=params or None,
                json=json,
                headers=self.session.authorization_header(),
                timeout=timeout if timeout is not None else self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise RequestTimeout(f"{method} {url} timed out") from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return f"Error {response.status_code}: {response.reason}"

    def request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json: Any = None,
        timeout: Optional[float] = None,
    ) -> ApiResponse:
        response = self._send(method, path, params, json, timeout)

        if not response.ok:
            message = self._error_message(response)
            logger.debug("%s %s -> %s: %s", method, path, response.status_code, message)
            raise ApiError(message, response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            raise MalformedResponse(
                f"Response from {path} is not valid JSON", response.status_code
            ) from e
        if not isinstance(body, dict):
            raise MalformedResponse(
                f"Response from {path} is not a JSON object", response.status_code
            )
        if body.get("success") is False:
            raise ApiError(body.get("error") or "Request failed", response.status_code)

        pagination = body.get("pagination") or {}
        total = pagination.get("total") if isinstance(pagination, dict) else None
        if total is None:
            total = body.get("total")
        return ApiResponse(
            status_code=response.status_code,
            data=body.get("data"),
            total=total,
            message=body.get("message"),
        )

    def download(
        self,
        path: str,
        params: Optional[dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> BinaryResponse:
        response = self._send("GET", path, params, None, timeout)
        if not response.ok:
            raise ApiError(self._error_message(response), response.status_code)
        return BinaryResponse(
            status_code=response.status_code,
            content_type=response.headers.get("content-type", ""),
            content=response.content,
        )

    def close(self) -> None:
        self.http.close()
