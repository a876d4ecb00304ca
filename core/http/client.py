"""
HTTP Client

Provides a blocking HTTP client shared by the resource, storage and
archive transfer clients.
"""

from __future__ import annotations

import json as jsonlib
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Optional

import requests

from core.config.runtime import HttpConfig


logger = logging.getLogger(__name__)


@dataclass
class HttpResponse:
    """
    Response from an HTTP request.
    """
    status_code: int
    content: bytes
    headers: dict[str, str] = field(default_factory=dict)
    url: str = ""
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        """Check if request was successful (2xx status)."""
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        """Get response content as text."""
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Parse response as JSON."""
        return jsonlib.loads(self.content)


class HttpError(Exception):
    """HTTP request error."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Optional[HttpResponse] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class HttpClient:
    """
    Blocking HTTP client.

    No retries and no timeout enforcement beyond what the config asks for;
    a single failed attempt is reported to the caller.

    Usage:
        client = HttpClient(config=ClientConfig(...).http)

        response = client.get("http://controller/v1/packages")
        if response.ok:
            data = response.json()
    """

    def __init__(
        self,
        config: Optional[HttpConfig] = None,
        *,
        default_headers: Optional[dict[str, str]] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize HTTP client.

        Args:
            config: HTTP settings (timeout, user agent, proxy)
            default_headers: Headers to include in all requests
            session: Pre-built session, mainly for tests
        """
        self.config = config or HttpConfig()
        self.default_headers = {"User-Agent": self.config.user_agent}
        if default_headers:
            self.default_headers.update(default_headers)
        self._session = session

    def _get_session(self) -> requests.Session:
        """Lazy-create the requests session."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update(self.default_headers)
            if self.config.proxy:
                self._session.proxies = {
                    "http": self.config.proxy,
                    "https": self.config.proxy,
                }
        return self._session

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, Any]] = None,
        data: Optional[Any] = None,
        json: Optional[Any] = None,
        files: Optional[dict[str, Any]] = None,
    ) -> HttpResponse:
        """
        Make an HTTP request.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Request URL
            headers: Additional headers
            params: Query parameters
            data: Request body (form data)
            json: Request body (JSON)
            files: Multipart file fields

        Returns:
            HttpResponse with status, content, and headers

        Raises:
            HttpError: on connection or transport failure
        """
        session = self._get_session()

        request_headers = dict(self.default_headers)
        if headers:
            request_headers.update(headers)

        logger.debug("%s %s", method, url)
        started = time.monotonic()
        try:
            response = session.request(
                method=method,
                url=url,
                headers=request_headers,
                params=params,
                data=data,
                json=json,
                files=files,
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            raise HttpError(f"{method} {url} failed: {e}") from e

        return HttpResponse(
            status_code=response.status_code,
            content=response.content,
            headers=dict(response.headers),
            url=str(response.url),
            elapsed_ms=(time.monotonic() - started) * 1000,
        )

    def get(
        self,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> HttpResponse:
        """Make a GET request."""
        return self.request("GET", url, headers=headers, params=params)

    def post(
        self,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, Any]] = None,
        data: Optional[Any] = None,
        json: Optional[Any] = None,
        files: Optional[dict[str, Any]] = None,
    ) -> HttpResponse:
        """Make a POST request."""
        return self.request(
            "POST", url,
            headers=headers,
            params=params,
            data=data,
            json=json,
            files=files,
        )

    def put(
        self,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, Any]] = None,
        data: Optional[Any] = None,
        json: Optional[Any] = None,
    ) -> HttpResponse:
        """Make a PUT request."""
        return self.request(
            "PUT", url,
            headers=headers,
            params=params,
            data=data,
            json=json,
        )

    def delete(
        self,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> HttpResponse:
        """Make a DELETE request."""
        return self.request("DELETE", url, headers=headers, params=params)

    def close(self) -> None:
        """Close the HTTP session."""
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()
