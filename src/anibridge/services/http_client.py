"""Single-attempt HTTP fetch client.

ResilientFetchClient performs exactly one request per call and turns
every transport or status failure into a typed AniBridge error. Retrying
is the caller's business (see ``anibridge.services.retry``).
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote

import requests

from anibridge.shared.constants import CatalogEndpoints, HTTPStatusCodes, Timeout
from anibridge.shared.errors import (
    ErrorContext,
    ParseFailureError,
    RateLimitedError,
    RequestFailedError,
    RequestTimeoutError,
    UpstreamUnavailableError,
)

logger = logging.getLogger(__name__)


def parse_retry_after(retry_after: str | None) -> float | None:
    """Parse a Retry-After header, which can be seconds or an HTTP-date.

    Returns:
        Seconds to wait, or None when the header is absent or unreadable
    """
    if not retry_after:
        return None

    value = retry_after.strip()
    if value.isdigit():
        return float(value)

    try:
        retry_date = datetime.strptime(value, "%a, %d %b %Y %H:%M:%S GMT")
        retry_date = retry_date.replace(tzinfo=timezone.utc)
        delta = (retry_date - datetime.now(timezone.utc)).total_seconds()
        return max(0.0, delta)
    except ValueError:
        logger.warning("Could not parse Retry-After header: %s", retry_after)
        return None


def build_proxy_url(target_url: str, proxy_url: str = CatalogEndpoints.PROXY_URL) -> str:
    """Route a target URL through the proxy, which takes it URL-encoded.

    Example:
        >>> build_proxy_url("https://example.org/a?b=1", "https://proxy/?url=")
        'https://proxy/?url=https%3A%2F%2Fexample.org%2Fa%3Fb%3D1'
    """
    return f"{proxy_url}{quote(target_url, safe='')}"


class ResilientFetchClient:
    """Fetch text or JSON with a fixed timeout and typed failures.

    Status mapping:
        - timeout -> RequestTimeoutError
        - connection failure -> UpstreamUnavailableError
        - 429 -> RateLimitedError (with the Retry-After delay, if any)
        - 5xx -> UpstreamUnavailableError
        - other non-2xx -> RequestFailedError

    Attributes:
        session: Shared requests session
        timeout: Per-request timeout in seconds
        proxy_url: Routing proxy prefix for ``proxied=True`` requests
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float = Timeout.DEFAULT,
        proxy_url: str = CatalogEndpoints.PROXY_URL,
    ) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout
        self.proxy_url = proxy_url

    def get_text(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        *,
        proxied: bool = False,
    ) -> str:
        """GET a URL and return the response body as text."""
        return self._request(url, params, headers, proxied=proxied).text

    def get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        *,
        proxied: bool = False,
    ) -> Any:
        """GET a URL and decode the JSON body.

        Raises:
            ParseFailureError: If the body is not valid JSON
        """
        response = self._request(url, params, headers, proxied=proxied)
        try:
            return response.json()
        except ValueError as e:
            raise ParseFailureError(
                "Response body is not valid JSON",
                ErrorContext(operation="get_json", url=url),
                e,
            ) from e

    def close(self) -> None:
        self.session.close()

    def _request(
        self,
        url: str,
        params: dict[str, Any] | None,
        headers: dict[str, str] | None,
        *,
        proxied: bool,
    ) -> requests.Response:
        if proxied:
            if params:
                url = requests.Request("GET", url, params=params).prepare().url or url
                params = None
            request_url = build_proxy_url(url, self.proxy_url)
        else:
            request_url = url

        context = ErrorContext(
            operation="http_get",
            url=url,
            additional_data={"proxied": proxied},
        )

        start = time.perf_counter()
        try:
            response = self.session.get(
                request_url,
                params=params,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise RequestTimeoutError(
                f"Request timed out after {self.timeout:.1f}s",
                context,
                e,
            ) from e
        except requests.exceptions.ConnectionError as e:
            raise UpstreamUnavailableError(
                f"Could not reach upstream: {e!s}",
                context,
                e,
            ) from e
        except requests.exceptions.RequestException as e:
            raise UpstreamUnavailableError(
                f"Request failed: {e!s}",
                context,
                e,
            ) from e

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.debug("GET %s -> %d (%.0f ms)", url, response.status_code, elapsed_ms)

        self._raise_for_status(response, context)
        return response

    @staticmethod
    def _raise_for_status(response: requests.Response, context: ErrorContext) -> None:
        status = response.status_code
        if HTTPStatusCodes.OK_MIN <= status <= HTTPStatusCodes.OK_MAX:
            return

        if status == HTTPStatusCodes.TOO_MANY_REQUESTS:
            retry_after = parse_retry_after(response.headers.get("Retry-After"))
            logger.warning("Rate limited by upstream (retry after: %s)", retry_after)
            raise RateLimitedError("Rate limit exceeded", context, retry_after)

        if HTTPStatusCodes.SERVER_ERROR_MIN <= status <= HTTPStatusCodes.SERVER_ERROR_MAX:
            raise UpstreamUnavailableError(
                f"Upstream server error: HTTP {status}",
                context,
                status_code=status,
            )

        raise RequestFailedError(f"Request failed: HTTP {status}", status, context)
