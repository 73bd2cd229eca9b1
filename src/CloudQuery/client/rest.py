"""REST client for the document data service.

Performs authenticated requests with retry/backoff and turns every outcome
into a `Response`. Network and service failures are reported through
`Response.error`, never raised.
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import Any, Mapping

import requests

from CloudQuery.core.errors import RemoteError
from CloudQuery.utils.log import log

DEFAULT_API_VERSION = "1.1"
DEFAULT_TIMEOUT = 30.0
MAX_ATTEMPTS = 3
BASE_PAUSE = 0.8
MAX_SLEEP = 8.0
RETRYABLE_STATUS = {429, 500, 502, 503, 504}

NETWORK_ERROR_CODE = -1
INVALID_RESPONSE_CODE = -2

HEADERS = {
    "User-Agent": "cloudquery/0.1",
    "Accept": "application/json",
}

_SPECIAL_ENDPOINTS = {
    "_User": "users",
    "_Role": "roles",
    "_Installation": "installations",
    "_File": "files",
}


def endpoint_for(class_name: str) -> str:
    """Return the REST path serving objects of `class_name`."""
    return _SPECIAL_ENDPOINTS.get(class_name, f"classes/{class_name}")


@dataclass(frozen=True, slots=True)
class Response:
    """Outcome of one REST request.

    Attributes:
        value: Decoded JSON body when it is an object.
        error: Failure cause, None on success.
    """

    value: Mapping[str, Any] | None = None
    error: RemoteError | None = None

    @property
    def results(self) -> list[dict[str, Any]]:
        """Object documents listed under `results`, if any."""
        if not self.value:
            return []
        items = self.value.get("results", [])
        if not isinstance(items, list):
            return []
        return [item for item in items if isinstance(item, dict)]

    @property
    def count(self) -> int | None:
        if not self.value:
            return None
        count = self.value.get("count")
        if isinstance(count, bool) or not isinstance(count, int):
            return None
        return count


class RestClient:
    """Low-level HTTP client for the data service REST API."""

    def __init__(
        self,
        *,
        base_url: str,
        app_id: str,
        app_key: str,
        api_version: str = DEFAULT_API_VERSION,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = MAX_ATTEMPTS,
        session: requests.Session | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("base_url cannot be empty")
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self._session = session or requests.Session()
        self._session.headers.update(HEADERS)
        self._session.headers.update({"X-LC-Id": app_id, "X-LC-Key": app_key})

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def __enter__(self) -> RestClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def url(self, endpoint: str) -> str:
        return f"{self.base_url}/{self.api_version}/{endpoint.lstrip('/')}"

    def request(
        self,
        method: str,
        endpoint: str,
        parameters: Mapping[str, Any] | None = None,
    ) -> Response:
        """Send one request and wrap the outcome.

        Args:
            method: HTTP method, e.g. "GET".
            endpoint: Path relative to the versioned API root.
            parameters: Query string for GET, JSON body otherwise.

        Returns:
            Response with either a decoded body or an error.
        """
        method = method.upper()
        url = self.url(endpoint)
        kwargs: dict[str, Any] = {"timeout": self.timeout}
        if parameters is not None:
            if method == "GET":
                kwargs["params"] = dict(parameters)
            else:
                kwargs["json"] = dict(parameters)

        log.debug("REST %s %s params=%s", method, url, parameters)
        try:
            response = self._request_with_retry(method, url, **kwargs)
        except (requests.Timeout, requests.ConnectionError) as error:
            log.warning("REST %s %s network failure: %s", method, url, error)
            return Response(error=RemoteError(NETWORK_ERROR_CODE, str(error)))
        except requests.RequestException as error:
            log.warning("REST %s %s request failure: %s", method, url, error)
            return Response(error=RemoteError(NETWORK_ERROR_CODE, str(error)))

        return self._parse_response(response)

    def _request_with_retry(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """Issue a request, retrying transient failures.

        Retryable statuses that persist after the last attempt are returned as
        they are, so the caller can report the service's error body.
        """
        last_error: Exception | None = None
        for attempt in range(1, self.max_retries + 1):
            try:
                response = self._session.request(method, url, **kwargs)
                if response.status_code not in RETRYABLE_STATUS or attempt == self.max_retries:
                    return response
                log.debug("REST retryable status=%s attempt=%d/%d", response.status_code, attempt, self.max_retries)
            except (requests.Timeout, requests.ConnectionError) as error:
                last_error = error
                if attempt == self.max_retries:
                    raise
                log.debug("REST retry attempt=%d/%d error=%s", attempt, self.max_retries, error)
            time.sleep(min(BASE_PAUSE * (2 ** (attempt - 1)) + random.uniform(0, 0.3), MAX_SLEEP))

        assert last_error is not None
        raise last_error

    @staticmethod
    def _parse_response(response: requests.Response) -> Response:
        try:
            body = response.json()
        except ValueError:
            body = None

        if response.status_code >= 400:
            if isinstance(body, dict) and "error" in body:
                code = body.get("code")
                error = RemoteError(
                    code if isinstance(code, int) else response.status_code,
                    str(body["error"]),
                    status_code=response.status_code,
                )
            else:
                error = RemoteError(
                    response.status_code,
                    response.reason or f"HTTP {response.status_code}",
                    status_code=response.status_code,
                )
            log.debug("REST error response: %s", error)
            return Response(error=error)

        if not isinstance(body, dict):
            return Response(
                error=RemoteError(INVALID_RESPONSE_CODE, "Response body is not a JSON object", status_code=response.status_code)
            )
        return Response(value=body)
