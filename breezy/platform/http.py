"""HTTP client abstraction for the GitHub REST API.

This module provides:
- HttpClient: Protocol for JSON requests (injectable for tests)
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Mock implementation for testing
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from breezy.core.result import Err, Ok, Result

__all__ = [
    "HttpClient",
    "RealHttpClient",
    "MockHttpClient",
    "HttpError",
    "HttpCall",
]


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for JSON-over-HTTP operations.

    This abstraction allows injecting mock clients for testing,
    avoiding real network calls in unit tests.
    """

    def request_json(
        self,
        method: str,
        url: str,
        payload: object | None = None,
    ) -> Result[object, HttpError]:
        """Send a request and parse the JSON response.

        Args:
            method: HTTP method (GET, POST, PATCH, ...)
            url: Absolute URL
            payload: JSON-serializable request body, if any

        Returns:
            Ok with the parsed JSON (None for an empty body), or Err with HttpError
        """
        ...


class RealHttpClient:
    """Real HTTP client using urllib.

    Handles:
    - HTTPS with system certificates
    - Bearer token authentication
    - JSON encoding and decoding
    - Timeout handling
    """

    def __init__(
        self,
        *,
        token: str | None = None,
        timeout: float = 30.0,
        user_agent: str = "breezy",
        headers: dict[str, str] | None = None,
    ) -> None:
        """Initialize HTTP client.

        Args:
            token: Bearer token sent as Authorization header
            timeout: Request timeout in seconds
            user_agent: User-Agent header value
            headers: Extra headers sent with every request
        """
        self.timeout = timeout
        self._headers = {"User-Agent": user_agent, **(headers or {})}
        if token:
            self._headers["Authorization"] = f"Bearer {token}"
        self._ssl_context = ssl.create_default_context()

    def _request(self, method: str, url: str, data: bytes | None) -> Result[bytes, HttpError]:
        headers = dict(self._headers)
        if data is not None:
            headers["Content-Type"] = "application/json"
        try:
            req = urllib.request.Request(url, data=data, headers=headers, method=method)
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                return Ok(response.read())
        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=_http_error_message(e)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except ValueError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

    def request_json(
        self,
        method: str,
        url: str,
        payload: object | None = None,
    ) -> Result[object, HttpError]:
        data = None if payload is None else json.dumps(payload).encode("utf-8")
        result = self._request(method, url, data)
        if isinstance(result, Err):
            return result

        raw = result.value
        if not raw.strip():
            return Ok(None)
        try:
            return Ok(json.loads(raw.decode("utf-8")))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(HttpError(url=url, status=0, message=f"JSON parse error: {e}"))


def _http_error_message(error: urllib.error.HTTPError) -> str:
    # GitHub puts the useful part in the JSON body ({"message": ...}).
    try:
        body: object = json.loads(error.read().decode("utf-8"))
    except (OSError, ValueError):
        return str(error.reason)
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return f"{error.reason}: {body['message']}"
    return str(error.reason)


@dataclass(frozen=True, slots=True)
class HttpCall:
    """A request recorded by MockHttpClient."""

    method: str
    url: str
    payload: object | None = None


def _empty_calls() -> list[HttpCall]:
    return []


@dataclass
class MockHttpClient:
    """Mock HTTP client for testing.

    Responses are keyed by (method, url). Unknown requests return a 404.

    Usage:
        client = MockHttpClient()
        client.set_json("GET", "https://api.github.com/user", {"login": "octocat"})
        result = client.request_json("GET", "https://api.github.com/user")
        assert result == Ok({"login": "octocat"})
    """

    calls: list[HttpCall] = field(default_factory=_empty_calls)
    _responses: dict[tuple[str, str], object] = field(default_factory=dict)

    def set_json(self, method: str, url: str, response: object | HttpError) -> None:
        """Set the response for a method and URL."""
        self._responses[(method.upper(), url)] = response

    def request_json(
        self,
        method: str,
        url: str,
        payload: object | None = None,
    ) -> Result[object, HttpError]:
        self.calls.append(HttpCall(method=method.upper(), url=url, payload=payload))

        key = (method.upper(), url)
        if key not in self._responses:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))

        response = self._responses[key]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)
