"""HTTP transport for webhook notifications.

- HttpClient: Protocol (injectable for tests)
- RealHttpClient: urllib implementation
- MockHttpClient: records posts and replays canned responses
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from cherry import __version__
from cherry.core.result import Err, Ok, Result

__all__ = ["HttpClient", "HttpError", "MockHttpClient", "RealHttpClient"]


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
    def post_json(self, url: str, payload: dict[str, Any]) -> Result[str, HttpError]:
        """POST payload as JSON; Ok holds the response body."""
        ...


class RealHttpClient:
    def __init__(self, timeout: float = 10.0, user_agent: str = f"cherry/{__version__}") -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def post_json(self, url: str, payload: dict[str, Any]) -> Result[str, HttpError]:
        body = json.dumps(payload).encode("utf-8")
        try:
            req = urllib.request.Request(
                url,
                data=body,
                method="POST",
                headers={
                    "User-Agent": self.user_agent,
                    "Content-Type": "application/json",
                },
            )
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                return Ok(response.read().decode("utf-8", errors="replace"))
        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=str(e.reason)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except (ValueError, OSError) as e:
            return Err(HttpError(url=url, status=0, message=str(e)))


class MockHttpClient:
    """Mock HTTP client for testing.

    Usage:
        client = MockHttpClient()
        client.set_response("https://hooks.example/x", "ok")
        client.post_json("https://hooks.example/x", {"text": "hi"})
        assert client.posts == [("https://hooks.example/x", {"text": "hi"})]
    """

    def __init__(self) -> None:
        self._responses: dict[str, str | HttpError] = {}
        self.posts: list[tuple[str, dict[str, Any]]] = []

    def set_response(self, url: str, response: str | HttpError) -> None:
        self._responses[url] = response

    def post_json(self, url: str, payload: dict[str, Any]) -> Result[str, HttpError]:
        self.posts.append((url, payload))

        if url not in self._responses:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))

        response = self._responses[url]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)
