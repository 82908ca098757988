"""Translation of raw transport and SDK errors into GitHub client exceptions.

githubkit raises ``RequestFailed`` for HTTP error responses (carrying the
response and the originating request), ``RequestTimeout`` when the transport
times out and ``RequestError`` for anything else that went wrong while
sending. ``translate_error`` maps all of these, plus arbitrary exceptions,
onto exactly one member of the error taxonomy.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from githubkit.exception import RequestError, RequestTimeout

from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubNetworkError,
    GitHubNotFoundError,
    GitHubPermissionError,
    GitHubRateLimitError,
    GitHubServerError,
    GitHubUnknownError,
    GitHubValidationError,
)

DEFAULT_API_URL = "https://api.github.com"

_CONNECTION_MARKERS = ("ENOTFOUND", "ECONNREFUSED", "ECONNRESET")
_TIMEOUT_MARKERS = ("timeout", "timed out")


def translate_error(error: BaseException, api_url: str = DEFAULT_API_URL) -> GitHubClientError:
    """Map a raw error onto the GitHub error taxonomy.

    Never raises. Errors that are already ``GitHubClientError`` instances
    are returned unchanged so translation is idempotent.

    Args:
        error: Exception raised by the transport, the SDK or our own code
        api_url: API base URL stripped from request URLs in not-found errors

    Returns:
        The classified exception (not raised)
    """
    if isinstance(error, GitHubClientError):
        return error

    response = getattr(error, "response", None)
    status = _status_code(error, response)
    if status is None:
        return _translate_transport_error(error)

    headers = normalize_headers(getattr(response, "headers", None))

    if status == 401:
        return GitHubAuthenticationError()
    if status == 403:
        if headers.get("x-ratelimit-remaining") == "0":
            return GitHubRateLimitError(parse_reset_time(headers.get("x-ratelimit-reset")))
        return GitHubPermissionError(_describe_action(error, api_url))
    if status == 404:
        return GitHubNotFoundError(_resource_path(error, api_url) or "resource")
    if status == 422:
        return GitHubValidationError(_server_message(response) or "Invalid request parameters")
    return GitHubServerError(status, f"GitHub API error ({status}): {error}")


def normalize_headers(headers: Any) -> dict[str, str]:
    """Lower-case header names so lookups work for dicts and httpx.Headers alike."""
    if headers is None:
        return {}
    items = headers.items() if hasattr(headers, "items") else headers
    try:
        return {str(key).lower(): str(value) for key, value in items}
    except (TypeError, ValueError):
        return {}


def parse_reset_time(value: str | None) -> datetime | None:
    """Parse an ``x-ratelimit-reset`` header (Unix seconds) into a UTC datetime.

    Returns:
        The reset time, or None if the header is missing, zero or malformed
    """
    if not value:
        return None
    try:
        seconds = int(value)
    except ValueError:
        return None
    if seconds <= 0:
        return None
    return datetime.fromtimestamp(seconds, tz=UTC)


def _status_code(error: BaseException, response: Any) -> int | None:
    status = getattr(response, "status_code", None)
    if status is None:
        status = getattr(error, "status", None)
    if isinstance(status, int) and not isinstance(status, bool):
        return status
    return None


def _translate_transport_error(error: BaseException) -> GitHubClientError:
    message = str(error)
    lowered = message.lower()

    if any(marker in message for marker in _CONNECTION_MARKERS):
        return GitHubNetworkError(GitHubNetworkError.CONNECTION)
    if isinstance(error, (RequestTimeout, TimeoutError)) or any(
        marker in lowered for marker in _TIMEOUT_MARKERS
    ):
        return GitHubNetworkError(GitHubNetworkError.TIMEOUT)
    if isinstance(error, (RequestError, ConnectionError)):
        return GitHubNetworkError(GitHubNetworkError.CONNECTION)

    return GitHubUnknownError(message or type(error).__name__)


def _request_url(error: BaseException) -> str | None:
    request = getattr(error, "request", None)
    if request is None:
        response = getattr(error, "response", None)
        request = getattr(response, "raw_request", None)
    url = getattr(request, "url", None)
    if url is None:
        return None
    return str(url)


def _resource_path(error: BaseException, api_url: str) -> str | None:
    url = _request_url(error)
    if not url:
        return None
    prefix = api_url.rstrip("/") + "/"
    if url.startswith(prefix):
        return url[len(prefix) :]
    return url


def _describe_action(error: BaseException, api_url: str) -> str:
    path = _resource_path(error, api_url)
    if path is None:
        return "access this GitHub resource"
    method = getattr(getattr(error, "request", None), "method", None)
    if isinstance(method, str) and method:
        return f"{method} {path}"
    return path


def _server_message(response: Any) -> str | None:
    try:
        data = response.json()
    except (AttributeError, TypeError, ValueError):
        return None
    if isinstance(data, Mapping):
        message = data.get("message")
        if isinstance(message, str) and message:
            return message
    return None
