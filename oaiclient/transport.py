"""HTTP transport shared by the API clients."""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from operator import itemgetter
from typing import Any, BinaryIO
from urllib.parse import parse_qsl, urlencode

from .ratelimit import RateLimitHeaders

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_ASSISTANT_VERSION = "v2"


@dataclass
class ApiResponse:
    """A response whose body is read on first use."""

    status: int
    headers: Mapping[str, str]
    stream: BinaryIO
    _content: bytes | None = field(default=None, init=False, repr=False, compare=False)

    @property
    def content(self) -> bytes:
        """The whole body as bytes."""
        if self._content is None:
            self._content = self.stream.read()
        return self._content

    def json(self) -> Any:
        """The body decoded as JSON, or None when the body is empty."""
        data = self.content
        return json.loads(data) if data.strip() else None

    def rate_limits(self) -> RateLimitHeaders:
        """The rate-limit headers of this response."""
        return RateLimitHeaders.from_headers(self.headers)

    def close(self) -> None:
        self.stream.close()

    def __enter__(self) -> ApiResponse:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


Opener = Callable[..., Any]


class Transport:
    """Builds and sends authenticated requests to the API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        *,
        organization: str = "",
        assistant_version: str = DEFAULT_ASSISTANT_VERSION,
        api_version: str | None = None,
        opener: Opener | None = None,
        timeout: float | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.organization = organization
        self.assistant_version = assistant_version
        self.api_version = api_version
        self.timeout = timeout
        self._opener = opener or urllib.request.urlopen

    def _url(self, path: str, model: str) -> str:
        if self.api_version is None:
            return self.base_url + path
        prefix = self.base_url.rstrip("/") + "/openai"
        if model:
            prefix += f"/deployments/{model}"
        route, _, query = path.partition("?")
        params = [("api-version", self.api_version)]
        params += parse_qsl(query, keep_blank_values=True)
        return f"{prefix}{route}?{urlencode(sorted(params, key=itemgetter(0)))}"

    def _headers(self, beta: bool) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_version is None:
            headers["Authorization"] = f"Bearer {self.api_key}"
        else:
            headers["api-key"] = self.api_key
        if self.organization:
            headers["OpenAI-Organization"] = self.organization
        if beta:
            headers["OpenAI-Beta"] = f"assistants={self.assistant_version}"
        return headers

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        model: str = "",
        beta: bool = False,
    ) -> ApiResponse:
        """Send a request and return the response.

        A JSON-serialisable ``body`` is sent as JSON; bytes are sent as they are.
        Responses with a status of 400 or above raise ``urllib.error.HTTPError``.
        """
        url = self._url(path, model)
        headers = self._headers(beta)
        data = None
        if body is not None:
            data = bytes(body) if isinstance(body, (bytes, bytearray)) else json.dumps(body).encode()
            headers["Content-Type"] = "application/json"
        req = urllib.request.Request(url, data=data, headers=headers, method=method)
        raw = self._opener(req, timeout=self.timeout)
        status = getattr(raw, "status", 200)
        if status >= 400:
            raise urllib.error.HTTPError(url, status, getattr(raw, "reason", ""), raw.headers, raw)
        return ApiResponse(status=status, headers=raw.headers, stream=raw)


@dataclass(frozen=True)
class Pagination:
    """Cursor parameters for list endpoints."""

    limit: int | None = None
    order: str | None = None
    after: str | None = None
    before: str | None = None

    def query(self) -> str:
        """The set parameters as a query string, keys in sorted order."""
        params = {
            "limit": None if self.limit is None else str(self.limit),
            "order": self.order,
            "after": self.after,
            "before": self.before,
        }
        return urlencode(sorted((k, v) for k, v in params.items() if v is not None))

    def apply(self, path: str) -> str:
        """Append the query string to ``path`` when any parameter is set."""
        query = self.query()
        return f"{path}?{query}" if query else path