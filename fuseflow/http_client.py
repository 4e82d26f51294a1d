"""A small HTTP client with default headers, timeouts and JSON bodies."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import requests

DEFAULT_TIMEOUT = 30.0
"""Default request timeout in seconds."""

_log = logging.getLogger(__name__)


class HTTPClientError(Exception):
    """Raised when a request cannot be built, sent or read."""


@dataclass
class Request:
    """Data for one HTTP request. A timeout of 0 uses the client's default."""

    path: str = ""
    method: str = ""
    body: Any = None
    headers: Dict[str, str] = field(default_factory=dict)
    query_params: Dict[str, str] = field(default_factory=dict)
    timeout: float = 0.0
    follow_redirects: bool = False


@dataclass
class Response:
    """Data returned by an HTTP request."""

    body: bytes
    headers: Dict[str, str]
    status_code: int
    is_error: bool
    empty: bool
    url: str

    def is_json(self) -> bool:
        """Return whether the response's content type is JSON."""
        return "application/json" in self.headers.get("Content-Type", "")


@dataclass
class ClientOptions:
    """Options for configuring a Client."""

    timeout: float = DEFAULT_TIMEOUT
    default_headers: Dict[str, str] = field(default_factory=dict)
    debug: bool = False
    follow_redirects: bool = True


def _canonical_header(key: str) -> str:
    return "-".join(part[:1].upper() + part[1:].lower() for part in key.split("-"))


def _with_query(url: str, params: Dict[str, str]) -> str:
    try:
        parts = urlsplit(url)
    except ValueError as exc:
        raise HTTPClientError(f"invalid URL: {exc}") from exc
    query: Dict[str, List[str]] = {}
    for key, value in parse_qsl(parts.query, keep_blank_values=True):
        query.setdefault(key, []).append(value)
    for key, value in params.items():
        query[key] = [value]
    encoded = urlencode([(key, value) for key in sorted(query) for value in query[key]])
    return urlunsplit((parts.scheme, parts.netloc, parts.path, encoded, parts.fragment))


def _create_body(body: Any) -> Any:
    if isinstance(body, str):
        return body.encode("utf-8")
    if isinstance(body, (bytes, bytearray)):
        return bytes(body)
    if hasattr(body, "read"):
        return body
    try:
        return json.dumps(body, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise HTTPClientError(
            f"failed to create request body: failed to marshal request body: {exc}"
        ) from exc


class Client:
    """HTTP client bound to one host."""

    def __init__(self, host: str, options: Optional[ClientOptions] = None) -> None:
        options = options if options is not None else ClientOptions()
        self.host = host.rstrip("/")
        self.default_timeout = options.timeout or DEFAULT_TIMEOUT
        self.default_headers: Dict[str, str] = (
            options.default_headers if options.default_headers is not None else {}
        )
        self.debug = options.debug
        self._follow_redirects = options.follow_redirects
        self._session = requests.Session()

    def send_request(self, request: Optional[Request]) -> Response:
        """Send ``request`` and return its response; errors raise HTTPClientError."""
        if request is None:
            raise HTTPClientError("request data cannot be nil")
        if not request.method:
            request.method = "GET"

        timeout = request.timeout or self.default_timeout
        url = f"{self.host}{request.path}"
        if request.query_params:
            url = _with_query(url, request.query_params)

        body = _create_body(request.body) if request.body is not None else None

        if self.debug:
            _log.info("Making request: %s %s", request.method, url)

        headers = {**self.default_headers, **request.headers}

        follow = self._follow_redirects
        if request.timeout and request.timeout != self.default_timeout:
            follow = request.follow_redirects

        try:
            resp = self._session.request(
                request.method,
                url,
                data=body,
                headers=headers,
                timeout=timeout,
                allow_redirects=follow,
            )
            content = resp.content
        except requests.RequestException as exc:
            raise HTTPClientError(f"request failed: {exc}") from exc

        if self.debug:
            _log.info(
                "Response: %s %s - Status: %d, Body length: %d",
                request.method, url, resp.status_code, len(content),
            )

        return Response(
            body=content,
            headers={_canonical_header(k): v for k, v in resp.headers.items()},
            status_code=resp.status_code,
            is_error=resp.status_code >= 400,
            empty=len(content) == 0,
            url=resp.url,
        )

    def get(self, path: str) -> Response:
        """Send a GET request."""
        return self.send_request(Request(path=path, method="GET"))

    def post(self, path: str, body: Any) -> Response:
        """Send a POST request with ``body``."""
        return self.send_request(Request(path=path, method="POST", body=body))

    def put(self, path: str, body: Any) -> Response:
        """Send a PUT request with ``body``."""
        return self.send_request(Request(path=path, method="PUT", body=body))

    def delete(self, path: str) -> Response:
        """Send a DELETE request."""
        return self.send_request(Request(path=path, method="DELETE"))

    def set_default_header(self, key: str, value: str) -> None:
        """Set a header sent with every request."""
        if self.default_headers is None:
            self.default_headers = {}
        self.default_headers[key] = value