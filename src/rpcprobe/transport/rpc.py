"""
JSON-RPC transport for probing an endpoint.

One RpcTransport per endpoint session: it owns the httpx client, the
request-id counter and the timeout. Every call is timed from request write
to body complete and returns the negotiated HTTP version and status code
alongside the decoded envelope, so probes can report on the connection as
well as on the answer.

There is no retry here. A transport failure raises TransportError and the
caller decides what it means.
"""

from __future__ import annotations

import itertools
import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from ..errors import InvalidEndpointError, MissingResult, RpcError, TransportError
from .envelope import EnvelopeRegistry, EnvelopeValidationError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

HTTP2 = "HTTP/2"


@dataclass(frozen=True)
class RpcErrorObject:
    code: int
    message: str
    data: Any = None

    def to_exception(self) -> RpcError:
        return RpcError(self.code, self.message, self.data)


@dataclass(frozen=True)
class RpcResponse:
    """Decoded JSON-RPC response plus connection metadata."""

    result: Any
    error: Optional[RpcErrorObject]
    elapsed_ms: float
    protocol_version: str
    status_code: Optional[int] = None
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def is_http2(self) -> bool:
        return self.protocol_version == HTTP2

    def unwrap(self) -> Any:
        """
        Return the result, raising on an error object or an empty result.

        Raises:
            RpcError: If the endpoint returned an error object
            MissingResult: If result is absent or an empty string
        """
        if self.error is not None:
            raise self.error.to_exception()
        if self.result is None or self.result == "":
            raise MissingResult()
        return self.result


def parse_endpoint(url: str) -> str:
    """
    Check that url is an http(s) URL with a host.

    Raises:
        InvalidEndpointError: If the URL cannot be used
    """
    url = url.strip()
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise InvalidEndpointError(f"Invalid URL: {url} ({exc})") from exc
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise InvalidEndpointError(f"Invalid URL: {url}")
    return url


class RpcTransport:
    """Sends JSON-RPC 2.0 requests over HTTP(S) POST, strictly one at a time."""

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.Client] = None,
        registry: Optional[EnvelopeRegistry] = None,
    ) -> None:
        self.url = parse_endpoint(url)
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout, http2=True)
        self._registry = registry or EnvelopeRegistry.default()
        self._ids = itertools.count(1)

    @property
    def is_https(self) -> bool:
        return self.url.startswith("https://")

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "RpcTransport":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def send(self, method: str, params: Optional[list] = None) -> RpcResponse:
        """
        Issue a single JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_chainId")
            params: Positional parameters (default: [])

        Returns:
            RpcResponse with result or error, timing and protocol metadata

        Raises:
            TransportError: On timeout, connection failure, or a body that
                is not a JSON-RPC response
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params if params is not None else [],
            "id": next(self._ids),
        }
        logger.debug("-> %s id=%s params=%s", method, payload["id"], payload["params"])

        start = time.perf_counter()
        try:
            response = self._client.post(
                self.url,
                content=json.dumps(payload).encode("utf-8"),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except httpx.TimeoutException as exc:
            logger.debug("<- %s id=%s timed out: %s", method, payload["id"], exc)
            raise TransportError("timeout") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"request failed: {exc}") from exc
        elapsed_ms = (time.perf_counter() - start) * 1000.0

        logger.debug(
            "<- %s id=%s status=%s %s %.1fms",
            method,
            payload["id"],
            response.status_code,
            response.http_version,
            elapsed_ms,
        )

        try:
            body = json.loads(response.content)
        except ValueError as exc:
            raise TransportError(
                f"failed to parse response (HTTP {response.status_code}): {exc}"
            ) from exc

        try:
            self._registry.validate_response(body)
        except EnvelopeValidationError as exc:
            raise TransportError(f"malformed response: {exc}") from exc

        error = body.get("error")
        return RpcResponse(
            result=body.get("result"),
            error=(
                RpcErrorObject(error["code"], error["message"], error.get("data"))
                if error is not None
                else None
            ),
            elapsed_ms=elapsed_ms,
            protocol_version=response.http_version,
            status_code=response.status_code,
            headers=dict(response.headers),
        )
