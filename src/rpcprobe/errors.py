"""
Exception hierarchy for rpcprobe.

Probe-level failures derive from ProbeError and are contained by the suite
runner: each one fails the probe that raised it and nothing else.
Setup failures (ConfigError) stop the process before any probe runs.
"""

from __future__ import annotations

from typing import Any


class ProbeError(RuntimeError):
    """Base class for failures that fail a single probe."""


class TransportError(ProbeError):
    """Connection refused, timeout, or a body that is not a JSON-RPC response."""


class RpcError(ProbeError):
    """A well-formed JSON-RPC error object returned by the endpoint."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data


class MissingResult(ProbeError):
    """Neither result nor error populated, or an empty result."""

    def __init__(self, message: str = "No result returned") -> None:
        super().__init__(message)


class MalformedNumericValue(ProbeError, ValueError):
    """A value expected to be hex-or-numeric parsed as neither."""

    def __init__(self, value: Any) -> None:
        super().__init__(f"Malformed numeric value: {value!r}")
        self.value = value


class InvalidAddress(ProbeError, ValueError):
    """An account address that is not 20 bytes of hex, or fails its EIP-55 checksum."""

    def __init__(self, value: Any) -> None:
        super().__init__(f"Invalid test address: {value}")
        self.value = value


class ConfigError(ValueError):
    """Invalid command-line or environment input, detected before probing."""


class InvalidEndpointError(ConfigError):
    """The endpoint URL cannot be used for JSON-RPC over HTTP(S)."""
