"""
rpcprobe - capability and health probe for Ethereum JSON-RPC endpoints.

Checks chain identity, block production, balance queries, EIP-1559 fee
history support and legacy gas pricing, and scores each as pass/fail.
"""

__version__ = "0.1.0"

__all__ = [
    # Errors
    "ConfigError",
    "InvalidAddress",
    "InvalidEndpointError",
    "MalformedNumericValue",
    "MissingResult",
    "ProbeError",
    "RpcError",
    "TransportError",
    # Transport
    "RpcResponse",
    "RpcTransport",
    "parse_endpoint",
    # Models
    "FeeHistorySample",
    "ProbeOutcome",
    "SessionSummary",
    "Verdict",
    # Suite
    "ProbeSuite",
    "SuiteState",
    # Conversion
    "hex_or_number_to_int",
    "wei_to_ether",
    "wei_to_gwei",
]

from .errors import (
    ConfigError,
    InvalidAddress,
    InvalidEndpointError,
    MalformedNumericValue,
    MissingResult,
    ProbeError,
    RpcError,
    TransportError,
)
from .models import FeeHistorySample, ProbeOutcome, SessionSummary, Verdict
from .suite import ProbeSuite, SuiteState
from .transport.rpc import RpcResponse, RpcTransport, parse_endpoint
from .utils import hex_or_number_to_int, wei_to_ether, wei_to_gwei
