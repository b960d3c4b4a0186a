"""
Fee-history probe - detect EIP-1559 support.

Node implementations disagree on how eth_feeHistory's block count must be
encoded. The probe asks with a hex string first (the standard QUANTITY
encoding), and falls back to a native number when the error looks like a
decoding failure. An error saying the method is missing or unsupported is a
successful answer: the endpoint uses legacy gas pricing.

The error-text heuristics live in classify_fee_history_error so the
matching rules can be extended without touching the control flow.
"""

from __future__ import annotations

import logging
from enum import Enum

from ..errors import RpcError
from ..models import FeeHistorySample, FeeHistoryReport
from ..transport.rpc import RpcResponse, RpcTransport

logger = logging.getLogger(__name__)

BLOCK_COUNT_HEX = "0xa"
BLOCK_COUNT_NUMBER = 10
REWARD_PERCENTILES = [25, 50, 75]

# Case-sensitive substrings, matched against the raw error message.
FALLBACK_MARKERS = ("unmarshal", "destruct", "parse", "invalid", "type", "expected")
UNSUPPORTED_MARKERS = ("not found", "not supported")

FORMAT_HEX = "hex"
FORMAT_NUMBER = "number"


class FeeHistoryErrorKind(str, Enum):
    NEEDS_FALLBACK = "needs_fallback"
    UNSUPPORTED_FEATURE = "unsupported_feature"
    UNKNOWN = "unknown"


def classify_fee_history_error(
    message: str, fallback_available: bool = True
) -> FeeHistoryErrorKind:
    """
    Map an eth_feeHistory error message to the action it calls for.

    Args:
        message: Error message returned by the endpoint
        fallback_available: False once the numeric encoding was already tried

    Returns:
        NEEDS_FALLBACK if the hex block count was probably rejected,
        UNSUPPORTED_FEATURE if the method is missing, UNKNOWN otherwise
    """
    if fallback_available and any(m in message for m in FALLBACK_MARKERS):
        return FeeHistoryErrorKind.NEEDS_FALLBACK
    if any(m in message for m in UNSUPPORTED_MARKERS):
        return FeeHistoryErrorKind.UNSUPPORTED_FEATURE
    return FeeHistoryErrorKind.UNKNOWN


def _request(transport: RpcTransport, block_count: object) -> RpcResponse:
    return transport.send(
        "eth_feeHistory", [block_count, "latest", list(REWARD_PERCENTILES)]
    )


def probe_fee_history(transport: RpcTransport) -> FeeHistoryReport:
    response = _request(transport, BLOCK_COUNT_HEX)
    parameter_format = FORMAT_HEX
    fallback_attempted = False

    if response.error is not None:
        kind = classify_fee_history_error(response.error.message)
        if kind is FeeHistoryErrorKind.NEEDS_FALLBACK:
            logger.debug("hex block count rejected (%s), retrying as number", response.error.message)
            fallback_attempted = True
            response = _request(transport, BLOCK_COUNT_NUMBER)
            parameter_format = FORMAT_NUMBER

    if response.error is not None:
        message = response.error.message
        kind = classify_fee_history_error(message, fallback_available=False)
        if kind is FeeHistoryErrorKind.UNSUPPORTED_FEATURE:
            return FeeHistoryReport(
                eip1559_supported=False,
                elapsed_ms=response.elapsed_ms,
                unsupported_reason=message,
                fallback_attempted=fallback_attempted,
            )
        raise RpcError(response.error.code, message, response.error.data)

    sample = FeeHistorySample.from_result(response.unwrap())
    return FeeHistoryReport(
        eip1559_supported=bool(sample.base_fee_per_gas),
        elapsed_ms=response.elapsed_ms,
        parameter_format=parameter_format,
        sample=sample,
        fallback_attempted=fallback_attempted,
    )
