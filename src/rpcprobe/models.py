from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union

from .errors import MalformedNumericValue, MissingResult
from .transport.rpc import HTTP2
from .utils import hex_or_number_to_int, mean_gwei, wei_to_ether, wei_to_gwei


def _decimal_str(value: Optional[Decimal], places: int) -> Optional[str]:
    if value is None:
        return None
    return f"{value:.{places}f}"


def _ratio(value: Any) -> float:
    if isinstance(value, bool):
        raise MalformedNumericValue(value)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise MalformedNumericValue(value) from None


# ============ Probe Reports ============


@dataclass(frozen=True)
class ChainIdReport:
    chain_id: int
    network: Optional[str]
    elapsed_ms: float
    expected_chain_id: Optional[int] = None

    @property
    def display_name(self) -> str:
        return self.network or "Unknown chain"

    @property
    def mismatch(self) -> bool:
        return self.expected_chain_id is not None and self.expected_chain_id != self.chain_id

    def to_dict(self) -> dict[str, Any]:
        return {
            "chainId": self.chain_id,
            "network": self.display_name,
            "expectedChainId": self.expected_chain_id,
            "mismatch": self.mismatch,
            "elapsedMs": round(self.elapsed_ms, 2),
        }


@dataclass(frozen=True)
class BlockSample:
    block_number: int
    elapsed_ms: float
    protocol_version: str


@dataclass(frozen=True)
class BlockActivityReport:
    samples: tuple[BlockSample, ...]

    @property
    def block_numbers(self) -> list[int]:
        return [s.block_number for s in self.samples]

    @property
    def latest_block(self) -> int:
        return self.samples[-1].block_number

    @property
    def average_ms(self) -> float:
        return sum(s.elapsed_ms for s in self.samples) / len(self.samples)

    @property
    def min_ms(self) -> float:
        return min(s.elapsed_ms for s in self.samples)

    @property
    def max_ms(self) -> float:
        return max(s.elapsed_ms for s in self.samples)

    @property
    def http2_detected(self) -> bool:
        return any(s.protocol_version == HTTP2 for s in self.samples)

    @property
    def protocol_display(self) -> str:
        return HTTP2 if self.http2_detected else self.samples[0].protocol_version

    @property
    def is_active(self) -> bool:
        """True if any sample's block number exceeds the one before it."""
        numbers = self.block_numbers
        return any(later > earlier for earlier, later in zip(numbers, numbers[1:]))

    def to_dict(self) -> dict[str, Any]:
        return {
            "latestBlock": self.latest_block,
            "blockNumbers": self.block_numbers,
            "protocol": self.protocol_display,
            "http2": self.http2_detected,
            "active": self.is_active,
            "averageMs": round(self.average_ms, 2),
            "minMs": round(self.min_ms, 2),
            "maxMs": round(self.max_ms, 2),
        }


@dataclass(frozen=True)
class BalanceReading:
    address: str
    wei: int
    elapsed_ms: float

    @property
    def ether(self) -> Decimal:
        return wei_to_ether(self.wei)


@dataclass(frozen=True)
class BalanceReport:
    readings: tuple[BalanceReading, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "balances": [
                {
                    "address": r.address,
                    "wei": str(r.wei),
                    "ether": _decimal_str(r.ether, 6),
                    "elapsedMs": round(r.elapsed_ms, 2),
                }
                for r in self.readings
            ]
        }


@dataclass(frozen=True)
class FeeHistorySample:
    """
    Normalized eth_feeHistory result.

    Every quantity is parsed independently: nodes may mix hex strings and
    native numbers inside one array.
    """

    base_fee_per_gas: tuple[int, ...]
    gas_used_ratio: tuple[float, ...]
    reward: Optional[tuple[tuple[int, ...], ...]]
    oldest_block: Optional[int]

    @classmethod
    def from_result(cls, raw: Any) -> "FeeHistorySample":
        """
        Parse a raw eth_feeHistory result.

        Raises:
            MissingResult: If raw is not a JSON object
            MalformedNumericValue: If any quantity is neither hex nor numeric
        """
        if not isinstance(raw, dict):
            raise MissingResult(f"Unexpected eth_feeHistory result: {raw!r}")

        base_fees = tuple(hex_or_number_to_int(v) for v in raw.get("baseFeePerGas") or [])
        ratios = tuple(_ratio(r) for r in raw.get("gasUsedRatio") or [])

        raw_reward = raw.get("reward")
        reward = None
        if raw_reward is not None:
            reward = tuple(
                tuple(hex_or_number_to_int(v) for v in row or [])
                for row in raw_reward
            )

        oldest = raw.get("oldestBlock")
        return cls(
            base_fee_per_gas=base_fees,
            gas_used_ratio=ratios,
            reward=reward,
            oldest_block=hex_or_number_to_int(oldest) if oldest is not None else None,
        )


@dataclass(frozen=True)
class FeeHistoryReport:
    eip1559_supported: bool
    elapsed_ms: float
    parameter_format: Optional[str] = None
    sample: Optional[FeeHistorySample] = None
    unsupported_reason: Optional[str] = None
    fallback_attempted: bool = False

    @property
    def latest_base_fee_wei(self) -> Optional[int]:
        if self.sample is None or not self.sample.base_fee_per_gas:
            return None
        return self.sample.base_fee_per_gas[-1]

    @property
    def latest_base_fee_gwei(self) -> Optional[Decimal]:
        wei = self.latest_base_fee_wei
        return wei_to_gwei(wei) if wei is not None else None

    @property
    def average_base_fee_gwei(self) -> Optional[Decimal]:
        if self.sample is None or not self.sample.base_fee_per_gas:
            return None
        return mean_gwei(self.sample.base_fee_per_gas)

    @property
    def reward_supported(self) -> bool:
        return bool(self.sample is not None and self.sample.reward)

    @property
    def priority_fee_percentiles(self) -> Optional[tuple[int, int, int]]:
        """25th/50th/75th percentile rewards of the most recent block, in wei."""
        if not self.reward_supported:
            return None
        latest = self.sample.reward[-1]
        if len(latest) < 3:
            return None
        return latest[0], latest[1], latest[2]

    def to_dict(self) -> dict[str, Any]:
        percentiles = self.priority_fee_percentiles
        return {
            "eip1559Supported": self.eip1559_supported,
            "parameterFormat": self.parameter_format,
            "unsupportedReason": self.unsupported_reason,
            "fallbackAttempted": self.fallback_attempted,
            "latestBaseFeeGwei": _decimal_str(self.latest_base_fee_gwei, 2),
            "averageBaseFeeGwei": _decimal_str(self.average_base_fee_gwei, 2),
            "rewardSupported": self.reward_supported,
            "priorityFeePercentilesGwei": (
                [_decimal_str(wei_to_gwei(p), 2) for p in percentiles]
                if percentiles
                else None
            ),
            "oldestBlock": self.sample.oldest_block if self.sample else None,
            "elapsedMs": round(self.elapsed_ms, 2),
        }


@dataclass(frozen=True)
class GasPriceReport:
    wei: int
    elapsed_ms: float

    @property
    def gwei(self) -> Decimal:
        return wei_to_gwei(self.wei)

    def to_dict(self) -> dict[str, Any]:
        return {
            "wei": str(self.wei),
            "gwei": _decimal_str(self.gwei, 2),
            "elapsedMs": round(self.elapsed_ms, 2),
        }


ProbeReport = Union[
    ChainIdReport, BlockActivityReport, BalanceReport, FeeHistoryReport, GasPriceReport
]


# ============ Outcomes & Summary ============


@dataclass(frozen=True)
class ProbeOutcome:
    name: str
    passed: bool
    cause: Optional[str] = None
    elapsed_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "passed": self.passed,
            "cause": self.cause,
            "elapsedMs": round(self.elapsed_ms, 2),
        }


class Verdict(str, Enum):
    FULLY_FUNCTIONAL = "fully functional"
    PARTIALLY_FUNCTIONAL = "partially functional"
    DOWN_OR_MISCONFIGURED = "down or misconfigured"


@dataclass(frozen=True)
class SessionSummary:
    outcomes: tuple[ProbeOutcome, ...]
    chain_id: Optional[int] = None
    latest_block: Optional[int] = None
    eip1559_supported: Optional[bool] = None
    reports: dict[str, ProbeReport] = field(default_factory=dict)

    @property
    def passed_count(self) -> int:
        return sum(1 for o in self.outcomes if o.passed)

    @property
    def failed_count(self) -> int:
        return sum(1 for o in self.outcomes if not o.passed)

    @property
    def verdict(self) -> Verdict:
        if self.outcomes and self.failed_count == 0:
            return Verdict.FULLY_FUNCTIONAL
        if self.passed_count > 0:
            return Verdict.PARTIALLY_FUNCTIONAL
        return Verdict.DOWN_OR_MISCONFIGURED

    @property
    def exit_code(self) -> int:
        return 1 if self.failed_count > 0 else 0

    def outcome(self, name: str) -> ProbeOutcome:
        for o in self.outcomes:
            if o.name == name:
                return o
        raise KeyError(name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed_count,
            "failed": self.failed_count,
            "verdict": self.verdict.value,
            "chainId": self.chain_id,
            "latestBlock": self.latest_block,
            "eip1559Supported": self.eip1559_supported,
            "tests": {o.name: o.passed for o in self.outcomes},
            "outcomes": [o.to_dict() for o in self.outcomes],
            "reports": {name: r.to_dict() for name, r in self.reports.items()},
        }
