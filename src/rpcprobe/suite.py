"""
Probe suite runner.

Runs the five probes in a fixed order against one transport and folds their
outcomes into a SessionSummary. A probe that fails, or crashes outright, is
recorded as a failed outcome and the suite moves on to the next one.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable, Optional, Protocol

from .errors import ProbeError
from .models import (
    BlockActivityReport,
    ChainIdReport,
    FeeHistoryReport,
    ProbeOutcome,
    ProbeReport,
    SessionSummary,
)
from .probes import (
    probe_balance,
    probe_block_number,
    probe_chain_id,
    probe_fee_history,
    probe_gas_price,
)
from .transport.rpc import RpcTransport

logger = logging.getLogger(__name__)


class SuiteState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETE = "complete"


class ProbeListener(Protocol):
    def probe_started(self, name: str) -> None: ...

    def probe_finished(self, outcome: ProbeOutcome, report: Optional[ProbeReport]) -> None: ...


class ProbeSuite:
    """
    One-shot runner for the fixed probe sequence.

    Args:
        transport: Endpoint session shared by every probe
        expected_chain_id: Chain id to compare against (advisory only)
        test_address: Optional second eth_getBalance target
        listener: Receives start/finish notifications, e.g. for console output
    """

    def __init__(
        self,
        transport: RpcTransport,
        expected_chain_id: Optional[int] = None,
        test_address: Optional[str] = None,
        listener: Optional[ProbeListener] = None,
    ) -> None:
        self.transport = transport
        self.expected_chain_id = expected_chain_id
        self.test_address = test_address
        self.listener = listener
        self.state = SuiteState.IDLE
        self._outcomes: list[ProbeOutcome] = []
        self._reports: dict[str, ProbeReport] = {}

    def probes(self) -> list[tuple[str, Callable[[], ProbeReport]]]:
        return [
            ("eth_chainId", lambda: probe_chain_id(self.transport, self.expected_chain_id)),
            ("eth_blockNumber", lambda: probe_block_number(self.transport)),
            ("eth_getBalance", lambda: probe_balance(self.transport, self.test_address)),
            ("eth_feeHistory", lambda: probe_fee_history(self.transport)),
            ("eth_gasPrice", lambda: probe_gas_price(self.transport)),
        ]

    def run(self) -> SessionSummary:
        if self.state is not SuiteState.IDLE:
            raise RuntimeError(f"Probe suite already {self.state.value}")
        self.state = SuiteState.RUNNING

        for name, fn in self.probes():
            self._run_one(name, fn)

        self.state = SuiteState.COMPLETE
        return self.summary()

    def _run_one(self, name: str, fn: Callable[[], ProbeReport]) -> None:
        if self.listener is not None:
            self.listener.probe_started(name)

        report: Optional[ProbeReport] = None
        start = time.perf_counter()
        try:
            report = fn()
            outcome = ProbeOutcome(name, True, elapsed_ms=_since(start))
        except ProbeError as exc:
            logger.debug("probe %s failed: %s", name, exc)
            outcome = ProbeOutcome(name, False, cause=str(exc), elapsed_ms=_since(start))
        except Exception as exc:
            logger.debug("probe %s crashed", name, exc_info=True)
            outcome = ProbeOutcome(
                name, False, cause=f"crashed: {exc}", elapsed_ms=_since(start)
            )

        self._outcomes.append(outcome)
        if report is not None:
            self._reports[name] = report
        if self.listener is not None:
            self.listener.probe_finished(outcome, report)

    def summary(self) -> SessionSummary:
        chain = self._reports.get("eth_chainId")
        blocks = self._reports.get("eth_blockNumber")
        fees = self._reports.get("eth_feeHistory")
        return SessionSummary(
            outcomes=tuple(self._outcomes),
            chain_id=chain.chain_id if isinstance(chain, ChainIdReport) else None,
            latest_block=blocks.latest_block if isinstance(blocks, BlockActivityReport) else None,
            eip1559_supported=(
                fees.eip1559_supported if isinstance(fees, FeeHistoryReport) else None
            ),
            reports=dict(self._reports),
        )


def _since(start: float) -> float:
    return (time.perf_counter() - start) * 1000.0
