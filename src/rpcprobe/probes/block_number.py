"""Block-activity probe: five sequential eth_blockNumber calls."""

from __future__ import annotations

from ..models import BlockActivityReport, BlockSample
from ..transport.rpc import RpcTransport
from ..utils import hex_or_number_to_int

DEFAULT_SAMPLES = 5


def probe_block_number(
    transport: RpcTransport, samples: int = DEFAULT_SAMPLES
) -> BlockActivityReport:
    if samples < 1:
        raise ValueError("samples must be at least 1")
    # Each call waits for the previous response; any failure fails the probe.
    collected: list[BlockSample] = []
    for _ in range(samples):
        response = transport.send("eth_blockNumber")
        collected.append(
            BlockSample(
                block_number=hex_or_number_to_int(response.unwrap()),
                elapsed_ms=response.elapsed_ms,
                protocol_version=response.protocol_version,
            )
        )
    return BlockActivityReport(samples=tuple(collected))
