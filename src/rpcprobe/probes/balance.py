from __future__ import annotations

from typing import Optional

from ..models import BalanceReading, BalanceReport
from ..transport.rpc import RpcTransport
from ..utils import ZERO_ADDRESS, checksum_address, hex_or_number_to_int


def balance_targets(test_address: Optional[str] = None) -> list[str]:
    """
    The zero address, then the configured test address if any.

    Raises:
        InvalidAddress: If test_address is not a valid account address
    """
    targets = [ZERO_ADDRESS]
    if test_address:
        targets.append(checksum_address(test_address))
    return targets


def probe_balance(
    transport: RpcTransport, test_address: Optional[str] = None
) -> BalanceReport:
    readings: list[BalanceReading] = []
    for address in balance_targets(test_address):
        response = transport.send("eth_getBalance", [address, "latest"])
        readings.append(
            BalanceReading(
                address=address,
                wei=hex_or_number_to_int(response.unwrap()),
                elapsed_ms=response.elapsed_ms,
            )
        )
    return BalanceReport(readings=tuple(readings))
