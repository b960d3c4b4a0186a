from __future__ import annotations

from ..models import GasPriceReport
from ..transport.rpc import RpcTransport
from ..utils import hex_or_number_to_int


def probe_gas_price(transport: RpcTransport) -> GasPriceReport:
    """Legacy gas price via eth_gasPrice."""
    response = transport.send("eth_gasPrice")
    return GasPriceReport(
        wei=hex_or_number_to_int(response.unwrap()),
        elapsed_ms=response.elapsed_ms,
    )
