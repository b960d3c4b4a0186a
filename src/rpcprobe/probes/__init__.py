"""
Probes - one capability check per module.

Each probe issues its JSON-RPC calls through an RpcTransport and returns a
report object, or raises a ProbeError subclass when the endpoint fails it:
- chain_id:      eth_chainId and network name
- block_number:  five sequential eth_blockNumber calls, latency and liveness
- balance:       eth_getBalance for the zero address and a test address
- fee_history:   eth_feeHistory with hex/number fallback, EIP-1559 detection
- gas_price:     eth_gasPrice (legacy gas)
"""

from .balance import probe_balance
from .block_number import probe_block_number
from .chain_id import KNOWN_CHAINS, network_name, probe_chain_id
from .fee_history import FeeHistoryErrorKind, classify_fee_history_error, probe_fee_history
from .gas_price import probe_gas_price

__all__ = [
    "KNOWN_CHAINS",
    "FeeHistoryErrorKind",
    "classify_fee_history_error",
    "network_name",
    "probe_balance",
    "probe_block_number",
    "probe_chain_id",
    "probe_fee_history",
    "probe_gas_price",
]
