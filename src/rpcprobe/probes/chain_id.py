"""
Chain-identity probe.

Reads eth_chainId and names the network. A mismatch with the expected
chain id is advisory: it is reported, never failed.
"""

from __future__ import annotations

from typing import Optional

from ..models import ChainIdReport
from ..transport.rpc import RpcTransport
from ..utils import hex_or_number_to_int

KNOWN_CHAINS: dict[int, str] = {
    1: "Ethereum Mainnet",
    5: "Goerli Testnet",
    11155111: "Sepolia Testnet",
    137: "Polygon Mainnet",
    80001: "Polygon Mumbai",
    56: "BSC Mainnet",
    97: "BSC Testnet",
    43114: "Avalanche C-Chain",
    43113: "Avalanche Fuji",
    42161: "Arbitrum One",
    421613: "Arbitrum Goerli",
    10: "Optimism",
    420: "Optimism Goerli",
    8453: "Base Mainnet",
    84531: "Base Goerli",
    1329: "SEI Mainnet",
    16661: "0G-Aristotle",
    9600: "RouterChain",
    23294: "Oasis Sapphire",
    239: "TAC Mainnet",
    42793: "Etherlink",
}


def network_name(chain_id: int) -> Optional[str]:
    return KNOWN_CHAINS.get(chain_id)


def probe_chain_id(
    transport: RpcTransport, expected_chain_id: Optional[int] = None
) -> ChainIdReport:
    response = transport.send("eth_chainId")
    chain_id = hex_or_number_to_int(response.unwrap())
    return ChainIdReport(
        chain_id=chain_id,
        network=network_name(chain_id),
        elapsed_ms=response.elapsed_ms,
        expected_chain_id=expected_chain_id,
    )
