"""
Configuration for a probe run.

The endpoint URL and expected chain id come from the command line. The
optional test address comes from --address or the environment; a .env file
in the working directory is loaded first so the address can live there.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .errors import ConfigError, InvalidAddress
from .transport.rpc import DEFAULT_TIMEOUT, parse_endpoint
from .utils import checksum_address

TEST_ADDRESS_ENV = "RPCPROBE_TEST_ADDRESS"
TIMEOUT_ENV = "RPCPROBE_TIMEOUT"


@dataclass(frozen=True)
class ProbeConfig:
    rpc_url: str
    expected_chain_id: Optional[int] = None
    test_address: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def build(
        cls,
        rpc_url: str,
        expected_chain_id: Optional[str] = None,
        test_address: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> "ProbeConfig":
        """
        Validate raw inputs.

        Raises:
            InvalidEndpointError: If rpc_url is not an http(s) URL
            ConfigError: If the chain id or timeout is invalid
        """
        if timeout <= 0:
            raise ConfigError(f"Timeout must be positive, got {timeout}")
        return cls(
            rpc_url=parse_endpoint(rpc_url),
            expected_chain_id=parse_chain_id(expected_chain_id),
            test_address=normalize_address(test_address),
            timeout=timeout,
        )


def load_environment() -> None:
    """Load a .env file from the working directory, keeping existing variables."""
    load_dotenv(find_dotenv(usecwd=True), override=False)


def get_test_address() -> Optional[str]:
    return os.environ.get(TEST_ADDRESS_ENV) or None


def parse_chain_id(value: Optional[str]) -> Optional[int]:
    """
    Parse an expected chain id given as decimal or 0x-hex text.

    Any integer is accepted; a mismatch is only ever reported as a warning.
    """
    if value is None or value == "":
        return None
    for base in (10, 0):
        try:
            return int(value, base)
        except ValueError:
            continue
    raise ConfigError(f"Invalid expected chain ID: {value}")


def normalize_address(value: Optional[str]) -> Optional[str]:
    """
    Checksum a test address when it is valid.

    An invalid address is returned as given; the balance probe reports it
    and the other probes still run.
    """
    if value is None or not value.strip():
        return None
    value = value.strip()
    try:
        return checksum_address(value)
    except InvalidAddress:
        return value
