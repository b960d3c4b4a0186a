from __future__ import annotations

import string
from decimal import Decimal
from typing import Any

from eth_utils import is_address, to_checksum_address

from .errors import InvalidAddress, MalformedNumericValue

WEI_PER_ETHER = Decimal(10**18)
WEI_PER_GWEI = Decimal(10**9)

ZERO_ADDRESS = "0x" + "0" * 40

HEX_DIGITS = frozenset(string.hexdigits)


def hex_or_number_to_int(value: Any) -> int:
    """
    Normalize a JSON-RPC quantity to an int.

    Nodes disagree on encoding: most return 0x-prefixed hex strings, some
    return native JSON numbers. Both shapes are accepted, nothing else is.

    Raises:
        MalformedNumericValue: If value is neither a hex string nor a number
    """
    if isinstance(value, bool):
        raise MalformedNumericValue(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise MalformedNumericValue(value)
        return int(value)
    if isinstance(value, str):
        digits = value[2:]
        # int() would also take a sign, inner whitespace and underscores.
        if value[:2] not in ("0x", "0X") or not digits or not HEX_DIGITS.issuperset(digits):
            raise MalformedNumericValue(value)
        return int(digits, 16)
    raise MalformedNumericValue(value)


def wei_to_ether(wei: int) -> Decimal:
    return Decimal(wei) / WEI_PER_ETHER


def wei_to_gwei(wei: int) -> Decimal:
    return Decimal(wei) / WEI_PER_GWEI


def format_ether(wei: int) -> str:
    return f"{wei_to_ether(wei):.6f}"


def format_gwei(wei: int) -> str:
    return f"{wei_to_gwei(wei):.2f}"


def mean_gwei(values: list[int] | tuple[int, ...]) -> Decimal:
    """Arithmetic mean of wei amounts, in gwei. Empty input is an error."""
    if not values:
        raise ValueError("mean of empty sequence")
    return sum((wei_to_gwei(v) for v in values), Decimal(0)) / len(values)


def checksum_address(value: str) -> str:
    """
    Return the EIP-55 form of an account address.

    Raises:
        InvalidAddress: If value is not an address, or is mixed-case with a bad checksum
    """
    if not is_address(value):
        raise InvalidAddress(value)
    return to_checksum_address(value)
