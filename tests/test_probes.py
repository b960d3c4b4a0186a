"""Tests for the chain id, block number, balance and gas price probes."""

from __future__ import annotations

import itertools
from decimal import Decimal

import pytest

from conftest import FakeNode, error, result
from rpcprobe.errors import InvalidAddress, MalformedNumericValue, MissingResult, RpcError
from rpcprobe.models import BlockActivityReport, BlockSample
from rpcprobe.probes import (
    KNOWN_CHAINS,
    network_name,
    probe_balance,
    probe_block_number,
    probe_chain_id,
    probe_gas_price,
)
from rpcprobe.utils import ZERO_ADDRESS

TEST_ADDRESS = "0x000000000000000000000000000000000000dEaD"


def _blocks(*numbers: int) -> BlockActivityReport:
    return BlockActivityReport(
        samples=tuple(BlockSample(n, 10.0, "HTTP/1.1") for n in numbers)
    )


def _sequence(*values: object):
    it = iter(values)
    return lambda params: next(it)


class TestChainIdProbe:
    """Tests for probe_chain_id."""

    def test_known_chain(self, node: FakeNode) -> None:
        report = probe_chain_id(node.transport())
        assert report.chain_id == 1
        assert report.network == "Ethereum Mainnet"
        assert report.mismatch is False
        assert node.calls[0]["method"] == "eth_chainId"
        assert node.calls[0]["params"] == []

    def test_unknown_chain_is_not_a_failure(self) -> None:
        node = FakeNode({"eth_chainId": lambda params: result("0x3a98")})
        report = probe_chain_id(node.transport())
        assert report.chain_id == 15000
        assert report.network is None
        assert report.display_name == "Unknown chain"

    def test_mismatch_is_advisory(self, node: FakeNode) -> None:
        report = probe_chain_id(node.transport(), expected_chain_id=137)
        assert report.mismatch is True
        assert report.expected_chain_id == 137

    def test_matching_expected_chain(self, node: FakeNode) -> None:
        assert probe_chain_id(node.transport(), expected_chain_id=1).mismatch is False

    def test_negative_expected_chain_only_mismatches(self, node: FakeNode) -> None:
        assert probe_chain_id(node.transport(), expected_chain_id=-1).mismatch is True

    def test_rpc_error_fails(self) -> None:
        node = FakeNode({"eth_chainId": lambda params: error("unavailable")})
        with pytest.raises(RpcError):
            probe_chain_id(node.transport())

    def test_missing_result_fails(self) -> None:
        node = FakeNode({"eth_chainId": lambda params: {}})
        with pytest.raises(MissingResult):
            probe_chain_id(node.transport())

    def test_known_chain_table(self) -> None:
        assert network_name(8453) == "Base Mainnet"
        assert network_name(424242) is None
        assert KNOWN_CHAINS[42161] == "Arbitrum One"


class TestBlockActivityReport:
    """Statistics and liveness over block samples."""

    def test_increase_anywhere_is_active(self) -> None:
        assert _blocks(100, 100, 101, 101, 102).is_active is True

    def test_flat_is_inactive(self) -> None:
        assert _blocks(100, 100, 100, 100, 100).is_active is False

    def test_decrease_is_not_activity(self) -> None:
        assert _blocks(105, 104, 103, 103, 100).is_active is False

    def test_single_late_increase(self) -> None:
        assert _blocks(100, 99, 99, 99, 100).is_active is True

    def test_timing_stats(self) -> None:
        report = BlockActivityReport(
            samples=(
                BlockSample(1, 10.0, "HTTP/1.1"),
                BlockSample(1, 30.0, "HTTP/1.1"),
                BlockSample(2, 20.0, "HTTP/1.1"),
            )
        )
        assert report.average_ms == 20.0
        assert report.min_ms == 10.0
        assert report.max_ms == 30.0
        assert report.latest_block == 2

    def test_http2_is_sticky(self) -> None:
        report = BlockActivityReport(
            samples=(
                BlockSample(1, 1.0, "HTTP/1.1"),
                BlockSample(1, 1.0, "HTTP/2"),
                BlockSample(1, 1.0, "HTTP/1.1"),
            )
        )
        assert report.http2_detected is True
        assert report.protocol_display == "HTTP/2"

    def test_protocol_display_without_http2(self) -> None:
        assert _blocks(1, 2).protocol_display == "HTTP/1.1"


class TestBlockNumberProbe:
    """Tests for probe_block_number."""

    def test_five_sequential_calls(self, node: FakeNode) -> None:
        report = probe_block_number(node.transport())
        assert node.methods() == ["eth_blockNumber"] * 5
        assert report.block_numbers == [100, 101, 102, 103, 104]
        assert report.latest_block == 104
        assert report.is_active is True

    def test_static_chain(self) -> None:
        node = FakeNode({"eth_blockNumber": lambda params: result("0x64")})
        report = probe_block_number(node.transport())
        assert report.is_active is False
        assert report.latest_block == 100

    def test_http2_endpoint(self) -> None:
        node = FakeNode(http_version="HTTP/2")
        assert probe_block_number(node.transport()).http2_detected is True

    def test_any_failed_call_fails_probe(self) -> None:
        node = FakeNode(
            {
                "eth_blockNumber": _sequence(
                    result("0x1"), result("0x2"), error("header not found"), result("0x3"), result("0x4")
                )
            }
        )
        with pytest.raises(RpcError, match="header not found"):
            probe_block_number(node.transport())
        assert len(node.calls) == 3

    def test_missing_result_fails_probe(self) -> None:
        node = FakeNode({"eth_blockNumber": _sequence(result("0x1"), {"result": None})})
        with pytest.raises(MissingResult):
            probe_block_number(node.transport())

    def test_numeric_block_numbers_accepted(self) -> None:
        counter = itertools.count(7)
        node = FakeNode({"eth_blockNumber": lambda params: result(next(counter))})
        assert probe_block_number(node.transport()).latest_block == 11

    def test_samples_must_be_positive(self, node: FakeNode) -> None:
        with pytest.raises(ValueError):
            probe_block_number(node.transport(), samples=0)


class TestBalanceProbe:
    """Tests for probe_balance."""

    def test_zero_address_only(self, node: FakeNode) -> None:
        report = probe_balance(node.transport())
        assert [c["params"] for c in node.calls] == [[ZERO_ADDRESS, "latest"]]
        assert report.readings[0].wei == 10**18
        assert report.readings[0].ether == Decimal(1)

    def test_with_test_address(self, node: FakeNode) -> None:
        report = probe_balance(node.transport(), TEST_ADDRESS)
        assert [c["params"][0] for c in node.calls] == [ZERO_ADDRESS, TEST_ADDRESS]
        assert all(c["params"][1] == "latest" for c in node.calls)
        assert [r.address for r in report.readings] == [ZERO_ADDRESS, TEST_ADDRESS]

    def test_stops_at_first_error(self) -> None:
        node = FakeNode({"eth_getBalance": lambda params: error("invalid address")})
        with pytest.raises(RpcError):
            probe_balance(node.transport(), TEST_ADDRESS)
        assert len(node.calls) == 1

    def test_second_address_failure(self) -> None:
        node = FakeNode({"eth_getBalance": _sequence(result("0x0"), {})})
        with pytest.raises(MissingResult):
            probe_balance(node.transport(), TEST_ADDRESS)

    def test_zero_balance_is_a_result(self) -> None:
        node = FakeNode({"eth_getBalance": lambda params: result("0x0")})
        assert probe_balance(node.transport()).readings[0].wei == 0

    def test_signed_hex_balance_is_malformed(self) -> None:
        node = FakeNode({"eth_getBalance": lambda params: result("0x-de0b6b3a7640000")})
        with pytest.raises(MalformedNumericValue):
            probe_balance(node.transport())

    def test_invalid_test_address_fails_before_any_call(self, node: FakeNode) -> None:
        with pytest.raises(InvalidAddress, match="Invalid test address: 0x1234"):
            probe_balance(node.transport(), "0x1234")
        assert node.calls == []

    def test_lowercase_test_address_is_checksummed(self, node: FakeNode) -> None:
        report = probe_balance(node.transport(), TEST_ADDRESS.lower())
        assert node.calls[1]["params"][0] == TEST_ADDRESS
        assert report.readings[1].address == TEST_ADDRESS


class TestGasPriceProbe:
    """Tests for probe_gas_price."""

    def test_gas_price(self, node: FakeNode) -> None:
        report = probe_gas_price(node.transport())
        assert report.wei == 20 * 10**9
        assert report.gwei == Decimal(20)
        assert report.to_dict()["gwei"] == "20.00"

    def test_error_fails(self) -> None:
        node = FakeNode({"eth_gasPrice": lambda params: error("method not found", -32601)})
        with pytest.raises(RpcError):
            probe_gas_price(node.transport())

    def test_malformed_value_fails(self) -> None:
        node = FakeNode({"eth_gasPrice": lambda params: result("twenty")})
        with pytest.raises(MalformedNumericValue):
            probe_gas_price(node.transport())
