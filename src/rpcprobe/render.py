"""
Console rendering for probe runs.

ConsoleListener streams one block of text per probe as the suite runs;
print_summary closes the run with the scorecard and verdict.
"""

from __future__ import annotations

import json
from typing import Optional

import click

from .models import (
    BalanceReport,
    BlockActivityReport,
    ChainIdReport,
    FeeHistoryReport,
    GasPriceReport,
    ProbeOutcome,
    ProbeReport,
    SessionSummary,
    Verdict,
)
from .probes.fee_history import FORMAT_HEX
from .utils import format_ether, format_gwei

RULE = "═" * 55

PROBE_TITLES = {
    "eth_chainId": "Testing eth_chainId...",
    "eth_blockNumber": "Testing eth_blockNumber (multiple calls)...",
    "eth_getBalance": "Testing eth_getBalance...",
    "eth_feeHistory": "Testing eth_feeHistory (EIP-1559 support)...",
    "eth_gasPrice": "Testing eth_gasPrice (Legacy gas)...",
}


def _ok(text: str) -> None:
    click.echo(click.style("✓", fg="green") + f" {text}")


def _detail(text: str, **style: object) -> None:
    click.echo(click.style(f"  {text}", **style) if style else f"  {text}")


def _ms(value: float) -> str:
    return f"{value:.0f}ms"


def print_banner(rpc_url: str, is_https: bool) -> None:
    click.secho(RULE, fg="blue", bold=True)
    click.secho("         Ethereum RPC Endpoint Tester", fg="blue", bold=True)
    click.secho(RULE, fg="blue", bold=True)
    click.secho(f"RPC URL: {rpc_url}", fg="cyan")
    click.secho(f"Protocol: {'HTTPS' if is_https else 'HTTP'}", fg="cyan")


class ConsoleListener:
    """Prints each probe's result as soon as it finishes."""

    def probe_started(self, name: str) -> None:
        click.echo()
        click.secho(PROBE_TITLES.get(name, f"Testing {name}..."), bold=True)

    def probe_finished(self, outcome: ProbeOutcome, report: Optional[ProbeReport]) -> None:
        if not outcome.passed:
            click.secho(f"✗ Failed: {outcome.cause}", fg="red")
            return
        if isinstance(report, ChainIdReport):
            self._chain_id(report)
        elif isinstance(report, BlockActivityReport):
            self._block_activity(report)
        elif isinstance(report, BalanceReport):
            self._balance(report)
        elif isinstance(report, FeeHistoryReport):
            self._fee_history(report)
        elif isinstance(report, GasPriceReport):
            self._gas_price(report)

    def _chain_id(self, report: ChainIdReport) -> None:
        name = f"({report.network})" if report.network else "(Unknown chain)"
        _ok(f"Chain ID: {report.chain_id} {name}")
        _detail(f"Response time: {_ms(report.elapsed_ms)}")
        if report.mismatch:
            click.secho(
                f"⚠ Warning: Expected chain ID {report.expected_chain_id}, got {report.chain_id}",
                fg="yellow",
            )

    def _block_activity(self, report: BlockActivityReport) -> None:
        _ok(f"Latest block: {report.latest_block}")
        _detail(f"HTTP Version: {report.protocol_display}")
        _detail(f"Response times ({len(report.samples)} calls):")
        _detail(f"  Average: {report.average_ms:.2f}ms")
        _detail(f"  Min: {_ms(report.min_ms)}")
        _detail(f"  Max: {_ms(report.max_ms)}")
        if report.is_active:
            _detail("Network appears active (blocks incrementing)", fg="cyan")
        else:
            _detail("No new blocks observed during sampling", fg="yellow")

    def _balance(self, report: BalanceReport) -> None:
        for reading in report.readings:
            _ok(f"Address: {reading.address[:10]}...")
            _detail(f"Balance: {format_ether(reading.wei)} ETH ({reading.wei} wei)")
            _detail(f"Response time: {_ms(reading.elapsed_ms)}")

    def _fee_history(self, report: FeeHistoryReport) -> None:
        if report.fallback_attempted:
            _detail("Hex format failed, trying number format...", fg="yellow")
        if report.unsupported_reason is not None:
            click.secho("⚠ EIP-1559 not supported (Legacy gas pricing)", fg="yellow")
            _detail(f"Endpoint said: {report.unsupported_reason}", dim=True)
            return
        if not report.eip1559_supported:
            click.secho("⚠ Legacy gas pricing (No EIP-1559)", fg="yellow")
            _detail(f"Response time: {_ms(report.elapsed_ms)}")
            return

        click.secho("✓ EIP-1559 Supported", fg="green")
        encoding = "Hex string (0xa)" if report.parameter_format == FORMAT_HEX else "Number (10)"
        _detail(f"Parameter format: {encoding}", fg="cyan")
        if report.reward_supported:
            _detail("Reward field: ✓ Supported (returns priority fee percentiles)", fg="cyan")
        else:
            _detail("Reward field: ✗ Not supported (no priority fee data)", fg="yellow")
        _detail(f"Latest base fee: {report.latest_base_fee_gwei:.2f} Gwei")
        _detail(
            f"Average base fee (last {len(report.sample.base_fee_per_gas)} values): "
            f"{report.average_base_fee_gwei:.2f} Gwei"
        )
        percentiles = report.priority_fee_percentiles
        if percentiles is not None:
            _detail("Priority fee percentiles (latest block):")
            for label, wei in zip(("25th", "50th", "75th"), percentiles):
                _detail(f"  {label}: {format_gwei(wei)} Gwei")
        _detail(f"Response time: {_ms(report.elapsed_ms)}")

    def _gas_price(self, report: GasPriceReport) -> None:
        _ok(f"Current gas price: {format_gwei(report.wei)} Gwei")
        _detail(f"Response time: {_ms(report.elapsed_ms)}")


def print_summary(summary: SessionSummary) -> None:
    click.echo()
    click.secho(RULE, fg="blue", bold=True)
    click.secho("                    SUMMARY", bold=True)
    click.secho(RULE, fg="blue", bold=True)
    click.echo(
        click.style(f"Passed: {summary.passed_count}", fg="green")
        + " | "
        + click.style(f"Failed: {summary.failed_count}", fg="red")
    )

    if summary.chain_id is not None:
        click.echo()
        click.echo(click.style("Chain ID:", fg="cyan") + f" {summary.chain_id}")
    if summary.latest_block is not None:
        click.echo(click.style("Current Block:", fg="cyan") + f" {summary.latest_block}")
    if summary.eip1559_supported is not None:
        model = (
            "EIP-1559 (Dynamic fees)"
            if summary.eip1559_supported
            else "Legacy (Fixed gas price)"
        )
        click.echo(click.style("Gas Model:", fg="cyan") + f" {model}")

    click.echo()
    verdict = summary.verdict
    if verdict is Verdict.FULLY_FUNCTIONAL:
        click.secho("✓ All tests passed! RPC endpoint is fully functional.", fg="green", bold=True)
    elif verdict is Verdict.PARTIALLY_FUNCTIONAL:
        click.secho(
            "⚠ Some tests failed. RPC endpoint is partially functional.", fg="yellow", bold=True
        )
    else:
        click.secho(
            "✗ All tests failed. RPC endpoint may be down or misconfigured.", fg="red", bold=True
        )


def print_json(summary: SessionSummary, rpc_url: str) -> None:
    payload = {"rpcUrl": rpc_url, **summary.to_dict()}
    click.echo(json.dumps(payload, indent=2, sort_keys=True))
