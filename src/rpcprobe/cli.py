"""
rpcprobe CLI

Probe an Ethereum-compatible JSON-RPC endpoint and report what it supports:

  eth_chainId      - chain identity (optionally checked against an expected id)
  eth_blockNumber  - five sequential calls: latency, HTTP version, liveness
  eth_getBalance   - zero address plus an optional test address
  eth_feeHistory   - EIP-1559 support, with hex/number parameter fallback
  eth_gasPrice     - legacy gas price

Exit code is 0 when every probe passed, 1 otherwise.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import click

from . import __version__
from .config import TIMEOUT_ENV, ProbeConfig, get_test_address, load_environment
from .errors import ConfigError
from .render import ConsoleListener, print_banner, print_json, print_summary
from .suite import ProbeSuite
from .transport.rpc import DEFAULT_TIMEOUT, RpcTransport

logger = logging.getLogger(__name__)

EXAMPLES = """\b
Examples:
  rpcprobe https://eth-mainnet.g.alchemy.com/v2/YOUR_API_KEY
  rpcprobe http://localhost:8545 1
  rpcprobe https://rpc.ankr.com/eth 1 --address 0x...
"""


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@click.command(epilog=EXAMPLES)
@click.version_option(version=__version__, prog_name="rpcprobe")
@click.argument("rpc_url", required=False)
@click.argument("expected_chain_id", required=False)
@click.option(
    "--address",
    "test_address",
    help="Extra address for eth_getBalance (default: $RPCPROBE_TEST_ADDRESS)",
)
@click.option(
    "--timeout",
    type=float,
    default=DEFAULT_TIMEOUT,
    show_default=True,
    envvar=TIMEOUT_ENV,
    help="Per-request timeout in seconds",
)
@click.option("--json", "as_json", is_flag=True, help="Print the summary as JSON")
@click.option("-v", "--verbose", is_flag=True, help="Log every request to stderr")
@click.pass_context
def cli(
    ctx: click.Context,
    rpc_url: Optional[str],
    expected_chain_id: Optional[str],
    test_address: Optional[str],
    timeout: float,
    as_json: bool,
    verbose: bool,
) -> None:
    """Test an Ethereum JSON-RPC endpoint: RPC_URL [EXPECTED_CHAIN_ID]."""
    _configure_logging(verbose)

    if not rpc_url:
        click.echo(ctx.get_help())
        sys.exit(1)

    load_environment()
    try:
        config = ProbeConfig.build(
            rpc_url,
            expected_chain_id=expected_chain_id,
            test_address=test_address or get_test_address(),
            timeout=timeout,
        )
    except ConfigError as exc:
        click.secho(str(exc), fg="red", err=True)
        sys.exit(1)

    try:
        with RpcTransport(config.rpc_url, timeout=config.timeout) as transport:
            if not as_json:
                print_banner(config.rpc_url, transport.is_https)
            suite = ProbeSuite(
                transport,
                expected_chain_id=config.expected_chain_id,
                test_address=config.test_address,
                listener=None if as_json else ConsoleListener(),
            )
            summary = suite.run()
    except Exception as exc:
        logger.debug("fatal error", exc_info=True)
        click.secho(f"Fatal error: {exc}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        print_json(summary, config.rpc_url)
    else:
        print_summary(summary)
    sys.exit(summary.exit_code)


def main() -> None:
    """rpcprobe entry point."""
    # Ensure UTF-8 output on Windows (for box-drawing / check marks)
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
            sys.stderr.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
        except (AttributeError, OSError):
            pass
    cli()


if __name__ == "__main__":
    main()
