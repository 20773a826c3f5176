"""
Multibox CLI

Command-line interface for the Multibox request registry.

Commands:
  deploy        - Deploy a new Multibox contract
  request       - Register a request on a recipient's Multibox
  get-request   - Read the request registered for a subdomain
  get-requests  - Read every request on a Multibox
  encode        - Build a feed location hash
  decode        - Split a feed location hash
  receipt       - Wait for a transaction receipt
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any, NoReturn, Optional

import click

from .accounts import Account, load_private_key
from .chain.abi import load_artifact
from .chain.rpc import DEFAULT_TIMEOUT
from .client import MultiboxClient
from .config import (
    ENV_CHAIN_ID,
    ENV_ENS_DOMAIN,
    ENV_ETH_GATEWAY,
    ENV_GAS_PRICE,
    ENV_TIMEOUT,
    ClientConfig,
)
from .errors import MultiboxError
from .feed import decode_feed_location_hash, encode_feed_location_hash
from .log import configure_logging


# ============ Constants ============

VERSION = "0.1.0"


# ============ Helpers ============


def _fail(message: str) -> NoReturn:
    click.secho(f"ERROR: {message}", fg="red")
    sys.exit(1)


def _make_client(ctx: click.Context) -> MultiboxClient:
    params = ctx.find_root().params
    missing = [
        name
        for name, key in (
            (ENV_ETH_GATEWAY, "rpc_url"),
            (ENV_GAS_PRICE, "gas_price"),
            (ENV_ENS_DOMAIN, "domain"),
        )
        if not params.get(key)
    ]
    if missing:
        _fail(f"Missing configuration: {', '.join(missing)}")

    try:
        config = ClientConfig(
            eth_gateway=params["rpc_url"],
            gas_price=params["gas_price"],
            ens_domain=params["domain"],
            chain_id=params.get("chain_id"),
            timeout=params.get("timeout") or DEFAULT_TIMEOUT,
        )
        return MultiboxClient(config, artifact=load_artifact(params.get("artifact")))
    except MultiboxError as exc:
        _fail(str(exc))


def _run(coro: Any) -> Any:
    try:
        return asyncio.run(coro)
    except MultiboxError as exc:
        _fail(str(exc))


def _sender() -> Account:
    try:
        return Account.from_key(load_private_key())
    except MultiboxError as exc:
        _fail(str(exc))


# ============ Main CLI Group ============


@click.group()
@click.version_option(version=VERSION, prog_name="multibox")
@click.option("--rpc-url", envvar=ENV_ETH_GATEWAY, default=None, help="JSON-RPC endpoint")
@click.option("--gas-price", envvar=ENV_GAS_PRICE, default=None, help="Gas price in gwei")
@click.option("--domain", envvar=ENV_ENS_DOMAIN, default=None, help="ENS root domain")
@click.option("--chain-id", envvar=ENV_CHAIN_ID, default=None, type=int, help="Chain ID")
@click.option("--timeout", envvar=ENV_TIMEOUT, default=None, type=float, help="HTTP timeout (s)")
@click.option(
    "--artifact",
    envvar="MULTIBOX_ARTIFACT",
    default=None,
    type=click.Path(dir_okay=False),
    help="Multibox artifact JSON (ABI + bytecode)",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    rpc_url: Optional[str],
    gas_price: Optional[str],
    domain: Optional[str],
    chain_id: Optional[int],
    timeout: Optional[float],
    artifact: Optional[str],
    verbose: bool,
) -> None:
    """Multibox: encrypted-feed request registry client."""
    configure_logging(logging.DEBUG if verbose else logging.WARNING)


# ============ Transactions ============


@cli.command()
@click.option("--nonce", required=True, type=int, help="Deployer transaction nonce")
@click.option("--wait/--no-wait", default=False, help="Wait for the contract address")
@click.pass_context
def deploy(ctx: click.Context, nonce: int, wait: bool) -> None:
    """Deploy a new Multibox contract from PRIVATE_KEY."""
    client = _make_client(ctx)
    account = _sender()

    click.echo(f"  Deployer: {account.address}")
    tx_hash = _run(client.deploy_multibox(account, nonce))
    click.secho("SUBMITTED: Deployment broadcast", fg="green")
    click.echo(f"  TX: {tx_hash}")

    if wait:
        address = _run(client.get_deployed_address(tx_hash))
        click.echo(f"  Multibox: {address}")


@cli.command()
@click.argument("recipient")
@click.argument("multibox_address")
@click.argument("feed_location_hash")
@click.option("--nonce", default=None, type=int, help="Nonce (default: from node)")
@click.pass_context
def request(
    ctx: click.Context,
    recipient: str,
    multibox_address: str,
    feed_location_hash: str,
    nonce: Optional[int],
) -> None:
    """Register a request for RECIPIENT on MULTIBOX_ADDRESS."""
    client = _make_client(ctx)
    account = _sender()

    click.echo(f"  Sender: {account.address}")
    click.echo(f"  Recipient: {recipient}.{client.config.ens_domain}")
    tx_hash = _run(
        client.new_request(account, recipient, multibox_address, feed_location_hash, nonce=nonce)
    )
    click.secho("SUBMITTED: Request broadcast", fg="green")
    click.echo(f"  TX: {tx_hash}")


@cli.command()
@click.argument("tx_hash")
@click.option("--timeout", "wait_timeout", default=120.0, type=float, help="Seconds to wait")
@click.pass_context
def receipt(ctx: click.Context, tx_hash: str, wait_timeout: float) -> None:
    """Wait for TX_HASH to be mined and print its receipt."""
    client = _make_client(ctx)
    result = _run(client.wait_for_receipt(tx_hash, timeout=wait_timeout))
    click.echo(json.dumps(result, indent=2))
    if int(result.get("status", "0x0"), 16) != 1:
        click.secho("FAILED: Transaction reverted", fg="red")
        sys.exit(1)


# ============ Reads ============


@cli.command("get-request")
@click.argument("subdomain")
@click.argument("multibox_address")
@click.pass_context
def get_request(ctx: click.Context, subdomain: str, multibox_address: str) -> None:
    """Show the request registered for SUBDOMAIN."""
    client = _make_client(ctx)
    click.echo(json.dumps(_run(client.get_request(subdomain, multibox_address))))


@cli.command("get-requests")
@click.argument("multibox_address")
@click.pass_context
def get_requests(ctx: click.Context, multibox_address: str) -> None:
    """Show every request on MULTIBOX_ADDRESS."""
    client = _make_client(ctx)
    click.echo(json.dumps(_run(client.get_requests(multibox_address)), indent=2))


# ============ Feed location hash ============


@cli.command()
@click.argument("sender_address")
@click.argument("recipient_namehash")
def encode(sender_address: str, recipient_namehash: str) -> None:
    """Build a feed location hash (offline)."""
    try:
        click.echo(encode_feed_location_hash(sender_address, recipient_namehash))
    except MultiboxError as exc:
        _fail(str(exc))


@cli.command()
@click.argument("feed_location_hash")
def decode(feed_location_hash: str) -> None:
    """Split a feed location hash into address and topic (offline)."""
    try:
        decoded = decode_feed_location_hash(feed_location_hash)
    except MultiboxError as exc:
        _fail(str(exc))
    click.echo(f"  Address: {decoded.address}")
    click.echo(f"  Topic: {decoded.topic}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
