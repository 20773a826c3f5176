"""
Transaction signing and broadcast.

Uses eth-account for signing and the httpx-based RpcClient for sending.
Broadcast returns as soon as the node acknowledges the transaction hash;
it never waits for inclusion.
"""

from __future__ import annotations

from typing import Any

from eth_account import Account
from eth_utils import to_checksum_address

from ..errors import SigningError
from ..log import get_logger
from .rpc import RpcClient

logger = get_logger("tx")

# eth-account derives the sender from the key; "from" is informational only
_UNSIGNED_FIELDS = ("from",)


def sign_transaction(tx: dict[str, Any], private_key: str) -> str:
    """
    Sign a transaction dict.

    Args:
        tx: Transaction with data, gas, gasPrice, nonce, chainId and optional to
        private_key: hex private key

    Returns:
        0x-prefixed hex encoded signed transaction

    Raises:
        SigningError: If the key is malformed or the transaction cannot be signed
    """
    unsigned = {k: v for k, v in tx.items() if k not in _UNSIGNED_FIELDS}
    if unsigned.get("to"):
        unsigned["to"] = to_checksum_address(unsigned["to"])

    try:
        signed = Account.sign_transaction(unsigned, private_key)
    except (ValueError, TypeError) as exc:
        raise SigningError(f"Could not sign transaction: {exc}") from exc

    return "0x" + bytes(signed.raw_transaction).hex()


async def broadcast(rpc: RpcClient, raw_tx: str) -> str:
    """Submit a signed transaction and return the acknowledged hash."""
    tx_hash = await rpc.send_raw_transaction(raw_tx)
    logger.info("broadcast tx %s", tx_hash)
    return tx_hash


async def sign_and_send(rpc: RpcClient, tx: dict[str, Any], private_key: str) -> str:
    return await broadcast(rpc, sign_transaction(tx, private_key))
