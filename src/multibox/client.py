"""
MultiboxClient - façade over a JSON-RPC node and the Multibox contract.

Mutating calls (deploy, newRequest) are signed locally and resolve as soon
as the node acknowledges the transaction hash. They do NOT wait for the
transaction to be mined; use wait_for_receipt() for that.

The client does no nonce management. Concurrent transactions from one
account must be serialised by the caller.
"""

from __future__ import annotations

from typing import Any, Optional

from eth_utils import to_checksum_address

from .accounts import Account
from .chain.abi import ContractArtifact, load_artifact
from .chain.rpc import RpcClient
from .chain.tx import sign_and_send
from .config import ClientConfig
from .ens import NameHasher, namehash, subdomain_name
from .errors import InvalidAddressError
from .feed import (
    FeedLocationHash,
    decode_feed_location_hash,
    encode_feed_location_hash,
    feed_location_hash_to_bytes,
    namehash_to_bytes,
    subdomain_namehash_to_feed_location_hash,
)
from .log import get_logger

logger = get_logger("client")

DEPLOY_GAS_LIMIT = 1_500_000
NEW_REQUEST_GAS_LIMIT = 510_000


def _to_hex(value: Any) -> Any:
    """Render bytes (and sequences of bytes) from ABI decoding as 0x hex."""
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, (list, tuple)):
        return [_to_hex(v) for v in value]
    return value


def _checksum(address: str) -> str:
    try:
        return to_checksum_address(address)
    except (ValueError, TypeError) as exc:
        raise InvalidAddressError(f"Invalid address: {address!r}", {"address": address}) from exc


class MultiboxClient:
    """
    Multibox contract client.

    Args:
        config: Immutable client configuration
        artifact: Contract ABI/bytecode (default: packaged Multibox artifact)
        namehasher: Domain name to 0x-hex name-hash function (default: ENS)
        rpc: JSON-RPC client (default: one built from config)
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        artifact: Optional[ContractArtifact] = None,
        namehasher: Optional[NameHasher] = None,
        rpc: Optional[RpcClient] = None,
    ) -> None:
        self.config = config
        self.artifact = artifact or load_artifact()
        self.namehasher = namehasher or namehash
        self.rpc = rpc or RpcClient(config.eth_gateway, timeout=config.timeout)
        self.gas_price = config.gas_price_wei

    # ---------------------------------------------------------------------
    # Feed location hash helpers
    # ---------------------------------------------------------------------

    def encode_feed_location_hash(self, sender_address: str, recipient_namehash: str) -> str:
        return encode_feed_location_hash(sender_address, recipient_namehash)

    def subdomain_namehash_to_feed_location_hash(self, recipient_namehash: str) -> str:
        return subdomain_namehash_to_feed_location_hash(recipient_namehash)

    def decode_feed_location_hash(self, feed_location_hash: str) -> FeedLocationHash:
        return decode_feed_location_hash(feed_location_hash)

    def subdomain_namehash(self, subdomain: str) -> str:
        """Name-hash of ``<subdomain>.<root domain>``."""
        return self.namehasher(subdomain_name(subdomain, self.config.ens_domain))

    # ---------------------------------------------------------------------
    # Transactions
    # ---------------------------------------------------------------------

    async def _chain_id(self) -> int:
        if self.config.chain_id is not None:
            return self.config.chain_id
        return await self.rpc.chain_id()

    async def build_deploy_tx(self, account: Account, nonce: int) -> dict[str, Any]:
        """Unsigned contract-creation transaction."""
        return {
            "from": account.address,
            "data": self.artifact.encode_deploy(),
            "gas": DEPLOY_GAS_LIMIT,
            "gasPrice": self.gas_price,
            "nonce": nonce,
            "value": 0,
            "chainId": await self._chain_id(),
        }

    async def build_new_request_tx(
        self,
        sender_account: Account,
        recipient_subdomain: str,
        multibox_address: str,
        feed_location_hash: str | FeedLocationHash,
        nonce: Optional[int] = None,
    ) -> dict[str, Any]:
        """Unsigned newRequest(recipientNamehash, feedLocationHash) transaction."""
        to = _checksum(multibox_address)
        recipient_namehash = self.subdomain_namehash(recipient_subdomain)
        data = self.artifact.encode_call(
            "newRequest",
            [namehash_to_bytes(recipient_namehash), feed_location_hash_to_bytes(feed_location_hash)],
        )
        if nonce is None:
            nonce = await self.rpc.get_transaction_count(sender_account.address)

        return {
            "from": sender_account.address,
            "to": to,
            "data": data,
            "gas": NEW_REQUEST_GAS_LIMIT,
            "gasPrice": self.gas_price,
            "nonce": nonce,
            "value": 0,
            "chainId": await self._chain_id(),
        }

    async def deploy_multibox(self, account: Account, nonce: int) -> str:
        """
        Deploy a new Multibox contract.

        Args:
            account: Deployer; signs and pays gas
            nonce: Deployer's transaction nonce (caller-managed)

        Returns:
            Transaction hash, as soon as the node acknowledges it. The
            contract address is not known yet; see get_deployed_address().
        """
        tx = await self.build_deploy_tx(account, nonce)
        logger.info("deploying Multibox from %s (nonce %s)", account.address, nonce)
        return await sign_and_send(self.rpc, tx, account.private_key)

    async def new_request(
        self,
        sender_account: Account,
        recipient_subdomain: str,
        multibox_address: str,
        feed_location_hash: str | FeedLocationHash,
        nonce: Optional[int] = None,
    ) -> str:
        """
        Register a request on a recipient's Multibox.

        Args:
            sender_account: Sender; signs and pays gas
            recipient_subdomain: Recipient's label under the root domain
            multibox_address: Recipient's Multibox contract
            feed_location_hash: Where the sender's feed can be found
            nonce: Explicit nonce; fetched from the node when omitted

        Returns:
            Transaction hash, as soon as the node acknowledges it
        """
        tx = await self.build_new_request_tx(
            sender_account,
            recipient_subdomain,
            multibox_address,
            feed_location_hash,
            nonce=nonce,
        )
        logger.info(
            "newRequest %s -> %s on %s",
            sender_account.address,
            recipient_subdomain,
            multibox_address,
        )
        return await sign_and_send(self.rpc, tx, sender_account.private_key)

    # ---------------------------------------------------------------------
    # Reads
    # ---------------------------------------------------------------------

    async def _read(self, multibox_address: str, function_name: str, args: list) -> Any:
        calldata = self.artifact.encode_call(function_name, args)
        result = await self.rpc.eth_call(_checksum(multibox_address), calldata)
        if result is None or result == "0x":
            return None
        return _to_hex(self.artifact.decode_result(function_name, result))

    async def get_request_raw(self, namehash: str, multibox_address: str) -> Any:
        """Read getRequest(namehash) from a Multibox."""
        return await self._read(multibox_address, "getRequest", [namehash_to_bytes(namehash)])

    async def get_request(self, subdomain: str, multibox_address: str) -> Any:
        """Read the request registered for ``<subdomain>.<root domain>``."""
        return await self.get_request_raw(self.subdomain_namehash(subdomain), multibox_address)

    async def get_requests(self, multibox_address: str) -> Any:
        """Read every request recorded on a Multibox."""
        return await self._read(multibox_address, "getRequests", [])

    # ---------------------------------------------------------------------
    # Confirmation (explicit, never implied by the calls above)
    # ---------------------------------------------------------------------

    async def wait_for_receipt(
        self, tx_hash: str, timeout: float = 120, poll_interval: float = 2.0
    ) -> dict:
        return await self.rpc.wait_for_receipt(tx_hash, timeout=timeout, poll_interval=poll_interval)

    async def get_deployed_address(
        self, tx_hash: str, timeout: float = 180, poll_interval: float = 2.0
    ) -> Optional[str]:
        """Wait for a deployment receipt and return the new contract address."""
        receipt = await self.wait_for_receipt(tx_hash, timeout=timeout, poll_interval=poll_interval)
        return receipt.get("contractAddress")
