"""
Async JSON-RPC client.

Lightweight alternative to web3.py: uses httpx for HTTP. Every call opens a
short-lived AsyncClient; the only knob is the timeout fixed at construction.
"""

from __future__ import annotations

import asyncio
import itertools
import time
from typing import Any, Optional

import httpx

from ..errors import ConfirmationTimeout, RpcError, RpcTransportError
from ..log import get_logger

logger = get_logger("rpc")

DEFAULT_TIMEOUT = 2.0


class RpcClient:
    """JSON-RPC 2.0 over HTTP for one node endpoint."""

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._transport = transport
        self._ids = itertools.count(1)

    async def call(self, method: str, params: Optional[list] = None) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            RpcTransportError: If the node is unreachable or answers non-2xx
            RpcError: If the node returns a JSON-RPC error object
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": next(self._ids),
        }
        logger.debug("rpc %s id=%s", method, payload["id"])

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(self.url, json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as exc:
            raise RpcTransportError(
                f"RPC {method} failed: {exc}", {"url": self.url, "method": method}
            ) from exc
        except ValueError as exc:
            raise RpcTransportError(
                f"RPC {method} returned invalid JSON", {"url": self.url, "method": method}
            ) from exc

        if "error" in data:
            error = data["error"] or {}
            if isinstance(error, dict):
                raise RpcError(
                    error.get("message", "RPC error"),
                    code=error.get("code"),
                    data=error.get("data"),
                    method=method,
                )
            raise RpcError(str(error), method=method)

        return data.get("result")

    async def chain_id(self) -> int:
        return int(await self.call("eth_chainId"), 16)

    async def get_transaction_count(self, address: str, block: str = "pending") -> int:
        result = await self.call("eth_getTransactionCount", [address, block])
        return int(result, 16)

    async def eth_call(self, to: str, data: str, block: str = "latest") -> str:
        return await self.call("eth_call", [{"to": to, "data": data}, block])

    async def send_raw_transaction(self, raw_tx: str) -> str:
        """
        Send a signed raw transaction.

        Returns:
            Transaction hash as acknowledged by the node
        """
        return await self.call("eth_sendRawTransaction", [raw_tx])

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[dict]:
        return await self.call("eth_getTransactionReceipt", [tx_hash])

    async def wait_for_receipt(
        self,
        tx_hash: str,
        timeout: float = 120,
        poll_interval: float = 2.0,
    ) -> dict:
        """
        Wait for a transaction receipt.

        Raises:
            ConfirmationTimeout: If receipt not found within timeout
        """
        start = time.monotonic()
        while time.monotonic() - start < timeout:
            receipt = await self.get_transaction_receipt(tx_hash)
            if receipt is not None:
                return receipt
            await asyncio.sleep(poll_interval)

        raise ConfirmationTimeout(tx_hash, timeout)
