"""Shared fixtures: an in-process fake JSON-RPC node and a wired client."""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any, Callable, Optional

import httpx
import pytest
from eth_utils import keccak

from multibox.accounts import Account
from multibox.chain.abi import ContractArtifact, load_artifact
from multibox.chain.rpc import RpcClient
from multibox.client import MultiboxClient
from multibox.config import ClientConfig

RPC_URL = "http://node.test:8545"
CHAIN_ID = 31337
ENS_DOMAIN = "datafund.eth"

# Well-known local development key (hardhat / anvil account #0)
PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

MULTIBOX_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
FAKE_BYTECODE = "0x6080604052348015600f57600080fd5b50603f80601d6000396000f3fe"


class FakeNode:
    """Answers JSON-RPC requests from canned values and records every call."""

    def __init__(self) -> None:
        self.requests: list[dict[str, Any]] = []
        self.nonce = 5
        self.call_results: dict[str, str] = {}
        self.receipts: dict[str, Optional[dict]] = {}
        self.errors: dict[str, dict[str, Any]] = {}
        self.http_status = 200

    def calls(self, method: str) -> list[dict[str, Any]]:
        return [r for r in self.requests if r["method"] == method]

    def _result(self, method: str, params: list) -> Any:
        if method == "eth_chainId":
            return hex(CHAIN_ID)
        if method == "eth_getTransactionCount":
            return hex(self.nonce)
        if method == "eth_sendRawTransaction":
            return "0x" + keccak(hexstr=params[0]).hex()
        if method == "eth_call":
            selector = params[0]["data"][:10]
            return self.call_results.get(selector, "0x")
        if method == "eth_getTransactionReceipt":
            return self.receipts.get(params[0])
        raise AssertionError(f"unexpected RPC method {method}")

    def handler(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.requests.append(payload)
        if self.http_status != 200:
            return httpx.Response(self.http_status, text="unavailable")

        method = payload["method"]
        body: dict[str, Any] = {"jsonrpc": "2.0", "id": payload["id"]}
        if method in self.errors:
            body["error"] = self.errors[method]
        else:
            body["result"] = self._result(method, payload["params"])
        return httpx.Response(200, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def stub_namehasher(name: str) -> str:
    """Deterministic stand-in for ENS hashing: keccak of the raw name."""
    return "0x" + keccak(text=name).hex()


@pytest.fixture()
def node() -> FakeNode:
    return FakeNode()


@pytest.fixture()
def config() -> ClientConfig:
    return ClientConfig(
        eth_gateway=RPC_URL,
        gas_price=Decimal("2.5"),
        ens_domain=ENS_DOMAIN,
        chain_id=CHAIN_ID,
    )


@pytest.fixture()
def artifact() -> ContractArtifact:
    packaged = load_artifact()
    return ContractArtifact(abi=packaged.abi, bytecode=FAKE_BYTECODE)


@pytest.fixture()
def namehasher() -> Callable[[str], str]:
    return stub_namehasher


@pytest.fixture()
def client(
    config: ClientConfig,
    artifact: ContractArtifact,
    node: FakeNode,
    namehasher: Callable[[str], str],
) -> MultiboxClient:
    rpc = RpcClient(RPC_URL, transport=node.transport)
    return MultiboxClient(config, artifact=artifact, namehasher=namehasher, rpc=rpc)


@pytest.fixture()
def account() -> Account:
    return Account(address=ADDRESS, private_key=PRIVATE_KEY, subdomain="alice")
