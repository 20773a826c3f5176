"""
CLI integration tests using Click's test runner.

Network commands run against the in-process fake node; no real chain
interaction is needed.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner
from eth_abi import encode
from eth_utils import keccak

from multibox import cli as cli_module
from multibox.chain.rpc import RpcClient
from multibox.cli import cli
from multibox.client import MultiboxClient

from ..conftest import ADDRESS, FAKE_BYTECODE, MULTIBOX_ADDRESS, PRIVATE_KEY, FakeNode

NAMEHASH = "0x" + "cd" * 20 + "0011223344556677889900aa"
FEED_HASH = ADDRESS + "0011223344556677889900aa"


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def node(monkeypatch: pytest.MonkeyPatch) -> FakeNode:
    """Route every client the CLI builds through a fake node."""
    fake = FakeNode()

    def make(config, **kwargs):
        rpc = RpcClient(config.eth_gateway, transport=fake.transport)
        return MultiboxClient(config, rpc=rpc, **kwargs)

    monkeypatch.setattr(cli_module, "MultiboxClient", make)
    return fake


@pytest.fixture()
def env(tmp_path: Path) -> dict[str, str]:
    artifact = tmp_path / "Multibox.json"
    artifact.write_text(
        json.dumps({"abi": list(cli_module.load_artifact().abi), "bytecode": FAKE_BYTECODE}),
        encoding="utf-8",
    )
    return {
        "MULTIBOX_ETH_GATEWAY": "http://node.test:8545",
        "MULTIBOX_GAS_PRICE": "1",
        "MULTIBOX_ENS_DOMAIN": "datafund.eth",
        "MULTIBOX_CHAIN_ID": "31337",
        "MULTIBOX_ARTIFACT": str(artifact),
        "PRIVATE_KEY": PRIVATE_KEY,
    }


class TestOffline:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "multibox" in result.output

    def test_encode(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["encode", ADDRESS, NAMEHASH])
        assert result.exit_code == 0
        assert result.output.strip() == FEED_HASH

    def test_decode(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["decode", FEED_HASH])
        assert result.exit_code == 0
        assert f"Address: {ADDRESS}" in result.output
        assert "Topic: 0011223344556677889900aa" in result.output

    def test_decode_malformed(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["decode", "0x1234"])
        assert result.exit_code == 1
        assert "ERROR" in result.output


class TestNetwork:
    def test_missing_config(self, runner: CliRunner, node: FakeNode) -> None:
        result = runner.invoke(
            cli,
            ["get-requests", MULTIBOX_ADDRESS],
            env={"MULTIBOX_ETH_GATEWAY": "", "MULTIBOX_GAS_PRICE": "", "MULTIBOX_ENS_DOMAIN": ""},
        )
        assert result.exit_code == 1
        assert "MULTIBOX_ETH_GATEWAY" in result.output

    def test_get_requests(self, runner: CliRunner, node: FakeNode, env: dict) -> None:
        selector = "0x" + keccak(text="getRequests()")[:4].hex()
        node.call_results[selector] = "0x" + encode(["bytes32[]"], [[b"\x01" * 32]]).hex()

        result = runner.invoke(cli, ["get-requests", MULTIBOX_ADDRESS], env=env)

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == ["0x" + "01" * 32]

    def test_request(self, runner: CliRunner, node: FakeNode, env: dict) -> None:
        result = runner.invoke(cli, ["request", "bob", MULTIBOX_ADDRESS, FEED_HASH], env=env)

        assert result.exit_code == 0, result.output
        assert "SUBMITTED" in result.output
        assert "bob.datafund.eth" in result.output
        assert len(node.calls("eth_sendRawTransaction")) == 1

    def test_deploy(self, runner: CliRunner, node: FakeNode, env: dict) -> None:
        result = runner.invoke(cli, ["deploy", "--nonce", "0"], env=env)

        assert result.exit_code == 0, result.output
        assert f"Deployer: {ADDRESS}" in result.output
        assert node.calls("eth_getTransactionReceipt") == []

    def test_node_error(self, runner: CliRunner, node: FakeNode, env: dict) -> None:
        node.errors["eth_sendRawTransaction"] = {"code": -32000, "message": "nonce too low"}

        result = runner.invoke(cli, ["deploy", "--nonce", "0"], env=env)

        assert result.exit_code == 1
        assert "nonce too low" in result.output

    def test_invalid_multibox_address(self, runner: CliRunner, node: FakeNode, env: dict) -> None:
        result = runner.invoke(cli, ["get-requests", "0x1234"], env=env)

        assert result.exit_code == 1
        assert "ERROR: Invalid address" in result.output
        assert node.requests == []

    def test_malformed_feed_hash(self, runner: CliRunner, node: FakeNode, env: dict) -> None:
        result = runner.invoke(cli, ["request", "bob", MULTIBOX_ADDRESS, "0xzz"], env=env)

        assert result.exit_code == 1
        assert "ERROR" in result.output
        assert node.calls("eth_sendRawTransaction") == []
