"""
Contract artifacts - ABI and deployment bytecode for the Multibox contract.

The package ships the Multibox ABI. Deployment bytecode is supplied
externally, either through an artifact file (MULTIBOX_ARTIFACT) or by
passing a ContractArtifact to the client.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Sequence

from eth_abi import decode, encode
from eth_utils import keccak

from ..errors import ArtifactError

ARTIFACT_ENV = "MULTIBOX_ARTIFACT"
DEFAULT_ARTIFACT = Path(__file__).resolve().parent.parent / "artifacts" / "Multibox.json"


def _hex_to_bytes(data: str) -> bytes:
    return bytes.fromhex(data[2:] if data.startswith("0x") else data)


@dataclass(frozen=True)
class ContractArtifact:
    """ABI plus (optional) creation bytecode for one contract."""

    abi: tuple[dict[str, Any], ...]
    bytecode: str = ""
    name: str = "Multibox"

    def function(self, function_name: str) -> dict[str, Any]:
        for entry in self.abi:
            if entry.get("type") == "function" and entry.get("name") == function_name:
                return entry
        raise ArtifactError(
            f"Function {function_name} not found in ABI", {"contract": self.name}
        )

    def constructor(self) -> Optional[dict[str, Any]]:
        for entry in self.abi:
            if entry.get("type") == "constructor":
                return entry
        return None

    def selector(self, function_name: str) -> bytes:
        func = self.function(function_name)
        input_types = [inp["type"] for inp in func.get("inputs", [])]
        sig = f"{function_name}({','.join(input_types)})"
        # Keccak-256, not NIST SHA3-256
        return keccak(text=sig)[:4]

    def encode_call(self, function_name: str, args: Sequence[Any] = ()) -> str:
        """
        ABI-encode a function call.

        Returns:
            0x-prefixed hex calldata (selector + encoded arguments)
        """
        func = self.function(function_name)
        input_types = [inp["type"] for inp in func.get("inputs", [])]
        encoded_args = encode(input_types, list(args)) if input_types else b""
        return "0x" + self.selector(function_name).hex() + encoded_args.hex()

    def decode_result(self, function_name: str, data: str) -> Any:
        """
        ABI-decode a function call result.

        Returns:
            None for empty output, a single value, or a tuple of values
        """
        func = self.function(function_name)
        output_types = [out["type"] for out in func.get("outputs", [])]
        if not output_types or not data or data == "0x":
            return None

        decoded = decode(output_types, _hex_to_bytes(data))
        if len(decoded) == 1:
            return decoded[0]
        return decoded

    def encode_deploy(self, constructor_args: Optional[Sequence[Any]] = None) -> str:
        """Creation payload: bytecode followed by ABI-encoded constructor args."""
        if not self.bytecode or self.bytecode == "0x":
            raise ArtifactError(
                f"No bytecode in artifact for {self.name}. "
                f"Point {ARTIFACT_ENV} at a compiled artifact.",
                {"contract": self.name},
            )

        deploy_data = self.bytecode[2:] if self.bytecode.startswith("0x") else self.bytecode
        if constructor_args:
            constructor = self.constructor()
            if constructor is None:
                raise ArtifactError(
                    f"Constructor not found in ABI for {self.name}, "
                    f"but constructor_args were provided."
                )
            input_types = [inp["type"] for inp in constructor.get("inputs", [])]
            deploy_data += encode(input_types, list(constructor_args)).hex()

        return "0x" + deploy_data


def artifact_from_dict(artifact: dict[str, Any], name: str = "Multibox") -> ContractArtifact:
    """Build a ContractArtifact from truffle-style or Foundry-style JSON."""
    abi = artifact.get("abi")
    if not isinstance(abi, list):
        raise ArtifactError(f"Artifact for {name} has no ABI list")

    bytecode = artifact.get("bytecode", "")
    if isinstance(bytecode, dict):
        bytecode = bytecode.get("object", "")
    if not isinstance(bytecode, str):
        raise ArtifactError(f"Artifact for {name} has malformed bytecode")

    return ContractArtifact(
        abi=tuple(abi),
        bytecode=bytecode,
        name=artifact.get("contractName", name),
    )


def load_artifact(path: Optional[Path | str] = None) -> ContractArtifact:
    """
    Load the Multibox artifact.

    Args:
        path: Artifact JSON file. Defaults to $MULTIBOX_ARTIFACT, then the
              packaged ABI-only artifact.

    Raises:
        ArtifactError: If the file is missing or not a valid artifact
    """
    if path is None:
        path = os.environ.get(ARTIFACT_ENV) or DEFAULT_ARTIFACT
    artifact_path = Path(path)

    if not artifact_path.exists():
        raise ArtifactError(f"Artifact not found: {artifact_path}")

    try:
        with artifact_path.open("r", encoding="utf-8") as f:
            artifact = json.load(f)
    except json.JSONDecodeError as exc:
        raise ArtifactError(f"Artifact is not valid JSON: {artifact_path}") from exc

    return artifact_from_dict(artifact, name=artifact_path.stem)
